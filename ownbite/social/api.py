# -*- coding: utf-8 -*-
"""Social — API endpoints (connect accounts, share, history)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from ..auth.security import get_current_user
from ..rewards.storage import award_points
from .models import (
    ConnectRequest,
    ShareHistoryResponse,
    ShareRequest,
    ShareResponse,
    SocialAccount,
    SocialAccountsResponse,
    SocialShare,
)
from .providers import ProviderAuthError, ProviderConfigError, UnsupportedProviderError, exchange_code
from .storage import disconnect_account, get_connected_account, list_accounts, list_shares, record_share, upsert_account

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/social", tags=["Social"])

SHARE_POINTS = 15


@router.post("/connect", response_model=SocialAccount, summary="Connect a social account via OAuth code")
def connect(request: ConnectRequest, user: dict = Depends(get_current_user)):
    provider = request.provider.lower()
    try:
        account = exchange_code(provider, code=request.code, redirect_uri=request.redirect_uri)
    except UnsupportedProviderError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ProviderConfigError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except ProviderAuthError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return SocialAccount(**upsert_account(user_id=user["id"], provider=provider, account=account))


@router.get("/accounts", response_model=SocialAccountsResponse, summary="My connected accounts")
def read_accounts(user: dict = Depends(get_current_user)):
    rows = list_accounts(user_id=user["id"])
    return SocialAccountsResponse(count=len(rows), accounts=[SocialAccount(**r) for r in rows])


@router.delete("/accounts/{account_id}", summary="Disconnect an account")
def remove_account(account_id: str, user: dict = Depends(get_current_user)):
    if not disconnect_account(user_id=user["id"], account_id=account_id):
        raise HTTPException(status_code=404, detail="Account not found")
    return {"status": "ok"}


@router.post("/share", response_model=ShareResponse, summary="Share content to a connected account")
def share(request: ShareRequest, response: Response, user: dict = Depends(get_current_user)):
    provider = request.provider.lower()
    if not get_connected_account(user_id=user["id"], provider=provider):
        raise HTTPException(status_code=400, detail=f"No connected {provider} account found")

    payload = request.model_dump(mode="json")
    payload["provider"] = provider
    row = record_share(user_id=user["id"], share=payload)

    points = 0
    try:
        award_points(
            user_id=user["id"],
            event_type="share_progress",
            points=SHARE_POINTS,
            context={"content_type": payload["content_type"], "provider": provider},
        )
        points = SHARE_POINTS
    except Exception:
        log.warning("Awarding share points failed for user %s", user["id"], exc_info=True)

    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
    return ShareResponse(success=True, share=SocialShare(**row), points_awarded=points)


@router.get("/shares", response_model=ShareHistoryResponse, summary="My share history")
def read_shares(limit: int = Query(50, ge=1, le=200), user: dict = Depends(get_current_user)):
    rows = list_shares(user_id=user["id"], limit=limit)
    return ShareHistoryResponse(count=len(rows), shares=[SocialShare(**r) for r in rows])
