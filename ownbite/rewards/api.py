# -*- coding: utf-8 -*-
"""Rewards — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user, require_admin
from .models import (
    AwardPointsRequest,
    AwardPointsResponse,
    LeaderboardEntry,
    LeaderboardResponse,
    RedeemRequest,
    RedeemResponse,
    Redemption,
    RedemptionListResponse,
    RedemptionStatus,
    RedemptionStatusRequest,
    RewardCatalogResponse,
    RewardItem,
    RewardItemCreateRequest,
    RewardsResponse,
)
from .storage import (
    RedemptionError,
    award_points,
    create_reward_item,
    get_rewards,
    leaderboard,
    list_redemptions,
    list_reward_items,
    redeem_reward,
    set_redemption_status,
)

router = APIRouter(prefix="/api/rewards", tags=["Rewards"])


@router.get("", response_model=RewardsResponse, summary="My points, tier and recent events")
def read_rewards(user: dict = Depends(get_current_user)):
    return RewardsResponse(**get_rewards(user_id=user["id"]))


@router.post("/award", response_model=AwardPointsResponse, summary="Award points for an activity")
def post_award(request: AwardPointsRequest, user: dict = Depends(get_current_user)):
    result = award_points(
        user_id=user["id"],
        event_type=request.event_type,
        points=request.points,
        context=request.context,
    )
    return AwardPointsResponse(**result)


@router.get("/leaderboard", response_model=LeaderboardResponse, summary="Top users by points")
def read_leaderboard(limit: int = Query(10, ge=1, le=100), user: dict = Depends(get_current_user)):
    rows = leaderboard(limit=limit)
    return LeaderboardResponse(count=len(rows), entries=[LeaderboardEntry(**r) for r in rows])


# ---------- marketplace ----------


@router.get("/items", response_model=RewardCatalogResponse, summary="Rewards I can browse and redeem")
def read_items(user: dict = Depends(get_current_user)):
    return RewardCatalogResponse(**list_reward_items(user_id=user["id"]))


@router.post("/redeem", response_model=RedeemResponse, summary="Spend points on a reward")
def post_redeem(request: RedeemRequest, user: dict = Depends(get_current_user)):
    try:
        row = redeem_reward(
            user_id=user["id"],
            reward_item_id=request.reward_item_id,
            delivery_details=request.delivery_details,
        )
    except RedemptionError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    return RedeemResponse(**row)


@router.get("/redemptions", response_model=RedemptionListResponse, summary="My redemption history")
def read_redemptions(user: dict = Depends(get_current_user)):
    rows = list_redemptions(user_id=user["id"])
    return RedemptionListResponse(count=len(rows), redemptions=[Redemption(**r) for r in rows])


@router.post("/admin/items", response_model=RewardItem, summary="Add a reward to the catalog")
def admin_create_item(request: RewardItemCreateRequest, _: dict = Depends(require_admin)):
    return RewardItem(**create_reward_item(request.model_dump(mode="json")))


@router.patch("/admin/redemptions/{redemption_id}", response_model=Redemption, summary="Fulfil or cancel a redemption")
def admin_set_redemption_status(
    redemption_id: str,
    request: RedemptionStatusRequest,
    _: dict = Depends(require_admin),
):
    if request.status == RedemptionStatus.pending:
        raise HTTPException(status_code=400, detail="Status must be fulfilled or cancelled")
    try:
        row = set_redemption_status(redemption_id=redemption_id, status=request.status.value)
    except RedemptionError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    if not row:
        raise HTTPException(status_code=404, detail="Redemption not found")
    return Redemption(**row)
