# -*- coding: utf-8 -*-
"""Affiliates — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import get_current_user, require_admin
from .models import (
    Affiliate,
    AffiliateDashboard,
    AffiliateListResponse,
    AffiliateUpsertRequest,
    CodeValidationResponse,
    Commission,
    CommissionListResponse,
    CommissionStatusRequest,
    GenerateCommissionRequest,
    Referral,
    ReferralListResponse,
    TrackReferralRequest,
)
from .storage import (
    ReferralError,
    dashboard,
    generate_commission,
    get_affiliate,
    list_all_affiliates,
    list_commissions,
    list_referrals,
    set_affiliate_approval,
    set_commission_status,
    track_referral,
    upsert_affiliate,
    validate_referral_code,
)

router = APIRouter(prefix="/api/affiliates", tags=["Affiliates"])


def _own_affiliate(user: dict) -> dict:
    row = get_affiliate(user_id=user["id"])
    if not row:
        raise HTTPException(status_code=404, detail="Affiliate profile not found")
    return row


@router.get("/me", response_model=Affiliate, summary="My affiliate profile")
def read_profile(user: dict = Depends(get_current_user)):
    return Affiliate(**_own_affiliate(user))


@router.put("/me", response_model=Affiliate, summary="Create or update my affiliate profile")
def put_profile(request: AffiliateUpsertRequest, user: dict = Depends(get_current_user)):
    try:
        row = upsert_affiliate(
            user_id=user["id"],
            email=user["email"],
            updates=request.model_dump(exclude_unset=True),
        )
    except ReferralError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    return Affiliate(**row)


@router.get("/validate/{code}", response_model=CodeValidationResponse, summary="Check a referral code")
def validate_code(code: str):
    return CodeValidationResponse(referral_code=code, valid=validate_referral_code(code))


@router.post("/referrals", response_model=Referral, summary="Record that I joined via a referral code")
def new_referral(request: TrackReferralRequest, user: dict = Depends(get_current_user)):
    try:
        row = track_referral(referred_user_id=user["id"], code=request.referral_code, source=request.source)
    except ReferralError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    return Referral(**row)


@router.get("/referrals", response_model=ReferralListResponse, summary="Users I referred")
def read_referrals(user: dict = Depends(get_current_user)):
    rows = list_referrals(affiliate_id=_own_affiliate(user)["id"])
    return ReferralListResponse(count=len(rows), referrals=[Referral(**r) for r in rows])


@router.get("/commissions", response_model=CommissionListResponse, summary="My commissions")
def read_commissions(user: dict = Depends(get_current_user)):
    rows = list_commissions(affiliate_id=_own_affiliate(user)["id"])
    return CommissionListResponse(count=len(rows), commissions=[Commission(**r) for r in rows])


@router.get("/dashboard", response_model=AffiliateDashboard, summary="Affiliate dashboard")
def read_dashboard(user: dict = Depends(get_current_user)):
    data = dashboard(user_id=user["id"])
    if not data:
        raise HTTPException(status_code=404, detail="Affiliate profile not found")
    return AffiliateDashboard(**data)


# ---------- admin ----------


@router.get("/admin/affiliates", response_model=AffiliateListResponse, summary="All affiliates (admin)")
def admin_list(_: dict = Depends(require_admin)):
    rows = list_all_affiliates()
    return AffiliateListResponse(count=len(rows), affiliates=[Affiliate(**r) for r in rows])


@router.post("/admin/affiliates/{affiliate_id}/approve", response_model=Affiliate, summary="Approve an affiliate")
def admin_approve(affiliate_id: str, _: dict = Depends(require_admin)):
    row = set_affiliate_approval(affiliate_id=affiliate_id, approved=True)
    if not row:
        raise HTTPException(status_code=404, detail="Affiliate not found")
    return Affiliate(**row)


@router.post("/admin/affiliates/{affiliate_id}/reject", response_model=Affiliate, summary="Revoke approval")
def admin_reject(affiliate_id: str, _: dict = Depends(require_admin)):
    row = set_affiliate_approval(affiliate_id=affiliate_id, approved=False)
    if not row:
        raise HTTPException(status_code=404, detail="Affiliate not found")
    return Affiliate(**row)


@router.post("/admin/commissions", response_model=Commission, summary="Generate a commission for a referral")
def admin_generate_commission(request: GenerateCommissionRequest, _: dict = Depends(require_admin)):
    row = generate_commission(referral_id=request.referral_id, amount=request.amount)
    if not row:
        raise HTTPException(status_code=404, detail="Referral not found")
    return Commission(**row)


@router.patch("/admin/commissions/{commission_id}", response_model=Commission, summary="Mark a commission paid or cancelled")
def admin_commission_status(
    commission_id: str,
    request: CommissionStatusRequest,
    _: dict = Depends(require_admin),
):
    row = set_commission_status(commission_id=commission_id, status=request.status.value)
    if not row:
        raise HTTPException(status_code=404, detail="Commission not found")
    return Commission(**row)
