# -*- coding: utf-8 -*-
"""Affiliates — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class AffiliateUpsertRequest(BaseModel):
    full_name: Optional[str] = Field(None, max_length=120)
    bio: Optional[str] = Field(None, max_length=2000)
    social_links: Optional[Dict[str, str]] = None


class Affiliate(BaseModel):
    id: str
    user_id: str
    referral_code: str
    full_name: Optional[str] = None
    bio: Optional[str] = None
    social_links: Dict[str, str] = {}
    approved: bool = False
    created_at: str


class AffiliateListResponse(BaseModel):
    count: int
    affiliates: List[Affiliate] = []


class CodeValidationResponse(BaseModel):
    referral_code: str
    valid: bool


class TrackReferralRequest(BaseModel):
    referral_code: str = Field(..., min_length=1, max_length=64)
    source: str = Field("direct", max_length=64)


class Referral(BaseModel):
    id: str
    referred_user_id: str
    affiliate_id: str
    source: str
    hashtag: str
    joined_at: str


class ReferralListResponse(BaseModel):
    count: int
    referrals: List[Referral] = []


class CommissionStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    cancelled = "cancelled"


class Commission(BaseModel):
    id: str
    affiliate_id: str
    referral_id: str
    amount: float
    status: CommissionStatus
    generated_at: str
    paid_at: Optional[str] = None


class CommissionListResponse(BaseModel):
    count: int
    commissions: List[Commission] = []


class GenerateCommissionRequest(BaseModel):
    referral_id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)


class CommissionStatusRequest(BaseModel):
    status: CommissionStatus


class DashboardStats(BaseModel):
    total_referrals: int = 0
    total_earnings: float = 0.0
    pending_earnings: float = 0.0
    paid_earnings: float = 0.0


class AffiliateDashboard(BaseModel):
    affiliate: Affiliate
    stats: DashboardStats
    recent_referrals: List[Referral] = []
    recent_commissions: List[Commission] = []
