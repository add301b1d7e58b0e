# -*- coding: utf-8 -*-
"""Rewards — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class RewardEvent(BaseModel):
    id: str
    event_type: str
    points_awarded: int
    context: Dict[str, Any] = {}
    created_at: str


class RewardsResponse(BaseModel):
    points: int = 0
    lifetime_points: int = 0
    tier: str = "Bronze"
    next_tier: Optional[str] = None
    points_to_next_tier: int = 0
    recent_events: List[RewardEvent] = []


class AwardPointsRequest(BaseModel):
    event_type: str = Field(..., min_length=1, max_length=64)
    points: int = Field(..., gt=0, le=10_000)
    context: Dict[str, Any] = {}


class AwardPointsResponse(BaseModel):
    points_awarded: int
    new_points: int
    tier: str
    tier_changed: bool


class LeaderboardEntry(BaseModel):
    user_id: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    points: int
    tier: str


class LeaderboardResponse(BaseModel):
    count: int
    entries: List[LeaderboardEntry] = []


class Tier(str, Enum):
    bronze = "Bronze"
    silver = "Silver"
    gold = "Gold"
    platinum = "Platinum"


class RewardItem(BaseModel):
    id: str
    name: str
    description: str = ""
    image_url: Optional[str] = None
    points_cost: int
    required_tier: Tier = Tier.bronze
    category: str
    is_digital: bool = True
    stock_quantity: Optional[int] = None
    is_unlocked: bool = True
    can_afford: bool = False
    created_at: str


class RewardCatalogResponse(BaseModel):
    user_tier: Tier
    user_points: int
    rewards: List[RewardItem] = []


class RewardItemCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: str = Field("", max_length=2000)
    image_url: Optional[str] = Field(None, max_length=2000)
    points_cost: int = Field(..., gt=0, le=1_000_000)
    required_tier: Tier = Tier.bronze
    category: str = Field(..., min_length=1, max_length=64)
    is_digital: bool = True
    stock_quantity: Optional[int] = Field(None, ge=0)


class RedeemRequest(BaseModel):
    reward_item_id: str = Field(..., min_length=1)
    delivery_details: Dict[str, Any] = {}


class RedemptionStatus(str, Enum):
    pending = "pending"
    fulfilled = "fulfilled"
    cancelled = "cancelled"


class Redemption(BaseModel):
    id: str
    reward_item_id: str
    reward_name: str
    reward_description: str = ""
    reward_image_url: Optional[str] = None
    points_spent: int
    status: RedemptionStatus
    redemption_code: Optional[str] = None
    is_digital: bool
    delivery_details: Dict[str, Any] = {}
    created_at: str
    fulfilled_at: Optional[str] = None


class RedeemResponse(Redemption):
    remaining_points: int


class RedemptionListResponse(BaseModel):
    count: int
    redemptions: List[Redemption] = []


class RedemptionStatusRequest(BaseModel):
    status: RedemptionStatus
