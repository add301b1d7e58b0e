# -*- coding: utf-8 -*-
"""Social — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ShareContentType(str, Enum):
    recipe = "recipe"
    food_scan = "food_scan"
    progress = "progress"
    achievement = "achievement"
    bloodwork = "bloodwork"


class ConnectRequest(BaseModel):
    provider: str = Field(..., min_length=1, max_length=32)
    code: str = Field(..., min_length=1)
    redirect_uri: str = Field(..., min_length=1, alias="redirectUri")

    model_config = {"populate_by_name": True}


class SocialAccount(BaseModel):
    """Connected account as exposed to clients; tokens are never returned."""

    id: str
    provider: str
    provider_user_id: Optional[str] = None
    username: Optional[str] = None
    profile_image_url: Optional[str] = None
    token_expires_at: Optional[str] = None
    is_connected: bool = True
    created_at: str
    updated_at: str


class SocialAccountsResponse(BaseModel):
    count: int
    accounts: List[SocialAccount] = []


class ShareRequest(BaseModel):
    content_type: ShareContentType
    content_id: str = Field(..., min_length=1)
    provider: str = Field(..., min_length=1, max_length=32)
    share_text: str = Field(..., min_length=1, max_length=5000)
    share_url: Optional[str] = None
    share_image_url: Optional[str] = None
    hashtags: List[str] = []


class SocialShare(BaseModel):
    id: str
    content_type: str
    content_id: str
    provider: str
    share_url: str
    share_image_url: Optional[str] = None
    share_text: str
    share_status: str
    hashtags: List[str] = []
    created_at: str


class ShareResponse(BaseModel):
    success: bool = True
    share: SocialShare
    points_awarded: int = 0


class ShareHistoryResponse(BaseModel):
    count: int
    shares: List[SocialShare] = []
