# -*- coding: utf-8 -*-
"""Auth — Pydantic models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=8, max_length=128)
    full_name: Optional[str] = Field(None, max_length=120)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1, max_length=128)


class UserPublic(BaseModel):
    id: str
    email: str
    created_at: str


class AuthResponse(BaseModel):
    user: UserPublic
    token: str


class Profile(BaseModel):
    user_id: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: str = "user"
    subscription_status: str = "free"
    subscription_end_date: Optional[str] = None
    created_at: str
    updated_at: str


class ProfileUpdateRequest(BaseModel):
    full_name: Optional[str] = Field(None, max_length=120)
    avatar_url: Optional[str] = Field(None, max_length=2000)


class PremiumAccessResponse(BaseModel):
    has_premium_access: bool
