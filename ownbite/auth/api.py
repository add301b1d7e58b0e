# -*- coding: utf-8 -*-
"""Auth + profile — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from ..config import settings
from .models import (
    AuthResponse,
    LoginRequest,
    PremiumAccessResponse,
    Profile,
    ProfileUpdateRequest,
    RegisterRequest,
    UserPublic,
)
from .security import TOKEN_COOKIE_NAME, create_access_token, get_current_user, hash_password, verify_password
from .storage import create_user, get_profile, get_user_by_email, has_premium_access, update_profile

router = APIRouter(prefix="/api/auth", tags=["Auth"])
profile_router = APIRouter(prefix="/api/profile", tags=["Profile"])


def _user_public(row: dict) -> UserPublic:
    return UserPublic(id=row["id"], email=row["email"], created_at=row["created_at"])


def _set_auth_cookie(resp: Response, token: str) -> None:
    max_age = int(settings.token_ttl_days) * 24 * 60 * 60
    resp.set_cookie(
        TOKEN_COOKIE_NAME,
        token,
        httponly=True,
        secure=bool(settings.cookie_secure),
        samesite="lax",
        max_age=max_age,
        path="/",
    )


@router.post("/register", response_model=AuthResponse, summary="Register a new user")
def register(request: RegisterRequest, response: Response):
    if get_user_by_email(request.email):
        raise HTTPException(status_code=400, detail="Email already registered")

    user = create_user(
        email=request.email,
        password_hash=hash_password(request.password),
        full_name=request.full_name,
    )
    token = create_access_token(user_id=user["id"], email=user["email"])
    _set_auth_cookie(response, token)
    return AuthResponse(user=_user_public(user), token=token)


@router.post("/login", response_model=AuthResponse, summary="Login")
def login(request: LoginRequest, response: Response):
    user = get_user_by_email(request.email)
    if not user or not verify_password(request.password, user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token(user_id=user["id"], email=user["email"])
    _set_auth_cookie(response, token)
    return AuthResponse(user=_user_public(user), token=token)


@router.post("/logout", summary="Logout")
def logout(response: Response):
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
    return {"status": "ok"}


@router.get("/me", response_model=UserPublic, summary="Get current user")
def me(user: dict = Depends(get_current_user)):
    return _user_public(user)


@profile_router.get("", response_model=Profile, summary="Get my profile")
def read_profile(user: dict = Depends(get_current_user)):
    row = get_profile(user["id"])
    if not row:
        raise HTTPException(status_code=404, detail="Profile not found")
    return Profile(**row)


@profile_router.patch("", response_model=Profile, summary="Update my profile")
def patch_profile(request: ProfileUpdateRequest, user: dict = Depends(get_current_user)):
    row = update_profile(user["id"], request.model_dump(exclude_unset=True))
    if not row:
        raise HTTPException(status_code=404, detail="Profile not found")
    return Profile(**row)


@profile_router.get("/premium", response_model=PremiumAccessResponse, summary="Check premium access")
def premium_access(response: Response, user: dict = Depends(get_current_user)):
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
    return PremiumAccessResponse(has_premium_access=has_premium_access(user["id"]))
