# -*- coding: utf-8 -*-
"""Social — OAuth code exchange and profile lookup per provider."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import httpx

from ..config import settings

log = logging.getLogger(__name__)


class UnsupportedProviderError(ValueError):
    pass


class ProviderConfigError(RuntimeError):
    """Client id/secret for a provider are not configured."""


class ProviderAuthError(RuntimeError):
    """Token exchange or profile fetch failed."""


def _facebook(p: Dict[str, Any]) -> Dict[str, Any]:
    picture = ((p.get("picture") or {}).get("data") or {}).get("url")
    return {"provider_user_id": p.get("id"), "username": p.get("name"), "profile_image_url": picture}


def _instagram(p: Dict[str, Any]) -> Dict[str, Any]:
    return {"provider_user_id": p.get("id"), "username": p.get("username"), "profile_image_url": None}


def _twitter(p: Dict[str, Any]) -> Dict[str, Any]:
    data = p.get("data") or {}
    return {
        "provider_user_id": data.get("id"),
        "username": data.get("username"),
        "profile_image_url": data.get("profile_image_url"),
    }


def _tiktok(p: Dict[str, Any]) -> Dict[str, Any]:
    user = (p.get("data") or {}).get("user") or {}
    return {
        "provider_user_id": user.get("open_id"),
        "username": user.get("display_name"),
        "profile_image_url": user.get("avatar_url"),
    }


def _pinterest(p: Dict[str, Any]) -> Dict[str, Any]:
    return {"provider_user_id": p.get("id"), "username": p.get("username"), "profile_image_url": p.get("profile_image")}


@dataclass(frozen=True)
class Provider:
    name: str
    token_url: str
    profile_url: str
    extract: Callable[[Dict[str, Any]], Dict[str, Any]]


PROVIDERS: Dict[str, Provider] = {
    "facebook": Provider(
        "facebook",
        "https://graph.facebook.com/v18.0/oauth/access_token",
        "https://graph.facebook.com/v18.0/me?fields=id,name,email,picture",
        _facebook,
    ),
    "instagram": Provider(
        "instagram",
        "https://api.instagram.com/oauth/access_token",
        "https://graph.instagram.com/me?fields=id,username",
        _instagram,
    ),
    "twitter": Provider(
        "twitter",
        "https://api.twitter.com/2/oauth2/token",
        "https://api.twitter.com/2/users/me",
        _twitter,
    ),
    "tiktok": Provider(
        "tiktok",
        "https://open-api.tiktok.com/oauth/access_token/",
        "https://open-api.tiktok.com/user/info/",
        _tiktok,
    ),
    "pinterest": Provider(
        "pinterest",
        "https://api.pinterest.com/v5/oauth/token",
        "https://api.pinterest.com/v5/user_account",
        _pinterest,
    ),
}


def get_provider(name: str) -> Provider:
    provider = PROVIDERS.get((name or "").lower())
    if provider is None:
        raise UnsupportedProviderError(f"Unsupported provider: {name}")
    return provider


def exchange_code(
    provider_name: str,
    *,
    code: str,
    redirect_uri: str,
    client: Optional[httpx.Client] = None,
) -> Dict[str, Any]:
    """Trade an OAuth code for tokens and return the account fields to store."""
    provider = get_provider(provider_name)
    client_id, client_secret = settings.social_credentials.get(provider.name, (None, None))
    if not client_id or not client_secret:
        raise ProviderConfigError(f"{provider.name} API credentials not configured")

    owns_client = client is None
    http = client or httpx.Client(timeout=settings.social_timeout)
    try:
        try:
            token_resp = http.post(
                provider.token_url,
                data={
                    "client_id": client_id,
                    "client_secret": client_secret,
                    "code": code,
                    "redirect_uri": redirect_uri,
                    "grant_type": "authorization_code",
                },
            )
        except httpx.HTTPError as exc:
            raise ProviderAuthError(f"Token exchange failed: {exc}") from exc
        if token_resp.status_code >= 400:
            log.warning("%s token exchange error %s: %s", provider.name, token_resp.status_code, token_resp.text[:500])
            raise ProviderAuthError("Failed to exchange authorization code")
        try:
            token_data = token_resp.json()
        except ValueError as exc:
            raise ProviderAuthError("Invalid token response") from exc
        if not isinstance(token_data, dict):
            raise ProviderAuthError("Invalid token response")
        access_token = token_data.get("access_token")
        if not access_token:
            raise ProviderAuthError("Token response missing access_token")

        try:
            profile_resp = http.get(provider.profile_url, headers={"Authorization": f"Bearer {access_token}"})
        except httpx.HTTPError as exc:
            raise ProviderAuthError(f"Profile fetch failed: {exc}") from exc
        if profile_resp.status_code >= 400:
            log.warning("%s profile fetch error %s: %s", provider.name, profile_resp.status_code, profile_resp.text[:500])
            raise ProviderAuthError("Failed to fetch user profile")
        try:
            profile = profile_resp.json()
        except ValueError as exc:
            raise ProviderAuthError("Invalid profile response") from exc
    finally:
        if owns_client:
            http.close()

    expires_in = token_data.get("expires_in")
    expires_at = None
    if expires_in:
        try:
            expires_at = (datetime.now(timezone.utc) + timedelta(seconds=int(expires_in))).isoformat().replace("+00:00", "Z")
        except (TypeError, ValueError):
            expires_at = None

    account = provider.extract(profile if isinstance(profile, dict) else {})
    account.update(
        {
            "access_token": access_token,
            "refresh_token": token_data.get("refresh_token"),
            "token_expires_at": expires_at,
        }
    )
    if account.get("provider_user_id") is not None:
        account["provider_user_id"] = str(account["provider_user_id"])
    return account
