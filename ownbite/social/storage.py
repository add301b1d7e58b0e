# -*- coding: utf-8 -*-
"""Social — connected accounts and share history (SQLite)."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings

MAIN_HASHTAG = "#iamhealthierwithownbite.me"

_SHARE_PATHS = {
    "recipe": "r",
    "food_scan": "s",
    "progress": "p",
    "achievement": "a",
    "bloodwork": "b",
}


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _row_to_account(row: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(row)
    out["is_connected"] = bool(out.get("is_connected"))
    return out


def _row_to_share(row: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(row)
    try:
        out["hashtags"] = json.loads(out.get("hashtags") or "[]")
    except ValueError:
        out["hashtags"] = []
    return out


def default_share_url(content_type: str, content_id: str) -> str:
    path = _SHARE_PATHS.get(content_type)
    if not path:
        return settings.share_base_url
    return f"{settings.share_base_url}/{path}/{content_id}"


def with_main_hashtag(hashtags: List[str]) -> List[str]:
    out = list(hashtags or [])
    if MAIN_HASHTAG not in out:
        out.append(MAIN_HASHTAG)
    return out


def upsert_account(*, user_id: str, provider: str, account: Dict[str, Any]) -> Dict[str, Any]:
    now = _utc_now()
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO social_accounts (
                id, user_id, provider, provider_user_id, username, access_token, refresh_token,
                token_expires_at, profile_image_url, is_connected, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, 1, ?, ?)
            ON CONFLICT(user_id, provider) DO UPDATE SET
                provider_user_id = COALESCE(excluded.provider_user_id, social_accounts.provider_user_id),
                username = excluded.username,
                access_token = excluded.access_token,
                refresh_token = excluded.refresh_token,
                token_expires_at = excluded.token_expires_at,
                profile_image_url = excluded.profile_image_url,
                is_connected = 1,
                updated_at = excluded.updated_at
            """,
            (
                str(uuid4()),
                user_id,
                provider,
                account.get("provider_user_id"),
                account.get("username"),
                account.get("access_token"),
                account.get("refresh_token"),
                account.get("token_expires_at"),
                account.get("profile_image_url"),
                now,
                now,
            ),
        )
        row = conn.execute(
            "SELECT * FROM social_accounts WHERE user_id = ? AND provider = ?",
            (user_id, provider),
        ).fetchone()
    return _row_to_account(dict(row))


def list_accounts(*, user_id: str) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            "SELECT * FROM social_accounts WHERE user_id = ? AND is_connected = 1 ORDER BY provider ASC",
            (user_id,),
        ).fetchall()
        return [_row_to_account(dict(r)) for r in rows]


def get_connected_account(*, user_id: str, provider: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT * FROM social_accounts WHERE user_id = ? AND provider = ? AND is_connected = 1",
            (user_id, provider),
        ).fetchone()
        return _row_to_account(dict(row)) if row else None


def disconnect_account(*, user_id: str, account_id: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute(
            """
            UPDATE social_accounts
            SET is_connected = 0, access_token = NULL, refresh_token = NULL, updated_at = ?
            WHERE id = ? AND user_id = ? AND is_connected = 1
            """,
            (_utc_now(), account_id, user_id),
        )
        return cur.rowcount > 0


def record_share(*, user_id: str, share: Dict[str, Any]) -> Dict[str, Any]:
    row = {
        "id": str(uuid4()),
        "user_id": user_id,
        "content_type": share["content_type"],
        "content_id": share["content_id"],
        "provider": share["provider"],
        "share_url": share.get("share_url") or default_share_url(share["content_type"], share["content_id"]),
        "share_image_url": share.get("share_image_url"),
        "share_text": share["share_text"],
        "share_status": "success",
        "hashtags": json.dumps(with_main_hashtag(share.get("hashtags") or []), ensure_ascii=False),
        "created_at": _utc_now(),
    }
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO social_shares (
                id, user_id, content_type, content_id, provider, share_url, share_image_url,
                share_text, share_status, hashtags, created_at
            ) VALUES (
                :id, :user_id, :content_type, :content_id, :provider, :share_url, :share_image_url,
                :share_text, :share_status, :hashtags, :created_at
            )
            """,
            row,
        )
    return _row_to_share(row)


def list_shares(*, user_id: str, limit: int = 50) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            "SELECT * FROM social_shares WHERE user_id = ? ORDER BY created_at DESC, rowid DESC LIMIT ?",
            (user_id, int(limit)),
        ).fetchall()
        return [_row_to_share(dict(r)) for r in rows]
