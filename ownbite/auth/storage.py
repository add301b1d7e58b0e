# -*- coding: utf-8 -*-
"""Auth — DB storage helpers (users + profiles)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute("SELECT * FROM users WHERE email = ?", (email.lower().strip(),)).fetchone()
        return dict(row) if row else None


def get_user_by_id(user_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return dict(row) if row else None


def create_user(*, email: str, password_hash: str, full_name: Optional[str] = None) -> Dict[str, Any]:
    user_id = str(uuid4())
    now = _utc_now()
    email_norm = email.lower().strip()
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            "INSERT INTO users (id, email, password_hash, created_at) VALUES (?, ?, ?, ?)",
            (user_id, email_norm, password_hash, now),
        )
        conn.execute(
            """
            INSERT INTO profiles (user_id, full_name, avatar_url, role, subscription_status, created_at, updated_at)
            VALUES (?, ?, NULL, 'user', 'free', ?, ?)
            """,
            (user_id, full_name, now, now),
        )
    return {"id": user_id, "email": email_norm, "password_hash": password_hash, "created_at": now}


def get_profile(user_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute("SELECT * FROM profiles WHERE user_id = ?", (user_id,)).fetchone()
        return dict(row) if row else None


def update_profile(user_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    allowed = {"full_name", "avatar_url"}
    fields = {k: v for k, v in updates.items() if k in allowed}
    if fields:
        fields["updated_at"] = _utc_now()
        assignments = ", ".join(f"{k} = ?" for k in fields)
        with db_conn(settings.app_db_path) as conn:
            conn.execute(
                f"UPDATE profiles SET {assignments} WHERE user_id = ?",
                (*fields.values(), user_id),
            )
    return get_profile(user_id)


def is_admin(user_id: str) -> bool:
    profile = get_profile(user_id)
    return bool(profile and profile.get("role") == "admin")


def has_premium_access(user_id: str, *, now: Optional[datetime] = None) -> bool:
    profile = get_profile(user_id)
    if not profile or profile.get("subscription_status") != "premium":
        return False
    end = profile.get("subscription_end_date")
    if not end:
        return True
    current = now or datetime.now(timezone.utc)
    try:
        end_dt = datetime.fromisoformat(str(end).replace("Z", "+00:00"))
    except ValueError:
        return False
    if end_dt.tzinfo is None:
        end_dt = end_dt.replace(tzinfo=timezone.utc)
    return end_dt > current
