# -*- coding: utf-8 -*-
"""Meal plans — saved plans (SQLite)."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _row_to_plan(row: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(row)
    try:
        out["target_nutrients"] = json.loads(out.get("target_nutrients") or "[]")
    except ValueError:
        out["target_nutrients"] = []
    try:
        out["plan_data"] = json.loads(out.get("plan_data") or "{}")
    except ValueError:
        out["plan_data"] = {"days": []}
    out["is_active"] = bool(out.get("is_active"))
    return out


def save_meal_plan(*, user_id: str, plan: Dict[str, Any]) -> Dict[str, Any]:
    """Insert a plan and make it the user's only active one."""
    plan_id = str(uuid4())
    with db_conn(settings.app_db_path) as conn:
        conn.execute("UPDATE meal_plans SET is_active = 0 WHERE user_id = ?", (user_id,))
        conn.execute(
            """
            INSERT INTO meal_plans (
                id, user_id, title, description, target_nutrients, plan_data, is_active, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, 1, ?)
            """,
            (
                plan_id,
                user_id,
                plan["title"],
                plan.get("description") or "",
                json.dumps(plan.get("target_nutrients") or [], ensure_ascii=False),
                json.dumps(plan["plan_data"], ensure_ascii=False),
                _utc_now(),
            ),
        )
    return get_meal_plan(user_id=user_id, plan_id=plan_id) or {}


def get_meal_plan(*, user_id: str, plan_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT * FROM meal_plans WHERE id = ? AND user_id = ?",
            (plan_id, user_id),
        ).fetchone()
        return _row_to_plan(dict(row)) if row else None


def list_meal_plans(*, user_id: str, limit: int = 5) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            "SELECT * FROM meal_plans WHERE user_id = ? ORDER BY created_at DESC LIMIT ?",
            (user_id, int(limit)),
        ).fetchall()
        return [_row_to_plan(dict(r)) for r in rows]


def get_active_meal_plan(*, user_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT * FROM meal_plans WHERE user_id = ? AND is_active = 1 ORDER BY created_at DESC LIMIT 1",
            (user_id,),
        ).fetchone()
        return _row_to_plan(dict(row)) if row else None


def delete_meal_plan(*, user_id: str, plan_id: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute("DELETE FROM meal_plans WHERE id = ? AND user_id = ?", (plan_id, user_id))
        return cur.rowcount > 0
