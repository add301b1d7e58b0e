# -*- coding: utf-8 -*-
"""Reminders — DB storage helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings

_UPDATABLE = ("title", "description", "due_date", "type", "priority", "is_completed")
_REQUIRED = ("title", "type", "priority", "is_completed")


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _row_to_reminder(row: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(row)
    out["is_completed"] = bool(out.get("is_completed"))
    return out


def list_reminders(*, user_id: str, status_filter: str = "all") -> List[Dict[str, Any]]:
    sql = "SELECT * FROM reminders WHERE user_id = ?"
    if status_filter == "active":
        sql += " AND is_completed = 0"
    elif status_filter == "completed":
        sql += " AND is_completed = 1"
    sql += " ORDER BY created_at DESC, rowid DESC"
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(sql, (user_id,)).fetchall()
        return [_row_to_reminder(dict(r)) for r in rows]


def get_reminder(*, user_id: str, reminder_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT * FROM reminders WHERE id = ? AND user_id = ?",
            (reminder_id, user_id),
        ).fetchone()
        return _row_to_reminder(dict(row)) if row else None


def add_reminder(*, user_id: str, reminder: Dict[str, Any]) -> Dict[str, Any]:
    row = {
        "id": str(uuid4()),
        "user_id": user_id,
        "title": reminder["title"],
        "description": reminder.get("description"),
        "due_date": reminder.get("due_date"),
        "type": reminder.get("type") or "reminder",
        "priority": reminder.get("priority") or "medium",
        "is_completed": int(bool(reminder.get("is_completed"))),
        "created_at": _utc_now(),
    }
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO reminders (id, user_id, title, description, due_date, type, priority, is_completed, created_at)
            VALUES (:id, :user_id, :title, :description, :due_date, :type, :priority, :is_completed, :created_at)
            """,
            row,
        )
    return _row_to_reminder(row)


def update_reminder(*, user_id: str, reminder_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    fields = {k: v for k, v in updates.items() if k in _UPDATABLE}
    for key in _REQUIRED:
        if fields.get(key, "") is None:
            fields.pop(key)
    if "is_completed" in fields:
        fields["is_completed"] = int(bool(fields["is_completed"]))
    if fields:
        assignments = ", ".join(f"{k} = ?" for k in fields)
        with db_conn(settings.app_db_path) as conn:
            conn.execute(
                f"UPDATE reminders SET {assignments} WHERE id = ? AND user_id = ?",
                (*fields.values(), reminder_id, user_id),
            )
    return get_reminder(user_id=user_id, reminder_id=reminder_id)


def delete_reminder(*, user_id: str, reminder_id: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute("DELETE FROM reminders WHERE id = ? AND user_id = ?", (reminder_id, user_id))
        return cur.rowcount > 0
