# -*- coding: utf-8 -*-
"""Diary — food entry storage (SQLite)."""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings


def _date_prefix(iso8601: str) -> str:
    return (iso8601 or "")[:10]


def add_food_entry(
    *,
    user_id: str,
    name: str,
    calories: float,
    protein: float,
    carbs: float,
    fat: float,
    timestamp: str,
    image_url: Optional[str] = None,
) -> Dict[str, Any]:
    entry = {
        "id": str(uuid4()),
        "user_id": user_id,
        "name": name.strip(),
        "calories": float(calories or 0.0),
        "protein": float(protein or 0.0),
        "carbs": float(carbs or 0.0),
        "fat": float(fat or 0.0),
        "image_url": image_url,
        "timestamp": timestamp,
    }
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO food_entries (id, user_id, name, calories, protein, carbs, fat, image_url, timestamp)
            VALUES (:id, :user_id, :name, :calories, :protein, :carbs, :fat, :image_url, :timestamp)
            """,
            entry,
        )
    return entry


def list_food_entries(*, user_id: str, date: str) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            """
            SELECT * FROM food_entries
            WHERE user_id = ? AND substr(timestamp, 1, 10) = ?
            ORDER BY timestamp ASC
            """,
            (user_id, _date_prefix(date)),
        ).fetchall()
        return [dict(r) for r in rows]


def recent_food_entries(*, user_id: str, limit: int = 10) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            "SELECT * FROM food_entries WHERE user_id = ? ORDER BY timestamp DESC LIMIT ?",
            (user_id, int(limit)),
        ).fetchall()
        return [dict(r) for r in rows]


def get_food_entry(*, user_id: str, entry_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT * FROM food_entries WHERE id = ? AND user_id = ?",
            (entry_id, user_id),
        ).fetchone()
        return dict(row) if row else None


def delete_food_entry(*, user_id: str, entry_id: str) -> Optional[Dict[str, Any]]:
    """Delete an owned entry and return the removed row (None when missing)."""
    row = get_food_entry(user_id=user_id, entry_id=entry_id)
    if not row:
        return None
    with db_conn(settings.app_db_path) as conn:
        conn.execute("DELETE FROM food_entries WHERE id = ? AND user_id = ?", (entry_id, user_id))
    return row


def daily_summary(*, user_id: str, date: str) -> Dict[str, Any]:
    day = _date_prefix(date)
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            """
            SELECT
                COUNT(*) AS entry_count,
                COALESCE(SUM(calories), 0) AS calories,
                COALESCE(SUM(protein), 0) AS protein,
                COALESCE(SUM(carbs), 0) AS carbs,
                COALESCE(SUM(fat), 0) AS fat
            FROM food_entries
            WHERE user_id = ? AND substr(timestamp, 1, 10) = ?
            """,
            (user_id, day),
        ).fetchone()
    data = dict(row) if row else {}
    return {
        "date": day,
        "calories": round(float(data.get("calories") or 0.0), 1),
        "protein": round(float(data.get("protein") or 0.0), 1),
        "carbs": round(float(data.get("carbs") or 0.0), 1),
        "fat": round(float(data.get("fat") or 0.0), 1),
        "entry_count": int(data.get("entry_count") or 0),
    }
