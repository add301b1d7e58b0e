# -*- coding: utf-8 -*-
"""Scan — food scans + stored photos (disk + SQLite)."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _user_images_root(user_id: str) -> Path:
    return settings.data_root / "users" / user_id / "food_images"


_SUFFIXES = {"image/jpeg": ".jpg", "image/png": ".png", "image/webp": ".webp", "image/heic": ".heic"}


def store_image(*, user_id: str, data: bytes, content_type: str) -> Dict[str, Any]:
    image_id = str(uuid4())
    root = _user_images_root(user_id)
    root.mkdir(parents=True, exist_ok=True)
    path = root / f"{image_id}{_SUFFIXES.get(content_type, '')}"
    path.write_bytes(data)

    row = {
        "id": image_id,
        "user_id": user_id,
        "content_type": content_type,
        "size_bytes": len(data),
        "stored_relpath": str(path.relative_to(settings.data_root)),
        "created_at": _utc_now(),
    }
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO scan_images (id, user_id, content_type, size_bytes, stored_relpath, created_at)
            VALUES (:id, :user_id, :content_type, :size_bytes, :stored_relpath, :created_at)
            """,
            row,
        )
    return row


def get_image_row(*, user_id: str, image_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT * FROM scan_images WHERE id = ? AND user_id = ?",
            (image_id, user_id),
        ).fetchone()
        return dict(row) if row else None


def image_path(row: Dict[str, Any]) -> Path:
    return settings.data_root / (row.get("stored_relpath") or "")


def _json_list(raw: Any) -> List[str]:
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except ValueError:
        return []
    return [str(x) for x in data] if isinstance(data, list) else []


def save_scan(*, user_id: str, result: Dict[str, Any], image_url: Optional[str] = None) -> Dict[str, Any]:
    scan_id = str(uuid4())
    now = _utc_now()
    items = result.get("foodItems") or []
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO food_scans (
                id, user_id, image_url, total_calories, total_protein, total_carbs, total_fat, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                scan_id,
                user_id,
                image_url,
                float(result.get("totalCalories") or 0.0),
                float(result.get("totalProtein") or 0.0),
                float(result.get("totalCarbs") or 0.0),
                float(result.get("totalFat") or 0.0),
                now,
            ),
        )
        for item in items:
            conn.execute(
                """
                INSERT INTO food_items (
                    id, scan_id, name, calories, protein, carbs, fat, health_benefits, health_risks
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(uuid4()),
                    scan_id,
                    item["name"],
                    float(item.get("calories") or 0.0),
                    float(item.get("protein") or 0.0),
                    float(item.get("carbs") or 0.0),
                    float(item.get("fat") or 0.0),
                    json.dumps(item.get("healthBenefits") or [], ensure_ascii=False),
                    json.dumps(item.get("healthRisks") or [], ensure_ascii=False),
                ),
            )
    return get_scan(user_id=user_id, scan_id=scan_id) or {}


def _item_from_row(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": row["name"],
        "calories": row["calories"],
        "protein": row["protein"],
        "carbs": row["carbs"],
        "fat": row["fat"],
        "healthBenefits": _json_list(row.get("health_benefits")),
        "healthRisks": _json_list(row.get("health_risks")),
    }


def _attach_items(conn, scans: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    for scan in scans:
        rows = conn.execute("SELECT * FROM food_items WHERE scan_id = ?", (scan["id"],)).fetchall()
        scan["items"] = [_item_from_row(dict(r)) for r in rows]
    return scans


def get_scan(*, user_id: str, scan_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT * FROM food_scans WHERE id = ? AND user_id = ?",
            (scan_id, user_id),
        ).fetchone()
        if not row:
            return None
        return _attach_items(conn, [dict(row)])[0]


def list_scans(*, user_id: str, limit: int = 10) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            "SELECT * FROM food_scans WHERE user_id = ? ORDER BY created_at DESC LIMIT ?",
            (user_id, int(limit)),
        ).fetchall()
        return _attach_items(conn, [dict(r) for r in rows])
