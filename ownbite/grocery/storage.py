# -*- coding: utf-8 -*-
"""Grocery — lists and items (SQLite). Items are owned through their list."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings

_ITEM_UPDATABLE = {"name", "quantity", "category", "is_checked"}


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _row_to_list(row: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(row)
    out["is_public"] = bool(out.get("is_public"))
    out["item_count"] = int(out.get("item_count") or 0)
    return out


def _row_to_item(row: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(row)
    out["is_checked"] = bool(out.get("is_checked"))
    return out


def list_grocery_lists(*, user_id: str) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            """
            SELECT g.*, (SELECT COUNT(*) FROM grocery_list_items i WHERE i.list_id = g.id) AS item_count
            FROM grocery_lists g
            WHERE g.user_id = ?
            ORDER BY g.updated_at DESC
            """,
            (user_id,),
        ).fetchall()
        return [_row_to_list(dict(r)) for r in rows]


def get_grocery_list(*, user_id: str, list_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            """
            SELECT g.*, (SELECT COUNT(*) FROM grocery_list_items i WHERE i.list_id = g.id) AS item_count
            FROM grocery_lists g
            WHERE g.id = ? AND g.user_id = ?
            """,
            (list_id, user_id),
        ).fetchone()
        return _row_to_list(dict(row)) if row else None


def create_grocery_list(
    *,
    user_id: str,
    name: str,
    is_public: bool = False,
    items: Iterable[Dict[str, Any]] = (),
) -> Dict[str, Any]:
    list_id = str(uuid4())
    now = _utc_now()
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO grocery_lists (id, user_id, name, is_public, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (list_id, user_id, name.strip(), int(bool(is_public)), now, now),
        )
        for item in items:
            conn.execute(
                """
                INSERT INTO grocery_list_items (id, list_id, name, quantity, category, is_checked, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, 0, ?, ?)
                """,
                (str(uuid4()), list_id, item["name"], item.get("quantity") or "", item.get("category") or "", now, now),
            )
    return get_grocery_list(user_id=user_id, list_id=list_id) or {}


def delete_grocery_list(*, user_id: str, list_id: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute("DELETE FROM grocery_lists WHERE id = ? AND user_id = ?", (list_id, user_id))
        return cur.rowcount > 0


def list_items(*, user_id: str, list_id: str) -> Optional[List[Dict[str, Any]]]:
    if not get_grocery_list(user_id=user_id, list_id=list_id):
        return None
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            "SELECT * FROM grocery_list_items WHERE list_id = ? ORDER BY created_at ASC, rowid ASC",
            (list_id,),
        ).fetchall()
        return [_row_to_item(dict(r)) for r in rows]


def add_item(*, user_id: str, list_id: str, item: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not get_grocery_list(user_id=user_id, list_id=list_id):
        return None
    now = _utc_now()
    row = {
        "id": str(uuid4()),
        "list_id": list_id,
        "name": item["name"].strip(),
        "quantity": item.get("quantity") or "",
        "category": item.get("category") or "",
        "is_checked": int(bool(item.get("is_checked"))),
        "created_at": now,
        "updated_at": now,
    }
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO grocery_list_items (id, list_id, name, quantity, category, is_checked, created_at, updated_at)
            VALUES (:id, :list_id, :name, :quantity, :category, :is_checked, :created_at, :updated_at)
            """,
            row,
        )
        conn.execute("UPDATE grocery_lists SET updated_at = ? WHERE id = ?", (now, list_id))
    return _row_to_item(row)


def _owned_item(conn, user_id: str, item_id: str) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        """
        SELECT i.* FROM grocery_list_items i
        JOIN grocery_lists g ON g.id = i.list_id
        WHERE i.id = ? AND g.user_id = ?
        """,
        (item_id, user_id),
    ).fetchone()
    return dict(row) if row else None


def update_item(*, user_id: str, item_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    now = _utc_now()
    with db_conn(settings.app_db_path) as conn:
        current = _owned_item(conn, user_id, item_id)
        if not current:
            return None
        fields = {k: v for k, v in updates.items() if k in _ITEM_UPDATABLE and v is not None}
        if "is_checked" in fields:
            fields["is_checked"] = int(bool(fields["is_checked"]))
        fields["updated_at"] = now
        assignments = ", ".join(f"{k} = :{k}" for k in fields)
        conn.execute(f"UPDATE grocery_list_items SET {assignments} WHERE id = :item_id", {**fields, "item_id": item_id})
        conn.execute("UPDATE grocery_lists SET updated_at = ? WHERE id = ?", (now, current["list_id"]))
        row = conn.execute("SELECT * FROM grocery_list_items WHERE id = ?", (item_id,)).fetchone()
    return _row_to_item(dict(row))


def delete_item(*, user_id: str, item_id: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        current = _owned_item(conn, user_id, item_id)
        if not current:
            return False
        conn.execute("DELETE FROM grocery_list_items WHERE id = ?", (item_id,))
        conn.execute("UPDATE grocery_lists SET updated_at = ? WHERE id = ?", (_utc_now(), current["list_id"]))
    return True
