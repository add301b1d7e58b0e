# -*- coding: utf-8 -*-
"""Rewards — points ledger, tiers and marketplace (SQLite)."""

from __future__ import annotations

import json
import secrets
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings

# (tier, lifetime points needed to leave it)
TIERS: Tuple[Tuple[str, Optional[int]], ...] = (
    ("Bronze", 500),
    ("Silver", 1000),
    ("Gold", 2000),
    ("Platinum", None),
)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def tier_for(lifetime_points: int) -> str:
    for name, ceiling in TIERS:
        if ceiling is None or lifetime_points < ceiling:
            return name
    return TIERS[-1][0]


def next_tier_for(lifetime_points: int) -> Tuple[Optional[str], int]:
    """Return the next tier name and the points still needed (None, 0 at the top)."""
    for idx, (_, ceiling) in enumerate(TIERS):
        if ceiling is not None and lifetime_points < ceiling:
            return TIERS[idx + 1][0], ceiling - lifetime_points
    return None, 0


def _row_to_event(row: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(row)
    try:
        out["context"] = json.loads(out.get("context") or "{}")
    except ValueError:
        out["context"] = {}
    return out


def _record_event(
    conn: sqlite3.Connection,
    *,
    user_id: str,
    event_type: str,
    points: int,
    context: Optional[Dict[str, Any]],
    now: str,
) -> None:
    conn.execute(
        """
        INSERT INTO reward_events (id, user_id, event_type, points_awarded, context, created_at)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (str(uuid4()), user_id, event_type, int(points), json.dumps(context or {}, ensure_ascii=False), now),
    )


def award_points(*, user_id: str, event_type: str, points: int, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Add points to the balance and lifetime total in one statement, then log the event."""
    points = int(points)
    now = _utc_now()
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO user_rewards (user_id, points, lifetime_points, tier, last_updated, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                points = user_rewards.points + excluded.points,
                lifetime_points = user_rewards.lifetime_points + excluded.lifetime_points,
                last_updated = excluded.last_updated
            """,
            (user_id, points, points, tier_for(points), now, now),
        )
        # The upsert holds the write lock, so this read sees our own increment.
        row = conn.execute(
            "SELECT points, lifetime_points FROM user_rewards WHERE user_id = ?",
            (user_id,),
        ).fetchone()
        new_points = int(row["points"])
        new_lifetime = int(row["lifetime_points"])
        old_tier = tier_for(new_lifetime - points)
        new_tier = tier_for(new_lifetime)
        conn.execute("UPDATE user_rewards SET tier = ? WHERE user_id = ?", (new_tier, user_id))
        _record_event(conn, user_id=user_id, event_type=event_type, points=points, context=context, now=now)
    return {
        "points_awarded": points,
        "new_points": new_points,
        "tier": new_tier,
        "tier_changed": new_tier != old_tier,
    }


def get_rewards(*, user_id: str, events_limit: int = 10) -> Dict[str, Any]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute("SELECT * FROM user_rewards WHERE user_id = ?", (user_id,)).fetchone()
        events = conn.execute(
            "SELECT * FROM reward_events WHERE user_id = ? ORDER BY created_at DESC, rowid DESC LIMIT ?",
            (user_id, int(events_limit)),
        ).fetchall()
    lifetime = int(row["lifetime_points"]) if row else 0
    next_tier, remaining = next_tier_for(lifetime)
    return {
        "points": int(row["points"]) if row else 0,
        "lifetime_points": lifetime,
        "tier": tier_for(lifetime),
        "next_tier": next_tier,
        "points_to_next_tier": remaining,
        "recent_events": [_row_to_event(dict(e)) for e in events],
    }


def leaderboard(*, limit: int = 10) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            """
            SELECT r.user_id, p.full_name, p.avatar_url, r.points, r.tier
            FROM user_rewards r
            LEFT JOIN profiles p ON p.user_id = r.user_id
            ORDER BY r.points DESC, r.lifetime_points DESC
            LIMIT ?
            """,
            (int(limit),),
        ).fetchall()
        return [dict(r) for r in rows]


# ---------- marketplace ----------


class RedemptionError(ValueError):
    """Redemption rejected; `status_code` carries the HTTP mapping."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


def tier_rank(tier: str) -> int:
    names = [name for name, _ in TIERS]
    return names.index(tier) if tier in names else 0


def _row_to_item(row: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(row)
    out["is_digital"] = bool(out.get("is_digital"))
    out["is_active"] = bool(out.get("is_active"))
    return out


def _row_to_redemption(row: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(row)
    out["is_digital"] = bool(out.get("is_digital"))
    try:
        out["delivery_details"] = json.loads(out.get("delivery_details") or "{}")
    except ValueError:
        out["delivery_details"] = {}
    return out


def _balance(conn: sqlite3.Connection, user_id: str) -> Tuple[int, int]:
    row = conn.execute(
        "SELECT points, lifetime_points FROM user_rewards WHERE user_id = ?",
        (user_id,),
    ).fetchone()
    return (int(row["points"]), int(row["lifetime_points"])) if row else (0, 0)


def list_reward_items(*, user_id: str) -> Dict[str, Any]:
    """Active catalog with per-user `can_afford` and `is_unlocked` flags."""
    with db_conn(settings.app_db_path) as conn:
        points, lifetime = _balance(conn, user_id)
        rows = conn.execute(
            "SELECT * FROM reward_items WHERE is_active = 1 ORDER BY points_cost ASC, name ASC"
        ).fetchall()
    tier = tier_for(lifetime)
    items = []
    for r in rows:
        item = _row_to_item(dict(r))
        item["is_unlocked"] = tier_rank(tier) >= tier_rank(item["required_tier"])
        item["can_afford"] = item["is_unlocked"] and points >= item["points_cost"] and item["stock_quantity"] != 0
        items.append(item)
    return {"user_tier": tier, "user_points": points, "rewards": items}


def create_reward_item(item: Dict[str, Any]) -> Dict[str, Any]:
    item_id = str(uuid4())
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO reward_items (
                id, name, description, image_url, points_cost, required_tier, category,
                is_digital, stock_quantity, is_active, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, 1, ?)
            """,
            (
                item_id,
                item["name"].strip(),
                item.get("description") or "",
                item.get("image_url"),
                int(item["points_cost"]),
                item.get("required_tier") or TIERS[0][0],
                item["category"],
                int(bool(item.get("is_digital", True))),
                item.get("stock_quantity"),
                _utc_now(),
            ),
        )
        row = conn.execute("SELECT * FROM reward_items WHERE id = ?", (item_id,)).fetchone()
        return _row_to_item(dict(row))


def redeem_reward(*, user_id: str, reward_item_id: str, delivery_details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Spend points on a catalog item.

    Stock and balance are both decremented by guarded UPDATEs inside one
    transaction, so a failed check rolls back the other. Lifetime points and
    therefore the tier are left alone.
    """
    now = _utc_now()
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT * FROM reward_items WHERE id = ? AND is_active = 1",
            (reward_item_id,),
        ).fetchone()
        if not row:
            raise RedemptionError("Reward not found", status_code=404)
        item = _row_to_item(dict(row))
        cost = int(item["points_cost"])

        _, lifetime = _balance(conn, user_id)
        if tier_rank(tier_for(lifetime)) < tier_rank(item["required_tier"]):
            raise RedemptionError(f"Requires {item['required_tier']} tier", status_code=403)

        if item["stock_quantity"] is not None:
            cur = conn.execute(
                "UPDATE reward_items SET stock_quantity = stock_quantity - 1 WHERE id = ? AND stock_quantity > 0",
                (reward_item_id,),
            )
            if cur.rowcount == 0:
                raise RedemptionError("Reward is out of stock", status_code=409)

        cur = conn.execute(
            """
            UPDATE user_rewards SET points = points - ?, last_updated = ?
            WHERE user_id = ? AND points >= ?
            """,
            (cost, now, user_id, cost),
        )
        if cur.rowcount == 0:
            raise RedemptionError("Not enough points", status_code=400)

        redemption = {
            "id": str(uuid4()),
            "user_id": user_id,
            "reward_item_id": reward_item_id,
            "reward_name": item["name"],
            "reward_description": item["description"],
            "reward_image_url": item["image_url"],
            "points_spent": cost,
            "status": "fulfilled" if item["is_digital"] else "pending",
            "redemption_code": secrets.token_hex(4).upper() if item["is_digital"] else None,
            "is_digital": int(item["is_digital"]),
            "delivery_details": json.dumps(delivery_details or {}, ensure_ascii=False),
            "created_at": now,
            "fulfilled_at": now if item["is_digital"] else None,
        }
        conn.execute(
            """
            INSERT INTO reward_redemptions (
                id, user_id, reward_item_id, reward_name, reward_description, reward_image_url,
                points_spent, status, redemption_code, is_digital, delivery_details, created_at, fulfilled_at
            ) VALUES (
                :id, :user_id, :reward_item_id, :reward_name, :reward_description, :reward_image_url,
                :points_spent, :status, :redemption_code, :is_digital, :delivery_details, :created_at, :fulfilled_at
            )
            """,
            redemption,
        )
        _record_event(
            conn,
            user_id=user_id,
            event_type="redeem_reward",
            points=-cost,
            context={"reward_item_id": reward_item_id, "redemption_id": redemption["id"]},
            now=now,
        )
        remaining, _ = _balance(conn, user_id)
    out = _row_to_redemption(redemption)
    out["remaining_points"] = remaining
    return out


def list_redemptions(*, user_id: str) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            "SELECT * FROM reward_redemptions WHERE user_id = ? ORDER BY created_at DESC, rowid DESC",
            (user_id,),
        ).fetchall()
        return [_row_to_redemption(dict(r)) for r in rows]


def set_redemption_status(*, redemption_id: str, status: str) -> Optional[Dict[str, Any]]:
    """Admin transition out of `pending`; cancelling refunds the points and restocks the item."""
    now = _utc_now()
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute("SELECT * FROM reward_redemptions WHERE id = ?", (redemption_id,)).fetchone()
        if not row:
            return None
        if row["status"] != "pending":
            raise RedemptionError(f"Redemption is already {row['status']}", status_code=409)
        if status == "cancelled":
            conn.execute(
                "UPDATE user_rewards SET points = points + ?, last_updated = ? WHERE user_id = ?",
                (int(row["points_spent"]), now, row["user_id"]),
            )
            conn.execute(
                "UPDATE reward_items SET stock_quantity = stock_quantity + 1 WHERE id = ? AND stock_quantity IS NOT NULL",
                (row["reward_item_id"],),
            )
            conn.execute(
                "UPDATE reward_redemptions SET status = 'cancelled' WHERE id = ?",
                (redemption_id,),
            )
        else:
            conn.execute(
                "UPDATE reward_redemptions SET status = 'fulfilled', fulfilled_at = ? WHERE id = ?",
                (now, redemption_id),
            )
        updated = conn.execute("SELECT * FROM reward_redemptions WHERE id = ?", (redemption_id,)).fetchone()
        return _row_to_redemption(dict(updated))
