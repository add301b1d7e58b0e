# -*- coding: utf-8 -*-
"""Affiliates — profiles, referrals and commissions (SQLite)."""

from __future__ import annotations

import json
import random
import re
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings

REFERRAL_HASHTAG = "#iamhealthierwithownbite.me"
_CODE_ATTEMPTS = 5


class ReferralError(ValueError):
    """Referral rejected; `status_code` carries the HTTP mapping."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _row_to_affiliate(row: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(row)
    try:
        out["social_links"] = json.loads(out.get("social_links") or "{}")
    except ValueError:
        out["social_links"] = {}
    out["approved"] = bool(out.get("approved"))
    return out


def referral_code_base(name: str) -> str:
    base = re.sub(r"[^a-z0-9]", "", (name or "").lower())[:8]
    return base if len(base) >= 3 else "ref"


def _random_suffix() -> str:
    return f"{random.randint(0, 9999):04d}"


def generate_unique_referral_code(conn: sqlite3.Connection, name: str) -> str:
    """Return an unused code; raises ReferralError (409) once every attempt collides."""
    base = referral_code_base(name)
    for _ in range(_CODE_ATTEMPTS):
        code = f"{base}{_random_suffix()}"
        taken = conn.execute("SELECT 1 FROM affiliates WHERE referral_code = ?", (code,)).fetchone()
        if not taken:
            return code
    raise ReferralError("Could not allocate a unique referral code", status_code=409)


def get_affiliate(*, user_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute("SELECT * FROM affiliates WHERE user_id = ?", (user_id,)).fetchone()
        return _row_to_affiliate(dict(row)) if row else None


def upsert_affiliate(*, user_id: str, email: str, updates: Dict[str, Any]) -> Dict[str, Any]:
    """Create or update the caller's affiliate profile; the referral code is set once."""
    with db_conn(settings.app_db_path) as conn:
        existing = conn.execute("SELECT id FROM affiliates WHERE user_id = ?", (user_id,)).fetchone()
        if existing:
            fields: Dict[str, Any] = {}
            for key in ("full_name", "bio"):
                if key in updates:
                    fields[key] = updates[key]
            if "social_links" in updates:
                fields["social_links"] = json.dumps(updates["social_links"] or {}, ensure_ascii=False)
            if fields:
                assignments = ", ".join(f"{k} = :{k}" for k in fields)
                conn.execute(
                    f"UPDATE affiliates SET {assignments} WHERE user_id = :user_id",
                    {**fields, "user_id": user_id},
                )
        else:
            code = generate_unique_referral_code(conn, updates.get("full_name") or email)
            conn.execute(
                """
                INSERT INTO affiliates (id, user_id, referral_code, full_name, bio, social_links, approved, created_at)
                VALUES (?, ?, ?, ?, ?, ?, 0, ?)
                """,
                (
                    str(uuid4()),
                    user_id,
                    code,
                    updates.get("full_name"),
                    updates.get("bio"),
                    json.dumps(updates.get("social_links") or {}, ensure_ascii=False),
                    _utc_now(),
                ),
            )
    return get_affiliate(user_id=user_id) or {}


def validate_referral_code(code: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT 1 FROM affiliates WHERE referral_code = ? AND approved = 1",
            (code.strip().lower(),),
        ).fetchone()
        return row is not None


def track_referral(*, referred_user_id: str, code: str, source: str = "direct") -> Dict[str, Any]:
    with db_conn(settings.app_db_path) as conn:
        affiliate = conn.execute(
            "SELECT id, user_id FROM affiliates WHERE referral_code = ? AND approved = 1",
            (code.strip().lower(),),
        ).fetchone()
        if not affiliate:
            raise ReferralError("Invalid referral code", status_code=404)
        if affiliate["user_id"] == referred_user_id:
            raise ReferralError("Cannot use your own referral code")
        already = conn.execute(
            "SELECT 1 FROM referrals WHERE referred_user_id = ?",
            (referred_user_id,),
        ).fetchone()
        if already:
            raise ReferralError("User has already been referred", status_code=409)

        row = {
            "id": str(uuid4()),
            "referred_user_id": referred_user_id,
            "affiliate_id": affiliate["id"],
            "source": source or "direct",
            "hashtag": REFERRAL_HASHTAG,
            "joined_at": _utc_now(),
        }
        conn.execute(
            """
            INSERT INTO referrals (id, referred_user_id, affiliate_id, source, hashtag, joined_at)
            VALUES (:id, :referred_user_id, :affiliate_id, :source, :hashtag, :joined_at)
            """,
            row,
        )
    return row


def list_referrals(*, affiliate_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    sql = "SELECT * FROM referrals WHERE affiliate_id = ? ORDER BY joined_at DESC"
    params: list[Any] = [affiliate_id]
    if limit:
        sql += " LIMIT ?"
        params.append(int(limit))
    with db_conn(settings.app_db_path) as conn:
        return [dict(r) for r in conn.execute(sql, tuple(params)).fetchall()]


def list_commissions(*, affiliate_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    sql = "SELECT * FROM affiliate_commissions WHERE affiliate_id = ? ORDER BY generated_at DESC"
    params: list[Any] = [affiliate_id]
    if limit:
        sql += " LIMIT ?"
        params.append(int(limit))
    with db_conn(settings.app_db_path) as conn:
        return [dict(r) for r in conn.execute(sql, tuple(params)).fetchall()]


def dashboard(*, user_id: str) -> Optional[Dict[str, Any]]:
    affiliate = get_affiliate(user_id=user_id)
    if not affiliate:
        return None
    with db_conn(settings.app_db_path) as conn:
        total_referrals = conn.execute(
            "SELECT COUNT(*) FROM referrals WHERE affiliate_id = ?", (affiliate["id"],)
        ).fetchone()[0]
        earnings = conn.execute(
            """
            SELECT
                COALESCE(SUM(CASE WHEN status != 'cancelled' THEN amount END), 0) AS total,
                COALESCE(SUM(CASE WHEN status = 'pending' THEN amount END), 0) AS pending,
                COALESCE(SUM(CASE WHEN status = 'paid' THEN amount END), 0) AS paid
            FROM affiliate_commissions WHERE affiliate_id = ?
            """,
            (affiliate["id"],),
        ).fetchone()
    return {
        "affiliate": affiliate,
        "stats": {
            "total_referrals": int(total_referrals),
            "total_earnings": round(float(earnings["total"]), 2),
            "pending_earnings": round(float(earnings["pending"]), 2),
            "paid_earnings": round(float(earnings["paid"]), 2),
        },
        "recent_referrals": list_referrals(affiliate_id=affiliate["id"], limit=5),
        "recent_commissions": list_commissions(affiliate_id=affiliate["id"], limit=5),
    }


# ---------- admin ----------


def list_all_affiliates() -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute("SELECT * FROM affiliates ORDER BY created_at DESC").fetchall()
        return [_row_to_affiliate(dict(r)) for r in rows]


def set_affiliate_approval(*, affiliate_id: str, approved: bool) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute("UPDATE affiliates SET approved = ? WHERE id = ?", (int(approved), affiliate_id))
        if cur.rowcount == 0:
            return None
        row = conn.execute("SELECT * FROM affiliates WHERE id = ?", (affiliate_id,)).fetchone()
    return _row_to_affiliate(dict(row))


def generate_commission(*, referral_id: str, amount: float) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        referral = conn.execute("SELECT affiliate_id FROM referrals WHERE id = ?", (referral_id,)).fetchone()
        if not referral:
            return None
        row = {
            "id": str(uuid4()),
            "affiliate_id": referral["affiliate_id"],
            "referral_id": referral_id,
            "amount": float(amount),
            "status": "pending",
            "generated_at": _utc_now(),
            "paid_at": None,
        }
        conn.execute(
            """
            INSERT INTO affiliate_commissions (id, affiliate_id, referral_id, amount, status, generated_at, paid_at)
            VALUES (:id, :affiliate_id, :referral_id, :amount, :status, :generated_at, :paid_at)
            """,
            row,
        )
    return row


def set_commission_status(*, commission_id: str, status: str) -> Optional[Dict[str, Any]]:
    paid_at = _utc_now() if status == "paid" else None
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute(
            "UPDATE affiliate_commissions SET status = ?, paid_at = ? WHERE id = ?",
            (status, paid_at, commission_id),
        )
        if cur.rowcount == 0:
            return None
        row = conn.execute("SELECT * FROM affiliate_commissions WHERE id = ?", (commission_id,)).fetchone()
    return dict(row)
