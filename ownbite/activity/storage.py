# -*- coding: utf-8 -*-
"""Activity — lifestyle logs per user and day (SQLite)."""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings

SUMMARY_DAYS = 7


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_day(value: str) -> str:
    """Return the ISO date; raises ValueError on anything else."""
    return date.fromisoformat((value or "").strip()[:10]).isoformat()


def _row_to_activity(row: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(row)
    try:
        out["screen_time_breakdown"] = json.loads(out.get("screen_time_breakdown") or "{}")
    except ValueError:
        out["screen_time_breakdown"] = {}
    return out


def _upsert(
    table: str,
    *,
    user_id: str,
    log_date: str,
    keys: Sequence[str],
    values: Dict[str, Any],
) -> Dict[str, Any]:
    """INSERT or overwrite the row identified by (user_id, log_date, *keys)."""
    now = _utc_now()
    row = {"id": str(uuid4()), "user_id": user_id, "log_date": log_date, **values, "created_at": now, "updated_at": now}
    conflict = ", ".join(("user_id", "log_date", *keys))
    assignments = ", ".join(f"{k} = excluded.{k}" for k in (*values, "updated_at") if k not in keys)
    columns = ", ".join(row)
    placeholders = ", ".join(f":{k}" for k in row)
    where = " AND ".join(f"{k} = :{k}" for k in ("user_id", "log_date", *keys))
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            f"INSERT INTO {table} ({columns}) VALUES ({placeholders}) "
            f"ON CONFLICT({conflict}) DO UPDATE SET {assignments}",
            row,
        )
        saved = conn.execute(f"SELECT * FROM {table} WHERE {where}", row).fetchone()
        return dict(saved)


def save_activity_log(*, user_id: str, log_date: str, log: Dict[str, Any]) -> Dict[str, Any]:
    values = dict(log)
    values["screen_time_breakdown"] = json.dumps(values.get("screen_time_breakdown") or {})
    return _row_to_activity(_upsert("activity_logs", user_id=user_id, log_date=log_date, keys=(), values=values))


def save_hydration_log(*, user_id: str, log_date: str, hydration_pct: float) -> Dict[str, Any]:
    return _upsert(
        "hydration_logs", user_id=user_id, log_date=log_date, keys=(), values={"hydration_pct": float(hydration_pct)}
    )


def save_fast_food_log(*, user_id: str, log_date: str, is_fast_food: bool) -> Dict[str, Any]:
    row = _upsert(
        "fast_food_logs", user_id=user_id, log_date=log_date, keys=(), values={"is_fast_food": int(bool(is_fast_food))}
    )
    row["is_fast_food"] = bool(row["is_fast_food"])
    return row


def save_substance_log(*, user_id: str, log_date: str, substance_type: str, amount: float) -> Dict[str, Any]:
    return _upsert(
        "substance_logs",
        user_id=user_id,
        log_date=log_date,
        keys=("substance_type",),
        values={"substance_type": substance_type.strip().lower(), "amount": float(amount)},
    )


def save_spending(*, user_id: str, log_date: str, category: str, amount: float) -> Dict[str, Any]:
    return _upsert(
        "diet_spending",
        user_id=user_id,
        log_date=log_date,
        keys=("category",),
        values={"category": category.strip().lower(), "amount": float(amount)},
    )


def get_day(*, user_id: str, log_date: str) -> Dict[str, Any]:
    params = (user_id, log_date)
    with db_conn(settings.app_db_path) as conn:
        activity = conn.execute("SELECT * FROM activity_logs WHERE user_id = ? AND log_date = ?", params).fetchone()
        hydration = conn.execute("SELECT * FROM hydration_logs WHERE user_id = ? AND log_date = ?", params).fetchone()
        fast_food = conn.execute("SELECT * FROM fast_food_logs WHERE user_id = ? AND log_date = ?", params).fetchone()
        substances = conn.execute(
            "SELECT * FROM substance_logs WHERE user_id = ? AND log_date = ? ORDER BY substance_type",
            params,
        ).fetchall()
        spending = conn.execute(
            "SELECT * FROM diet_spending WHERE user_id = ? AND log_date = ? ORDER BY category",
            params,
        ).fetchall()
    fast = dict(fast_food) if fast_food else None
    if fast:
        fast["is_fast_food"] = bool(fast["is_fast_food"])
    return {
        "log_date": log_date,
        "activity": _row_to_activity(dict(activity)) if activity else None,
        "hydration": dict(hydration) if hydration else None,
        "fast_food": fast,
        "substances": [dict(r) for r in substances],
        "spending": [dict(r) for r in spending],
    }


def _avg(values: List[float]) -> Optional[float]:
    return round(sum(values) / len(values), 2) if values else None


def weekly_summary(*, user_id: str, end: str, days: int = SUMMARY_DAYS) -> Dict[str, Any]:
    """Aggregate the `days` days ending on `end` (inclusive)."""
    start = (date.fromisoformat(end) - timedelta(days=days - 1)).isoformat()
    params = (user_id, start, end)
    window = "user_id = ? AND log_date BETWEEN ? AND ?"
    with db_conn(settings.app_db_path) as conn:
        activity = [_row_to_activity(dict(r)) for r in conn.execute(f"SELECT * FROM activity_logs WHERE {window}", params)]
        hydration = [r["hydration_pct"] for r in conn.execute(f"SELECT hydration_pct FROM hydration_logs WHERE {window}", params)]
        fast_food_days = conn.execute(
            f"SELECT COUNT(*) FROM fast_food_logs WHERE {window} AND is_fast_food = 1", params
        ).fetchone()[0]
        substances = conn.execute(
            f"SELECT substance_type, SUM(amount) AS total FROM substance_logs WHERE {window} GROUP BY substance_type",
            params,
        ).fetchall()
        spending = conn.execute(
            f"SELECT category, SUM(amount) AS total FROM diet_spending WHERE {window} GROUP BY category",
            params,
        ).fetchall()
        food_scans = conn.execute(
            "SELECT COUNT(*) FROM food_scans WHERE user_id = ? AND substr(created_at, 1, 10) BETWEEN ? AND ?",
            params,
        ).fetchone()[0]
        goal_days_met = conn.execute(
            f"SELECT COUNT(*) FROM daily_goal_logs WHERE {window} AND overall_goal_met = 1", params
        ).fetchone()[0]

    breakdown: Dict[str, float] = {}
    for log in activity:
        for key, hours in (log["screen_time_breakdown"] or {}).items():
            breakdown[key] = round(breakdown.get(key, 0.0) + float(hours or 0), 2)
    spend_by_category = {r["category"]: round(float(r["total"]), 2) for r in spending}
    return {
        "start": start,
        "end": end,
        "days_logged": len(activity),
        "avg_sitting_hours": _avg([a["sitting_hours"] for a in activity]),
        "avg_driving_hours": _avg([a["driving_hours"] for a in activity]),
        "avg_screen_time_hours": _avg([a["screen_time_hours"] for a in activity]),
        "avg_sleep_hours": _avg([a["sleep_hours"] for a in activity]),
        "screen_time_breakdown": breakdown,
        "avg_hydration_pct": _avg(hydration),
        "fast_food_days": int(fast_food_days),
        "substance_totals": {r["substance_type"]: round(float(r["total"]), 2) for r in substances},
        "total_spend": round(sum(spend_by_category.values()), 2),
        "spend_by_category": spend_by_category,
        "food_scans": int(food_scans),
        "goal_days_met": int(goal_days_met),
    }
