# -*- coding: utf-8 -*-
"""Goals — nutrition goals + daily goal logs (SQLite)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..app_db import db_conn
from ..config import settings
from ..diary.storage import daily_summary
from .calculator import protein_met, within_tolerance

_LOG_BOOL_FIELDS = (
    "met_calories_goal",
    "met_protein_goal",
    "met_fat_goal",
    "met_carbs_goal",
    "overall_goal_met",
)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _row_to_log(row: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(row)
    for key in _LOG_BOOL_FIELDS:
        out[key] = bool(out.get(key))
    return out


def get_goals(*, user_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute("SELECT * FROM nutrition_goals WHERE user_id = ?", (user_id,)).fetchone()
        return dict(row) if row else None


def upsert_goals(*, user_id: str, goals: Dict[str, Any]) -> Dict[str, Any]:
    now = _utc_now()
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO nutrition_goals (
                user_id, calories_goal, protein_goal_g, fat_goal_g, carbs_goal_g,
                gender, weight_kg, height_cm, age, activity_level, goal_type, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                calories_goal = excluded.calories_goal,
                protein_goal_g = excluded.protein_goal_g,
                fat_goal_g = excluded.fat_goal_g,
                carbs_goal_g = excluded.carbs_goal_g,
                gender = excluded.gender,
                weight_kg = excluded.weight_kg,
                height_cm = excluded.height_cm,
                age = excluded.age,
                activity_level = excluded.activity_level,
                goal_type = excluded.goal_type,
                updated_at = excluded.updated_at
            """,
            (
                user_id,
                float(goals["calories_goal"]),
                float(goals["protein_goal_g"]),
                float(goals["fat_goal_g"]),
                float(goals["carbs_goal_g"]),
                goals.get("gender"),
                goals.get("weight_kg"),
                goals.get("height_cm"),
                goals.get("age"),
                goals.get("activity_level"),
                goals.get("goal_type"),
                now,
                now,
            ),
        )
    return get_goals(user_id=user_id) or {}


def update_daily_log(*, user_id: str, log_date: str) -> Optional[Dict[str, Any]]:
    """Recompute the day's totals from the diary and upsert the goal log.

    Returns None when the user has no goals yet.
    """
    goals = get_goals(user_id=user_id)
    if not goals:
        return None

    totals = daily_summary(user_id=user_id, date=log_date)
    met_calories = within_tolerance(totals["calories"], goals["calories_goal"])
    met_protein = protein_met(totals["protein"], goals["protein_goal_g"])
    met_fat = within_tolerance(totals["fat"], goals["fat_goal_g"])
    met_carbs = within_tolerance(totals["carbs"], goals["carbs_goal_g"])
    overall = met_calories and met_protein and met_fat and met_carbs

    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO daily_goal_logs (
                user_id, log_date, actual_calories, actual_protein_g, actual_fat_g, actual_carbs_g,
                met_calories_goal, met_protein_goal, met_fat_goal, met_carbs_goal, overall_goal_met, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id, log_date) DO UPDATE SET
                actual_calories = excluded.actual_calories,
                actual_protein_g = excluded.actual_protein_g,
                actual_fat_g = excluded.actual_fat_g,
                actual_carbs_g = excluded.actual_carbs_g,
                met_calories_goal = excluded.met_calories_goal,
                met_protein_goal = excluded.met_protein_goal,
                met_fat_goal = excluded.met_fat_goal,
                met_carbs_goal = excluded.met_carbs_goal,
                overall_goal_met = excluded.overall_goal_met
            """,
            (
                user_id,
                totals["date"],
                totals["calories"],
                totals["protein"],
                totals["fat"],
                totals["carbs"],
                int(met_calories),
                int(met_protein),
                int(met_fat),
                int(met_carbs),
                int(overall),
                _utc_now(),
            ),
        )
        row = conn.execute(
            "SELECT * FROM daily_goal_logs WHERE user_id = ? AND log_date = ?",
            (user_id, totals["date"]),
        ).fetchone()
    return _row_to_log(dict(row)) if row else None


def list_daily_logs(
    *,
    user_id: str,
    start: Optional[str] = None,
    end: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    sql = "SELECT * FROM daily_goal_logs WHERE user_id = ?"
    params: list[Any] = [user_id]
    if start:
        sql += " AND log_date >= ?"
        params.append(start[:10])
    if end:
        sql += " AND log_date <= ?"
        params.append(end[:10])
    sql += " ORDER BY log_date DESC"
    if limit:
        sql += " LIMIT ?"
        params.append(int(limit))
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(sql, tuple(params)).fetchall()
        return [_row_to_log(dict(r)) for r in rows]


def current_streak(*, user_id: str) -> int:
    """Consecutive goal-met days counted from the newest of the last 30 logs."""
    streak = 0
    for log in list_daily_logs(user_id=user_id, limit=30):
        if not log["overall_goal_met"]:
            break
        streak += 1
    return streak
