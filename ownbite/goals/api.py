# -*- coding: utf-8 -*-
"""Goals — API endpoints."""

from __future__ import annotations

from datetime import date as date_cls

from fastapi import APIRouter, Depends, Query

from ..auth.security import get_current_user
from ..diary.storage import daily_summary
from .calculator import progress_percent, recommended_goals
from .models import (
    DailyGoalLog,
    DailyLogsResponse,
    MacroProgress,
    NutritionGoals,
    NutritionGoalsRequest,
    RecommendedGoals,
    RecommendedGoalsRequest,
    StreakResponse,
    TodayProgressResponse,
)
from .storage import current_streak, get_goals, list_daily_logs, update_daily_log, upsert_goals

router = APIRouter(prefix="/api/goals", tags=["Goals"])


@router.get("", response_model=NutritionGoals | None, summary="Get my nutrition goals")
def read_goals(user: dict = Depends(get_current_user)):
    row = get_goals(user_id=user["id"])
    return NutritionGoals(**row) if row else None


@router.put("", response_model=NutritionGoals, summary="Create or update my nutrition goals")
def save_goals(request: NutritionGoalsRequest, user: dict = Depends(get_current_user)):
    row = upsert_goals(user_id=user["id"], goals=request.model_dump(mode="json"))
    return NutritionGoals(**row)


@router.post("/recommended", response_model=RecommendedGoals, summary="Recommended daily targets")
def recommend(request: RecommendedGoalsRequest, user: dict = Depends(get_current_user)):  # noqa: ARG001
    return RecommendedGoals(
        **recommended_goals(
            gender=request.gender.value,
            weight_kg=request.weight_kg,
            height_cm=request.height_cm,
            age=request.age,
            activity_level=request.activity_level.value,
            goal_type=request.goal_type.value,
        )
    )


@router.post("/logs/{log_date}", response_model=DailyGoalLog | None, summary="Recompute the goal log for a day")
def refresh_log(log_date: str, user: dict = Depends(get_current_user)):
    row = update_daily_log(user_id=user["id"], log_date=log_date)
    return DailyGoalLog(**row) if row else None


@router.get("/logs", response_model=DailyLogsResponse, summary="Daily goal logs (newest first)")
def read_logs(
    start: str | None = Query(default=None, description="YYYY-MM-DD"),
    end: str | None = Query(default=None, description="YYYY-MM-DD"),
    user: dict = Depends(get_current_user),
):
    rows = list_daily_logs(user_id=user["id"], start=start, end=end)
    return DailyLogsResponse(count=len(rows), logs=[DailyGoalLog(**r) for r in rows])


@router.get("/streak", response_model=StreakResponse, summary="Current goal streak")
def read_streak(user: dict = Depends(get_current_user)):
    return StreakResponse(current_streak=current_streak(user_id=user["id"]))


@router.get("/progress", response_model=TodayProgressResponse, summary="Progress towards today's goals")
def today_progress(
    date: str | None = Query(default=None, description="YYYY-MM-DD, defaults to today"),
    user: dict = Depends(get_current_user),
):
    day = (date or date_cls.today().isoformat())[:10]
    goals_row = get_goals(user_id=user["id"])
    totals = daily_summary(user_id=user["id"], date=day)
    actual = MacroProgress(
        calories=totals["calories"],
        protein=totals["protein"],
        fat=totals["fat"],
        carbs=totals["carbs"],
    )
    if not goals_row:
        return TodayProgressResponse(date=day, goals=None, actual=actual)

    progress = MacroProgress(
        calories=progress_percent(actual.calories, goals_row["calories_goal"]),
        protein=progress_percent(actual.protein, goals_row["protein_goal_g"]),
        fat=progress_percent(actual.fat, goals_row["fat_goal_g"]),
        carbs=progress_percent(actual.carbs, goals_row["carbs_goal_g"]),
    )
    return TodayProgressResponse(date=day, goals=NutritionGoals(**goals_row), actual=actual, progress=progress)
