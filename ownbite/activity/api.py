# -*- coding: utf-8 -*-
"""Activity — API endpoints."""

from __future__ import annotations

from datetime import date as date_cls

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from .models import (
    ActivityDay,
    ActivityLog,
    ActivityLogRequest,
    ActivitySummary,
    FastFoodLog,
    FastFoodLogRequest,
    HydrationLog,
    HydrationLogRequest,
    Spending,
    SpendingRequest,
    SubstanceLog,
    SubstanceLogRequest,
)
from .storage import (
    SUMMARY_DAYS,
    get_day,
    parse_day,
    save_activity_log,
    save_fast_food_log,
    save_hydration_log,
    save_spending,
    save_substance_log,
    weekly_summary,
)

router = APIRouter(prefix="/api/activity", tags=["Activity"])


def _day(value: str) -> str:
    try:
        return parse_day(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Date must be YYYY-MM-DD") from exc


@router.get("/days/{log_date}", response_model=ActivityDay, summary="Everything I logged for a day")
def read_day(log_date: str, user: dict = Depends(get_current_user)):
    return ActivityDay(**get_day(user_id=user["id"], log_date=_day(log_date)))


@router.put("/days/{log_date}/activity", response_model=ActivityLog, summary="Save sitting, driving, screen and sleep hours")
def put_activity(log_date: str, request: ActivityLogRequest, user: dict = Depends(get_current_user)):
    row = save_activity_log(user_id=user["id"], log_date=_day(log_date), log=request.model_dump())
    return ActivityLog(**row)


@router.put("/days/{log_date}/hydration", response_model=HydrationLog, summary="Save hydration for a day")
def put_hydration(log_date: str, request: HydrationLogRequest, user: dict = Depends(get_current_user)):
    row = save_hydration_log(user_id=user["id"], log_date=_day(log_date), hydration_pct=request.hydration_pct)
    return HydrationLog(**row)


@router.put("/days/{log_date}/fast-food", response_model=FastFoodLog, summary="Record whether I ate fast food")
def put_fast_food(log_date: str, request: FastFoodLogRequest, user: dict = Depends(get_current_user)):
    row = save_fast_food_log(user_id=user["id"], log_date=_day(log_date), is_fast_food=request.is_fast_food)
    return FastFoodLog(**row)


@router.put("/days/{log_date}/substances", response_model=SubstanceLog, summary="Save a substance amount (one per type)")
def put_substance(log_date: str, request: SubstanceLogRequest, user: dict = Depends(get_current_user)):
    row = save_substance_log(
        user_id=user["id"],
        log_date=_day(log_date),
        substance_type=request.substance_type,
        amount=request.amount,
    )
    return SubstanceLog(**row)


@router.put("/days/{log_date}/spending", response_model=Spending, summary="Save diet spending (one per category)")
def put_spending(log_date: str, request: SpendingRequest, user: dict = Depends(get_current_user)):
    row = save_spending(user_id=user["id"], log_date=_day(log_date), category=request.category, amount=request.amount)
    return Spending(**row)


@router.get("/summary", response_model=ActivitySummary, summary="Weekly lifestyle summary")
def read_summary(
    end: str | None = Query(default=None, description="YYYY-MM-DD, defaults to today"),
    days: int = Query(SUMMARY_DAYS, ge=1, le=31),
    user: dict = Depends(get_current_user),
):
    end_day = _day(end) if end else date_cls.today().isoformat()
    return ActivitySummary(**weekly_summary(user_id=user["id"], end=end_day, days=days))
