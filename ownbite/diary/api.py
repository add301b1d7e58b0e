# -*- coding: utf-8 -*-
"""Diary — API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from ..goals.storage import update_daily_log
from .models import DailySummary, FoodEntriesResponse, FoodEntry, FoodEntryCreateRequest
from .storage import add_food_entry, daily_summary, delete_food_entry, list_food_entries

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/diary", tags=["Diary"])


def _refresh_goal_log(user_id: str, timestamp: str) -> None:
    try:
        update_daily_log(user_id=user_id, log_date=timestamp[:10])
    except Exception:
        log.warning("Daily goal log refresh failed for %s", timestamp[:10], exc_info=True)


@router.post("/entries", response_model=FoodEntry, summary="Add a food entry")
def create_entry(request: FoodEntryCreateRequest, user: dict = Depends(get_current_user)):
    entry = add_food_entry(
        user_id=user["id"],
        name=request.name,
        calories=request.calories,
        protein=request.protein,
        carbs=request.carbs,
        fat=request.fat,
        image_url=request.image_url,
        timestamp=request.timestamp,
    )
    _refresh_goal_log(user["id"], entry["timestamp"])
    return FoodEntry(**entry)


@router.get("/entries", response_model=FoodEntriesResponse, summary="List food entries for a day")
def list_entries(
    date: str = Query(..., description="YYYY-MM-DD"),
    user: dict = Depends(get_current_user),
):
    rows = list_food_entries(user_id=user["id"], date=date)
    return FoodEntriesResponse(date=date[:10], count=len(rows), entries=[FoodEntry(**r) for r in rows])


@router.get("/summary", response_model=DailySummary, summary="Daily nutrition summary")
def summary(
    date: str = Query(..., description="YYYY-MM-DD"),
    user: dict = Depends(get_current_user),
):
    return DailySummary(**daily_summary(user_id=user["id"], date=date))


@router.delete("/entries/{entry_id}", summary="Delete a food entry")
def delete_entry(entry_id: str, user: dict = Depends(get_current_user)):
    row = delete_food_entry(user_id=user["id"], entry_id=entry_id)
    if not row:
        raise HTTPException(status_code=404, detail="Entry not found")
    _refresh_goal_log(user["id"], row["timestamp"])
    return {"status": "ok"}
