# -*- coding: utf-8 -*-
"""Coach — API endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends

from ..auth.security import get_current_user
from ..diary.storage import daily_summary, recent_food_entries
from .advisor import get_advice
from .models import CoachAdviceRequest, CoachAdviceResponse, CoachDailySummary, CoachRecentEntry

router = APIRouter(prefix="/api/coach", tags=["Coach"])


@router.post("/advice", response_model=CoachAdviceResponse, summary="Personalized nutrition advice")
def advice(request: CoachAdviceRequest, user: dict = Depends(get_current_user)):
    summary = request.dailySummary
    if summary is None:
        totals = daily_summary(user_id=user["id"], date=date.today().isoformat())
        summary = CoachDailySummary(**totals)

    recent = request.recentEntries
    if recent is None:
        recent = [CoachRecentEntry(**r) for r in recent_food_entries(user_id=user["id"], limit=5)]

    text, source = get_advice(summary, recent, request.query)
    return CoachAdviceResponse(advice=text, source=source)
