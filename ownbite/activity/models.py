# -*- coding: utf-8 -*-
"""Activity — Pydantic models."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ScreenTimeBreakdown(BaseModel):
    social_media: float = Field(0, ge=0, le=24)
    work: float = Field(0, ge=0, le=24)
    entertainment: float = Field(0, ge=0, le=24)
    education: float = Field(0, ge=0, le=24)


class ActivityLogRequest(BaseModel):
    sitting_hours: float = Field(0, ge=0, le=24)
    driving_hours: float = Field(0, ge=0, le=24)
    screen_time_hours: float = Field(0, ge=0, le=24)
    screen_time_breakdown: ScreenTimeBreakdown = ScreenTimeBreakdown()
    sleep_hours: float = Field(0, ge=0, le=24)


class ActivityLog(ActivityLogRequest):
    id: str
    log_date: str
    created_at: str
    updated_at: str


class HydrationLogRequest(BaseModel):
    hydration_pct: float = Field(..., ge=0, le=100)


class HydrationLog(HydrationLogRequest):
    id: str
    log_date: str
    updated_at: str


class FastFoodLogRequest(BaseModel):
    is_fast_food: bool


class FastFoodLog(FastFoodLogRequest):
    id: str
    log_date: str
    updated_at: str


class SubstanceLogRequest(BaseModel):
    substance_type: str = Field(..., min_length=1, max_length=40, examples=["alcohol"])
    amount: float = Field(..., ge=0)


class SubstanceLog(SubstanceLogRequest):
    id: str
    log_date: str
    updated_at: str


class SpendingRequest(BaseModel):
    category: str = Field(..., min_length=1, max_length=40, examples=["groceries"])
    amount: float = Field(..., ge=0)


class Spending(SpendingRequest):
    id: str
    log_date: str
    updated_at: str


class ActivityDay(BaseModel):
    log_date: str
    activity: Optional[ActivityLog] = None
    hydration: Optional[HydrationLog] = None
    fast_food: Optional[FastFoodLog] = None
    substances: List[SubstanceLog] = []
    spending: List[Spending] = []


class ActivitySummary(BaseModel):
    start: str
    end: str
    days_logged: int = 0
    avg_sitting_hours: Optional[float] = None
    avg_driving_hours: Optional[float] = None
    avg_screen_time_hours: Optional[float] = None
    avg_sleep_hours: Optional[float] = None
    screen_time_breakdown: Dict[str, float] = {}
    avg_hydration_pct: Optional[float] = None
    fast_food_days: int = 0
    substance_totals: Dict[str, float] = {}
    total_spend: float = 0
    spend_by_category: Dict[str, float] = {}
    food_scans: int = 0
    goal_days_met: int = 0
