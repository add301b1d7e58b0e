# -*- coding: utf-8 -*-
"""Coach — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class CoachDailySummary(BaseModel):
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0


class CoachRecentEntry(BaseModel):
    name: str
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    timestamp: str


class CoachAdviceRequest(BaseModel):
    dailySummary: Optional[CoachDailySummary] = Field(None, description="Defaults to today's diary totals")
    recentEntries: Optional[List[CoachRecentEntry]] = None
    query: Optional[str] = Field(None, max_length=2000)


class CoachAdviceResponse(BaseModel):
    advice: str
    source: str = Field(..., description="'ai', 'mock' or 'fallback'")
