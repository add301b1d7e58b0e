# -*- coding: utf-8 -*-
"""Diary — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class FoodEntryCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    calories: float = Field(0.0, ge=0)
    protein: float = Field(0.0, ge=0)
    carbs: float = Field(0.0, ge=0)
    fat: float = Field(0.0, ge=0)
    image_url: Optional[str] = Field(None, max_length=2000)
    timestamp: str = Field(..., description="ISO8601 timestamp")


class FoodEntry(BaseModel):
    id: str
    user_id: str
    name: str
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    image_url: Optional[str] = None
    timestamp: str


class FoodEntriesResponse(BaseModel):
    date: str
    count: int
    entries: List[FoodEntry] = []


class DailySummary(BaseModel):
    date: str
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    entry_count: int = 0
