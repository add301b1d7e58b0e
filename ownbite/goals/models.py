# -*- coding: utf-8 -*-
"""Goals — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Gender(str, Enum):
    male = "male"
    female = "female"


class ActivityLevel(str, Enum):
    sedentary = "sedentary"
    light = "light"
    moderate = "moderate"
    active = "active"
    very_active = "very_active"


class GoalType(str, Enum):
    lose = "lose"
    maintain = "maintain"
    gain = "gain"


class NutritionGoalsRequest(BaseModel):
    calories_goal: float = Field(..., gt=0)
    protein_goal_g: float = Field(..., ge=0)
    fat_goal_g: float = Field(..., ge=0)
    carbs_goal_g: float = Field(..., ge=0)
    gender: Optional[Gender] = None
    weight_kg: Optional[float] = Field(None, gt=0)
    height_cm: Optional[float] = Field(None, gt=0)
    age: Optional[int] = Field(None, gt=0, lt=130)
    activity_level: Optional[ActivityLevel] = None
    goal_type: Optional[GoalType] = None


class NutritionGoals(BaseModel):
    user_id: str
    calories_goal: float
    protein_goal_g: float
    fat_goal_g: float
    carbs_goal_g: float
    gender: Optional[str] = None
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    age: Optional[int] = None
    activity_level: Optional[str] = None
    goal_type: Optional[str] = None
    created_at: str
    updated_at: str


class RecommendedGoalsRequest(BaseModel):
    gender: Gender
    weight_kg: float = Field(..., gt=0)
    height_cm: float = Field(..., gt=0)
    age: int = Field(..., gt=0, lt=130)
    activity_level: ActivityLevel = ActivityLevel.moderate
    goal_type: GoalType = GoalType.maintain


class RecommendedGoals(BaseModel):
    calories_goal: int
    protein_goal_g: int
    fat_goal_g: int
    carbs_goal_g: int


class DailyGoalLog(BaseModel):
    log_date: str
    actual_calories: float = 0.0
    actual_protein_g: float = 0.0
    actual_fat_g: float = 0.0
    actual_carbs_g: float = 0.0
    met_calories_goal: bool = False
    met_protein_goal: bool = False
    met_fat_goal: bool = False
    met_carbs_goal: bool = False
    overall_goal_met: bool = False


class DailyLogsResponse(BaseModel):
    count: int
    logs: List[DailyGoalLog] = []


class StreakResponse(BaseModel):
    current_streak: int


class MacroProgress(BaseModel):
    calories: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    carbs: float = 0.0


class TodayProgressResponse(BaseModel):
    date: str
    goals: Optional[NutritionGoals] = None
    actual: MacroProgress = MacroProgress()
    progress: MacroProgress = MacroProgress()
