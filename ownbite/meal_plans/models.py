# -*- coding: utf-8 -*-
"""Meal plans — Pydantic models."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class MealPreferences(BaseModel):
    dietary_restrictions: List[str] = []
    allergies: List[str] = []
    cuisine_preferences: List[str] = []


class GenerateMealPlanRequest(BaseModel):
    nutrient_deficiencies: List[str] = Field(default_factory=list)
    preferences: MealPreferences = Field(default_factory=MealPreferences)
    bloodwork_data: Optional[Dict[str, Any]] = None


class MealNutrition(BaseModel):
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0


class Meal(BaseModel):
    type: str
    name: str
    ingredients: List[str] = []
    nutrition: MealNutrition = MealNutrition()
    benefits: List[str] = []


class PlanDay(BaseModel):
    day: str
    meals: List[Meal] = []
    daily_totals: MealNutrition = MealNutrition()


class PlanData(BaseModel):
    days: List[PlanDay]
    shopping_list: List[str] = []
    tips: List[str] = []


class MealPlan(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    target_nutrients: List[str] = []
    plan_data: PlanData


class GeneratedMealPlan(MealPlan):
    source: str = Field(..., description="'ai' or 'mock'")


class SavedMealPlan(MealPlan):
    id: str
    is_active: bool = False
    created_at: str


class MealPlansResponse(BaseModel):
    count: int
    plans: List[SavedMealPlan] = []
