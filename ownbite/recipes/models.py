# -*- coding: utf-8 -*-
"""Recipes — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class RecipeNutrition(BaseModel):
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0


class Recipe(BaseModel):
    id: str
    title: str
    description: str = ""
    instructions: Optional[str] = None
    ingredients: List[str] = []
    image_url: Optional[str] = None
    cuisine_type: str = "Other"
    diet_type: List[str] = []
    prep_time: int = 0
    cook_time: int = 0
    servings: int = 1
    calories_per_serving: int = 0
    nutrition: RecipeNutrition = RecipeNutrition()
    created_at: str


class RecipeSearchResponse(BaseModel):
    count: int
    recipes: List[Recipe] = []
