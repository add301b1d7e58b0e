# -*- coding: utf-8 -*-
"""Meal plans — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from ..auth.security import get_current_user
from .generator import generate_meal_plan
from .models import GeneratedMealPlan, GenerateMealPlanRequest, MealPlan, MealPlansResponse, SavedMealPlan
from .storage import delete_meal_plan, get_active_meal_plan, list_meal_plans, save_meal_plan

router = APIRouter(prefix="/api/meal-plans", tags=["Meal plans"])


@router.post("/generate", response_model=GeneratedMealPlan, summary="Generate a 7-day meal plan")
def generate(request: GenerateMealPlanRequest, response: Response, user: dict = Depends(get_current_user)):  # noqa: ARG001
    plan, source = generate_meal_plan(
        request.nutrient_deficiencies,
        request.preferences,
        request.bloodwork_data,
    )
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
    return GeneratedMealPlan(**plan.model_dump(), source=source)


@router.post("", response_model=SavedMealPlan, summary="Save a meal plan as the active plan")
def save(request: MealPlan, user: dict = Depends(get_current_user)):
    row = save_meal_plan(user_id=user["id"], plan=request.model_dump())
    return SavedMealPlan(**row)


@router.get("", response_model=MealPlansResponse, summary="Recent meal plans")
def list_plans(
    limit: int = Query(default=5, ge=1, le=50),
    user: dict = Depends(get_current_user),
):
    rows = list_meal_plans(user_id=user["id"], limit=limit)
    return MealPlansResponse(count=len(rows), plans=[SavedMealPlan(**r) for r in rows])


@router.get("/active", response_model=SavedMealPlan | None, summary="Current active meal plan")
def active_plan(user: dict = Depends(get_current_user)):
    row = get_active_meal_plan(user_id=user["id"])
    return SavedMealPlan(**row) if row else None


@router.delete("/{plan_id}", summary="Delete a meal plan")
def remove_plan(plan_id: str, user: dict = Depends(get_current_user)):
    if not delete_meal_plan(user_id=user["id"], plan_id=plan_id):
        raise HTTPException(status_code=404, detail="Meal plan not found")
    return {"status": "ok"}
