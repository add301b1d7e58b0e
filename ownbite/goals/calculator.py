# -*- coding: utf-8 -*-
"""Goals — recommended targets and goal-met checks."""

from __future__ import annotations

from typing import Dict

ACTIVITY_FACTORS: Dict[str, float] = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}

GOAL_ADJUSTMENTS: Dict[str, float] = {
    "lose": -500.0,
    "maintain": 0.0,
    "gain": 300.0,
}

PROTEIN_SHARE = 0.30
CARBS_SHARE = 0.40
FAT_SHARE = 0.30

GOAL_TOLERANCE = 0.10


def bmr_mifflin_st_jeor(*, gender: str, weight_kg: float, height_cm: float, age: int) -> float:
    base = 10.0 * weight_kg + 6.25 * height_cm - 5.0 * age
    return base + 5.0 if gender == "male" else base - 161.0


def recommended_goals(
    *,
    gender: str,
    weight_kg: float,
    height_cm: float,
    age: int,
    activity_level: str = "moderate",
    goal_type: str = "maintain",
) -> Dict[str, int]:
    bmr = bmr_mifflin_st_jeor(gender=gender, weight_kg=weight_kg, height_cm=height_cm, age=age)
    tdee = bmr * ACTIVITY_FACTORS.get(activity_level, ACTIVITY_FACTORS["moderate"])
    calories = tdee + GOAL_ADJUSTMENTS.get(goal_type, 0.0)
    return {
        "calories_goal": round(calories),
        "protein_goal_g": round(calories * PROTEIN_SHARE / 4.0),
        "carbs_goal_g": round(calories * CARBS_SHARE / 4.0),
        "fat_goal_g": round(calories * FAT_SHARE / 9.0),
    }


def within_tolerance(actual: float, goal: float) -> bool:
    if goal <= 0:
        return False
    return abs(actual - goal) <= goal * GOAL_TOLERANCE


def protein_met(actual: float, goal: float) -> bool:
    if goal <= 0:
        return False
    return actual >= goal * (1.0 - GOAL_TOLERANCE)


def progress_percent(actual: float, goal: float) -> float:
    if not goal or goal <= 0:
        return 0.0
    return round(min(actual / goal * 100.0, 100.0), 1)
