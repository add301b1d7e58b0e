# -*- coding: utf-8 -*-
"""Meal plans — one AI call with a deterministic mock fallback.

The model is called once with a fixed timeout. Any failure (no key, transport
error, timeout, unparsable or structurally invalid JSON) yields the mock plan.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from ..config import settings
from ..llm import AIRequestError, AIUnavailableError, generate_text, parse_json_object
from .models import MealPlan, MealPreferences

log = logging.getLogger(__name__)

WEEK_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

BASE_SHOPPING_ITEMS = [
    "Spinach", "Kale", "Broccoli", "Sweet potatoes", "Avocados",
    "Salmon", "Chicken breast", "Eggs", "Greek yogurt",
    "Quinoa", "Brown rice", "Oats", "Almonds", "Walnuts",
    "Blueberries", "Bananas", "Oranges", "Chia seeds", "Olive oil",
]

DEFICIENCY_SHOPPING_ITEMS: Dict[str, List[str]] = {
    "Vitamin D": ["Fatty fish", "Egg yolks", "Fortified milk"],
    "Iron": ["Lean red meat", "Lentils", "Dark chocolate"],
    "B12": ["Beef liver", "Nutritional yeast", "Clams"],
    "Magnesium": ["Dark chocolate", "Pumpkin seeds", "Cashews"],
    "Zinc": ["Oysters", "Beef", "Pumpkin seeds"],
}

MAX_SHOPPING_ITEMS = 25

MOCK_TIPS = [
    "Focus on whole, unprocessed foods",
    "Include a variety of colorful vegetables",
    "Stay hydrated throughout the day",
    "Consider meal prep for busy days",
]

MEAL_PLAN_PROMPT = """
Create a personalized 7-day meal plan based on the following information:

NUTRIENT DEFICIENCIES TO ADDRESS:
{deficiencies}

DIETARY PREFERENCES:
- Restrictions: {restrictions}
- Allergies: {allergies}
- Cuisine Preferences: {cuisines}
{bloodwork}
REQUIREMENTS:
1. Focus on foods rich in the deficient nutrients
2. Include 3 meals per day (breakfast, lunch, dinner)
3. Provide specific ingredient lists for each meal
4. Calculate approximate nutrition values for each meal
5. Include health benefits for each meal
6. Generate a comprehensive shopping list
7. Provide practical cooking tips

Return the response in this exact JSON format:
{{
  "title": "Personalized 7-Day Nutrition Plan",
  "description": "A meal plan designed to address your specific nutrient deficiencies",
  "target_nutrients": ["list of nutrients being targeted"],
  "plan_data": {{
    "days": [
      {{
        "day": "Monday",
        "meals": [
          {{
            "type": "Breakfast",
            "name": "Meal name",
            "ingredients": ["ingredient1", "ingredient2"],
            "nutrition": {{"calories": 400, "protein": 20, "carbs": 45, "fat": 15}},
            "benefits": ["benefit1", "benefit2"]
          }}
        ],
        "daily_totals": {{"calories": 1800, "protein": 120, "carbs": 200, "fat": 60}}
      }}
    ],
    "shopping_list": ["item1", "item2"],
    "tips": ["tip1", "tip2"]
  }}
}}

Make sure all meals are practical, delicious, and specifically chosen to address the nutrient deficiencies.
Focus on whole foods and provide variety throughout the week.
""".strip()


def build_prompt(
    deficiencies: List[str],
    preferences: MealPreferences,
    bloodwork_data: Optional[Dict[str, Any]] = None,
) -> str:
    bloodwork = ""
    summary = (bloodwork_data or {}).get("summary_text")
    if summary:
        bloodwork = f"\nBLOODWORK SUMMARY:\n{summary}\n"
    return MEAL_PLAN_PROMPT.format(
        deficiencies=", ".join(deficiencies),
        restrictions=", ".join(preferences.dietary_restrictions) or "None",
        allergies=", ".join(preferences.allergies) or "None",
        cuisines=", ".join(preferences.cuisine_preferences) or "Varied",
        bloodwork=bloodwork,
    )


def shopping_list_for(deficiencies: List[str]) -> List[str]:
    extra: List[str] = []
    for deficiency in deficiencies:
        extra.extend(DEFICIENCY_SHOPPING_ITEMS.get(deficiency, []))
    return (BASE_SHOPPING_ITEMS + extra)[:MAX_SHOPPING_ITEMS]


def _mock_meals() -> List[Dict[str, Any]]:
    return [
        {
            "type": "Breakfast",
            "name": "Nutrient-Rich Smoothie Bowl",
            "ingredients": ["spinach", "banana", "berries", "almonds", "chia seeds"],
            "nutrition": {"calories": 350, "protein": 15, "carbs": 45, "fat": 12},
            "benefits": ["High in vitamins", "Antioxidant rich"],
        },
        {
            "type": "Lunch",
            "name": "Quinoa Power Salad",
            "ingredients": ["quinoa", "kale", "chickpeas", "avocado", "pumpkin seeds"],
            "nutrition": {"calories": 450, "protein": 18, "carbs": 55, "fat": 16},
            "benefits": ["Complete protein", "Fiber rich"],
        },
        {
            "type": "Dinner",
            "name": "Salmon with Sweet Potato",
            "ingredients": ["salmon fillet", "sweet potato", "broccoli", "olive oil"],
            "nutrition": {"calories": 500, "protein": 35, "carbs": 40, "fat": 20},
            "benefits": ["Omega-3 fatty acids", "Beta carotene"],
        },
    ]


def mock_meal_plan(deficiencies: List[str]) -> MealPlan:
    return MealPlan.model_validate(
        {
            "title": f"Personalized Nutrition Plan for {', '.join(deficiencies)}",
            "description": "A meal plan designed to address your specific nutrient deficiencies",
            "target_nutrients": list(deficiencies),
            "plan_data": {
                "days": [
                    {
                        "day": day,
                        "meals": _mock_meals(),
                        "daily_totals": {"calories": 1300, "protein": 68, "carbs": 140, "fat": 48},
                    }
                    for day in WEEK_DAYS
                ],
                "shopping_list": shopping_list_for(deficiencies),
                "tips": list(MOCK_TIPS),
            },
        }
    )


def parse_meal_plan(content: str) -> MealPlan:
    """Parse and validate model output; raises ValueError when unusable."""
    parsed = parse_json_object(content)
    plan_data = parsed.get("plan_data")
    if not parsed.get("title") or not isinstance(plan_data, dict) or not plan_data.get("days"):
        raise ValueError("Invalid meal plan structure")
    try:
        return MealPlan.model_validate(parsed)
    except ValidationError as exc:
        raise ValueError(f"Invalid meal plan structure: {exc}") from exc


def generate_meal_plan(
    deficiencies: List[str],
    preferences: MealPreferences | None = None,
    bloodwork_data: Optional[Dict[str, Any]] = None,
) -> Tuple[MealPlan, str]:
    """Return (plan, source) where source is "ai" or "mock"."""
    prefs = preferences or MealPreferences()
    prompt = build_prompt(deficiencies, prefs, bloodwork_data)
    try:
        content = generate_text(prompt, timeout=settings.meal_plan_timeout)
        return parse_meal_plan(content), "ai"
    except AIUnavailableError:
        log.warning("Meal plan model not configured; returning mock plan")
    except (AIRequestError, ValueError):
        log.warning("Meal plan generation failed; returning mock plan", exc_info=True)
    return mock_meal_plan(deficiencies), "mock"
