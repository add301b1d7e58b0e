# -*- coding: utf-8 -*-
"""Scan — food photo analysis via the vision model, with a canned fallback."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from ..llm import AIRequestError, AIUnavailableError, as_str_list, coerce_float, describe_image, parse_json_object
from .imaging import prepare_image, split_data_url

log = logging.getLogger(__name__)

FALLBACK_WARNING = "AI analysis unavailable; showing an estimated mixed meal."

ANALYZE_PROMPT = """
Analyze this food image and identify all visible food items.
For each food item, provide:
1. The name of the food
2. Estimated calories
3. Estimated macronutrients (protein, carbs, fat in grams)
4. Health benefits (if any)
5. Potential health concerns (if any)

Return the results in this exact JSON format:
{
  "foodItems": [
    {
      "name": "food name",
      "calories": number,
      "protein": number,
      "carbs": number,
      "fat": number,
      "healthBenefits": ["benefit 1", "benefit 2"],
      "healthRisks": ["risk 1"]
    }
  ]
}

Be accurate but reasonable with nutritional estimates. If you can't identify the food clearly, make your best guess.
Only return the JSON object, no other text.
""".strip()


def fallback_items() -> List[Dict[str, Any]]:
    return [
        {
            "name": "Mixed meal",
            "calories": 450.0,
            "protein": 20.0,
            "carbs": 45.0,
            "fat": 15.0,
            "healthBenefits": ["Provides balanced nutrition", "Contains essential nutrients"],
            "healthRisks": ["Portion size may vary"],
        }
    ]


def _first_present(obj: Dict[str, Any], keys: List[str]) -> Any:
    for k in keys:
        if k in obj:
            return obj.get(k)
    return None


def _normalize_items(items: Any) -> List[Dict[str, Any]]:
    if not isinstance(items, list):
        return []
    out: List[Dict[str, Any]] = []
    for raw in items:
        if not isinstance(raw, dict):
            continue
        name = _first_present(raw, ["name", "food", "item", "dish"])
        name = (name if isinstance(name, str) else str(name or "")).strip() or "Unknown food"

        def num(keys: List[str]) -> float:
            value = coerce_float(_first_present(raw, keys))
            return max(0.0, value) if value is not None else 0.0

        out.append(
            {
                "name": name,
                "calories": num(["calories", "kcal", "calories_kcal"]),
                "protein": num(["protein", "protein_g"]),
                "carbs": num(["carbs", "carbohydrates", "carbs_g"]),
                "fat": num(["fat", "fat_g"]),
                "healthBenefits": as_str_list(_first_present(raw, ["healthBenefits", "health_benefits", "benefits"])),
                "healthRisks": as_str_list(_first_present(raw, ["healthRisks", "health_risks", "risks"])),
            }
        )
    return out


def totals_for(items: List[Dict[str, Any]]) -> Dict[str, float]:
    return {
        "totalCalories": round(sum(float(i.get("calories") or 0.0) for i in items), 1),
        "totalProtein": round(sum(float(i.get("protein") or 0.0) for i in items), 1),
        "totalCarbs": round(sum(float(i.get("carbs") or 0.0) for i in items), 1),
        "totalFat": round(sum(float(i.get("fat") or 0.0) for i in items), 1),
    }


def analyze_food_image(image_data_url: str) -> Tuple[Dict[str, Any], List[str], bool]:
    """Return (result, warnings, used_fallback).

    Raises ValueError only for an undecodable data URL; every model failure
    degrades to the canned result.
    """
    mime, raw = split_data_url(image_data_url)
    prepared = prepare_image(raw, mime=mime)
    warnings: List[str] = [prepared.warning] if prepared.warning else []

    items: List[Dict[str, Any]] = []
    try:
        content = describe_image(ANALYZE_PROMPT, prepared.data_url())
        parsed = parse_json_object(content)
        items = _normalize_items(parsed.get("foodItems") or parsed.get("items"))
        if not items:
            raise ValueError("No food items in model output")
    except AIUnavailableError:
        log.warning("Vision model not configured; returning fallback analysis")
    except (AIRequestError, ValueError):
        log.warning("Food image analysis failed; returning fallback analysis", exc_info=True)

    fallback = not items
    if fallback:
        items = fallback_items()
        warnings.append(FALLBACK_WARNING)

    result = {"foodItems": items, **totals_for(items)}
    return result, warnings, fallback
