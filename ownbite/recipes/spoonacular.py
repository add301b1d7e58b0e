# -*- coding: utf-8 -*-
"""Recipes — Spoonacular HTTP client + transform into the app recipe shape."""

from __future__ import annotations

import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings

log = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")


class RecipeConfigError(RuntimeError):
    """SPOONACULAR_API_KEY is not configured."""


class RecipeUpstreamError(RuntimeError):
    """Spoonacular returned an error or was unreachable."""


def _nutrient(recipe: Dict[str, Any], name: str) -> float:
    nutrients = (recipe.get("nutrition") or {}).get("nutrients") or []
    for n in nutrients:
        if isinstance(n, dict) and n.get("name") == name:
            try:
                return float(n.get("amount") or 0.0)
            except (TypeError, ValueError):
                return 0.0
    return 0.0


def transform_recipe(recipe: Dict[str, Any]) -> Dict[str, Any]:
    ready = int(recipe.get("readyInMinutes") or 0)
    servings = int(recipe.get("servings") or 1) or 1
    calories = _nutrient(recipe, "Calories")
    return {
        "id": str(recipe.get("id")),
        "title": recipe.get("title") or "",
        "description": _TAG_RE.sub("", recipe.get("summary") or ""),
        "instructions": recipe.get("instructions"),
        "ingredients": [
            i.get("original") or i.get("name") or ""
            for i in recipe.get("extendedIngredients") or []
            if isinstance(i, dict)
        ],
        "image_url": recipe.get("image"),
        "cuisine_type": (recipe.get("cuisines") or ["Other"])[0],
        "diet_type": list(recipe.get("diets") or []),
        "prep_time": ready // 2,
        "cook_time": math.ceil(ready / 2),
        "servings": servings,
        "calories_per_serving": round(calories / servings),
        "nutrition": {
            "calories": calories,
            "protein": _nutrient(recipe, "Protein"),
            "carbs": _nutrient(recipe, "Carbohydrates"),
            "fat": _nutrient(recipe, "Fat"),
        },
        "created_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }


class SpoonacularClient:
    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, timeout: float = 15.0) -> None:
        self.api_key = api_key if api_key is not None else settings.spoonacular_api_key
        self.base_url = (base_url or settings.spoonacular_base_url).rstrip("/")
        self.timeout = timeout

    def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise RecipeConfigError("Spoonacular API key is not configured")
        try:
            with httpx.Client(timeout=self.timeout) as client:
                resp = client.get(f"{self.base_url}{path}", params={"apiKey": self.api_key, **params})
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as exc:
            log.warning("Spoonacular error %s: %s", exc.response.status_code, exc.response.text[:500])
            raise RecipeUpstreamError(f"Spoonacular API error: {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise RecipeUpstreamError(f"Spoonacular API unreachable: {exc}") from exc
        if not isinstance(data, dict):
            raise RecipeUpstreamError("Unexpected Spoonacular response")
        return data

    def search(
        self,
        *,
        query: str = "",
        cuisine: Optional[str] = None,
        diet: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {
            "number": limit,
            "offset": offset,
            "addRecipeInformation": "true",
            "addRecipeNutrition": "true",
            "instructionsRequired": "true",
            "fillIngredients": "true",
        }
        if query:
            params["query"] = query
        if cuisine:
            params["cuisine"] = cuisine
        if diet:
            params["diet"] = diet
        data = self._get("/complexSearch", params)
        return [transform_recipe(r) for r in data.get("results") or [] if isinstance(r, dict)]

    def get(self, recipe_id: str) -> Dict[str, Any]:
        data = self._get(f"/{recipe_id}/information", {"includeNutrition": "true"})
        return transform_recipe(data)
