# -*- coding: utf-8 -*-
"""Recipes — API endpoints (Spoonacular search)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from .models import Recipe, RecipeSearchResponse
from .spoonacular import RecipeConfigError, RecipeUpstreamError, SpoonacularClient

router = APIRouter(prefix="/api/recipes", tags=["Recipes"])


def _client() -> SpoonacularClient:
    return SpoonacularClient()


@router.get("/search", response_model=RecipeSearchResponse, summary="Search recipes")
def search(
    query: str = Query(default=""),
    cuisine: str | None = Query(default=None),
    diet: str | None = Query(default=None),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: dict = Depends(get_current_user),  # noqa: ARG001
):
    try:
        rows = _client().search(query=query, cuisine=cuisine, diet=diet, limit=limit, offset=offset)
    except RecipeConfigError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except RecipeUpstreamError as exc:
        raise HTTPException(status_code=502, detail=f"Failed to fetch recipes: {exc}") from exc
    return RecipeSearchResponse(count=len(rows), recipes=[Recipe(**r) for r in rows])


@router.get("/soups", response_model=RecipeSearchResponse, summary="Soup recipes")
def soups(limit: int = Query(default=10, ge=1, le=100), user: dict = Depends(get_current_user)):
    return search(query="soup", cuisine=None, diet=None, limit=limit, offset=0, user=user)


@router.get("/{recipe_id}", response_model=Recipe, summary="Recipe details")
def get_recipe(recipe_id: str, user: dict = Depends(get_current_user)):  # noqa: ARG001
    try:
        row = _client().get(recipe_id)
    except RecipeConfigError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except RecipeUpstreamError as exc:
        raise HTTPException(status_code=502, detail=f"Failed to fetch recipe details: {exc}") from exc
    return Recipe(**row)
