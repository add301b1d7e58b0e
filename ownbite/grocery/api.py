# -*- coding: utf-8 -*-
"""Grocery — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import get_current_user
from ..community.storage import get_recipe
from ..meal_plans.storage import get_meal_plan
from .models import (
    FromMealPlanRequest,
    FromRecipeRequest,
    GroceryItem,
    GroceryItemCreateRequest,
    GroceryItemsResponse,
    GroceryItemUpdateRequest,
    GroceryList,
    GroceryListCreateRequest,
    GroceryListsResponse,
)
from .storage import (
    add_item,
    create_grocery_list,
    delete_grocery_list,
    delete_item,
    list_grocery_lists,
    list_items,
    update_item,
)

router = APIRouter(prefix="/api/grocery", tags=["Grocery"])


@router.get("/lists", response_model=GroceryListsResponse, summary="My grocery lists")
def read_lists(user: dict = Depends(get_current_user)):
    rows = list_grocery_lists(user_id=user["id"])
    return GroceryListsResponse(count=len(rows), lists=[GroceryList(**r) for r in rows])


@router.post("/lists", response_model=GroceryList, summary="Create a grocery list")
def new_list(request: GroceryListCreateRequest, user: dict = Depends(get_current_user)):
    return GroceryList(**create_grocery_list(user_id=user["id"], name=request.name, is_public=request.is_public))


@router.delete("/lists/{list_id}", summary="Delete a grocery list")
def remove_list(list_id: str, user: dict = Depends(get_current_user)):
    if not delete_grocery_list(user_id=user["id"], list_id=list_id):
        raise HTTPException(status_code=404, detail="Grocery list not found")
    return {"status": "ok"}


@router.get("/lists/{list_id}/items", response_model=GroceryItemsResponse, summary="Items on a list")
def read_items(list_id: str, user: dict = Depends(get_current_user)):
    rows = list_items(user_id=user["id"], list_id=list_id)
    if rows is None:
        raise HTTPException(status_code=404, detail="Grocery list not found")
    return GroceryItemsResponse(list_id=list_id, count=len(rows), items=[GroceryItem(**r) for r in rows])


@router.post("/lists/{list_id}/items", response_model=GroceryItem, summary="Add an item")
def new_item(list_id: str, request: GroceryItemCreateRequest, user: dict = Depends(get_current_user)):
    row = add_item(user_id=user["id"], list_id=list_id, item=request.model_dump())
    if not row:
        raise HTTPException(status_code=404, detail="Grocery list not found")
    return GroceryItem(**row)


@router.patch("/items/{item_id}", response_model=GroceryItem, summary="Update an item")
def patch_item(item_id: str, request: GroceryItemUpdateRequest, user: dict = Depends(get_current_user)):
    row = update_item(user_id=user["id"], item_id=item_id, updates=request.model_dump(exclude_unset=True))
    if not row:
        raise HTTPException(status_code=404, detail="Item not found")
    return GroceryItem(**row)


@router.delete("/items/{item_id}", summary="Delete an item")
def remove_item(item_id: str, user: dict = Depends(get_current_user)):
    if not delete_item(user_id=user["id"], item_id=item_id):
        raise HTTPException(status_code=404, detail="Item not found")
    return {"status": "ok"}


@router.post("/lists/from-recipe", response_model=GroceryList, summary="Create a list from a recipe's ingredients")
def from_recipe(request: FromRecipeRequest, user: dict = Depends(get_current_user)):
    recipe = get_recipe(viewer_id=user["id"], recipe_id=request.recipe_id)
    if not recipe:
        raise HTTPException(status_code=404, detail="Recipe not found")
    items = [{"name": ingredient, "category": "From Recipe"} for ingredient in recipe["ingredients"] if ingredient]
    row = create_grocery_list(
        user_id=user["id"],
        name=request.name or f"{recipe['title']} Ingredients",
        items=items,
    )
    return GroceryList(**row)


@router.post("/lists/from-meal-plan", response_model=GroceryList, summary="Create a list from a meal plan")
def from_meal_plan(request: FromMealPlanRequest, user: dict = Depends(get_current_user)):
    plan = get_meal_plan(user_id=user["id"], plan_id=request.plan_id)
    if not plan:
        raise HTTPException(status_code=404, detail="Meal plan not found")
    shopping = (plan.get("plan_data") or {}).get("shopping_list") or []
    items = [{"name": str(entry), "category": "From Meal Plan"} for entry in shopping if entry]
    row = create_grocery_list(
        user_id=user["id"],
        name=request.name or f"{plan['title']} Shopping List",
        items=items,
    )
    return GroceryList(**row)
