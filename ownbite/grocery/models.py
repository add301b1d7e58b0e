# -*- coding: utf-8 -*-
"""Grocery — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class GroceryListCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    is_public: bool = False


class GroceryList(BaseModel):
    id: str
    name: str
    is_public: bool = False
    created_at: str
    updated_at: str
    item_count: int = 0


class GroceryListsResponse(BaseModel):
    count: int
    lists: List[GroceryList] = []


class GroceryItemCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    quantity: str = Field("", max_length=100)
    category: str = Field("", max_length=100)
    is_checked: bool = False


class GroceryItemUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    quantity: Optional[str] = Field(None, max_length=100)
    category: Optional[str] = Field(None, max_length=100)
    is_checked: Optional[bool] = None


class GroceryItem(BaseModel):
    id: str
    list_id: str
    name: str
    quantity: str = ""
    category: str = ""
    is_checked: bool = False
    created_at: str
    updated_at: str


class GroceryItemsResponse(BaseModel):
    list_id: str
    count: int
    items: List[GroceryItem] = []


class FromRecipeRequest(BaseModel):
    recipe_id: str = Field(..., min_length=1)
    name: Optional[str] = Field(None, max_length=200)


class FromMealPlanRequest(BaseModel):
    plan_id: str = Field(..., min_length=1)
    name: Optional[str] = Field(None, max_length=200)
