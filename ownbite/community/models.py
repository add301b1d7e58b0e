# -*- coding: utf-8 -*-
"""Community — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class RecipeNutrition(BaseModel):
    calories: float = Field(0.0, ge=0)
    protein: float = Field(0.0, ge=0)
    carbs: float = Field(0.0, ge=0)
    fat: float = Field(0.0, ge=0)


class RecipeCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=5000)
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    image_url: Optional[str] = Field(None, max_length=2000)
    nutrition: Optional[RecipeNutrition] = None
    is_public: bool = True


class RecipeUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    ingredients: Optional[List[str]] = None
    instructions: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    image_url: Optional[str] = Field(None, max_length=2000)
    nutrition: Optional[RecipeNutrition] = None
    is_public: Optional[bool] = None


class CommunityRecipe(BaseModel):
    id: str
    user_id: str
    title: str
    description: str = ""
    ingredients: List[str] = []
    instructions: List[str] = []
    tags: List[str] = []
    image_url: Optional[str] = None
    nutrition: Optional[RecipeNutrition] = None
    is_public: bool = True
    remix_of: Optional[str] = None
    like_count: int = 0
    comment_count: int = 0
    created_at: str
    updated_at: str
    user_full_name: Optional[str] = None
    user_avatar_url: Optional[str] = None
    is_liked: bool = False


class RecipeListResponse(BaseModel):
    count: int
    recipes: List[CommunityRecipe] = []


class CommentCreateRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)


class RecipeComment(BaseModel):
    id: str
    user_id: str
    recipe_id: str
    content: str
    created_at: str
    updated_at: str
    user_full_name: Optional[str] = None
    user_avatar_url: Optional[str] = None


class CommentListResponse(BaseModel):
    count: int
    comments: List[RecipeComment] = []


class UserProfileSummary(BaseModel):
    user_id: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    recipe_count: int = 0
    follower_count: int = 0
    following_count: int = 0
    is_following: bool = False


class CollectionCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=2000)
    is_public: bool = True


class RecipeCollection(BaseModel):
    id: str
    user_id: str
    name: str
    description: str = ""
    is_public: bool = True
    created_at: str
    updated_at: str
    recipe_count: int = 0


class CollectionListResponse(BaseModel):
    count: int
    collections: List[RecipeCollection] = []
