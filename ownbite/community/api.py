# -*- coding: utf-8 -*-
"""Community — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from .models import (
    CollectionCreateRequest,
    CollectionListResponse,
    CommentCreateRequest,
    CommentListResponse,
    CommunityRecipe,
    RecipeCollection,
    RecipeComment,
    RecipeCreateRequest,
    RecipeListResponse,
    RecipeUpdateRequest,
    UserProfileSummary,
)
from .storage import (
    add_comment,
    add_recipe_to_collection,
    create_collection,
    create_recipe,
    delete_comment,
    delete_recipe,
    discover_feed,
    follow_user,
    get_recipe,
    like_recipe,
    list_collections,
    list_comments,
    list_user_recipes,
    remix_recipe,
    remove_recipe_from_collection,
    social_feed,
    unfollow_user,
    unlike_recipe,
    update_recipe,
    user_exists,
    user_profile_summary,
)

router = APIRouter(prefix="/api/community", tags=["Community"])


def _recipe_list(rows: list) -> RecipeListResponse:
    return RecipeListResponse(count=len(rows), recipes=[CommunityRecipe(**r) for r in rows])


# ---------- feeds ----------


@router.get("/feed", response_model=RecipeListResponse, summary="Recipes from people I follow")
def read_social_feed(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: dict = Depends(get_current_user),
):
    return _recipe_list(social_feed(viewer_id=user["id"], limit=limit, offset=offset))


@router.get("/discover", response_model=RecipeListResponse, summary="Popular public recipes")
def read_discover_feed(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: dict = Depends(get_current_user),
):
    return _recipe_list(discover_feed(viewer_id=user["id"], limit=limit, offset=offset))


# ---------- recipes ----------


@router.post("/recipes", response_model=CommunityRecipe, summary="Share a recipe")
def create(request: RecipeCreateRequest, user: dict = Depends(get_current_user)):
    return CommunityRecipe(**create_recipe(user_id=user["id"], recipe=request.model_dump()))


@router.get("/recipes/{recipe_id}", response_model=CommunityRecipe, summary="Recipe details")
def read_recipe(recipe_id: str, user: dict = Depends(get_current_user)):
    row = get_recipe(viewer_id=user["id"], recipe_id=recipe_id)
    if not row:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return CommunityRecipe(**row)


@router.patch("/recipes/{recipe_id}", response_model=CommunityRecipe, summary="Update my recipe")
def patch_recipe(recipe_id: str, request: RecipeUpdateRequest, user: dict = Depends(get_current_user)):
    row = update_recipe(user_id=user["id"], recipe_id=recipe_id, updates=request.model_dump(exclude_unset=True))
    if not row:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return CommunityRecipe(**row)


@router.delete("/recipes/{recipe_id}", summary="Delete my recipe")
def remove_recipe(recipe_id: str, user: dict = Depends(get_current_user)):
    if not delete_recipe(user_id=user["id"], recipe_id=recipe_id):
        raise HTTPException(status_code=404, detail="Recipe not found")
    return {"status": "ok"}


@router.post("/recipes/{recipe_id}/remix", response_model=CommunityRecipe, summary="Remix a recipe")
def remix(recipe_id: str, request: RecipeUpdateRequest, user: dict = Depends(get_current_user)):
    row = remix_recipe(user_id=user["id"], recipe_id=recipe_id, changes=request.model_dump(exclude_unset=True))
    if not row:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return CommunityRecipe(**row)


@router.get("/users/{user_id}/recipes", response_model=RecipeListResponse, summary="Recipes by a user")
def read_user_recipes(
    user_id: str,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: dict = Depends(get_current_user),
):
    return _recipe_list(list_user_recipes(viewer_id=user["id"], user_id=user_id, limit=limit, offset=offset))


# ---------- likes ----------


@router.post("/recipes/{recipe_id}/like", response_model=CommunityRecipe, summary="Like a recipe")
def like(recipe_id: str, user: dict = Depends(get_current_user)):
    row = like_recipe(user_id=user["id"], recipe_id=recipe_id)
    if not row:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return CommunityRecipe(**row)


@router.delete("/recipes/{recipe_id}/like", response_model=CommunityRecipe, summary="Unlike a recipe")
def unlike(recipe_id: str, user: dict = Depends(get_current_user)):
    row = unlike_recipe(user_id=user["id"], recipe_id=recipe_id)
    if not row:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return CommunityRecipe(**row)


# ---------- comments ----------


@router.get("/recipes/{recipe_id}/comments", response_model=CommentListResponse, summary="Recipe comments")
def read_comments(recipe_id: str, user: dict = Depends(get_current_user)):
    if not get_recipe(viewer_id=user["id"], recipe_id=recipe_id):
        raise HTTPException(status_code=404, detail="Recipe not found")
    rows = list_comments(recipe_id=recipe_id)
    return CommentListResponse(count=len(rows), comments=[RecipeComment(**r) for r in rows])


@router.post("/recipes/{recipe_id}/comments", response_model=RecipeComment, summary="Comment on a recipe")
def create_comment(recipe_id: str, request: CommentCreateRequest, user: dict = Depends(get_current_user)):
    if not get_recipe(viewer_id=user["id"], recipe_id=recipe_id):
        raise HTTPException(status_code=404, detail="Recipe not found")
    return RecipeComment(**add_comment(user_id=user["id"], recipe_id=recipe_id, content=request.content))


@router.delete("/comments/{comment_id}", summary="Delete my comment")
def remove_comment(comment_id: str, user: dict = Depends(get_current_user)):
    if not delete_comment(user_id=user["id"], comment_id=comment_id):
        raise HTTPException(status_code=404, detail="Comment not found")
    return {"status": "ok"}


# ---------- follows ----------


@router.post("/users/{user_id}/follow", response_model=UserProfileSummary, summary="Follow a user")
def follow(user_id: str, user: dict = Depends(get_current_user)):
    if user_id == user["id"]:
        raise HTTPException(status_code=400, detail="Cannot follow yourself")
    if not user_exists(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    follow_user(follower_id=user["id"], following_id=user_id)
    return UserProfileSummary(**user_profile_summary(viewer_id=user["id"], user_id=user_id))


@router.delete("/users/{user_id}/follow", summary="Unfollow a user")
def unfollow(user_id: str, user: dict = Depends(get_current_user)):
    unfollow_user(follower_id=user["id"], following_id=user_id)
    return {"status": "ok"}


@router.get("/users/{user_id}", response_model=UserProfileSummary, summary="Public profile with counts")
def read_user_profile(user_id: str, user: dict = Depends(get_current_user)):
    row = user_profile_summary(viewer_id=user["id"], user_id=user_id)
    if not row:
        raise HTTPException(status_code=404, detail="User not found")
    return UserProfileSummary(**row)


# ---------- collections ----------


@router.get("/collections", response_model=CollectionListResponse, summary="My recipe collections")
def read_collections(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: dict = Depends(get_current_user),
):
    rows = list_collections(user_id=user["id"], limit=limit, offset=offset)
    return CollectionListResponse(count=len(rows), collections=[RecipeCollection(**r) for r in rows])


@router.post("/collections", response_model=RecipeCollection, summary="Create a collection")
def new_collection(request: CollectionCreateRequest, user: dict = Depends(get_current_user)):
    row = create_collection(
        user_id=user["id"],
        name=request.name,
        description=request.description,
        is_public=request.is_public,
    )
    return RecipeCollection(**row)


@router.put("/collections/{collection_id}/recipes/{recipe_id}", summary="Add a recipe to my collection")
def add_to_collection(collection_id: str, recipe_id: str, user: dict = Depends(get_current_user)):
    if not add_recipe_to_collection(user_id=user["id"], collection_id=collection_id, recipe_id=recipe_id):
        raise HTTPException(status_code=404, detail="Collection or recipe not found")
    return {"status": "ok"}


@router.delete("/collections/{collection_id}/recipes/{recipe_id}", summary="Remove a recipe from my collection")
def remove_from_collection(collection_id: str, recipe_id: str, user: dict = Depends(get_current_user)):
    if not remove_recipe_from_collection(user_id=user["id"], collection_id=collection_id, recipe_id=recipe_id):
        raise HTTPException(status_code=404, detail="Collection not found")
    return {"status": "ok"}
