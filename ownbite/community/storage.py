# -*- coding: utf-8 -*-
"""Community — recipes, likes, comments, follows and collections (SQLite).

A recipe is visible to a viewer when it is public or the viewer owns it;
anything else behaves as missing.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings

_JSON_LIST_FIELDS = ("ingredients", "instructions", "tags")
_UPDATABLE_FIELDS = {"title", "description", "ingredients", "instructions", "tags", "image_url", "nutrition", "is_public"}

_RECIPE_SELECT = """
    SELECT r.*,
           p.full_name AS user_full_name,
           p.avatar_url AS user_avatar_url,
           EXISTS (
               SELECT 1 FROM recipe_likes l WHERE l.recipe_id = r.id AND l.user_id = :viewer
           ) AS is_liked
    FROM community_recipes r
    LEFT JOIN profiles p ON p.user_id = r.user_id
"""

_VISIBLE = "(r.is_public = 1 OR r.user_id = :viewer)"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _loads(raw: Any, default: Any) -> Any:
    if not raw:
        return default
    try:
        return json.loads(raw)
    except ValueError:
        return default


def _row_to_recipe(row: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(row)
    for key in _JSON_LIST_FIELDS:
        out[key] = _loads(out.get(key), [])
    out["nutrition"] = _loads(out.get("nutrition"), None)
    out["is_public"] = bool(out.get("is_public"))
    out["is_liked"] = bool(out.get("is_liked"))
    out["description"] = out.get("description") or ""
    return out


def _encode_recipe_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(fields)
    for key in _JSON_LIST_FIELDS:
        if key in out:
            out[key] = json.dumps(out[key] or [], ensure_ascii=False)
    if "nutrition" in out:
        out["nutrition"] = json.dumps(out["nutrition"], ensure_ascii=False) if out["nutrition"] is not None else None
    if "is_public" in out:
        out["is_public"] = int(bool(out["is_public"]))
    return out


# ---------- recipes ----------


def create_recipe(*, user_id: str, recipe: Dict[str, Any], remix_of: Optional[str] = None) -> Dict[str, Any]:
    recipe_id = str(uuid4())
    now = _utc_now()
    row = _encode_recipe_fields(
        {
            "id": recipe_id,
            "user_id": user_id,
            "title": recipe["title"].strip(),
            "description": recipe.get("description") or "",
            "ingredients": recipe.get("ingredients") or [],
            "instructions": recipe.get("instructions") or [],
            "tags": recipe.get("tags") or [],
            "image_url": recipe.get("image_url"),
            "nutrition": recipe.get("nutrition"),
            "is_public": recipe.get("is_public", True),
            "remix_of": remix_of,
            "created_at": now,
            "updated_at": now,
        }
    )
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO community_recipes (
                id, user_id, title, description, ingredients, instructions, tags, image_url,
                nutrition, is_public, remix_of, like_count, comment_count, created_at, updated_at
            ) VALUES (
                :id, :user_id, :title, :description, :ingredients, :instructions, :tags, :image_url,
                :nutrition, :is_public, :remix_of, 0, 0, :created_at, :updated_at
            )
            """,
            row,
        )
    return get_recipe(viewer_id=user_id, recipe_id=recipe_id) or {}


def get_recipe(*, viewer_id: str, recipe_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            f"{_RECIPE_SELECT} WHERE r.id = :id AND {_VISIBLE}",
            {"viewer": viewer_id, "id": recipe_id},
        ).fetchone()
        return _row_to_recipe(dict(row)) if row else None


def update_recipe(*, user_id: str, recipe_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Owner-only update; id, owner, counters and timestamps are never touched."""
    with db_conn(settings.app_db_path) as conn:
        owned = conn.execute(
            "SELECT id FROM community_recipes WHERE id = ? AND user_id = ?",
            (recipe_id, user_id),
        ).fetchone()
        if not owned:
            return None
        fields = _encode_recipe_fields(
            {k: v for k, v in updates.items() if k in _UPDATABLE_FIELDS and v is not None}
        )
        fields["updated_at"] = _utc_now()
        assignments = ", ".join(f"{k} = :{k}" for k in fields)
        conn.execute(
            f"UPDATE community_recipes SET {assignments} WHERE id = :recipe_id AND user_id = :user_id",
            {**fields, "recipe_id": recipe_id, "user_id": user_id},
        )
    return get_recipe(viewer_id=user_id, recipe_id=recipe_id)


def delete_recipe(*, user_id: str, recipe_id: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute(
            "DELETE FROM community_recipes WHERE id = ? AND user_id = ?",
            (recipe_id, user_id),
        )
        return cur.rowcount > 0


def list_user_recipes(*, viewer_id: str, user_id: str, limit: int = 20, offset: int = 0) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            f"""
            {_RECIPE_SELECT}
            WHERE r.user_id = :owner AND {_VISIBLE}
            ORDER BY r.created_at DESC LIMIT :limit OFFSET :offset
            """,
            {"viewer": viewer_id, "owner": user_id, "limit": int(limit), "offset": int(offset)},
        ).fetchall()
        return [_row_to_recipe(dict(r)) for r in rows]


def social_feed(*, viewer_id: str, limit: int = 20, offset: int = 0) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            f"""
            {_RECIPE_SELECT}
            WHERE r.is_public = 1 AND r.user_id IN (
                SELECT following_id FROM user_follows WHERE follower_id = :viewer
            )
            ORDER BY r.created_at DESC LIMIT :limit OFFSET :offset
            """,
            {"viewer": viewer_id, "limit": int(limit), "offset": int(offset)},
        ).fetchall()
        return [_row_to_recipe(dict(r)) for r in rows]


def discover_feed(*, viewer_id: str, limit: int = 20, offset: int = 0) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            f"""
            {_RECIPE_SELECT}
            WHERE r.is_public = 1
            ORDER BY r.like_count DESC, r.created_at DESC LIMIT :limit OFFSET :offset
            """,
            {"viewer": viewer_id, "limit": int(limit), "offset": int(offset)},
        ).fetchall()
        return [_row_to_recipe(dict(r)) for r in rows]


def remix_recipe(*, user_id: str, recipe_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    original = get_recipe(viewer_id=user_id, recipe_id=recipe_id)
    if not original:
        return None
    merged = {
        "title": changes.get("title") or f"{original['title']} (Remix)",
        "is_public": changes["is_public"] if changes.get("is_public") is not None else True,
    }
    for key in ("description", "ingredients", "instructions", "tags", "image_url", "nutrition"):
        merged[key] = changes.get(key) or original.get(key)
    return create_recipe(user_id=user_id, recipe=merged, remix_of=recipe_id)


# ---------- likes ----------


def like_recipe(*, user_id: str, recipe_id: str) -> Optional[Dict[str, Any]]:
    if not get_recipe(viewer_id=user_id, recipe_id=recipe_id):
        return None
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute(
            "INSERT OR IGNORE INTO recipe_likes (id, user_id, recipe_id, created_at) VALUES (?, ?, ?, ?)",
            (str(uuid4()), user_id, recipe_id, _utc_now()),
        )
        if cur.rowcount > 0:
            conn.execute("UPDATE community_recipes SET like_count = like_count + 1 WHERE id = ?", (recipe_id,))
    return get_recipe(viewer_id=user_id, recipe_id=recipe_id)


def unlike_recipe(*, user_id: str, recipe_id: str) -> Optional[Dict[str, Any]]:
    if not get_recipe(viewer_id=user_id, recipe_id=recipe_id):
        return None
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute(
            "DELETE FROM recipe_likes WHERE user_id = ? AND recipe_id = ?",
            (user_id, recipe_id),
        )
        if cur.rowcount > 0:
            conn.execute(
                "UPDATE community_recipes SET like_count = MAX(like_count - 1, 0) WHERE id = ?",
                (recipe_id,),
            )
    return get_recipe(viewer_id=user_id, recipe_id=recipe_id)


# ---------- comments ----------


def list_comments(*, recipe_id: str) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            """
            SELECT c.*, p.full_name AS user_full_name, p.avatar_url AS user_avatar_url
            FROM recipe_comments c
            LEFT JOIN profiles p ON p.user_id = c.user_id
            WHERE c.recipe_id = ?
            ORDER BY c.created_at DESC
            """,
            (recipe_id,),
        ).fetchall()
        return [dict(r) for r in rows]


def add_comment(*, user_id: str, recipe_id: str, content: str) -> Dict[str, Any]:
    comment_id = str(uuid4())
    now = _utc_now()
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO recipe_comments (id, user_id, recipe_id, content, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (comment_id, user_id, recipe_id, content.strip(), now, now),
        )
        conn.execute("UPDATE community_recipes SET comment_count = comment_count + 1 WHERE id = ?", (recipe_id,))
        row = conn.execute(
            """
            SELECT c.*, p.full_name AS user_full_name, p.avatar_url AS user_avatar_url
            FROM recipe_comments c LEFT JOIN profiles p ON p.user_id = c.user_id
            WHERE c.id = ?
            """,
            (comment_id,),
        ).fetchone()
    return dict(row)


def delete_comment(*, user_id: str, comment_id: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT recipe_id FROM recipe_comments WHERE id = ? AND user_id = ?",
            (comment_id, user_id),
        ).fetchone()
        if not row:
            return False
        conn.execute("DELETE FROM recipe_comments WHERE id = ?", (comment_id,))
        conn.execute(
            "UPDATE community_recipes SET comment_count = MAX(comment_count - 1, 0) WHERE id = ?",
            (row["recipe_id"],),
        )
    return True


# ---------- follows ----------


def user_exists(user_id: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        return conn.execute("SELECT 1 FROM users WHERE id = ?", (user_id,)).fetchone() is not None


def follow_user(*, follower_id: str, following_id: str) -> None:
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT OR IGNORE INTO user_follows (id, follower_id, following_id, created_at)
            VALUES (?, ?, ?, ?)
            """,
            (str(uuid4()), follower_id, following_id, _utc_now()),
        )


def unfollow_user(*, follower_id: str, following_id: str) -> None:
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            "DELETE FROM user_follows WHERE follower_id = ? AND following_id = ?",
            (follower_id, following_id),
        )


def user_profile_summary(*, viewer_id: str, user_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        profile = conn.execute("SELECT * FROM profiles WHERE user_id = ?", (user_id,)).fetchone()
        if not profile:
            return None
        recipe_count = conn.execute(
            "SELECT COUNT(*) FROM community_recipes WHERE user_id = ? AND (is_public = 1 OR user_id = ?)",
            (user_id, viewer_id),
        ).fetchone()[0]
        follower_count = conn.execute(
            "SELECT COUNT(*) FROM user_follows WHERE following_id = ?", (user_id,)
        ).fetchone()[0]
        following_count = conn.execute(
            "SELECT COUNT(*) FROM user_follows WHERE follower_id = ?", (user_id,)
        ).fetchone()[0]
        is_following = conn.execute(
            "SELECT 1 FROM user_follows WHERE follower_id = ? AND following_id = ?",
            (viewer_id, user_id),
        ).fetchone() is not None
    return {
        "user_id": user_id,
        "full_name": profile["full_name"],
        "avatar_url": profile["avatar_url"],
        "recipe_count": int(recipe_count),
        "follower_count": int(follower_count),
        "following_count": int(following_count),
        "is_following": is_following,
    }


# ---------- collections ----------


def _row_to_collection(row: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(row)
    out["is_public"] = bool(out.get("is_public"))
    out["description"] = out.get("description") or ""
    out["recipe_count"] = int(out.get("recipe_count") or 0)
    return out


def list_collections(*, user_id: str, limit: int = 20, offset: int = 0) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            """
            SELECT c.*, (SELECT COUNT(*) FROM collection_recipes cr WHERE cr.collection_id = c.id) AS recipe_count
            FROM recipe_collections c
            WHERE c.user_id = ?
            ORDER BY c.created_at DESC LIMIT ? OFFSET ?
            """,
            (user_id, int(limit), int(offset)),
        ).fetchall()
        return [_row_to_collection(dict(r)) for r in rows]


def create_collection(*, user_id: str, name: str, description: str = "", is_public: bool = True) -> Dict[str, Any]:
    now = _utc_now()
    row = {
        "id": str(uuid4()),
        "user_id": user_id,
        "name": name.strip(),
        "description": description,
        "is_public": int(bool(is_public)),
        "created_at": now,
        "updated_at": now,
    }
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO recipe_collections (id, user_id, name, description, is_public, created_at, updated_at)
            VALUES (:id, :user_id, :name, :description, :is_public, :created_at, :updated_at)
            """,
            row,
        )
    return _row_to_collection(row)


def _owns_collection(conn, user_id: str, collection_id: str) -> bool:
    return conn.execute(
        "SELECT 1 FROM recipe_collections WHERE id = ? AND user_id = ?",
        (collection_id, user_id),
    ).fetchone() is not None


def add_recipe_to_collection(*, user_id: str, collection_id: str, recipe_id: str) -> bool:
    if not get_recipe(viewer_id=user_id, recipe_id=recipe_id):
        return False
    with db_conn(settings.app_db_path) as conn:
        if not _owns_collection(conn, user_id, collection_id):
            return False
        now = _utc_now()
        conn.execute(
            "INSERT OR IGNORE INTO collection_recipes (collection_id, recipe_id, created_at) VALUES (?, ?, ?)",
            (collection_id, recipe_id, now),
        )
        conn.execute("UPDATE recipe_collections SET updated_at = ? WHERE id = ?", (now, collection_id))
    return True


def remove_recipe_from_collection(*, user_id: str, collection_id: str, recipe_id: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        if not _owns_collection(conn, user_id, collection_id):
            return False
        conn.execute(
            "DELETE FROM collection_recipes WHERE collection_id = ? AND recipe_id = ?",
            (collection_id, recipe_id),
        )
        conn.execute("UPDATE recipe_collections SET updated_at = ? WHERE id = ?", (_utc_now(), collection_id))
    return True
