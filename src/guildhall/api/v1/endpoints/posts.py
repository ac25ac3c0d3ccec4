# src/guildhall/api/v1/endpoints/posts.py
"""Post endpoints for the Guildhall API."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, status
from fastapi.encoders import jsonable_encoder

from guildhall.api.v1.dependencies import (
    CacheDep,
    CurrentUserDep,
    OptionalUserDep,
    PageDep,
    SessionDep,
)
from guildhall.repositories.post_repo import PostFilters
from guildhall.schemas.common import paginated, success
from guildhall.schemas.post import PostCreate, PostResponse, PostUpdate
from guildhall.services import content, engagement

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("")
def list_posts(
    db: SessionDep,
    cache: CacheDep,
    params: PageDep,
    category: str | None = Query(None, description="Filter by category"),
    game_id: int | None = Query(None, description="Filter by game"),
    search: str | None = Query(None, description="Search in title and content"),
    user_id: int | None = Query(None, description="Filter by author"),
) -> dict[str, Any]:
    """List live posts, pinned first, newest first.

    Soft-deleted posts are neither returned nor counted in the pagination
    totals.
    """
    filters = PostFilters(
        category=category, game_id=game_id, search=search, user_id=user_id
    )
    cache_key = f"{filters}:{params.page}:{params.limit}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    posts, total = content.list_posts(db, filters, offset=params.offset, limit=params.limit)
    body = jsonable_encoder(
        paginated(
            "posts",
            [PostResponse.model_validate(post) for post in posts],
            params,
            total,
            "Posts retrieved successfully",
        )
    )
    cache.set(cache_key, body)
    return body


@router.get("/{post_id}")
def get_post(post_id: int, db: SessionDep, current_user: OptionalUserDep) -> dict[str, Any]:
    post = content.get_post(db, post_id)
    content.record_view(db, post_id)
    db.refresh(post)
    data: dict[str, Any] = {"post": PostResponse.model_validate(post)}
    if current_user is not None:
        data["liked"] = engagement.post_likes.status(db, post_id, current_user.user_id)
        data["bookmarked"] = engagement.post_bookmarks.status(db, post_id, current_user.user_id)
    return success(data, "Post retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_post(
    payload: PostCreate, db: SessionDep, cache: CacheDep, current_user: CurrentUserDep
) -> dict[str, Any]:
    post = content.create_post(
        db,
        current_user,
        title=payload.title,
        content=payload.content,
        category=payload.category,
        game_id=payload.game_id,
        tags=payload.tags,
    )
    cache.invalidate()
    return success(PostResponse.model_validate(post), "Post created successfully")


@router.put("/{post_id}")
def update_post(
    post_id: int,
    payload: PostUpdate,
    db: SessionDep,
    cache: CacheDep,
    current_user: CurrentUserDep,
) -> dict[str, Any]:
    post = content.update_post(
        db,
        post_id,
        current_user,
        title=payload.title,
        content=payload.content,
        category=payload.category,
        game_id=payload.game_id,
        tags=payload.tags,
    )
    cache.invalidate()
    return success(PostResponse.model_validate(post), "Post updated successfully")


@router.delete("/{post_id}")
def delete_post(
    post_id: int, db: SessionDep, cache: CacheDep, current_user: CurrentUserDep
) -> dict[str, Any]:
    content.delete_post(db, post_id, current_user)
    cache.invalidate()
    return success(None, "Post deleted successfully")
