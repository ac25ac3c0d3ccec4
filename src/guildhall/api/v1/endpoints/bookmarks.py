# src/guildhall/api/v1/endpoints/bookmarks.py
"""Bookmark toggles and the caller's bookmark list."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from guildhall.api.v1.dependencies import CurrentUserDep, PageDep, SessionDep
from guildhall.schemas.common import paginated, success
from guildhall.schemas.engagement import BookmarkStatus
from guildhall.schemas.post import PostResponse
from guildhall.services import engagement

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


@router.get("")
def list_bookmarks(db: SessionDep, params: PageDep, current_user: CurrentUserDep) -> dict[str, Any]:
    """Posts the caller bookmarked, most recently bookmarked first."""
    posts, total = engagement.post_bookmarks.posts_for_user(
        db, current_user.user_id, offset=params.offset, limit=params.limit
    )
    return paginated(
        "bookmarks",
        [PostResponse.model_validate(post) for post in posts],
        params,
        total,
        "Bookmarks retrieved successfully",
    )


@router.get("/{post_id}")
def bookmark_status(post_id: int, db: SessionDep, current_user: CurrentUserDep) -> dict[str, Any]:
    bookmarked = engagement.post_bookmarks.status(db, post_id, current_user.user_id)
    return success(BookmarkStatus(bookmarked=bookmarked), "Bookmark status retrieved successfully")


@router.post("/{post_id}")
def bookmark_post(post_id: int, db: SessionDep, current_user: CurrentUserDep) -> dict[str, Any]:
    engagement.bookmark_post(db, post_id, current_user)
    return success(BookmarkStatus(bookmarked=True), "Post bookmarked successfully")


@router.delete("/{post_id}")
def remove_bookmark(post_id: int, db: SessionDep, current_user: CurrentUserDep) -> dict[str, Any]:
    engagement.post_bookmarks.remove(db, post_id, current_user.user_id)
    return success(BookmarkStatus(bookmarked=False), "Bookmark removed successfully")
