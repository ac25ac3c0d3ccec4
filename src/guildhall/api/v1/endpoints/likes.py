# src/guildhall/api/v1/endpoints/likes.py
"""Like toggles for posts and comments."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from sqlalchemy.orm import Session

from guildhall.api.v1.dependencies import CacheDep, CurrentUserDep, SessionDep
from guildhall.schemas.common import success
from guildhall.schemas.engagement import LikeStatus
from guildhall.services import engagement

post_likes_router = APIRouter(prefix="/post-likes", tags=["likes"])
comment_likes_router = APIRouter(prefix="/comment-likes", tags=["likes"])


def _status(
    ledger: engagement.EngagementLedger, db: Session, target_id: int, liked: bool
) -> LikeStatus:
    return LikeStatus(liked=liked, like_count=ledger.count(db, target_id))


@post_likes_router.get("/{post_id}")
def post_like_status(post_id: int, db: SessionDep, current_user: CurrentUserDep) -> dict[str, Any]:
    liked = engagement.post_likes.status(db, post_id, current_user.user_id)
    return success(
        _status(engagement.post_likes, db, post_id, liked), "Like status retrieved successfully"
    )


@post_likes_router.post("/{post_id}")
def like_post(
    post_id: int, db: SessionDep, cache: CacheDep, current_user: CurrentUserDep
) -> dict[str, Any]:
    engagement.like_post(db, post_id, current_user)
    cache.invalidate()
    return success(_status(engagement.post_likes, db, post_id, True), "Post liked successfully")


@post_likes_router.delete("/{post_id}")
def unlike_post(
    post_id: int, db: SessionDep, cache: CacheDep, current_user: CurrentUserDep
) -> dict[str, Any]:
    engagement.post_likes.remove(db, post_id, current_user.user_id)
    cache.invalidate()
    return success(_status(engagement.post_likes, db, post_id, False), "Post unliked successfully")


@comment_likes_router.get("/{comment_id}")
def comment_like_status(
    comment_id: int, db: SessionDep, current_user: CurrentUserDep
) -> dict[str, Any]:
    liked = engagement.comment_likes.status(db, comment_id, current_user.user_id)
    return success(
        _status(engagement.comment_likes, db, comment_id, liked),
        "Like status retrieved successfully",
    )


@comment_likes_router.post("/{comment_id}")
def like_comment(
    comment_id: int, db: SessionDep, cache: CacheDep, current_user: CurrentUserDep
) -> dict[str, Any]:
    engagement.like_comment(db, comment_id, current_user)
    cache.invalidate()
    return success(
        _status(engagement.comment_likes, db, comment_id, True), "Comment liked successfully"
    )


@comment_likes_router.delete("/{comment_id}")
def unlike_comment(
    comment_id: int, db: SessionDep, cache: CacheDep, current_user: CurrentUserDep
) -> dict[str, Any]:
    engagement.comment_likes.remove(db, comment_id, current_user.user_id)
    cache.invalidate()
    return success(
        _status(engagement.comment_likes, db, comment_id, False), "Comment unliked successfully"
    )
