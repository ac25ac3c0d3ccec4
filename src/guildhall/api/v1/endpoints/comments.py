# src/guildhall/api/v1/endpoints/comments.py
"""Comment endpoints for the Guildhall API."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, status

from guildhall.api.v1.dependencies import CacheDep, CurrentUserDep, PageDep, SessionDep
from guildhall.core.errors import ValidationError
from guildhall.repositories.comment_repo import CommentFilters
from guildhall.schemas.comment import CommentCreate, CommentResponse, CommentUpdate
from guildhall.schemas.common import paginated, success
from guildhall.services import content

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("")
def list_comments(
    db: SessionDep,
    params: PageDep,
    post_id: int | None = Query(None, description="Post whose comments to list"),
) -> dict[str, Any]:
    """List the live comments of a post, oldest first."""
    if post_id is None:
        raise ValidationError("post_id parameter is required")
    content.get_post(db, post_id)
    comments, total = content.list_comments(
        db,
        CommentFilters(post_id=post_id, oldest_first=True),
        offset=params.offset,
        limit=params.limit,
    )
    return paginated(
        "comments",
        [CommentResponse.model_validate(comment) for comment in comments],
        params,
        total,
        "Comments retrieved successfully",
    )


@router.get("/{comment_id}")
def get_comment(comment_id: int, db: SessionDep) -> dict[str, Any]:
    comment = content.get_comment(db, comment_id)
    return success(CommentResponse.model_validate(comment), "Comment retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_comment(
    payload: CommentCreate, db: SessionDep, cache: CacheDep, current_user: CurrentUserDep
) -> dict[str, Any]:
    comment = content.create_comment(
        db,
        current_user,
        post_id=payload.post_id,
        content=payload.content,
        parent_comment_id=payload.parent_comment_id,
    )
    cache.invalidate()
    return success(CommentResponse.model_validate(comment), "Comment created successfully")


@router.put("/{comment_id}")
def update_comment(
    comment_id: int,
    payload: CommentUpdate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> dict[str, Any]:
    comment = content.update_comment(db, comment_id, current_user, content=payload.content)
    return success(CommentResponse.model_validate(comment), "Comment updated successfully")


@router.delete("/{comment_id}")
def delete_comment(
    comment_id: int, db: SessionDep, cache: CacheDep, current_user: CurrentUserDep
) -> dict[str, Any]:
    content.delete_comment(db, comment_id, current_user)
    cache.invalidate()
    return success(None, "Comment deleted successfully")
