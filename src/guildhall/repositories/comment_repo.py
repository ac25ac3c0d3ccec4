"""Data access helpers for comments."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select, select

from guildhall.models.comment import Comment
from guildhall.repositories.query import LIKE_ESCAPE, contains_pattern


@dataclass
class CommentFilters:
    post_id: int | None = None
    user_id: int | None = None
    search: str | None = None
    is_deleted: bool | None = False
    # Thread views read oldest first; admin and profile listings newest first.
    oldest_first: bool = False


def build_comment_query(filters: CommentFilters) -> Select[Any]:
    stmt = select(Comment)
    if filters.is_deleted is not None:
        stmt = stmt.where(Comment.is_deleted.is_(filters.is_deleted))
    if filters.post_id is not None:
        stmt = stmt.where(Comment.post_id == filters.post_id)
    if filters.user_id is not None:
        stmt = stmt.where(Comment.user_id == filters.user_id)
    if filters.search:
        pattern = contains_pattern(filters.search)
        stmt = stmt.where(Comment.content.ilike(pattern, escape=LIKE_ESCAPE))

    if filters.oldest_first:
        return stmt.order_by(Comment.created_at.asc(), Comment.id.asc())
    return stmt.order_by(Comment.created_at.desc(), Comment.id.desc())
