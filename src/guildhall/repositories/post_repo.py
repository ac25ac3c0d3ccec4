"""Data access helpers for working with posts."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select, or_, select

from guildhall.models.post import Post
from guildhall.repositories.query import LIKE_ESCAPE, contains_pattern

__all__ = ["PostFilters", "build_post_query"]


@dataclass
class PostFilters:
    """Criteria for post listings.

    ``is_deleted`` selects one side of the soft-delete flag explicitly (admin
    listings); otherwise deleted posts are hidden unless ``include_deleted``.
    """

    category: str | None = None
    game_id: int | None = None
    search: str | None = None
    user_id: int | None = None
    is_pinned: bool | None = None
    is_deleted: bool | None = None
    include_deleted: bool = False
    pinned_first: bool = True


def build_post_query(filters: PostFilters) -> Select[Any]:
    """Return the ordered SELECT for ``filters``.

    The same statement backs both the page fetch and the total count, so
    the two can never disagree about which posts are visible.
    """
    stmt = select(Post)

    if filters.is_deleted is not None:
        stmt = stmt.where(Post.is_deleted.is_(filters.is_deleted))
    elif not filters.include_deleted:
        stmt = stmt.where(Post.is_deleted.is_(False))

    if filters.category:
        stmt = stmt.where(Post.category == filters.category)
    if filters.game_id is not None:
        stmt = stmt.where(Post.game_id == filters.game_id)
    if filters.user_id is not None:
        stmt = stmt.where(Post.user_id == filters.user_id)
    if filters.is_pinned is not None:
        stmt = stmt.where(Post.is_pinned.is_(filters.is_pinned))
    if filters.search:
        pattern = contains_pattern(filters.search)
        stmt = stmt.where(
            or_(
                Post.title.ilike(pattern, escape=LIKE_ESCAPE),
                Post.content.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )

    if filters.pinned_first:
        stmt = stmt.order_by(Post.is_pinned.desc(), Post.created_at.desc(), Post.id.desc())
    else:
        stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())
    return stmt
