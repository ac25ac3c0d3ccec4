"""Data access helpers for accounts."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select, or_, select

from guildhall.models.user import User
from guildhall.repositories.query import LIKE_ESCAPE, contains_pattern


@dataclass
class UserFilters:
    search: str | None = None
    is_active: bool | None = None


def build_user_query(filters: UserFilters) -> Select[Any]:
    stmt = select(User)
    if filters.is_active is not None:
        stmt = stmt.where(User.is_active.is_(filters.is_active))
    if filters.search:
        pattern = contains_pattern(filters.search)
        stmt = stmt.where(
            or_(
                User.username.ilike(pattern, escape=LIKE_ESCAPE),
                User.email.ilike(pattern, escape=LIKE_ESCAPE),
                User.display_name.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )
    return stmt.order_by(User.created_at.desc(), User.id.desc())
