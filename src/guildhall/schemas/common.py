"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

import math
from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, Field

from guildhall.db.time import ensure_utc

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Timestamps always leave the API with an explicit UTC offset.
UTCDateTime = Annotated[datetime, AfterValidator(ensure_utc)]


class Pagination(BaseModel):
    """Pagination block returned alongside list payloads."""

    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> Pagination:
        return cls(
            current_page=page,
            total_pages=math.ceil(total / limit) if limit else 0,
            total_items=total,
            items_per_page=limit,
        )


class PageParams(BaseModel):
    """Clamped page/limit pair."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    @classmethod
    def clamp(cls, page: int | None, limit: int | None) -> PageParams:
        """Pull out-of-range values back into range instead of rejecting them."""
        page = max(1, page or 1)
        limit = DEFAULT_PAGE_SIZE if limit is None else min(MAX_PAGE_SIZE, max(1, limit))
        return cls(page=page, limit=limit)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def success(data: Any = None, message: str = "Success") -> dict[str, Any]:
    """Wrap ``data`` in the success envelope."""
    return {"success": True, "data": data, "message": message}


def paginated(
    key: str,
    items: list[Any],
    params: PageParams,
    total: int,
    message: str = "Success",
    **extra: Any,
) -> dict[str, Any]:
    """Success envelope for a page of ``items`` stored under ``key``."""
    data: dict[str, Any] = {
        key: items,
        "pagination": Pagination.build(params.page, params.limit, total),
    }
    data.update(extra)
    return success(data, message)
