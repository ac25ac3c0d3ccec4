"""Paging and search helpers shared by the query builders."""
from __future__ import annotations

from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

LIKE_ESCAPE = "\\"


def count_rows(db: Session, stmt: Select[Any]) -> int:
    """Count the rows ``stmt`` would return, ignoring its ordering."""
    counted = select(func.count()).select_from(stmt.order_by(None).subquery())
    return int(db.execute(counted).scalar_one())


def fetch_page(db: Session, stmt: Select[Any], *, offset: int, limit: int) -> list[Any]:
    return list(db.execute(stmt.offset(offset).limit(limit)).unique().scalars())


def contains_pattern(term: str) -> str:
    """Substring LIKE pattern matching ``term`` literally, for use with ``escape=LIKE_ESCAPE``."""
    escaped = (
        term.strip()
        .replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
