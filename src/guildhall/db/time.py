"""UTC helpers shared by models and response schemas.

Columns are declared ``DateTime(timezone=True)``. PostgreSQL returns aware
values, SQLite returns naive ones that are nonetheless UTC.
"""

from datetime import UTC, datetime


def utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
