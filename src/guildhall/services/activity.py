"""Best-effort activity logging."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from guildhall.models.activity import ActivityLog

logger = logging.getLogger(__name__)

ACTION_POST = "post"
ACTION_COMMENT = "comment"
ACTION_LIKE = "like"
ACTION_COMMENT_LIKE = "comment_like"
ACTION_BOOKMARK = "bookmark"
ACTION_REPORT = "report"


def record_activity(
    db: Session,
    user_id: int,
    action_type: str,
    target_type: str | None = None,
    target_id: int | None = None,
    details: dict[str, Any] | None = None,
) -> ActivityLog | None:
    """Write an activity row in its own commit.

    Runs after the operation it describes has committed; a failure here is
    logged and swallowed so the caller's result stands.
    """
    entry = ActivityLog(
        user_id=user_id,
        action_type=action_type,
        target_type=target_type,
        target_id=target_id,
        details=details,
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning(
            "Failed to record %s activity for user %s", action_type, user_id, exc_info=True
        )
        return None
    return entry
