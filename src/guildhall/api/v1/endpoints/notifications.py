# src/guildhall/api/v1/endpoints/notifications.py
"""Notification inbox endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query

from guildhall.api.v1.dependencies import CurrentUserDep, PageDep, SessionDep
from guildhall.schemas.common import paginated, success
from guildhall.schemas.notification import NotificationResponse
from guildhall.services import notifications

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("")
def list_notifications(
    db: SessionDep,
    params: PageDep,
    current_user: CurrentUserDep,
    unread_only: bool = Query(False),
) -> dict[str, Any]:
    items, total, unread = notifications.list_notifications(
        db,
        current_user.user_id,
        offset=params.offset,
        limit=params.limit,
        unread_only=unread_only,
    )
    return paginated(
        "notifications",
        [NotificationResponse.model_validate(item) for item in items],
        params,
        total,
        "Notifications retrieved successfully",
        unread_count=unread,
    )


# Declared before the "{notification_id}" routes so "read-all" is not parsed as an id.
@router.put("/read-all")
def mark_all_read(db: SessionDep, current_user: CurrentUserDep) -> dict[str, Any]:
    updated = notifications.mark_all_read(db, current_user.user_id)
    return success({"updated": updated}, "All notifications marked as read")


@router.put("/{notification_id}/read")
def mark_read(notification_id: int, db: SessionDep, current_user: CurrentUserDep) -> dict[str, Any]:
    item = notifications.mark_read(db, notification_id, current_user.user_id)
    return success(NotificationResponse.model_validate(item), "Notification marked as read")


@router.delete("/{notification_id}")
def delete_notification(
    notification_id: int, db: SessionDep, current_user: CurrentUserDep
) -> dict[str, Any]:
    notifications.delete_notification(db, notification_id, current_user.user_id)
    return success(None, "Notification deleted")
