"""Notification and activity log schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict

from guildhall.schemas.common import UTCDateTime


class NotificationResponse(BaseModel):
    id: int
    type: str
    title: str
    message: str | None
    link: str | None
    is_read: bool
    created_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)


class ActivityResponse(BaseModel):
    id: int
    user_id: int
    action_type: str
    target_type: str | None
    target_id: int | None
    details: dict[str, Any] | None
    created_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)
