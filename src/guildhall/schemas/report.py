"""Report and moderation Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field

from guildhall.schemas.common import UTCDateTime


class ReportCreate(BaseModel):
    """Report submission. Type and reason rules are enforced by the moderation service."""

    reported_type: str | None = None
    reported_id: int | None = None
    reason: str | None = Field(None, max_length=100)
    description: str | None = None


class ReportResolve(BaseModel):
    status: str | None = None


class ReportedItem(BaseModel):
    """Summary of the reported post or comment, deleted or not."""

    id: int
    type: str
    user_id: int
    title: str | None = None
    content: str
    post_id: int | None = None
    is_deleted: bool


class ReportResponse(BaseModel):
    id: int
    reporter_user_id: int
    reported_type: str
    reported_id: int
    reason: str
    description: str | None
    status: str
    reviewed_by: int | None
    reviewed_at: UTCDateTime | None
    created_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)


class ReportDetail(ReportResponse):
    reporter_username: str | None = None
    reviewer_username: str | None = None
    reported_item: ReportedItem | None = None
