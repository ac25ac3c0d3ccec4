"""Comment-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict

from guildhall.schemas.common import UTCDateTime
from guildhall.schemas.post import AuthorSummary


class CommentCreate(BaseModel):
    post_id: int | None = None
    content: str | None = None
    parent_comment_id: int | None = None


class CommentUpdate(BaseModel):
    content: str | None = None


class CommentResponse(BaseModel):
    """Schema for comment information returned by the API."""

    id: int
    post_id: int
    user_id: int
    author: AuthorSummary | None = None
    parent_comment_id: int | None
    content: str
    like_count: int
    is_deleted: bool
    deleted_at: UTCDateTime | None
    created_at: UTCDateTime
    updated_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)
