"""Post-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from guildhall.schemas.common import UTCDateTime


class PostCreate(BaseModel):
    """Schema for creating a new post.

    Length and category rules live in the content service so that they
    surface as 400 responses like every other content validation error.
    """

    title: str | None = None
    content: str | None = None
    category: str | None = None
    game_id: int | None = None
    tags: list[str] = Field(default_factory=list)


class PostUpdate(PostCreate):
    """Schema for replacing the editable fields of a post."""


class AdminPostUpdate(BaseModel):
    is_pinned: bool | None = None
    is_locked: bool | None = None
    is_deleted: bool | None = None
    category: str | None = None


class AuthorSummary(BaseModel):
    id: int
    username: str
    display_name: str | None
    avatar_url: str | None

    model_config = ConfigDict(from_attributes=True)


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    user_id: int
    author: AuthorSummary | None = None
    title: str
    content: str
    category: str
    game_id: int | None
    tags: list[str]
    is_pinned: bool
    is_locked: bool
    view_count: int
    like_count: int
    comment_count: int
    is_deleted: bool
    deleted_at: UTCDateTime | None
    created_at: UTCDateTime
    updated_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("tags", mode="before")
    @classmethod
    def _default_tags(cls, value: object) -> object:
        return [] if value is None else value
