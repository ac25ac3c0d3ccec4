"""Like and bookmark response schemas."""

from pydantic import BaseModel


class LikeStatus(BaseModel):
    liked: bool
    like_count: int


class BookmarkStatus(BaseModel):
    bookmarked: bool
