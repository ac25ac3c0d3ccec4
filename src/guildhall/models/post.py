# src/guildhall/models/post.py
"""SQLAlchemy model for community posts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from guildhall.db.session import Base
from guildhall.db.time import utcnow
from guildhall.models.user import User

POST_CATEGORIES = ("discussion", "guide", "news", "question", "humor", "fanart")
DEFAULT_CATEGORY = "discussion"


class Post(Base):
    """Top-level content entity.

    ``like_count`` and ``comment_count`` are denormalized counters kept in
    step with the like rows and non-deleted comments by the services that
    mutate them. Deletion is soft: the row stays for moderation history.
    """

    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_listing", "is_deleted", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False, default=DEFAULT_CATEGORY)
    # Game catalog lives outside this service; the id is stored as-is.
    game_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    is_pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    author: Mapped[User] = relationship("User", lazy="joined")
