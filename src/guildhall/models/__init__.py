# src/guildhall/models/__init__.py
"""SQLAlchemy models for the Guildhall application."""

from .activity import ActivityLog
from .comment import Comment
from .engagement import CommentLike, PostBookmark, PostLike
from .notification import Notification
from .post import Post
from .report import Report
from .user import Role, User, UserRole

__all__ = [
    "ActivityLog",
    "Comment",
    "CommentLike", "PostBookmark", "PostLike",
    "Notification",
    "Post",
    "Report",
    "Role", "User", "UserRole",
]
