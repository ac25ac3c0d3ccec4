# src/guildhall/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .auth import router as auth_router
from .bookmarks import router as bookmarks_router
from .comments import router as comments_router
from .likes import comment_likes_router, post_likes_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .profile import router as profile_router
from .reports import router as reports_router
from .upload import router as upload_router

__all__ = [
    "admin_router",
    "auth_router",
    "bookmarks_router",
    "comment_likes_router",
    "comments_router",
    "notifications_router",
    "post_likes_router",
    "posts_router",
    "profile_router",
    "reports_router",
    "upload_router",
]
