# src/guildhall/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    auth_router,
    bookmarks_router,
    comment_likes_router,
    comments_router,
    notifications_router,
    post_likes_router,
    posts_router,
    profile_router,
    reports_router,
    upload_router,
)

__all__ = [
    "auth_router",
    "posts_router",
    "comments_router",
    "post_likes_router",
    "comment_likes_router",
    "bookmarks_router",
    "reports_router",
    "profile_router",
    "notifications_router",
    "upload_router",
    "admin_router",
]
