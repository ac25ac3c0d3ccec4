"""Pydantic schemas for API request/response models."""

from .comment import CommentCreate, CommentResponse, CommentUpdate
from .common import PageParams, Pagination, paginated, success
from .engagement import BookmarkStatus, LikeStatus
from .notification import ActivityResponse, NotificationResponse
from .post import AdminPostUpdate, AuthorSummary, PostCreate, PostResponse, PostUpdate
from .report import ReportCreate, ReportDetail, ReportedItem, ReportResolve, ReportResponse
from .upload import UploadedImageResponse
from .user import (
    AdminUserUpdate,
    AuthResponse,
    ProfileResponse,
    ProfileStats,
    ProfileUpdate,
    UserLogin,
    UserRegister,
    UserResponse,
)

__all__ = [
    "ActivityResponse",
    "AdminPostUpdate",
    "AdminUserUpdate",
    "AuthResponse",
    "AuthorSummary",
    "BookmarkStatus",
    "CommentCreate",
    "CommentResponse",
    "CommentUpdate",
    "LikeStatus",
    "NotificationResponse",
    "PageParams",
    "Pagination",
    "PostCreate",
    "PostResponse",
    "PostUpdate",
    "ProfileResponse",
    "ProfileStats",
    "ProfileUpdate",
    "ReportCreate",
    "ReportDetail",
    "ReportResolve",
    "ReportResponse",
    "ReportedItem",
    "UploadedImageResponse",
    "UserLogin",
    "UserRegister",
    "UserResponse",
    "paginated",
    "success",
]
