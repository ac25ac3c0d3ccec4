# src/guildhall/api/v1/endpoints/profile.py
"""The caller's own profile and content."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter

from guildhall.api.v1.dependencies import CurrentUserDep, PageDep, SessionDep
from guildhall.repositories.comment_repo import CommentFilters
from guildhall.repositories.post_repo import PostFilters
from guildhall.repositories.report_repo import ReportFilters
from guildhall.schemas.comment import CommentResponse
from guildhall.schemas.common import paginated, success
from guildhall.schemas.post import PostResponse
from guildhall.schemas.report import ReportResponse
from guildhall.schemas.user import ProfileResponse, ProfileStats, ProfileUpdate, UserResponse
from guildhall.services import accounts, content, engagement, moderation

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("")
def get_profile(db: SessionDep, current_user: CurrentUserDep) -> dict[str, Any]:
    user = accounts.get_user(db, current_user.user_id)
    stats = accounts.profile_stats(db, user.id)
    body = ProfileResponse(
        user=UserResponse.model_validate(user), stats=ProfileStats(**asdict(stats))
    )
    return success(body, "Profile retrieved successfully")


@router.put("")
def update_profile(
    payload: ProfileUpdate, db: SessionDep, current_user: CurrentUserDep
) -> dict[str, Any]:
    user = accounts.get_user(db, current_user.user_id)
    user = accounts.update_profile(
        db,
        user,
        display_name=payload.display_name,
        bio=payload.bio,
        avatar_url=payload.avatar_url,
    )
    return success(UserResponse.model_validate(user), "Profile updated successfully")


@router.get("/posts")
def my_posts(db: SessionDep, params: PageDep, current_user: CurrentUserDep) -> dict[str, Any]:
    posts, total = content.list_posts(
        db,
        PostFilters(user_id=current_user.user_id, pinned_first=False),
        offset=params.offset,
        limit=params.limit,
    )
    return paginated("posts", [PostResponse.model_validate(p) for p in posts], params, total)


@router.get("/comments")
def my_comments(db: SessionDep, params: PageDep, current_user: CurrentUserDep) -> dict[str, Any]:
    comments, total = content.list_comments(
        db,
        CommentFilters(user_id=current_user.user_id),
        offset=params.offset,
        limit=params.limit,
    )
    return paginated(
        "comments", [CommentResponse.model_validate(c) for c in comments], params, total
    )


@router.get("/likes")
def my_likes(db: SessionDep, params: PageDep, current_user: CurrentUserDep) -> dict[str, Any]:
    posts, total = engagement.post_likes.posts_for_user(
        db, current_user.user_id, offset=params.offset, limit=params.limit
    )
    return paginated("posts", [PostResponse.model_validate(p) for p in posts], params, total)


@router.get("/reports")
def my_reports(db: SessionDep, params: PageDep, current_user: CurrentUserDep) -> dict[str, Any]:
    reports, total = moderation.list_reports(
        db,
        ReportFilters(reporter_user_id=current_user.user_id),
        offset=params.offset,
        limit=params.limit,
    )
    return paginated(
        "reports", [ReportResponse.model_validate(r) for r in reports], params, total
    )
