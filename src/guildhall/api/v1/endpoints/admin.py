# src/guildhall/api/v1/endpoints/admin.py
"""Administrative endpoints. Every route requires the admin or super_admin role."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select

from guildhall.api.v1.dependencies import (
    AdminUserDep,
    CacheDep,
    PageDep,
    SessionDep,
    require_admin,
)
from guildhall.api.v1.endpoints.reports import list_reports_page, report_detail, resolve_report
from guildhall.models.activity import ActivityLog
from guildhall.repositories.comment_repo import CommentFilters
from guildhall.repositories.post_repo import PostFilters
from guildhall.repositories.query import count_rows, fetch_page
from guildhall.repositories.report_repo import ReportFilters
from guildhall.repositories.user_repo import UserFilters
from guildhall.schemas.comment import CommentResponse
from guildhall.schemas.common import paginated, success
from guildhall.schemas.notification import ActivityResponse
from guildhall.schemas.post import AdminPostUpdate, PostResponse
from guildhall.schemas.report import ReportResolve
from guildhall.schemas.user import AdminUserUpdate, ProfileStats, UserResponse
from guildhall.services import accounts, content, moderation

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# --- users -------------------------------------------------------------------------


@router.get("/users")
def list_users(
    db: SessionDep,
    params: PageDep,
    search: str | None = Query(None),
    is_active: bool | None = Query(None),
) -> dict[str, Any]:
    users, total = accounts.list_users(
        db,
        UserFilters(search=search, is_active=is_active),
        offset=params.offset,
        limit=params.limit,
    )
    return paginated("users", [UserResponse.model_validate(u) for u in users], params, total)


@router.get("/users/{user_id}")
def get_user(user_id: int, db: SessionDep) -> dict[str, Any]:
    user = accounts.get_user(db, user_id)
    stats = accounts.profile_stats(db, user.id)
    return success(
        {
            "user": UserResponse.model_validate(user),
            "stats": ProfileStats.model_validate(stats, from_attributes=True),
        }
    )


@router.put("/users/{user_id}")
def update_user(user_id: int, payload: AdminUserUpdate, db: SessionDep) -> dict[str, Any]:
    """Update an account; new roles reach the user's token at their next login."""
    user = accounts.admin_update_user(
        db,
        user_id,
        is_active=payload.is_active,
        display_name=payload.display_name,
        bio=payload.bio,
        roles=payload.roles,
    )
    return success(UserResponse.model_validate(user), "User updated successfully")


@router.delete("/users/{user_id}")
def deactivate_user(user_id: int, db: SessionDep) -> dict[str, Any]:
    accounts.deactivate_user(db, user_id)
    return success(None, "User deactivated successfully")


# --- posts -------------------------------------------------------------------------


@router.get("/posts")
def list_posts(
    db: SessionDep,
    params: PageDep,
    search: str | None = Query(None),
    category: str | None = Query(None),
    is_deleted: bool = Query(False),
    is_pinned: bool | None = Query(None),
) -> dict[str, Any]:
    posts, total = content.list_posts(
        db,
        PostFilters(
            search=search,
            category=category,
            is_deleted=is_deleted,
            is_pinned=is_pinned,
            pinned_first=False,
        ),
        offset=params.offset,
        limit=params.limit,
    )
    return paginated("posts", [PostResponse.model_validate(p) for p in posts], params, total)


@router.get("/posts/{post_id}")
def get_post(post_id: int, db: SessionDep) -> dict[str, Any]:
    post = content.get_post(db, post_id, include_deleted=True)
    return success(PostResponse.model_validate(post))


@router.put("/posts/{post_id}")
def update_post(
    post_id: int, payload: AdminPostUpdate, db: SessionDep, cache: CacheDep
) -> dict[str, Any]:
    post = content.admin_update_post(
        db,
        post_id,
        is_pinned=payload.is_pinned,
        is_locked=payload.is_locked,
        is_deleted=payload.is_deleted,
        category=payload.category,
    )
    cache.invalidate()
    return success(PostResponse.model_validate(post), "Post updated successfully")


@router.delete("/posts/{post_id}")
def delete_post(post_id: int, db: SessionDep, cache: CacheDep) -> dict[str, Any]:
    content.remove_post(db, post_id)
    cache.invalidate()
    return success(None, "Post deleted successfully")


# --- comments ----------------------------------------------------------------------


@router.get("/comments")
def list_comments(
    db: SessionDep,
    params: PageDep,
    search: str | None = Query(None),
    post_id: int | None = Query(None),
    is_deleted: bool = Query(False),
) -> dict[str, Any]:
    comments, total = content.list_comments(
        db,
        CommentFilters(search=search, post_id=post_id, is_deleted=is_deleted),
        offset=params.offset,
        limit=params.limit,
    )
    return paginated(
        "comments", [CommentResponse.model_validate(c) for c in comments], params, total
    )


@router.get("/comments/{comment_id}")
def get_comment(comment_id: int, db: SessionDep) -> dict[str, Any]:
    comment = content.get_comment(db, comment_id, include_deleted=True)
    return success(CommentResponse.model_validate(comment))


@router.delete("/comments/{comment_id}")
def delete_comment(comment_id: int, db: SessionDep, cache: CacheDep) -> dict[str, Any]:
    content.remove_comment(db, comment_id)
    cache.invalidate()
    return success(None, "Comment deleted successfully")


# --- reports -----------------------------------------------------------------------


@router.get("/reports")
def list_reports(
    db: SessionDep,
    params: PageDep,
    status_filter: str | None = Query(None, alias="status"),
    reported_type: str | None = Query(None),
) -> dict[str, Any]:
    return list_reports_page(
        db, params, ReportFilters(status=status_filter, reported_type=reported_type)
    )


@router.get("/reports/{report_id}")
def get_report(report_id: int, db: SessionDep) -> dict[str, Any]:
    return success(report_detail(db, moderation.get(db, report_id)))


@router.put("/reports/{report_id}")
def update_report(
    report_id: int,
    payload: ReportResolve,
    db: SessionDep,
    cache: CacheDep,
    admin: AdminUserDep,
) -> dict[str, Any]:
    return resolve_report(db, cache, report_id, payload.status, admin.user_id)


@router.delete("/reports/{report_id}")
def delete_report(report_id: int, db: SessionDep) -> dict[str, Any]:
    moderation.delete(db, report_id)
    return success(None, "Report deleted successfully")


# --- activity ----------------------------------------------------------------------


@router.get("/activity")
def list_activity(
    db: SessionDep,
    params: PageDep,
    action_type: str | None = Query(None),
    user_id: int | None = Query(None),
) -> dict[str, Any]:
    stmt = select(ActivityLog)
    if action_type:
        stmt = stmt.where(ActivityLog.action_type == action_type)
    if user_id is not None:
        stmt = stmt.where(ActivityLog.user_id == user_id)
    stmt = stmt.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
    entries = fetch_page(db, stmt, offset=params.offset, limit=params.limit)
    return paginated(
        "activities",
        [ActivityResponse.model_validate(entry) for entry in entries],
        params,
        count_rows(db, stmt),
    )
