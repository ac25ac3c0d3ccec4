"""Lifecycle of posts and comments: validation, ownership, soft delete and counters.

Deletion is always soft. Mutations that touch a counter on another row
(comment create/delete and ``comment_count``) happen in the same
transaction as the row change and are rolled back together.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import case, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from guildhall.core.errors import NotFoundError, StorageError, ValidationError
from guildhall.core.security import TokenClaims
from guildhall.db.time import utcnow
from guildhall.models.comment import Comment
from guildhall.models.post import DEFAULT_CATEGORY, POST_CATEGORIES, Post
from guildhall.repositories.comment_repo import CommentFilters, build_comment_query
from guildhall.repositories.post_repo import PostFilters, build_post_query
from guildhall.repositories.query import count_rows, fetch_page
from guildhall.services import activity, notifications
from guildhall.services.access import ensure_can_modify

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200
MAX_POST_CONTENT_LENGTH = 50_000
MAX_COMMENT_LENGTH = 5_000


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to %s", action, exc_info=True)
        raise StorageError(f"Failed to {action}") from exc


def decrement_floored(column: Any) -> Any:
    """SQL expression for ``column - 1`` that never goes below zero."""
    return case((column > 0, column - 1), else_=0)


# --- posts -----------------------------------------------------------------------


def validate_post_fields(
    title: str | None,
    content: str | None,
    category: str | None,
    tags: Iterable[str] | None = None,
) -> dict[str, Any]:
    """Normalize and check the editable fields of a post.

    Raises:
        ValidationError: On a missing title/content, an over-long field or an
            unknown category.
    """
    title = (title or "").strip()
    content = (content or "").strip()
    if not title or not content:
        raise ValidationError("Title and content are required")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Title is too long (max {MAX_TITLE_LENGTH} characters)")
    if len(content) > MAX_POST_CONTENT_LENGTH:
        raise ValidationError(
            f"Content is too long (max {MAX_POST_CONTENT_LENGTH} characters)"
        )
    category = category or DEFAULT_CATEGORY
    if category not in POST_CATEGORIES:
        raise ValidationError("Invalid category")
    cleaned_tags = [tag.strip() for tag in (tags or []) if tag and tag.strip()]
    return {"title": title, "content": content, "category": category, "tags": cleaned_tags}


def get_post(db: Session, post_id: int, *, include_deleted: bool = False) -> Post:
    post = db.get(Post, post_id)
    if post is None or (post.is_deleted and not include_deleted):
        raise NotFoundError("Post not found")
    return post


def list_posts(
    db: Session, filters: PostFilters, *, offset: int, limit: int
) -> tuple[list[Post], int]:
    """Return one page of posts matching ``filters`` and the matching total."""
    stmt = build_post_query(filters)
    return fetch_page(db, stmt, offset=offset, limit=limit), count_rows(db, stmt)


def create_post(
    db: Session,
    author: TokenClaims,
    *,
    title: str | None,
    content: str | None,
    category: str | None = None,
    game_id: int | None = None,
    tags: Iterable[str] | None = None,
) -> Post:
    fields = validate_post_fields(title, content, category, tags)
    post = Post(user_id=author.user_id, game_id=game_id, **fields)
    db.add(post)
    _commit(db, "create post")
    logger.info("User %s created post %s", author.user_id, post.id)
    activity.record_activity(
        db, author.user_id, activity.ACTION_POST, "post", post.id, {"title": post.title}
    )
    return post


def update_post(
    db: Session,
    post_id: int,
    user: TokenClaims,
    *,
    title: str | None,
    content: str | None,
    category: str | None = None,
    game_id: int | None = None,
    tags: Iterable[str] | None = None,
) -> Post:
    post = get_post(db, post_id)
    ensure_can_modify(post.user_id, user, "You do not have permission to edit this post")
    fields = validate_post_fields(title, content, category, tags)
    for name, value in fields.items():
        setattr(post, name, value)
    post.game_id = game_id
    _commit(db, "update post")
    return post


def soft_delete_post(post: Post) -> bool:
    """Flag ``post`` deleted within the caller's transaction.

    Returns False when it was already deleted, in which case nothing changes.
    """
    if post.is_deleted:
        return False
    post.is_deleted = True
    post.deleted_at = utcnow()
    return True


def delete_post(db: Session, post_id: int, user: TokenClaims) -> Post:
    post = get_post(db, post_id)
    ensure_can_modify(post.user_id, user, "You do not have permission to delete this post")
    soft_delete_post(post)
    _commit(db, "delete post")
    logger.info("User %s deleted post %s", user.user_id, post.id)
    return post


def record_view(db: Session, post_id: int) -> None:
    """Increment the view counter in its own transaction. Best effort."""
    try:
        db.execute(
            update(Post)
            .where(Post.id == post_id)
            # Counters are not edits; keep updated_at.
            .values(view_count=Post.view_count + 1, updated_at=Post.updated_at)
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Failed to increment view count for post %s", post_id, exc_info=True)


# --- comments --------------------------------------------------------------------


def validate_comment_content(content: str | None) -> str:
    content = (content or "").strip()
    if not content:
        raise ValidationError("Content is required")
    if len(content) > MAX_COMMENT_LENGTH:
        raise ValidationError(f"Content is too long (max {MAX_COMMENT_LENGTH} characters)")
    return content


def get_comment(db: Session, comment_id: int, *, include_deleted: bool = False) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None or (comment.is_deleted and not include_deleted):
        raise NotFoundError("Comment not found")
    return comment


def list_comments(
    db: Session, filters: CommentFilters, *, offset: int, limit: int
) -> tuple[list[Comment], int]:
    stmt = build_comment_query(filters)
    return fetch_page(db, stmt, offset=offset, limit=limit), count_rows(db, stmt)


def _bump_comment_count(db: Session, post_id: int, delta: int) -> None:
    value = Post.comment_count + 1 if delta > 0 else decrement_floored(Post.comment_count)
    db.execute(
        update(Post)
        .where(Post.id == post_id)
        .values(comment_count=value, updated_at=Post.updated_at)
        .execution_options(synchronize_session=False)
    )
    post = db.get(Post, post_id)
    if post is not None:
        db.expire(post, ["comment_count"])


def create_comment(
    db: Session,
    author: TokenClaims,
    *,
    post_id: int | None,
    content: str | None,
    parent_comment_id: int | None = None,
) -> Comment:
    """Create a comment and bump the post's ``comment_count`` atomically.

    Raises:
        ValidationError: Missing post id or content, content too long, or a
            parent comment from another post.
        NotFoundError: The post or the parent comment does not exist.
    """
    if post_id is None:
        raise ValidationError("post_id is required")
    content = validate_comment_content(content)
    post = get_post(db, post_id)

    if parent_comment_id is not None:
        parent = db.get(Comment, parent_comment_id)
        if parent is None:
            raise NotFoundError("Parent comment not found")
        if parent.post_id != post.id:
            raise ValidationError("Parent comment does not belong to the same post")

    comment = Comment(
        post_id=post.id,
        user_id=author.user_id,
        parent_comment_id=parent_comment_id,
        content=content,
    )
    try:
        db.add(comment)
        db.flush()
        _bump_comment_count(db, post.id, +1)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to create comment on post %s", post_id, exc_info=True)
        raise StorageError("Failed to create comment") from exc

    if post.user_id != author.user_id:
        notifications.notify_comment(db, post.user_id, author.username, post.id, post.title)
    activity.record_activity(
        db, author.user_id, activity.ACTION_COMMENT, "comment", comment.id, {"post_id": post.id}
    )
    return comment


def update_comment(
    db: Session, comment_id: int, user: TokenClaims, *, content: str | None
) -> Comment:
    comment = get_comment(db, comment_id)
    ensure_can_modify(comment.user_id, user, "You do not have permission to edit this comment")
    comment.content = validate_comment_content(content)
    _commit(db, "update comment")
    return comment


def soft_delete_comment(db: Session, comment: Comment) -> bool:
    """Flag ``comment`` deleted and decrement its post's counter, within the caller's transaction.

    Replies are left untouched. Returns False when it was already deleted.
    """
    if comment.is_deleted:
        return False
    comment.is_deleted = True
    comment.deleted_at = utcnow()
    _bump_comment_count(db, comment.post_id, -1)
    return True


def delete_comment(db: Session, comment_id: int, user: TokenClaims) -> Comment:
    comment = get_comment(db, comment_id)
    ensure_can_modify(comment.user_id, user, "You do not have permission to delete this comment")
    try:
        soft_delete_comment(db, comment)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to delete comment %s", comment_id, exc_info=True)
        raise StorageError("Failed to delete comment") from exc
    return comment


# --- moderation-side operations -----------------------------------------------------


def admin_update_post(
    db: Session,
    post_id: int,
    *,
    is_pinned: bool | None = None,
    is_locked: bool | None = None,
    is_deleted: bool | None = None,
    category: str | None = None,
) -> Post:
    """Apply moderator flags to any post, deleted or not.

    Raises:
        ValidationError: Nothing to update or an unknown category.
        NotFoundError: Unknown post.
    """
    if is_pinned is None and is_locked is None and is_deleted is None and category is None:
        raise ValidationError("No data to update")
    if category is not None and category not in POST_CATEGORIES:
        raise ValidationError("Invalid category")
    post = get_post(db, post_id, include_deleted=True)
    if is_pinned is not None:
        post.is_pinned = is_pinned
    if is_locked is not None:
        post.is_locked = is_locked
    if category is not None:
        post.category = category
    if is_deleted is True:
        soft_delete_post(post)
    elif is_deleted is False and post.is_deleted:
        post.is_deleted = False
        post.deleted_at = None
    _commit(db, "update post")
    return post


def remove_post(db: Session, post_id: int) -> Post:
    """Soft-delete any post without an ownership check."""
    post = get_post(db, post_id, include_deleted=True)
    soft_delete_post(post)
    _commit(db, "delete post")
    return post


def remove_comment(db: Session, comment_id: int) -> Comment:
    """Soft-delete any comment without an ownership check."""
    comment = get_comment(db, comment_id, include_deleted=True)
    try:
        soft_delete_comment(db, comment)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to delete comment %s", comment_id, exc_info=True)
        raise StorageError("Failed to delete comment") from exc
    return comment
