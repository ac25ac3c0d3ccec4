"""Engagement ledger: likes and bookmarks with their denormalized counters.

A ledger couples a (target, user) relation table with an optional counter
column on the target. Adding or removing a relation and moving the counter
happen in one transaction; the relation's composite primary key is the
authoritative guard against duplicates, the existence check before it only
gives the caller a friendlier error on the common path.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from guildhall.core.errors import ConflictError, NotFoundError, StorageError
from guildhall.core.security import TokenClaims
from guildhall.models.comment import Comment
from guildhall.models.engagement import CommentLike, PostBookmark, PostLike
from guildhall.models.post import Post
from guildhall.repositories.query import count_rows, fetch_page
from guildhall.services import activity, notifications
from guildhall.services.content import decrement_floored

logger = logging.getLogger(__name__)


class EngagementLedger:
    """Add/remove/status operations for one relation type."""

    def __init__(
        self,
        relation_model: type[Any],
        target_model: type[Any],
        target_column: str,
        counter: str | None = None,
        *,
        label: str,
    ) -> None:
        self.relation_model = relation_model
        self.target_model = target_model
        self.target_column = target_column
        self.counter = counter
        self.label = label

    def _relation_filter(self, target_id: int, user_id: int) -> list[Any]:
        return [
            getattr(self.relation_model, self.target_column) == target_id,
            self.relation_model.user_id == user_id,
        ]

    def _live_target(self, db: Session, target_id: int) -> Any:
        target = db.get(self.target_model, target_id)
        if target is None or target.is_deleted:
            raise NotFoundError(f"{self.target_model.__name__} not found")
        return target

    def _bump_counter(self, db: Session, target_id: int, delta: int) -> None:
        if self.counter is None:
            return
        column = getattr(self.target_model, self.counter)
        value = column + 1 if delta > 0 else decrement_floored(column)
        db.execute(
            update(self.target_model)
            .where(self.target_model.id == target_id)
            .values({self.counter: value, "updated_at": self.target_model.updated_at})
            .execution_options(synchronize_session=False)
        )

    def status(self, db: Session, target_id: int, user_id: int) -> bool:
        """Return True when ``user_id`` currently holds the relation on ``target_id``."""
        stmt = select(self.relation_model).where(*self._relation_filter(target_id, user_id))
        return db.execute(stmt).first() is not None

    def count(self, db: Session, target_id: int) -> int:
        """Current counter value, or the relation row count for counterless ledgers."""
        if self.counter is not None:
            column = getattr(self.target_model, self.counter)
            value = db.execute(
                select(column).where(self.target_model.id == target_id)
            ).scalar_one_or_none()
            return int(value or 0)
        stmt = select(func.count()).select_from(self.relation_model).where(
            getattr(self.relation_model, self.target_column) == target_id
        )
        return int(db.execute(stmt).scalar_one())

    def add(self, db: Session, target_id: int, user_id: int) -> Any:
        """Create the relation and increment the counter.

        Returns:
            The live target row.

        Raises:
            NotFoundError: Target missing or soft-deleted.
            ConflictError: The relation already exists.
            StorageError: The transaction failed and was rolled back.
        """
        target = self._live_target(db, target_id)
        if self.status(db, target_id, user_id):
            raise ConflictError(f"Already {self.label}")

        relation = self.relation_model(**{self.target_column: target_id, "user_id": user_id})
        try:
            db.add(relation)
            db.flush()
            self._bump_counter(db, target_id, +1)
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise ConflictError(f"Already {self.label}") from exc
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(
                "Failed to add %s on %s %s for user %s",
                self.relation_model.__tablename__,
                self.target_model.__name__,
                target_id,
                user_id,
                exc_info=True,
            )
            raise StorageError() from exc
        if self.counter is not None:
            db.expire(target, [self.counter])
        return target

    def remove(self, db: Session, target_id: int, user_id: int) -> None:
        """Delete the relation and decrement the counter, floored at zero.

        Raises:
            NotFoundError: There is no such relation.
            StorageError: The transaction failed and was rolled back.
        """
        relation = db.execute(
            select(self.relation_model).where(*self._relation_filter(target_id, user_id))
        ).scalar_one_or_none()
        if relation is None:
            raise NotFoundError(f"Not {self.label}")
        try:
            db.delete(relation)
            db.flush()
            self._bump_counter(db, target_id, -1)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(
                "Failed to remove %s on %s %s for user %s",
                self.relation_model.__tablename__,
                self.target_model.__name__,
                target_id,
                user_id,
                exc_info=True,
            )
            raise StorageError() from exc
        target = db.get(self.target_model, target_id)
        if target is not None and self.counter is not None:
            db.expire(target, [self.counter])

    def posts_for_user(
        self, db: Session, user_id: int, *, offset: int, limit: int
    ) -> tuple[list[Post], int]:
        """Live posts the user holds this relation on, most recent relation first."""
        if self.target_model is not Post:
            raise TypeError(f"{self.label} ledger does not target posts")
        relation_target = getattr(self.relation_model, self.target_column)
        stmt = (
            select(Post)
            .join(self.relation_model, relation_target == Post.id)
            .where(self.relation_model.user_id == user_id, Post.is_deleted.is_(False))
            .order_by(self.relation_model.created_at.desc(), Post.id.desc())
        )
        return fetch_page(db, stmt, offset=offset, limit=limit), count_rows(db, stmt)


post_likes = EngagementLedger(PostLike, Post, "post_id", "like_count", label="liked")
comment_likes = EngagementLedger(CommentLike, Comment, "comment_id", "like_count", label="liked")
post_bookmarks = EngagementLedger(PostBookmark, Post, "post_id", label="bookmarked")


def like_post(db: Session, post_id: int, user: TokenClaims) -> Post:
    """Like a post, then notify its author and log the activity. Both follow-ups are best effort."""
    post = post_likes.add(db, post_id, user.user_id)
    if post.user_id != user.user_id:
        notifications.notify_like(db, post.user_id, user.username, post.id, post.title)
    activity.record_activity(db, user.user_id, activity.ACTION_LIKE, "post", post.id)
    return post


def like_comment(db: Session, comment_id: int, user: TokenClaims) -> Comment:
    comment = comment_likes.add(db, comment_id, user.user_id)
    activity.record_activity(
        db, user.user_id, activity.ACTION_COMMENT_LIKE, "comment", comment.id
    )
    return comment


def bookmark_post(db: Session, post_id: int, user: TokenClaims) -> Post:
    post = post_bookmarks.add(db, post_id, user.user_id)
    activity.record_activity(db, user.user_id, activity.ACTION_BOOKMARK, "post", post.id)
    return post
