"""Notification rows: creation helpers and the owner's inbox operations."""
from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from guildhall.core.errors import NotFoundError, StorageError
from guildhall.models.notification import (
    NOTIFICATION_COMMENT,
    NOTIFICATION_LIKE,
    Notification,
)

logger = logging.getLogger(__name__)


def _notify(
    db: Session,
    user_id: int,
    kind: str,
    title: str,
    message: str | None,
    link: str | None,
) -> Notification | None:
    notification = Notification(
        user_id=user_id, type=kind, title=title, message=message, link=link
    )
    try:
        db.add(notification)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Failed to create %s notification for user %s", kind, user_id, exc_info=True)
        return None
    return notification


def notify_comment(
    db: Session,
    recipient_id: int,
    commenter_name: str,
    post_id: int,
    post_title: str,
) -> Notification | None:
    """Tell a post author that someone commented. Best effort."""
    return _notify(
        db,
        recipient_id,
        NOTIFICATION_COMMENT,
        "New comment",
        f'{commenter_name} commented on "{post_title}"',
        f"/posts/{post_id}",
    )


def notify_like(
    db: Session,
    recipient_id: int,
    liker_name: str,
    post_id: int,
    post_title: str,
) -> Notification | None:
    """Tell a post author that someone liked the post. Best effort."""
    return _notify(
        db,
        recipient_id,
        NOTIFICATION_LIKE,
        "New like",
        f'{liker_name} liked "{post_title}"',
        f"/posts/{post_id}",
    )


def list_notifications(
    db: Session,
    user_id: int,
    *,
    offset: int,
    limit: int,
    unread_only: bool = False,
) -> tuple[list[Notification], int, int]:
    """Return one page of the inbox, its total size and the unread count."""
    stmt = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        stmt = stmt.where(Notification.is_read.is_(False))
    total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
    items = list(
        db.execute(
            stmt.order_by(Notification.created_at.desc(), Notification.id.desc())
            .offset(offset)
            .limit(limit)
        ).scalars()
    )
    return items, int(total), unread_count(db, user_id)


def unread_count(db: Session, user_id: int) -> int:
    stmt = select(func.count(Notification.id)).where(
        Notification.user_id == user_id, Notification.is_read.is_(False)
    )
    return int(db.execute(stmt).scalar_one())


def _owned(db: Session, notification_id: int, user_id: int) -> Notification:
    notification = db.get(Notification, notification_id)
    # Someone else's notification is indistinguishable from a missing one.
    if notification is None or notification.user_id != user_id:
        raise NotFoundError("Notification not found")
    return notification


def mark_read(db: Session, notification_id: int, user_id: int) -> Notification:
    notification = _owned(db, notification_id, user_id)
    notification.is_read = True
    _commit(db)
    return notification


def mark_all_read(db: Session, user_id: int) -> int:
    """Mark every unread notification of ``user_id`` read; returns how many changed."""
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    _commit(db)
    return int(result.rowcount or 0)


def delete_notification(db: Session, notification_id: int, user_id: int) -> None:
    notification = _owned(db, notification_id, user_id)
    db.delete(notification)
    _commit(db)


def _commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Notification update failed", exc_info=True)
        raise StorageError() from exc
