"""Report-driven moderation.

A report moves from ``pending`` to ``approved`` or ``rejected`` under an
administrator's review. Approval soft-deletes the reported post or comment
in the same transaction as the status change, so a failure leaves neither
applied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from guildhall.core.errors import ConflictError, NotFoundError, StorageError, ValidationError
from guildhall.db.time import utcnow
from guildhall.models.comment import Comment
from guildhall.models.post import Post
from guildhall.models.report import (
    REPORT_STATUS_APPROVED,
    REPORT_STATUSES,
    REPORTED_TYPE_COMMENT,
    REPORTED_TYPE_POST,
    REPORTED_TYPES,
    Report,
)
from guildhall.repositories.query import count_rows, fetch_page
from guildhall.repositories.report_repo import ReportFilters, build_report_query
from guildhall.services import activity
from guildhall.services.content import soft_delete_comment, soft_delete_post

logger = logging.getLogger(__name__)

_UNPROCESSABLE = status.HTTP_422_UNPROCESSABLE_ENTITY


@dataclass
class ReportedItemSummary:
    id: int
    type: str
    user_id: int
    content: str
    is_deleted: bool
    title: str | None = None
    post_id: int | None = None


def _target(db: Session, reported_type: str, reported_id: int) -> Post | Comment | None:
    model = Post if reported_type == REPORTED_TYPE_POST else Comment
    return db.get(model, reported_id)


def has_reported(db: Session, reporter_id: int, reported_type: str, reported_id: int) -> bool:
    stmt = select(Report.id).where(
        Report.reporter_user_id == reporter_id,
        Report.reported_type == reported_type,
        Report.reported_id == reported_id,
    )
    return db.execute(stmt).first() is not None


def submit(
    db: Session,
    reporter_id: int,
    reported_type: str | None,
    reported_id: int | None,
    reason: str | None,
    description: str | None = None,
) -> Report:
    """File a report.

    The duplicate check runs before the target lookup, so re-reporting
    content that has since been removed still answers with a conflict.

    Raises:
        ValidationError: (422) Bad type, missing id or empty reason.
        ConflictError: The reporter already reported this target.
        NotFoundError: The target does not exist.
        StorageError: The insert failed.
    """
    reason = (reason or "").strip()
    if not reported_type or reported_id is None or not reason:
        raise ValidationError(
            "reported_type, reported_id, and reason are required", status_code=_UNPROCESSABLE
        )
    if reported_type not in REPORTED_TYPES:
        raise ValidationError(
            'Invalid reported_type. Must be "post" or "comment"', status_code=_UNPROCESSABLE
        )

    if has_reported(db, reporter_id, reported_type, reported_id):
        raise ConflictError("You have already reported this content")
    if _target(db, reported_type, reported_id) is None:
        raise NotFoundError(f"Reported {reported_type} not found")

    report = Report(
        reporter_user_id=reporter_id,
        reported_type=reported_type,
        reported_id=reported_id,
        reason=reason,
        description=(description or "").strip() or None,
    )
    try:
        db.add(report)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("You have already reported this content") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to create report", exc_info=True)
        raise StorageError("Failed to create report") from exc

    logger.info(
        "User %s reported %s %s (report %s)", reporter_id, reported_type, reported_id, report.id
    )
    activity.record_activity(
        db, reporter_id, activity.ACTION_REPORT, reported_type, reported_id, {"reason": reason}
    )
    return report


def get(db: Session, report_id: int) -> Report:
    report = db.get(Report, report_id)
    if report is None:
        raise NotFoundError("Report not found")
    return report


def reported_item(db: Session, report: Report) -> ReportedItemSummary | None:
    """Summary of the reported content, including soft-deleted content."""
    target = _target(db, report.reported_type, report.reported_id)
    if target is None:
        return None
    if isinstance(target, Post):
        return ReportedItemSummary(
            id=target.id,
            type=REPORTED_TYPE_POST,
            user_id=target.user_id,
            title=target.title,
            content=target.content,
            is_deleted=target.is_deleted,
        )
    return ReportedItemSummary(
        id=target.id,
        type=REPORTED_TYPE_COMMENT,
        user_id=target.user_id,
        content=target.content,
        post_id=target.post_id,
        is_deleted=target.is_deleted,
    )


def list_reports(
    db: Session, filters: ReportFilters, *, offset: int, limit: int
) -> tuple[list[Report], int]:
    if filters.status and filters.status not in REPORT_STATUSES:
        raise ValidationError("Invalid status", status_code=_UNPROCESSABLE)
    if filters.reported_type and filters.reported_type not in REPORTED_TYPES:
        raise ValidationError("Invalid reported_type", status_code=_UNPROCESSABLE)
    stmt = build_report_query(filters)
    return fetch_page(db, stmt, offset=offset, limit=limit), count_rows(db, stmt)


def _remediate(db: Session, report: Report) -> None:
    target = _target(db, report.reported_type, report.reported_id)
    if target is None:
        logger.warning(
            "Report %s approved but %s %s no longer exists",
            report.id,
            report.reported_type,
            report.reported_id,
        )
        return
    if isinstance(target, Post):
        changed = soft_delete_post(target)
    else:
        changed = soft_delete_comment(db, target)
    if changed:
        logger.info(
            "Report %s removed %s %s", report.id, report.reported_type, report.reported_id
        )


def resolve(db: Session, report_id: int, new_status: str | None, reviewer_id: int) -> Report:
    """Record a review decision and apply its side effect.

    Approving soft-deletes the reported content. Approving again re-runs the
    soft delete, which leaves already deleted content unchanged. Rejecting or
    reopening has no content side effect.

    Raises:
        ValidationError: (422) Unknown status.
        NotFoundError: Unknown report.
        StorageError: The transaction failed; neither change was applied.
    """
    if new_status not in REPORT_STATUSES:
        raise ValidationError(
            'Invalid status. Must be "pending", "approved", or "rejected"',
            status_code=_UNPROCESSABLE,
        )
    report = get(db, report_id)
    try:
        report.status = new_status
        report.reviewed_by = reviewer_id
        report.reviewed_at = utcnow()
        if new_status == REPORT_STATUS_APPROVED:
            _remediate(db, report)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to resolve report %s", report_id, exc_info=True)
        raise StorageError("Failed to update report") from exc

    logger.info("Report %s set to %s by user %s", report_id, new_status, reviewer_id)
    db.refresh(report)
    return report


def delete(db: Session, report_id: int) -> None:
    report = get(db, report_id)
    try:
        db.delete(report)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to delete report %s", report_id, exc_info=True)
        raise StorageError("Failed to delete report") from exc
