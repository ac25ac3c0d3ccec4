# src/guildhall/models/report.py
"""Models tracking abuse reports and their review."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from guildhall.db.session import Base
from guildhall.db.time import utcnow
from guildhall.models.user import User

REPORT_STATUS_PENDING = "pending"
REPORT_STATUS_APPROVED = "approved"
REPORT_STATUS_REJECTED = "rejected"
REPORT_STATUSES = (REPORT_STATUS_PENDING, REPORT_STATUS_APPROVED, REPORT_STATUS_REJECTED)

REPORTED_TYPE_POST = "post"
REPORTED_TYPE_COMMENT = "comment"
REPORTED_TYPES = (REPORTED_TYPE_POST, REPORTED_TYPE_COMMENT)


class Report(Base):
    """State machine for one user's report against a post or comment.

    pending -> approved | rejected. Approval soft-deletes the reported
    content; the status column itself stays writable.
    """

    __tablename__ = "reports"
    __table_args__ = (
        # One report per reporter and target, whatever its status.
        UniqueConstraint(
            "reporter_user_id", "reported_type", "reported_id", name="uq_reports_reporter_target"
        ),
        CheckConstraint("reported_type IN ('post', 'comment')", name="ck_reports_reported_type"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')", name="ck_reports_status"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    reporter_user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    reported_type: Mapped[str] = mapped_column(String(20), nullable=False)
    reported_id: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=REPORT_STATUS_PENDING, index=True
    )
    reviewed_by: Mapped[int | None] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    reporter: Mapped[User] = relationship("User", foreign_keys=[reporter_user_id], lazy="joined")
    reviewer: Mapped[User | None] = relationship("User", foreign_keys=[reviewed_by], lazy="joined")
