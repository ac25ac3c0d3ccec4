"""Data access helpers for reports."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select, case, select

from guildhall.models.report import (
    REPORT_STATUS_APPROVED,
    REPORT_STATUS_PENDING,
    REPORT_STATUS_REJECTED,
    Report,
)

_STATUS_ORDER = case(
    (Report.status == REPORT_STATUS_PENDING, 0),
    (Report.status == REPORT_STATUS_APPROVED, 1),
    (Report.status == REPORT_STATUS_REJECTED, 2),
    else_=3,
)


@dataclass
class ReportFilters:
    status: str | None = None
    reported_type: str | None = None
    reporter_user_id: int | None = None


def build_report_query(filters: ReportFilters) -> Select[Any]:
    """Reports matching ``filters``: pending first, then approved, then rejected; newest first within each."""
    stmt = select(Report)
    if filters.status:
        stmt = stmt.where(Report.status == filters.status)
    if filters.reported_type:
        stmt = stmt.where(Report.reported_type == filters.reported_type)
    if filters.reporter_user_id is not None:
        stmt = stmt.where(Report.reporter_user_id == filters.reporter_user_id)
    return stmt.order_by(_STATUS_ORDER, Report.created_at.desc(), Report.id.desc())
