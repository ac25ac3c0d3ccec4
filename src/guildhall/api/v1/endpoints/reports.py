# src/guildhall/api/v1/endpoints/reports.py
"""Report submission and review endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Query, status
from sqlalchemy.orm import Session

from guildhall.api.v1.dependencies import (
    AdminUserDep,
    CacheDep,
    CurrentUserDep,
    PageDep,
    SessionDep,
)
from guildhall.models.report import Report
from guildhall.repositories.report_repo import ReportFilters
from guildhall.schemas.common import PageParams, paginated, success
from guildhall.schemas.report import (
    ReportCreate,
    ReportDetail,
    ReportedItem,
    ReportResolve,
    ReportResponse,
)
from guildhall.services import moderation
from guildhall.services.cache import ListingCache

router = APIRouter(prefix="/reports", tags=["reports"])


def report_detail(db: Session, report: Report) -> ReportDetail:
    """Report with reporter/reviewer names and the reported content, deleted or not."""
    detail = ReportDetail.model_validate(report)
    detail.reporter_username = report.reporter.username if report.reporter else None
    detail.reviewer_username = report.reviewer.username if report.reviewer else None
    item = moderation.reported_item(db, report)
    detail.reported_item = ReportedItem(**asdict(item)) if item else None
    return detail


def list_reports_page(
    db: Session, params: PageParams, filters: ReportFilters
) -> dict[str, Any]:
    reports, total = moderation.list_reports(
        db, filters, offset=params.offset, limit=params.limit
    )
    return paginated(
        "reports",
        [ReportResponse.model_validate(report) for report in reports],
        params,
        total,
        "Reports retrieved successfully",
    )


def resolve_report(
    db: Session, cache: ListingCache, report_id: int, new_status: str | None, reviewer_id: int
) -> dict[str, Any]:
    report = moderation.resolve(db, report_id, new_status, reviewer_id)
    cache.invalidate()
    return success(report_detail(db, report), "Report updated successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_report(
    payload: ReportCreate, db: SessionDep, current_user: CurrentUserDep
) -> dict[str, Any]:
    report = moderation.submit(
        db,
        current_user.user_id,
        payload.reported_type,
        payload.reported_id,
        payload.reason,
        payload.description,
    )
    return success(ReportResponse.model_validate(report), "Report submitted successfully")


@router.get("")
def list_reports(
    db: SessionDep,
    params: PageDep,
    admin: AdminUserDep,
    status_filter: str | None = Query(None, alias="status"),
    reported_type: str | None = Query(None),
) -> dict[str, Any]:
    return list_reports_page(
        db, params, ReportFilters(status=status_filter, reported_type=reported_type)
    )


@router.get("/{report_id}")
def get_report(report_id: int, db: SessionDep, admin: AdminUserDep) -> dict[str, Any]:
    report = moderation.get(db, report_id)
    return success(report_detail(db, report), "Report retrieved successfully")


@router.put("/{report_id}")
def update_report(
    report_id: int,
    payload: ReportResolve,
    db: SessionDep,
    cache: CacheDep,
    admin: AdminUserDep,
) -> dict[str, Any]:
    return resolve_report(db, cache, report_id, payload.status, admin.user_id)
