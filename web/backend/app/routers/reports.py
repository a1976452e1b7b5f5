"""Report intake and admin report listing.

The admin endpoints carry no authentication; access control for them has to
be provided in front of the service.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from gossipcast.moderation.models import Report
from gossipcast.state import AppState
from web.backend.app.dependencies import get_state
from web.backend.app.models.api import (
    AdminReportsResponse,
    ErrorResponse,
    ReportCreatedResponse,
    ReportRequest,
    ReportResponse,
)

router = APIRouter(prefix="/api", tags=["reports"])


def _report_to_response(report: Report) -> ReportResponse:
    return ReportResponse(
        id=report.id,
        content=report.content,
        reason=report.reason,
        device_id=report.device_id,
        reported_at=report.reported_at.isoformat(),
        status=report.status.value,
        timestamp=report.metadata.get("timestamp"),
        app_version=report.metadata.get("app_version"),
    )


@router.post("/report", response_model=ReportCreatedResponse, responses={400: {"model": ErrorResponse}})
async def file_report(req: ReportRequest, state: AppState = Depends(get_state)):
    """File a report. Severe reports ban the reporting device on the spot."""
    report = state.ledger.file_report(
        req.content,
        req.reason,
        req.device_id,
        metadata={"timestamp": req.timestamp, "app_version": req.app_version},
    )
    return ReportCreatedResponse(success=True, report_id=report.id)


@router.get("/admin/reports", response_model=AdminReportsResponse)
async def list_reports(
    limit: Optional[int] = Query(None, ge=1, le=1000),
    state: AppState = Depends(get_state),
):
    """Most recent reports plus aggregate counts."""
    reports = state.ledger.list_recent(limit or state.settings.admin_report_limit)
    summary = state.ledger.summary()
    return AdminReportsResponse(
        reports=[_report_to_response(r) for r in reports],
        total_count=summary.total,
        pending_count=summary.pending,
        banned_users_count=summary.banned,
    )


@router.post(
    "/admin/reports/{report_id}/review",
    response_model=ReportResponse,
    responses={404: {"model": ErrorResponse}},
)
async def review_report(report_id: str, state: AppState = Depends(get_state)):
    """Mark a report as reviewed."""
    return _report_to_response(state.ledger.mark_reviewed(report_id))
