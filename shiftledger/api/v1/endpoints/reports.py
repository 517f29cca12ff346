"""
Approved-hours reporting, CSV export, health and status.

Aggregation reads only approved records; a client that disconnects
mid-aggregation cancels it.
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import date

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import StreamingResponse
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shiftledger.api.v1.deps import (get_calendar, get_current_active_user,
                                     get_db)
from shiftledger.core.config import settings
from shiftledger.models.daily_record import DailyRecord
from shiftledger.models.employee import Employee
from shiftledger.models.submission import ShiftSubmission
from shiftledger.models.user import User
from shiftledger.schemas.records import DailyRecordRead
from shiftledger.schemas.report import (ApprovedHoursResponse,
                                        EmployeeDetailResponse,
                                        EmployeeHoursRead, HealthResponse,
                                        StatusResponse)
from shiftledger.services.aggregate import (ApprovedHoursReport,
                                            get_approved_hours,
                                            get_employee_detail)
from shiftledger.services.calendar import DoubleTimeCalendar
from shiftledger.services.periods import resolve_range
from shiftledger.services.submissions import PENDING

router = APIRouter(tags=["reports"])
logger = logging.getLogger(__name__)

CSV_COLUMNS = (
    "employee_id",
    "name",
    "total_days",
    "working_days",
    "off_days",
    "leave_days",
    "regular_hours",
    "penalty_hours",
    "double_time_hours",
    "payable_hours",
)


def _forbid_self_service(user: User, employee_id: int | None = None) -> None:
    """Employee accounts may only look at their own figures."""
    if user.role == "employee" and (employee_id is None or employee_id != user.employee_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to view other employees' hours",
        )


async def _report(
    request: Request,
    db: AsyncSession,
    calendar: DoubleTimeCalendar,
    period: str | None,
    date_from: date | None,
    date_to: date | None,
    employee_ids: list[int] | None,
) -> ApprovedHoursReport:
    start, end = resolve_range(period, date_from, date_to)
    return await get_approved_hours(
        db,
        calendar,
        start,
        end,
        employee_ids=employee_ids,
        should_cancel=request.is_disconnected,
    )


# ── Approved hours ──────────────────────────────────────────────────
@router.get("/reports/approved-hours", response_model=ApprovedHoursResponse)
async def approved_hours(
    request: Request,
    period: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    employee_ids: list[int] | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
    calendar: DoubleTimeCalendar = Depends(get_calendar),
    user: User = Depends(get_current_active_user),
) -> ApprovedHoursResponse:
    """Per-employee payroll totals for approved days, sorted by name."""
    _forbid_self_service(user)
    report = await _report(request, db, calendar, period, date_from, date_to, employee_ids)
    return ApprovedHoursResponse.model_validate(report)


@router.get("/reports/approved-hours/csv")
async def approved_hours_csv(
    request: Request,
    period: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    employee_ids: list[int] | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
    calendar: DoubleTimeCalendar = Depends(get_calendar),
    user: User = Depends(get_current_active_user),
) -> StreamingResponse:
    """Export approved hours as a CSV file download."""
    _forbid_self_service(user)
    report = await _report(request, db, calendar, period, date_from, date_to, employee_ids)

    def _line(values) -> str:
        buf = io.StringIO()
        csv.writer(buf).writerow(values)
        return buf.getvalue()

    def iter_csv():
        yield _line(CSV_COLUMNS)
        for row in [*report.employees, report.totals]:
            yield _line(getattr(row, column) for column in CSV_COLUMNS)

    label = period.replace("|", "_") if period else "all"
    return StreamingResponse(
        iter_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=approved_hours_{label}.csv"},
    )


@router.get("/reports/employees/{employee_id}/detail", response_model=EmployeeDetailResponse)
async def employee_detail(
    employee_id: int,
    period: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    db: AsyncSession = Depends(get_db),
    calendar: DoubleTimeCalendar = Depends(get_calendar),
    user: User = Depends(get_current_active_user),
) -> EmployeeDetailResponse:
    _forbid_self_service(user, employee_id)
    start, end = resolve_range(period, date_from, date_to)
    detail = await get_employee_detail(db, calendar, employee_id, start, end)
    return EmployeeDetailResponse(
        summary=EmployeeHoursRead.model_validate(detail.summary),
        records=[DailyRecordRead.model_validate(r) for r in detail.records],
        double_time_days=sorted(detail.double_time_days),
    )


# ── Health / Status ─────────────────────────────────────────────────
@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Public health check: DB and Redis connectivity."""
    result = HealthResponse(db=False, redis=False)

    try:
        await db.execute(select(1))
        result.db = True
    except Exception as e:
        logger.error("Health check DB failure: %s", e)

    try:
        r = aioredis.from_url(settings.REDIS_URL)
        await r.ping()
        await r.aclose()
        result.redis = True
    except Exception as e:
        logger.error("Health check Redis failure: %s", e)

    if not result.db:
        result.status = "degraded"
    return result


@router.get("/status", response_model=StatusResponse)
async def system_status(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> StatusResponse:
    """Active employees and outstanding review work."""
    emp_count = await db.execute(
        select(func.count(Employee.id)).where(Employee.is_active.is_(True))
    )
    pending = await db.execute(
        select(func.count(ShiftSubmission.id)).where(ShiftSubmission.status == PENDING)
    )
    unapproved = await db.execute(
        select(func.count(DailyRecord.id)).where(DailyRecord.approved.is_(False))
    )
    return StatusResponse(
        total_employees=emp_count.scalar() or 0,
        pending_submissions=pending.scalar() or 0,
        unapproved_records=unapproved.scalar() or 0,
        status="operational",
    )
