"""
Punch intake: single punches, clock-file batches, leave and off-days.

Single punches reconcile their working day immediately and commit once.
Batches commit per chunk and stop early when the client disconnects.
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shiftledger.api.v1.deps import (get_current_active_user, get_db,
                                     require_hr)
from shiftledger.models.punch import Punch
from shiftledger.models.user import User
from shiftledger.schemas.records import (BatchResultRead, DailyRecordRead,
                                         DaySubmission, LeaveRequest,
                                         PunchBatchRequest, PunchCreate,
                                         PunchRead, PunchResponse,
                                         RecordsResponse)
from shiftledger.services.ingestion import PunchRow, ingest_punches
from shiftledger.services.periods import resolve_range
from shiftledger.services.reconcile import (submit_leave, submit_off_day,
                                            submit_punch)

router = APIRouter(tags=["punches"])
logger = logging.getLogger(__name__)


def _records_response(records) -> RecordsResponse:
    return RecordsResponse(
        success=True,
        records=[DailyRecordRead.model_validate(r) for r in records],
    )


@router.post("/punches", response_model=PunchResponse)
async def create_punch(
    body: PunchCreate,
    db: AsyncSession = Depends(get_db),
    _hr: User = Depends(require_hr),
) -> PunchResponse:
    """Record a punch; an identical resubmission returns the stored punch."""
    outcome = await submit_punch(
        db,
        body.employee_id,
        body.timestamp,
        direction=body.direction,
        shift_hint=body.shift_hint,
        annotation=body.annotation,
        custom_start=body.custom_start,
        custom_end=body.custom_end,
        is_manual=True,
    )
    await db.commit()
    return PunchResponse(
        success=True,
        created=outcome.created,
        punch=PunchRead.model_validate(outcome.punch),
        records=[DailyRecordRead.model_validate(r) for r in outcome.records],
    )


@router.post("/punches/batch", response_model=BatchResultRead)
async def create_punch_batch(
    body: PunchBatchRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    _hr: User = Depends(require_hr),
) -> BatchResultRead:
    """Ingest an exported clock file; failed rows are reported, not fatal."""
    rows = [PunchRow(**row.model_dump()) for row in body.rows]
    result = await ingest_punches(
        db,
        rows,
        chunk_size=body.chunk_size,
        should_cancel=request.is_disconnected,
    )
    return BatchResultRead(
        success=not result.errors and not result.cancelled,
        success_count=result.success_count,
        errors=result.errors,
        cancelled=result.cancelled,
    )


@router.get("/punches", response_model=list[PunchRead])
async def list_punches(
    employee_id: int | None = None,
    period: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    limit: int = Query(default=500, le=5000),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> list[Punch]:
    """Audit trail of raw punches, oldest first."""
    start, end = resolve_range(period, date_from, date_to)
    query = select(Punch).order_by(Punch.timestamp, Punch.id).limit(limit)
    if employee_id is not None:
        query = query.where(Punch.employee_id == employee_id)
    if start is not None:
        query = query.where(Punch.working_day >= start)
    if end is not None:
        query = query.where(Punch.working_day <= end)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.post("/leave", response_model=RecordsResponse)
async def create_leave(
    body: LeaveRequest,
    db: AsyncSession = Depends(get_db),
    _hr: User = Depends(require_hr),
) -> RecordsResponse:
    records = await submit_leave(
        db,
        body.employee_id,
        body.start,
        body.end or body.start,
        body.leave_type,
        notes=body.notes,
    )
    await db.commit()
    return _records_response(records)


@router.post("/off-days", response_model=RecordsResponse)
async def create_off_days(
    body: DaySubmission,
    db: AsyncSession = Depends(get_db),
    _hr: User = Depends(require_hr),
) -> RecordsResponse:
    records = await submit_off_day(
        db, body.employee_id, body.start, body.end, notes=body.notes
    )
    await db.commit()
    return _records_response(records)
