"""
Daily-record review: listing, approval, penalties, time edits and deletion.

Every mutation commits once at the end of the request.  A record deleted
by someone else in the meantime comes back as a 404 notice.
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shiftledger.api.v1.deps import (get_current_active_user, get_db,
                                     require_admin, require_hr)
from shiftledger.models.daily_record import DailyRecord
from shiftledger.models.user import User
from shiftledger.schemas.records import (BatchResultRead, DailyRecordRead,
                                         DayRef, EditTimesRequest,
                                         PenaltyRequest, RecordsResponse)
from shiftledger.services.periods import resolve_range
from shiftledger.services.reconcile import (apply_penalty, approve_day,
                                            delete_records, edit_times,
                                            swap_record_punches,
                                            toggle_approval, unapprove_day)

router = APIRouter(prefix="/records", tags=["records"])
logger = logging.getLogger(__name__)


def _records_response(records) -> RecordsResponse:
    return RecordsResponse(
        success=True,
        records=[DailyRecordRead.model_validate(r) for r in records],
    )


@router.get("", response_model=list[DailyRecordRead])
async def list_records(
    employee_id: int | None = None,
    period: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    approved: bool | None = None,
    skip: int = 0,
    limit: int = Query(default=500, le=5000),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> list[DailyRecord]:
    """Records for review, ordered by day then employee."""
    start, end = resolve_range(period, date_from, date_to)
    query = (
        select(DailyRecord)
        .order_by(DailyRecord.working_day, DailyRecord.employee_id, DailyRecord.id)
        .offset(skip)
        .limit(limit)
    )
    if employee_id is not None:
        query = query.where(DailyRecord.employee_id == employee_id)
    if start is not None:
        query = query.where(DailyRecord.working_day >= start)
    if end is not None:
        query = query.where(DailyRecord.working_day <= end)
    if approved is not None:
        query = query.where(DailyRecord.approved.is_(approved))
    result = await db.execute(query)
    return list(result.scalars().all())


# ── Approval ────────────────────────────────────────────────────────
@router.post("/approve", response_model=RecordsResponse)
async def approve(
    body: DayRef,
    db: AsyncSession = Depends(get_db),
    hr: User = Depends(require_hr),
) -> RecordsResponse:
    records = await approve_day(db, body.employee_id, body.working_day, user_id=hr.id)
    await db.commit()
    return _records_response(records)


@router.post("/unapprove", response_model=RecordsResponse)
async def unapprove(
    body: DayRef,
    db: AsyncSession = Depends(get_db),
    _hr: User = Depends(require_hr),
) -> RecordsResponse:
    records = await unapprove_day(db, body.employee_id, body.working_day)
    await db.commit()
    return _records_response(records)


@router.post("/{record_id}/toggle-approval", response_model=DailyRecordRead)
async def toggle(
    record_id: int,
    db: AsyncSession = Depends(get_db),
    hr: User = Depends(require_hr),
) -> DailyRecord:
    record = await toggle_approval(db, record_id, user_id=hr.id)
    await db.commit()
    return record


# ── Corrections ─────────────────────────────────────────────────────
@router.post("/penalty", response_model=DailyRecordRead)
async def penalty(
    body: PenaltyRequest,
    db: AsyncSession = Depends(get_db),
    _hr: User = Depends(require_hr),
) -> DailyRecord:
    record = await apply_penalty(
        db, body.employee_id, body.working_day, body.minutes, shift_slot=body.shift_slot
    )
    await db.commit()
    return record


@router.put("/times", response_model=DailyRecordRead)
async def update_times(
    body: EditTimesRequest,
    db: AsyncSession = Depends(get_db),
    _hr: User = Depends(require_hr),
) -> DailyRecord:
    """Overwrite check-in/out; sending neither turns the day into an off-day."""
    record = await edit_times(
        db,
        body.employee_id,
        body.working_day,
        body.check_in,
        body.check_out,
        shift_slot=body.shift_slot,
        new_shift_type=body.new_shift_type,
        custom_start=body.custom_start,
        custom_end=body.custom_end,
        notes=body.notes,
    )
    await db.commit()
    return record


@router.post("/swap", response_model=DailyRecordRead)
async def swap(
    body: DayRef,
    db: AsyncSession = Depends(get_db),
    _hr: User = Depends(require_hr),
) -> DailyRecord:
    record = await swap_record_punches(
        db, body.employee_id, body.working_day, shift_slot=body.shift_slot
    )
    await db.commit()
    return record


# ── Bulk deletion (ADMIN-ONLY) ──────────────────────────────────────
@router.delete("", response_model=BatchResultRead)
async def clear_records(
    request: Request,
    period: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    employee_ids: list[int] | None = Query(default=None),
    preserve_approved: bool = True,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> BatchResultRead:
    """Delete daily records in chunks; approved ones stay unless told otherwise."""
    start, end = resolve_range(period, date_from, date_to)
    result = await delete_records(
        db,
        date_from=start,
        date_to=end,
        employee_ids=employee_ids,
        preserve_approved=preserve_approved,
        should_cancel=request.is_disconnected,
    )
    logger.warning(
        "ADMIN cleared %d daily records (from=%s to=%s employees=%s)",
        result.success_count,
        start,
        end,
        employee_ids or "all",
    )
    return BatchResultRead(
        success=not result.errors and not result.cancelled,
        success_count=result.success_count,
        errors=result.errors,
        cancelled=result.cancelled,
    )
