"""
Manual shift submissions: pending -> confirmed | rejected.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shiftledger.core.config import settings
from shiftledger.core.exceptions import BusinessRuleViolation, NotFoundError
from shiftledger.models.daily_record import DailyRecord
from shiftledger.models.submission import ShiftSubmission
from shiftledger.services import store
from shiftledger.services.hours import compute_day
from shiftledger.services.reconcile import (get_employee, natural_key,
                                            upsert_daily_record)
from shiftledger.services.shifts import (ShiftType, Work, parse_shift_type,
                                         shift_definition)

logger = logging.getLogger(__name__)

PENDING = "pending"
CONFIRMED = "confirmed"
REJECTED = "rejected"


async def submit_shift(
    db: AsyncSession,
    employee_id: int,
    working_day: date,
    shift_type: str,
    custom_start: str | None = None,
    custom_end: str | None = None,
    notes: str | None = None,
    submitted_by: int | None = None,
) -> ShiftSubmission:
    """File a shift for review; an identical pending submission is reused."""
    st = parse_shift_type(shift_type)
    definition = shift_definition(st, custom_start, custom_end)
    await get_employee(db, employee_id)

    result = await store.execute(
        db,
        select(ShiftSubmission).where(
            ShiftSubmission.employee_id == employee_id,
            ShiftSubmission.working_day == working_day,
            ShiftSubmission.shift_type == st.value,
            ShiftSubmission.status == PENDING,
        ),
    )
    existing = result.scalar_one_or_none()
    if existing is not None:
        return existing

    submission = ShiftSubmission(
        employee_id=employee_id,
        working_day=working_day,
        shift_type=st.value,
        custom_start=definition.display_start if st is ShiftType.CUSTOM else None,
        custom_end=definition.display_end if st is ShiftType.CUSTOM else None,
        notes=notes,
        submitted_by=submitted_by,
        status=PENDING,
    )
    db.add(submission)
    await store.flush(db)
    logger.info("Shift submitted for employee %d on %s (%s)", employee_id, working_day, st.value)
    return submission


async def list_submissions(
    db: AsyncSession,
    status: str | None = None,
    employee_id: int | None = None,
) -> list[ShiftSubmission]:
    query = select(ShiftSubmission).order_by(
        ShiftSubmission.working_day, ShiftSubmission.id
    )
    if status:
        query = query.where(ShiftSubmission.status == status)
    if employee_id is not None:
        query = query.where(ShiftSubmission.employee_id == employee_id)
    result = await store.execute(db, query)
    return list(result.scalars().all())


async def _pending(db: AsyncSession, submission_id: int) -> ShiftSubmission:
    result = await store.execute(
        db,
        select(ShiftSubmission).where(ShiftSubmission.id == submission_id).with_for_update(),
    )
    submission = result.scalar_one_or_none()
    if submission is None:
        raise NotFoundError(f"Submission {submission_id} no longer exists")
    if submission.status != PENDING:
        raise BusinessRuleViolation(
            f"Submission {submission_id} is already {submission.status}",
            reason="invalid_transition",
        )
    return submission


async def confirm_submission(
    db: AsyncSession,
    submission_id: int,
    decided_by: int | None = None,
) -> tuple[ShiftSubmission, DailyRecord]:
    """Confirm and materialise a manual record credited a standard shift."""
    submission = await _pending(db, submission_id)
    st = ShiftType(submission.shift_type)
    definition = shift_definition(st, submission.custom_start, submission.custom_end)
    day = submission.working_day
    check_in = definition.start_on(day)
    check_out = definition.end_on(day)
    computed = compute_day(
        check_in,
        check_out,
        definition,
        day,
        fixed_hours=settings.STANDARD_SHIFT_HOURS,
    )
    values = {
        "shift_type": st.value,
        "leave_type": None,
        "custom_start": submission.custom_start,
        "custom_end": submission.custom_end,
        "first_check_in": check_in,
        "last_check_out": check_out,
        "display_check_in": definition.display_start,
        "display_check_out": definition.display_end,
        "record_count": 0,
        **computed.as_columns(),
    }
    if submission.notes:
        values["notes"] = submission.notes
    record = await upsert_daily_record(
        db, natural_key(submission.employee_id, day, Work(st), True), values
    )

    submission.status = CONFIRMED
    submission.daily_record_id = record.id
    submission.decided_by = decided_by
    submission.decided_at = datetime.now(timezone.utc)
    await store.flush(db)
    logger.info("Confirmed submission %d as record %d", submission.id, record.id)
    return submission, record


async def reject_submission(
    db: AsyncSession,
    submission_id: int,
    reason: str | None = None,
    decided_by: int | None = None,
) -> ShiftSubmission:
    submission = await _pending(db, submission_id)
    submission.status = REJECTED
    submission.rejection_reason = reason
    submission.decided_by = decided_by
    submission.decided_at = datetime.now(timezone.utc)
    await store.flush(db)
    logger.info("Rejected submission %d", submission.id)
    return submission
