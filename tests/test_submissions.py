"""
Shift submission lifecycle tests.
"""

from datetime import date, datetime

import pytest

from shiftledger.core.exceptions import (BusinessRuleViolation, NotFoundError,
                                         ValidationError)
from shiftledger.services.submissions import (confirm_submission,
                                              list_submissions,
                                              reject_submission, submit_shift)


async def test_confirm_creates_manual_record_with_standard_hours(db_session, employee):
    submission = await submit_shift(db_session, employee.id, date(2024, 3, 4), "evening")
    submission, record = await confirm_submission(db_session, submission.id, decided_by=1)
    await db_session.commit()

    assert submission.status == "confirmed"
    assert submission.daily_record_id == record.id
    assert submission.decided_at is not None
    assert record.is_manual_entry
    assert record.shift_type == "evening"
    assert record.hours_worked == 9.0
    assert record.display_check_in == "13:00"
    assert record.display_check_out == "22:00"
    assert record.first_check_in == datetime(2024, 3, 4, 13, 0)


async def test_identical_pending_submission_is_reused(db_session, employee):
    first = await submit_shift(db_session, employee.id, date(2024, 3, 4), "morning")
    second = await submit_shift(db_session, employee.id, date(2024, 3, 4), "morning")
    assert first.id == second.id
    assert len(await list_submissions(db_session, status="pending")) == 1


async def test_custom_submission_keeps_bounds(db_session, employee):
    submission = await submit_shift(
        db_session, employee.id, date(2024, 3, 4), "custom", "09:00", "17:30"
    )
    _, record = await confirm_submission(db_session, submission.id)
    assert record.custom_start == "09:00"
    assert record.custom_end == "17:30"
    assert record.hours_worked == 9.0


async def test_custom_submission_without_bounds_rejected(db_session, employee):
    with pytest.raises(ValidationError):
        await submit_shift(db_session, employee.id, date(2024, 3, 4), "custom")


async def test_reject_then_confirm_is_invalid(db_session, employee):
    submission = await submit_shift(db_session, employee.id, date(2024, 3, 4), "night")
    rejected = await reject_submission(db_session, submission.id, reason="not scheduled")
    assert rejected.status == "rejected"
    assert rejected.rejection_reason == "not scheduled"

    with pytest.raises(BusinessRuleViolation) as info:
        await confirm_submission(db_session, submission.id)
    assert info.value.reason == "invalid_transition"


async def test_confirm_missing_submission(db_session):
    with pytest.raises(NotFoundError):
        await confirm_submission(db_session, 404)
