"""
Hours & flags calculator tests.
"""

from datetime import date, datetime

import pytest

from shiftledger.services.hours import (compute_day, credited_hours,
                                        display_time, is_approvable,
                                        worked_hours)
from shiftledger.services.shifts import STANDARD_SHIFTS, ShiftType

NIGHT = STANDARD_SHIFTS[ShiftType.NIGHT]
MORNING = STANDARD_SHIFTS[ShiftType.MORNING]


def test_night_shift_scenario():
    result = compute_day(
        datetime(2024, 3, 1, 21, 5),
        datetime(2024, 3, 2, 6, 10),
        NIGHT,
        date(2024, 3, 1),
    )
    assert result.hours_worked == pytest.approx(9.08)
    assert not result.is_late
    assert not result.early_leave
    assert not result.missing_check_in
    assert not result.missing_check_out


def test_night_arrival_after_midnight_is_late():
    result = compute_day(datetime(2024, 3, 2, 0, 30), None, NIGHT, date(2024, 3, 1))
    assert result.is_late
    assert result.missing_check_out
    assert result.hours_worked == 0.0


def test_morning_has_no_tolerance():
    assert compute_day(datetime(2024, 3, 1, 5, 1), None, MORNING, date(2024, 3, 1)).is_late
    assert not compute_day(datetime(2024, 3, 1, 5, 0), None, MORNING, date(2024, 3, 1)).is_late


def test_early_leave_before_threshold():
    result = compute_day(
        datetime(2024, 3, 1, 5, 0),
        datetime(2024, 3, 1, 13, 0),
        MORNING,
        date(2024, 3, 1),
    )
    assert result.early_leave
    assert result.hours_worked == 8.0


def test_excessive_overtime_flag():
    result = compute_day(
        datetime(2024, 3, 1, 5, 0),
        datetime(2024, 3, 1, 18, 0),
        MORNING,
        date(2024, 3, 1),
    )
    assert result.excessive_overtime


def test_fixed_hours_override_measured_span():
    result = compute_day(
        datetime(2024, 3, 1, 5, 0),
        datetime(2024, 3, 1, 7, 0),
        MORNING,
        date(2024, 3, 1),
        fixed_hours=9.0,
    )
    assert result.hours_worked == 9.0


def test_worked_hours_never_negative():
    assert worked_hours(datetime(2024, 3, 1, 14, 0), datetime(2024, 3, 1, 5, 0)) == 0.0
    assert worked_hours(None, datetime(2024, 3, 1, 5, 0)) == 0.0


def test_approvability():
    assert is_approvable("leave", None, None)
    assert is_approvable("off_day", None, None)
    assert not is_approvable("work", datetime(2024, 3, 1, 5), None)
    assert is_approvable("work", datetime(2024, 3, 1, 5), datetime(2024, 3, 1, 14))


def test_credited_hours_deducts_penalty_from_work_only():
    assert credited_hours("work", 9.0, 30) == 8.5
    assert credited_hours("work", 0.25, 60) == 0.0
    assert credited_hours("leave", 9.0, 30) == 9.0
    assert credited_hours("off_day", 9.0, 0) == 0.0


def test_display_time():
    assert display_time(datetime(2024, 3, 1, 5, 7)) == "05:07"
    assert display_time(None) == "Missing"
