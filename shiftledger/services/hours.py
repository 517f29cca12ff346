"""
Hours & flags calculator.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from shiftledger.core.config import settings
from shiftledger.services.shifts import (MISSING_DISPLAY, ShiftDefinition,
                                         clock_offset_minutes)


@dataclass(frozen=True)
class DayComputation:
    hours_worked: float
    missing_check_in: bool
    missing_check_out: bool
    is_late: bool
    early_leave: bool
    excessive_overtime: bool
    corrected_records: bool

    def as_columns(self) -> dict:
        return {
            "hours_worked": self.hours_worked,
            "missing_check_in": self.missing_check_in,
            "missing_check_out": self.missing_check_out,
            "is_late": self.is_late,
            "early_leave": self.early_leave,
            "excessive_overtime": self.excessive_overtime,
            "corrected_records": self.corrected_records,
        }


def worked_hours(check_in: datetime | None, check_out: datetime | None) -> float:
    if check_in is None or check_out is None:
        return 0.0
    seconds = (check_out - check_in).total_seconds()
    return round(max(seconds, 0.0) / 3600, 2)


def is_late(check_in: datetime | None, definition: ShiftDefinition) -> bool:
    # Wrap-aware so a 00:30 night arrival counts as 210 minutes late
    if check_in is None:
        return False
    return clock_offset_minutes(check_in, definition.start) > definition.late_tolerance_minutes


def is_early_leave(
    check_out: datetime | None,
    definition: ShiftDefinition,
    working_day: date,
) -> bool:
    if check_out is None:
        return False
    return check_out < definition.early_leave_on(working_day)


def compute_day(
    check_in: datetime | None,
    check_out: datetime | None,
    definition: ShiftDefinition,
    working_day: date,
    *,
    corrected: bool = False,
    fixed_hours: float | None = None,
) -> DayComputation:
    """Derive hours and flags for one work shift.

    ``fixed_hours`` replaces the measured span; confirmed manual submissions
    are credited a standard shift regardless of the recorded times.
    """
    hours = fixed_hours if fixed_hours is not None else worked_hours(check_in, check_out)
    return DayComputation(
        hours_worked=round(hours, 2),
        missing_check_in=check_in is None,
        missing_check_out=check_out is None,
        is_late=is_late(check_in, definition),
        early_leave=is_early_leave(check_out, definition, working_day),
        excessive_overtime=hours > settings.EXCESSIVE_OVERTIME_HOURS,
        corrected_records=corrected,
    )


def is_approvable(day_kind: str, check_in: datetime | None, check_out: datetime | None) -> bool:
    """Leave and off-days are always approvable; work days need both punches."""
    if day_kind != "work":
        return True
    return check_in is not None and check_out is not None


def credited_hours(day_kind: str, hours_worked: float, penalty_minutes: int) -> float:
    """Hours a record contributes to payroll once its penalty is deducted."""
    if day_kind == "off_day":
        return 0.0
    if day_kind == "leave":
        return float(hours_worked)
    return max(0.0, float(hours_worked) - penalty_minutes / 60)


def display_time(ts: datetime | None) -> str:
    return ts.strftime("%H:%M") if ts is not None else MISSING_DISPLAY
