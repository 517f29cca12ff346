"""
Shift catalogue and punch classifier.

Every raw punch is mapped to a ``ShiftType`` and a working day (the date the
logical shift belongs to).  Night shifts run 21:00-06:00, so a night
check-out on the morning of D+1 is grouped under D.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Union

from shiftledger.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

_HHMM_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class ShiftType(str, Enum):
    MORNING = "morning"
    EVENING = "evening"
    NIGHT = "night"
    CANTEEN_EARLY = "canteen-early"
    CANTEEN_LATE = "canteen-late"
    CUSTOM = "custom"


class Direction(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class LeaveType(str, Enum):
    SICK = "sick-leave"
    ANNUAL = "annual-leave"
    MARRIAGE = "marriage-leave"
    BEREAVEMENT = "bereavement-leave"
    MATERNITY = "maternity-leave"
    PATERNITY = "paternity-leave"
    UNPAID = "unpaid-leave"

    @property
    def abbreviation(self) -> str:
        return _LEAVE_ABBREVIATIONS[self]

    @property
    def is_paid(self) -> bool:
        return self is not LeaveType.UNPAID


_LEAVE_ABBREVIATIONS = {
    LeaveType.SICK: "SL",
    LeaveType.ANNUAL: "AL",
    LeaveType.MARRIAGE: "ML",
    LeaveType.BEREAVEMENT: "BL",
    LeaveType.MATERNITY: "MT",
    LeaveType.PATERNITY: "PT",
    LeaveType.UNPAID: "UL",
}

OFF_DAY_DISPLAY = "OFF-DAY"
MISSING_DISPLAY = "Missing"

# Minutes; any other value between 0 and one day is accepted as custom
PENALTY_PRESETS = (0, 15, 30, 60, 120, 240, 540)


# ── Day kinds ───────────────────────────────────────────────────────
@dataclass(frozen=True)
class Work:
    shift_type: ShiftType

    name = "work"


@dataclass(frozen=True)
class Leave:
    leave_type: LeaveType

    name = "leave"


@dataclass(frozen=True)
class OffDay:
    name = "off_day"


DayKind = Union[Work, Leave, OffDay]


def kind_columns(kind: DayKind) -> dict:
    """Column values that encode *kind* on a DailyRecord row."""
    if isinstance(kind, Work):
        return {
            "day_kind": kind.name,
            "shift_type": kind.shift_type.value,
            "leave_type": None,
            "shift_slot": kind.shift_type.value,
        }
    if isinstance(kind, Leave):
        return {
            "day_kind": kind.name,
            "shift_type": None,
            "leave_type": kind.leave_type.value,
            "shift_slot": kind.name,
        }
    return {
        "day_kind": kind.name,
        "shift_type": None,
        "leave_type": None,
        "shift_slot": kind.name,
    }


# ── Shift definitions ───────────────────────────────────────────────
@dataclass(frozen=True)
class ShiftDefinition:
    shift_type: ShiftType
    start: time
    end: time
    early_leave: time
    late_tolerance_minutes: int

    @property
    def crosses_midnight(self) -> bool:
        return self.end <= self.start

    def start_on(self, working_day: date) -> datetime:
        return datetime.combine(working_day, self.start)

    def end_on(self, working_day: date) -> datetime:
        day = working_day + timedelta(days=1) if self.crosses_midnight else working_day
        return datetime.combine(day, self.end)

    def early_leave_on(self, working_day: date) -> datetime:
        day = working_day + timedelta(days=1) if self.early_leave < self.start else working_day
        return datetime.combine(day, self.early_leave)

    @property
    def display_start(self) -> str:
        return self.start.strftime("%H:%M")

    @property
    def display_end(self) -> str:
        return self.end.strftime("%H:%M")


STANDARD_SHIFTS: dict[ShiftType, ShiftDefinition] = {
    ShiftType.MORNING: ShiftDefinition(ShiftType.MORNING, time(5), time(14), time(13, 30), 0),
    ShiftType.EVENING: ShiftDefinition(ShiftType.EVENING, time(13), time(22), time(21, 30), 0),
    ShiftType.NIGHT: ShiftDefinition(ShiftType.NIGHT, time(21), time(6), time(5, 30), 30),
    ShiftType.CANTEEN_EARLY: ShiftDefinition(
        ShiftType.CANTEEN_EARLY, time(7), time(16), time(15, 30), 10
    ),
    ShiftType.CANTEEN_LATE: ShiftDefinition(
        ShiftType.CANTEEN_LATE, time(8), time(17), time(16, 30), 10
    ),
}

CUSTOM_LATE_TOLERANCE_MINUTES = 15
CUSTOM_EARLY_LEAVE_MINUTES = 30


def parse_hhmm(value: str | time, field: str = "time") -> time:
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    match = _HHMM_RE.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise ValidationError(f"Invalid {field} {value!r}; expected HH:MM")
    return time(int(match.group(1)), int(match.group(2)))


def parse_shift_type(value: str | ShiftType) -> ShiftType:
    try:
        return ShiftType(value)
    except ValueError:
        raise ValidationError(f"Unknown shift type {value!r}") from None


def coerce_shift_hint(value: str | ShiftType | None) -> ShiftType | None:
    """A usable hint, or ``None`` so the punch is classified by the clock."""
    if not value:
        return None
    try:
        return ShiftType(value)
    except ValueError:
        logger.warning("Ignoring unknown shift hint %r", value)
        return None


def parse_direction(value: str | Direction) -> Direction:
    try:
        return Direction(value)
    except ValueError:
        raise ValidationError(f"Unknown punch direction {value!r}") from None


def parse_leave_type(value: str | LeaveType) -> LeaveType:
    try:
        return LeaveType(value)
    except ValueError:
        raise ValidationError(f"Unknown leave type {value!r}") from None


def custom_shift(
    start: str | time,
    end: str | time,
    overnight: bool = False,
) -> ShiftDefinition:
    """Build a custom shift from caller-supplied bounds.

    ``end`` before ``start`` is only accepted when ``overnight`` is set.
    """
    start_t = parse_hhmm(start, "custom start")
    end_t = parse_hhmm(end, "custom end")
    if start_t == end_t:
        raise ValidationError("Custom shift must not be zero length")
    if end_t < start_t and not overnight:
        raise ValidationError("Custom shift ends before it starts; mark it overnight")
    early = datetime.combine(date(2000, 1, 2), end_t) - timedelta(minutes=CUSTOM_EARLY_LEAVE_MINUTES)
    return ShiftDefinition(
        ShiftType.CUSTOM,
        start_t,
        end_t,
        early.time(),
        CUSTOM_LATE_TOLERANCE_MINUTES,
    )


def shift_definition(
    shift_type: str | ShiftType,
    custom_start: str | None = None,
    custom_end: str | None = None,
) -> ShiftDefinition:
    shift_type = parse_shift_type(shift_type)
    if shift_type is ShiftType.CUSTOM:
        if not custom_start or not custom_end:
            raise ValidationError("Custom shifts need both start and end times")
        start_t = parse_hhmm(custom_start, "custom start")
        end_t = parse_hhmm(custom_end, "custom end")
        return custom_shift(start_t, end_t, overnight=end_t < start_t)
    return STANDARD_SHIFTS[shift_type]


# ── Time helpers ────────────────────────────────────────────────────
def _parse_offset(offset: str) -> timezone:
    sign = 1 if offset[0] == "+" else -1
    hours, minutes = offset[1:].split(":")
    return timezone(sign * timedelta(hours=int(hours), minutes=int(minutes)))


def to_local(ts: datetime, offset: str) -> datetime:
    """Naive local wall-clock time; aware timestamps are shifted to *offset*."""
    if ts.tzinfo is not None:
        ts = ts.astimezone(_parse_offset(offset)).replace(tzinfo=None)
    return ts.replace(microsecond=0)


def clock_offset_minutes(ts: datetime, reference: time) -> int:
    """Signed minutes from *reference* to the clock time of *ts*, in [-720, 720)."""
    delta = (ts.hour * 60 + ts.minute) - (reference.hour * 60 + reference.minute)
    return (delta + 720) % 1440 - 720


# ── Classifier ──────────────────────────────────────────────────────
@dataclass(frozen=True)
class Classification:
    shift_type: ShiftType
    working_day: date


def _classify_check_in(hour: int, canteen: bool) -> ShiftType:
    if canteen and hour == 7:
        return ShiftType.CANTEEN_EARLY
    if canteen and hour == 8:
        return ShiftType.CANTEEN_LATE
    if 5 <= hour < 13:
        return ShiftType.MORNING
    if 13 <= hour < 21:
        return ShiftType.EVENING
    return ShiftType.NIGHT


def _classify_check_out(hour: int, canteen: bool) -> ShiftType:
    if hour < 12:
        return ShiftType.NIGHT
    if hour < 18:
        if canteen:
            return ShiftType.CANTEEN_EARLY if hour <= 16 else ShiftType.CANTEEN_LATE
        return ShiftType.MORNING
    return ShiftType.EVENING


def classify_punch(
    timestamp: datetime,
    direction: Direction,
    hint: str | ShiftType | None = None,
    canteen: bool = False,
    custom: ShiftDefinition | None = None,
) -> Classification:
    """Assign a shift type and working day to one punch.

    A valid *hint* wins over the time-of-day windows; an unknown one is
    ignored.  Only check-outs that close a shift begun the day before move
    to the previous date: night check-outs before noon, and check-outs of
    an overnight custom shift that fall before its end.
    """
    direction = parse_direction(direction)
    hinted = coerce_shift_hint(hint)
    if hinted is not None:
        shift_type = hinted
    elif direction is Direction.CHECK_IN:
        shift_type = _classify_check_in(timestamp.hour, canteen)
    else:
        shift_type = _classify_check_out(timestamp.hour, canteen)

    working_day = timestamp.date()
    if direction is Direction.CHECK_OUT:
        if shift_type is ShiftType.NIGHT and timestamp.hour < 12:
            working_day -= timedelta(days=1)
        elif (
            shift_type is ShiftType.CUSTOM
            and custom is not None
            and custom.crosses_midnight
            and timestamp.time() <= custom.end
        ):
            working_day -= timedelta(days=1)
    return Classification(shift_type, working_day)
