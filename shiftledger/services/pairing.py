"""
Punch pairing and correction.

Groups the classified punches of one (employee, working day) into
provisional shifts, one per shift type, and repairs the common
mislabeling patterns seen on real punch clocks.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from datetime import date, datetime

from shiftledger.services.shifts import (Direction, ShiftDefinition, ShiftType,
                                         clock_offset_minutes)

logger = logging.getLogger(__name__)

# A lone check-out this close to its shift's start was really a check-in
CORRECTION_WINDOW_MINUTES = 60

# Same-direction punches closer than this are one punch pressed twice
DUPLICATE_PUNCH_MINUTES = 60

# Two punches this far apart (hours, inclusive) read as one flipped shift
FLIPPED_SHIFT_MIN_HOURS = 7
FLIPPED_SHIFT_MAX_HOURS = 11


@dataclass(frozen=True)
class PunchEvent:
    timestamp: datetime
    direction: Direction
    shift_type: ShiftType


@dataclass
class ProvisionalDay:
    employee_id: int
    working_day: date
    shift_type: ShiftType
    check_in: datetime | None
    check_out: datetime | None
    record_count: int
    corrected: bool = False
    notes: list[str] = field(default_factory=list)


def _partition(punches: Iterable[PunchEvent]) -> dict[ShiftType, list[PunchEvent]]:
    # Dedupe on (timestamp, direction); dict preserves first-seen shift order
    unique = sorted(set(punches), key=lambda p: (p.timestamp, p.direction.value))
    partitions: dict[ShiftType, list[PunchEvent]] = {}
    for punch in unique:
        partitions.setdefault(punch.shift_type, []).append(punch)
    return partitions


def _merge_orphans(partitions: dict[ShiftType, list[PunchEvent]]) -> None:
    """Fold a lone check-out partition into a lone check-in partition.

    Happens when the two halves of one shift land in different windows,
    e.g. an evening check-in at 14:50 followed by a check-out at 02:10.
    """
    ins_only = [
        st for st, ps in partitions.items()
        if all(p.direction is Direction.CHECK_IN for p in ps)
    ]
    outs_only = [
        st for st, ps in partitions.items()
        if all(p.direction is Direction.CHECK_OUT for p in ps)
    ]
    if len(ins_only) != 1 or len(outs_only) != 1:
        return
    in_type, out_type = ins_only[0], outs_only[0]
    first_in = min(p.timestamp for p in partitions[in_type])
    last_out = max(p.timestamp for p in partitions[out_type])
    if last_out <= first_in:
        return
    partitions[in_type].extend(partitions.pop(out_type))
    logger.debug("Merged orphan %s check-out into %s shift", out_type.value, in_type.value)


def _hours_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / 3600


def repair_directions(group: Iterable[PunchEvent]) -> tuple[list[PunchEvent], list[str]]:
    """Relabel punches whose direction the clock got wrong.

    Two punches that are out of order (or share a direction) but span a
    plausible shift are read as check-in then check-out.  Otherwise each
    run of same-direction neighbours is walked in time order: an hour or
    more apart, the second of two check-ins becomes the check-out and the
    first of two check-outs becomes the check-in; closer than that they are
    one punch pressed twice and left alone.
    """
    events = sorted(group, key=lambda p: (p.timestamp, p.direction.value))
    notes: list[str] = []

    if len(events) == 2:
        first, second = events
        in_order = first.direction is Direction.CHECK_IN and second.direction is Direction.CHECK_OUT
        span = _hours_between(first.timestamp, second.timestamp)
        if not in_order and FLIPPED_SHIFT_MIN_HOURS <= span <= FLIPPED_SHIFT_MAX_HOURS:
            if first.direction is not Direction.CHECK_IN:
                notes.append("Fixed mislabeled: Changed to check-in (valid shift pattern detected)")
            if second.direction is not Direction.CHECK_OUT:
                notes.append("Fixed mislabeled: Changed to check-out (valid shift pattern detected)")
            return [
                replace(first, direction=Direction.CHECK_IN),
                replace(second, direction=Direction.CHECK_OUT),
            ], notes

    # Index of the last punch that was not dropped as a double press
    kept = 0
    for i in range(1, len(events)):
        current, following = events[kept], events[i]
        if current.direction is not following.direction:
            kept = i
            continue
        gap_minutes = _hours_between(current.timestamp, following.timestamp) * 60
        if gap_minutes < DUPLICATE_PUNCH_MINUTES:
            # Keep the earlier check-in or the later check-out
            if current.direction is Direction.CHECK_OUT:
                kept = i
            continue
        if current.direction is Direction.CHECK_IN:
            events[i] = replace(following, direction=Direction.CHECK_OUT)
            notes.append(
                "Fixed mislabeled: Changed from check-in to check-out (duplicate check-in pattern)"
            )
        else:
            events[kept] = replace(current, direction=Direction.CHECK_IN)
            notes.append(
                "Fixed mislabeled: Changed from check-out to check-in (duplicate check-out pattern)"
            )
        kept = i
    return events, notes


def _representative(group: Iterable[PunchEvent]) -> tuple[datetime | None, datetime | None]:
    ins = [p.timestamp for p in group if p.direction is Direction.CHECK_IN]
    outs = [p.timestamp for p in group if p.direction is Direction.CHECK_OUT]
    return (min(ins) if ins else None), (max(outs) if outs else None)


def pair_punches(
    employee_id: int,
    working_day: date,
    punches: Iterable[PunchEvent],
    definition_for: Callable[[ShiftType], ShiftDefinition | None],
) -> list[ProvisionalDay]:
    """Pair classified punches into provisional days, one per shift type.

    Within each shift the earliest check-in and the latest check-out are the
    representative pair; duplicates collapse and ``record_count`` keeps the
    number of distinct raw punches.  ``definition_for`` may return ``None``
    for shifts whose bounds are unknown, which disables correction for them.
    Mislabeled directions are repaired first by ``repair_directions``.
    """
    partitions = _partition(punches)
    _merge_orphans(partitions)

    days: list[ProvisionalDay] = []
    for shift_type, group in partitions.items():
        raw_pair = _representative(group)
        repaired, notes = repair_directions(group)
        check_in, check_out = _representative(repaired)
        # Relabels that leave the representative pair unchanged are not corrections
        corrected = (check_in, check_out) != raw_pair
        day = ProvisionalDay(
            employee_id=employee_id,
            working_day=working_day,
            shift_type=shift_type,
            check_in=check_in,
            check_out=check_out,
            record_count=len(group),
            corrected=corrected,
            notes=notes if corrected else [],
        )
        if corrected:
            logger.info(
                "Repaired punch directions for employee %d on %s (%s)",
                employee_id,
                working_day,
                shift_type.value,
            )
        definition = definition_for(shift_type)
        if definition is not None:
            day = correct_lone_check_out(day, definition)
        days.append(day)
    return days


def correct_lone_check_out(day: ProvisionalDay, definition: ShiftDefinition) -> ProvisionalDay:
    """Relabel a single check-out punched at shift start.

    The punch becomes the check-in and the check-out is filled with the
    standard end of the shift.
    """
    if day.record_count != 1 or day.check_in is not None or day.check_out is None:
        return day
    offset = clock_offset_minutes(day.check_out, definition.start)
    if abs(offset) > CORRECTION_WINDOW_MINUTES:
        return day
    corrected = replace(
        day,
        check_in=day.check_out,
        check_out=definition.end_on(day.working_day),
        corrected=True,
        notes=day.notes + ["Fixed mislabeled: check-out at shift start became check-in"],
    )
    logger.info(
        "Corrected lone check-out for employee %d on %s (%s)",
        day.employee_id,
        day.working_day,
        day.shift_type.value,
    )
    return corrected


def swap_check_in_out(day: ProvisionalDay) -> ProvisionalDay:
    """Invert both representative punches of a day."""
    return replace(
        day,
        check_in=day.check_out,
        check_out=day.check_in,
        corrected=True,
        notes=day.notes + ["Swapped check-in and check-out"],
    )
