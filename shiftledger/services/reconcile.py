"""
Reconciliation workflow: punches in, daily records out.

Every write to ``daily_records`` goes through ``upsert_daily_record``, which
looks the row up by its natural key and updates it, or inserts it inside a
savepoint.  A unique violation on insert means another writer got there
first; it surfaces as ``ConflictError`` and is retried as an update.

Single-record operations only flush; the caller owns the commit.  Batch
operations commit per chunk.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

from sqlalchemy import and_, case, exists, select, update
from sqlalchemy import delete as sa_delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shiftledger.core.config import settings
from shiftledger.core.exceptions import (BusinessRuleViolation,
                                         ConflictError, NotFoundError,
                                         ValidationError)
from shiftledger.models.daily_record import DailyRecord
from shiftledger.models.employee import Employee
from shiftledger.models.punch import Punch
from shiftledger.models.submission import ShiftSubmission
from shiftledger.services import store
from shiftledger.services.batching import (BatchResult, ShouldCancel,
                                           run_in_chunks)
from shiftledger.services.holidays import (backup_holidays,
                                           restore_holidays_if_empty)
from shiftledger.services.hours import (compute_day, display_time,
                                        is_approvable)
from shiftledger.services.pairing import (ProvisionalDay, PunchEvent,
                                          pair_punches, swap_check_in_out)
from shiftledger.services.shifts import (OFF_DAY_DISPLAY, STANDARD_SHIFTS,
                                         DayKind, Direction, Leave, OffDay,
                                         ShiftDefinition, ShiftType, Work,
                                         classify_punch, coerce_shift_hint,
                                         kind_columns, parse_direction,
                                         parse_leave_type, parse_shift_type,
                                         shift_definition, to_local)

logger = logging.getLogger(__name__)

MAX_RANGE_DAYS = 366
MAX_PENALTY_MINUTES = 24 * 60


# ── Natural key upsert ──────────────────────────────────────────────
def natural_key(
    employee_id: int,
    working_day: date,
    kind: DayKind,
    is_manual_entry: bool,
) -> dict:
    columns = kind_columns(kind)
    return {
        "employee_id": employee_id,
        "working_day": working_day,
        "day_kind": columns["day_kind"],
        "shift_slot": columns["shift_slot"],
        "is_manual_entry": is_manual_entry,
    }


def _kind_values(kind: DayKind) -> dict:
    columns = kind_columns(kind)
    return {"shift_type": columns["shift_type"], "leave_type": columns["leave_type"]}


async def find_by_natural_key(db: AsyncSession, key: dict) -> DailyRecord | None:
    result = await store.execute(db, select(DailyRecord).filter_by(**key))
    return result.scalar_one_or_none()


async def upsert_daily_record(
    db: AsyncSession,
    key: dict,
    values: dict,
    *,
    overwrite_approved: bool = True,
) -> DailyRecord:
    """Create or update the record at *key*; safe under concurrent writers.

    With ``overwrite_approved=False`` an approved record is returned as-is.
    """
    for _attempt in range(settings.UPSERT_CONFLICT_RETRIES):
        record = await find_by_natural_key(db, key)
        if record is not None:
            if record.approved and not overwrite_approved:
                logger.debug("Skipping approved record %d", record.id)
                return record
            for name, value in values.items():
                setattr(record, name, value)
            await store.flush(db)
            return record

        record = DailyRecord(**key, **values)
        try:
            async with db.begin_nested():
                db.add(record)
        except IntegrityError as exc:
            error = store.translate_store_error(exc)
            if not isinstance(error, ConflictError):
                if error is None:
                    raise
                raise error from exc
            logger.info(
                "Record for employee %s on %s was created concurrently; updating instead",
                key["employee_id"],
                key["working_day"],
            )
            continue
        return record

    raise ConflictError(
        f"Could not settle record for employee {key['employee_id']} on {key['working_day']}"
    )


# ── Lookups ─────────────────────────────────────────────────────────
async def get_employee(db: AsyncSession, employee_id: int) -> Employee:
    result = await store.execute(db, select(Employee).where(Employee.id == employee_id))
    employee = result.scalar_one_or_none()
    if employee is None:
        raise ValidationError(f"Unknown employee {employee_id}")
    return employee


async def records_for_day(
    db: AsyncSession,
    employee_id: int,
    working_day: date,
) -> list[DailyRecord]:
    result = await store.execute(
        db,
        select(DailyRecord)
        .where(DailyRecord.employee_id == employee_id, DailyRecord.working_day == working_day)
        .order_by(DailyRecord.id),
    )
    return list(result.scalars().all())


async def resolve_record(
    db: AsyncSession,
    employee_id: int,
    working_day: date,
    shift_slot: str | None = None,
) -> DailyRecord:
    """The single record an edit targets; ``shift_slot`` picks among several."""
    records = await records_for_day(db, employee_id, working_day)
    if shift_slot:
        records = [r for r in records if r.shift_slot == shift_slot]
    if not records:
        raise NotFoundError(f"No record for employee {employee_id} on {working_day}")
    if len(records) > 1:
        raise ValidationError(
            f"Employee {employee_id} has {len(records)} records on {working_day}; "
            "specify the shift"
        )
    return records[0]


async def get_record(db: AsyncSession, record_id: int) -> DailyRecord:
    result = await store.execute(db, select(DailyRecord).where(DailyRecord.id == record_id))
    record = result.scalar_one_or_none()
    if record is None:
        raise NotFoundError(f"Record {record_id} no longer exists")
    return record


# ── Reconciliation ──────────────────────────────────────────────────
def _work_values(day: ProvisionalDay, definition: ShiftDefinition) -> dict:
    computed = compute_day(
        day.check_in,
        day.check_out,
        definition,
        day.working_day,
        corrected=day.corrected,
    )
    values = {
        **_kind_values(Work(day.shift_type)),
        "custom_start": definition.display_start if day.shift_type is ShiftType.CUSTOM else None,
        "custom_end": definition.display_end if day.shift_type is ShiftType.CUSTOM else None,
        "first_check_in": day.check_in,
        "last_check_out": day.check_out,
        "display_check_in": display_time(day.check_in),
        "display_check_out": display_time(day.check_out),
        "record_count": day.record_count,
        **computed.as_columns(),
    }
    if day.notes:
        values["notes"] = "; ".join(day.notes)
    return values


async def reconcile_working_day(
    db: AsyncSession,
    employee_id: int,
    working_day: date,
) -> list[DailyRecord]:
    """Rebuild the raw (non-manual) work records of one day from its punches.

    Approved records are left untouched.  Raw records whose shift no longer
    appears in the pairing are removed unless approved.
    """
    result = await store.execute(
        db,
        select(Punch)
        .where(Punch.employee_id == employee_id, Punch.working_day == working_day)
        .order_by(Punch.timestamp),
    )
    punches = list(result.scalars().all())

    custom_bounds: dict[str, str] = {}
    for punch in punches:
        if punch.shift_type == ShiftType.CUSTOM.value and punch.custom_start and not custom_bounds:
            custom_bounds = {"custom_start": punch.custom_start, "custom_end": punch.custom_end}

    def definition_for(shift_type: ShiftType) -> ShiftDefinition | None:
        if shift_type is ShiftType.CUSTOM:
            return shift_definition(shift_type, **custom_bounds) if custom_bounds else None
        return STANDARD_SHIFTS[shift_type]

    events = [
        PunchEvent(p.timestamp, Direction(p.direction), ShiftType(p.shift_type)) for p in punches
    ]
    days = pair_punches(employee_id, working_day, events, definition_for)

    records: list[DailyRecord] = []
    kept_slots: set[str] = set()
    for day in days:
        definition = definition_for(day.shift_type)
        if definition is None:
            raise ValidationError("Custom shift punches need start and end times")
        key = natural_key(employee_id, working_day, Work(day.shift_type), False)
        record = await upsert_daily_record(
            db, key, _work_values(day, definition), overwrite_approved=False
        )
        kept_slots.add(key["shift_slot"])
        records.append(record)

    stale = [
        r for r in await records_for_day(db, employee_id, working_day)
        if r.day_kind == "work"
        and not r.is_manual_entry
        and not r.approved
        and r.shift_slot not in kept_slots
    ]
    for record in stale:
        await db.delete(record)
    if stale:
        await store.flush(db)
        logger.info(
            "Dropped %d stale record(s) for employee %d on %s",
            len(stale),
            employee_id,
            working_day,
        )
    return records


# ── Punch submission ────────────────────────────────────────────────
@dataclass
class PunchOutcome:
    punch: Punch
    created: bool
    records: list[DailyRecord] = field(default_factory=list)


async def _toggle_direction(db: AsyncSession, employee_id: int, ts: datetime) -> Direction:
    """IN unless the employee's last earlier punch in the window was an IN."""
    window_start = ts - timedelta(hours=settings.PUNCH_TOGGLE_WINDOW_HOURS)
    result = await store.execute(
        db,
        select(Punch)
        .where(
            Punch.employee_id == employee_id,
            Punch.timestamp < ts,
            Punch.timestamp > window_start,
        )
        .order_by(Punch.timestamp.desc())
        .limit(1)
        .with_for_update(),
    )
    last = result.scalar_one_or_none()
    if last is not None and last.direction == Direction.CHECK_IN.value:
        return Direction.CHECK_OUT
    return Direction.CHECK_IN


async def _find_punch(
    db: AsyncSession,
    employee_id: int,
    ts: datetime,
    direction: Direction | None = None,
) -> Punch | None:
    """The stored punch at *ts*; without a direction, whichever came first."""
    query = (
        select(Punch)
        .where(Punch.employee_id == employee_id, Punch.timestamp == ts)
        .order_by(Punch.id)
        .limit(1)
    )
    if direction is not None:
        query = query.where(Punch.direction == direction.value)
    result = await store.execute(db, query)
    return result.scalars().first()


async def submit_punch(
    db: AsyncSession,
    employee_id: int,
    timestamp: datetime,
    direction: str | Direction | None = None,
    shift_hint: str | None = None,
    annotation: str | None = None,
    custom_start: str | None = None,
    custom_end: str | None = None,
    is_manual: bool = False,
) -> PunchOutcome:
    """Record one punch and re-reconcile the working day it lands on.

    Re-submitting an identical punch is a no-op that returns the stored one.
    """
    employee = await get_employee(db, employee_id)
    if not employee.is_active:
        raise BusinessRuleViolation(
            f"Employee {employee_id} is deactivated", reason="employee_inactive"
        )

    ts = to_local(timestamp, settings.TIMEZONE_OFFSET)
    hint = coerce_shift_hint(shift_hint)
    custom = None
    if hint is ShiftType.CUSTOM:
        custom = shift_definition(hint, custom_start, custom_end)

    if direction is not None:
        resolved = parse_direction(direction)
        punch = await _find_punch(db, employee_id, ts, resolved)
    else:
        # A re-imported punch keeps the direction it was stored with
        punch = await _find_punch(db, employee_id, ts)
        resolved = (
            Direction(punch.direction)
            if punch is not None
            else await _toggle_direction(db, employee_id, ts)
        )

    created = punch is None
    if punch is None:
        classification = classify_punch(
            ts, resolved, hint, canteen=employee.is_canteen, custom=custom
        )
        punch = Punch(
            employee_id=employee_id,
            timestamp=ts,
            direction=resolved.value,
            shift_hint=hint.value if hint else None,
            shift_type=classification.shift_type.value,
            working_day=classification.working_day,
            custom_start=custom.display_start if custom else None,
            custom_end=custom.display_end if custom else None,
            annotation=annotation,
            is_manual=is_manual,
        )
        try:
            async with db.begin_nested():
                db.add(punch)
        except IntegrityError as exc:
            error = store.translate_store_error(exc)
            if not isinstance(error, ConflictError):
                if error is None:
                    raise
                raise error from exc
            # Identical punch inserted concurrently
            punch = await _find_punch(db, employee_id, ts, resolved)
            if punch is None:
                raise error from exc
            created = False

    records = await reconcile_working_day(db, employee_id, punch.working_day)
    logger.info(
        "Punch %s for employee %d at %s -> %s on %s",
        resolved.value,
        employee_id,
        ts.isoformat(),
        punch.shift_type,
        punch.working_day,
    )
    return PunchOutcome(punch=punch, created=created, records=records)


# ── Leave & off-days ────────────────────────────────────────────────
def _days_between(start: date, end: date) -> list[date]:
    if end < start:
        raise ValidationError("Range end is before its start")
    span = (end - start).days + 1
    if span > MAX_RANGE_DAYS:
        raise ValidationError(f"Range covers {span} days; the limit is {MAX_RANGE_DAYS}")
    return [start + timedelta(days=i) for i in range(span)]


def _non_work_values(kind: Leave | OffDay, display: str, hours: float) -> dict:
    return {
        **_kind_values(kind),
        "custom_start": None,
        "custom_end": None,
        "first_check_in": None,
        "last_check_out": None,
        "display_check_in": display,
        "display_check_out": display,
        "hours_worked": hours,
        "record_count": 0,
        "missing_check_in": False,
        "missing_check_out": False,
        "is_late": False,
        "early_leave": False,
        "excessive_overtime": False,
        "corrected_records": False,
    }


async def submit_leave(
    db: AsyncSession,
    employee_id: int,
    start: date,
    end: date,
    leave_type: str,
    notes: str | None = None,
) -> list[DailyRecord]:
    kind = Leave(parse_leave_type(leave_type))
    days = _days_between(start, end)
    await get_employee(db, employee_id)
    hours = settings.LEAVE_CREDIT_HOURS if kind.leave_type.is_paid else 0.0
    records = []
    for day in days:
        values = _non_work_values(kind, kind.leave_type.value, hours)
        if notes is not None:
            values["notes"] = notes
        records.append(
            await upsert_daily_record(db, natural_key(employee_id, day, kind, True), values)
        )
    logger.info(
        "Recorded %s for employee %d: %s..%s", kind.leave_type.value, employee_id, start, end
    )
    return records


async def submit_off_day(
    db: AsyncSession,
    employee_id: int,
    start: date,
    end: date | None = None,
    notes: str | None = None,
) -> list[DailyRecord]:
    days = _days_between(start, end or start)
    await get_employee(db, employee_id)
    records = []
    for day in days:
        values = _non_work_values(OffDay(), OFF_DAY_DISPLAY, 0.0)
        if notes is not None:
            values["notes"] = notes
        records.append(
            await upsert_daily_record(db, natural_key(employee_id, day, OffDay(), True), values)
        )
    logger.info("Recorded off-day(s) for employee %d: %s..%s", employee_id, start, days[-1])
    return records


# ── Approval ────────────────────────────────────────────────────────
def _check_approvable(records: Sequence[DailyRecord]) -> None:
    blocked = [
        r for r in records
        if not is_approvable(r.day_kind, r.first_check_in, r.last_check_out)
    ]
    if blocked:
        raise BusinessRuleViolation(
            f"{len(blocked)} record(s) are missing a check-in or check-out",
            reason="missing_punches",
        )


def _set_approval(records: Sequence[DailyRecord], approved: bool, user_id: int | None) -> None:
    now = datetime.now(timezone.utc)
    for record in records:
        record.approved = approved
        record.approved_at = now if approved else None
        record.approved_by = user_id if approved else None


async def approve_day(
    db: AsyncSession,
    employee_id: int,
    working_day: date,
    user_id: int | None = None,
) -> list[DailyRecord]:
    """Approve every record of the day; all of them must be approvable."""
    records = await records_for_day(db, employee_id, working_day)
    if not records:
        raise NotFoundError(f"No record for employee {employee_id} on {working_day}")
    _check_approvable(records)
    _set_approval(records, True, user_id)
    await store.flush(db)
    logger.info("Approved %d record(s) for employee %d on %s", len(records), employee_id, working_day)
    return records


async def unapprove_day(
    db: AsyncSession,
    employee_id: int,
    working_day: date,
) -> list[DailyRecord]:
    records = await records_for_day(db, employee_id, working_day)
    if not records:
        raise NotFoundError(f"No record for employee {employee_id} on {working_day}")
    _set_approval(records, False, None)
    await store.flush(db)
    logger.info("Unapproved %d record(s) for employee %d on %s", len(records), employee_id, working_day)
    return records


async def toggle_approval(
    db: AsyncSession,
    record_id: int,
    user_id: int | None = None,
) -> DailyRecord:
    record = await get_record(db, record_id)
    if not record.approved:
        _check_approvable([record])
    _set_approval([record], not record.approved, user_id)
    await store.flush(db)
    return record


# ── HR corrections ──────────────────────────────────────────────────
async def apply_penalty(
    db: AsyncSession,
    employee_id: int,
    working_day: date,
    minutes: int,
    shift_slot: str | None = None,
) -> DailyRecord:
    """Store a penalty; it is deducted from hours only when reporting."""
    if not 0 <= minutes <= MAX_PENALTY_MINUTES:
        raise ValidationError(f"Penalty must be between 0 and {MAX_PENALTY_MINUTES} minutes")
    record = await resolve_record(db, employee_id, working_day, shift_slot)
    record.penalty_minutes = minutes
    await store.flush(db)
    logger.info("Penalty of %d min on employee %d, %s", minutes, employee_id, working_day)
    return record


async def _move_to_key(db: AsyncSession, record: DailyRecord, key: dict) -> DailyRecord:
    """Re-key *record*; if another record already owns the key, keep that one."""
    if all(getattr(record, name) == value for name, value in key.items()):
        return record
    existing = await find_by_natural_key(db, key)
    if existing is not None and existing.id != record.id:
        await db.delete(record)
        await store.flush(db)
        return existing
    for name, value in key.items():
        setattr(record, name, value)
    return record


async def edit_times(
    db: AsyncSession,
    employee_id: int,
    working_day: date,
    check_in: datetime | None,
    check_out: datetime | None,
    *,
    shift_slot: str | None = None,
    new_shift_type: str | None = None,
    custom_start: str | None = None,
    custom_end: str | None = None,
    notes: str | None = None,
) -> DailyRecord:
    """Overwrite the times of a record and recompute its hours and flags.

    Clearing both times turns the record into an off-day.
    """
    record = await resolve_record(db, employee_id, working_day, shift_slot)

    if check_in is None and check_out is None:
        key = natural_key(employee_id, working_day, OffDay(), record.is_manual_entry)
        record = await _move_to_key(db, record, key)
        for name, value in _non_work_values(OffDay(), OFF_DAY_DISPLAY, 0.0).items():
            setattr(record, name, value)
        record.penalty_minutes = 0
    else:
        if new_shift_type:
            shift_type = parse_shift_type(new_shift_type)
        elif record.shift_type:
            shift_type = ShiftType(record.shift_type)
        else:
            raise ValidationError("Pick a shift type to turn this day into a work day")
        definition = shift_definition(
            shift_type,
            custom_start or record.custom_start,
            custom_end or record.custom_end,
        )
        ci = to_local(check_in, settings.TIMEZONE_OFFSET) if check_in else None
        co = to_local(check_out, settings.TIMEZONE_OFFSET) if check_out else None
        day = ProvisionalDay(
            employee_id=employee_id,
            working_day=working_day,
            shift_type=shift_type,
            check_in=ci,
            check_out=co,
            record_count=record.record_count,
            corrected=bool(record.corrected_records),
        )
        key = natural_key(employee_id, working_day, Work(shift_type), record.is_manual_entry)
        record = await _move_to_key(db, record, key)
        for name, value in _work_values(day, definition).items():
            setattr(record, name, value)

    if notes is not None:
        record.notes = notes
    await store.flush(db)
    logger.info("Edited times for employee %d on %s", employee_id, working_day)
    return record


async def swap_record_punches(
    db: AsyncSession,
    employee_id: int,
    working_day: date,
    shift_slot: str | None = None,
) -> DailyRecord:
    """Swap check-in and check-out of a work record and its audit punches."""
    record = await resolve_record(db, employee_id, working_day, shift_slot)
    if record.day_kind != "work":
        raise BusinessRuleViolation(
            "Only work days have punches to swap", reason="not_a_work_day"
        )
    shift_type = ShiftType(record.shift_type)
    definition = shift_definition(shift_type, record.custom_start, record.custom_end)
    current = ProvisionalDay(
        employee_id=employee_id,
        working_day=working_day,
        shift_type=shift_type,
        check_in=record.first_check_in,
        check_out=record.last_check_out,
        record_count=record.record_count,
        corrected=bool(record.corrected_records),
    )
    swapped = swap_check_in_out(current)

    timestamps = [t for t in (current.check_in, current.check_out) if t is not None]
    if timestamps:
        await store.execute(
            db,
            update(Punch)
            .where(
                Punch.employee_id == employee_id,
                Punch.working_day == working_day,
                Punch.timestamp.in_(timestamps),
            )
            .values(
                direction=case(
                    (Punch.direction == Direction.CHECK_IN.value, Direction.CHECK_OUT.value),
                    else_=Direction.CHECK_IN.value,
                ),
                is_corrected=True,
            )
            .execution_options(synchronize_session=False),
        )

    values = _work_values(swapped, definition)
    previous_notes = record.notes
    for name, value in values.items():
        setattr(record, name, value)
    if previous_notes:
        record.notes = f"{previous_notes}; {values['notes']}"
    await store.flush(db)
    logger.warning("Swapped check-in/out for employee %d on %s", employee_id, working_day)
    return record


# ── Bulk deletion & reset ───────────────────────────────────────────
async def delete_records(
    db: AsyncSession,
    *,
    date_from: date | None = None,
    date_to: date | None = None,
    employee_ids: Sequence[int] | None = None,
    preserve_approved: bool = True,
    chunk_size: int | None = None,
    pause: float | None = None,
    should_cancel: ShouldCancel | None = None,
) -> BatchResult:
    """Delete daily records in committed chunks.

    Approved records survive unless ``preserve_approved`` is off.  Punches
    are the audit trail and are not touched.
    """
    query = select(DailyRecord.id).order_by(DailyRecord.id)
    if date_from is not None:
        query = query.where(DailyRecord.working_day >= date_from)
    if date_to is not None:
        query = query.where(DailyRecord.working_day <= date_to)
    if employee_ids:
        query = query.where(DailyRecord.employee_id.in_(employee_ids))
    if preserve_approved:
        query = query.where(DailyRecord.approved.is_(False))
    ids = list((await store.execute(db, query)).scalars().all())

    async def _delete_chunk(chunk: Sequence[int]) -> tuple[int, list[dict]]:
        await store.execute(
            db,
            update(ShiftSubmission)
            .where(ShiftSubmission.daily_record_id.in_(chunk))
            .values(daily_record_id=None)
            .execution_options(synchronize_session=False),
        )
        await store.execute(
            db,
            sa_delete(DailyRecord)
            .where(DailyRecord.id.in_(chunk))
            .execution_options(synchronize_session=False),
        )
        return len(chunk), []

    result = await run_in_chunks(
        db,
        ids,
        _delete_chunk,
        label="Record deletion",
        chunk_size=chunk_size,
        pause=pause,
        should_cancel=should_cancel,
    )
    db.expunge_all()
    logger.warning(
        "Deleted %d daily record(s) (preserve_approved=%s)", result.success_count, preserve_approved
    )
    return result


@dataclass
class ResetResult:
    holidays_backed_up: int = 0
    deleted_records: int = 0
    deleted_submissions: int = 0
    deleted_punches: int = 0
    holidays_restored: int = 0
    errors: list[dict] = field(default_factory=list)


async def reset_all(
    db: AsyncSession,
    *,
    chunk_size: int | None = None,
    pause: float | None = None,
) -> ResetResult:
    """Clear everything that is not approved; holidays are never touched.

    Holidays are backed up first and restored from the backup if the live
    table is found empty afterwards.
    """
    outcome = ResetResult()
    outcome.holidays_backed_up = await backup_holidays(db)
    await store.commit(db)

    deletion = await delete_records(
        db, preserve_approved=True, chunk_size=chunk_size, pause=pause
    )
    outcome.deleted_records = deletion.success_count
    outcome.errors.extend(deletion.errors)

    submissions = await store.execute(
        db,
        sa_delete(ShiftSubmission)
        .where(ShiftSubmission.status != "confirmed")
        .execution_options(synchronize_session=False),
    )
    outcome.deleted_submissions = submissions.rowcount or 0

    approved_day = exists().where(
        and_(
            DailyRecord.employee_id == Punch.employee_id,
            DailyRecord.working_day == Punch.working_day,
            DailyRecord.approved.is_(True),
        )
    ).correlate(Punch)
    punches = await store.execute(
        db,
        sa_delete(Punch).where(~approved_day).execution_options(synchronize_session=False),
    )
    outcome.deleted_punches = punches.rowcount or 0

    outcome.holidays_restored = await restore_holidays_if_empty(db)
    await store.commit(db)
    logger.warning(
        "RESET: %d records, %d submissions, %d punches deleted; %d holidays kept",
        outcome.deleted_records,
        outcome.deleted_submissions,
        outcome.deleted_punches,
        outcome.holidays_backed_up,
    )
    return outcome
