"""
Batch punch ingestion from exported clock files.

Rows name employees by number; unknown numbers are registered on the fly.
Each row runs in its own savepoint so one bad row never sinks its chunk,
and foreign-key visibility races are retried with backoff.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shiftledger.core.exceptions import ShiftLedgerError
from shiftledger.models.employee import Employee
from shiftledger.services import store
from shiftledger.services.batching import (BatchResult, ShouldCancel,
                                           run_in_chunks)
from shiftledger.services.reconcile import submit_punch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PunchRow:
    employee_number: str
    timestamp: datetime
    direction: str | None = None
    employee_name: str | None = None
    shift_hint: str | None = None
    annotation: str | None = None
    custom_start: str | None = None
    custom_end: str | None = None


async def ensure_employee(db: AsyncSession, employee_number: str, name: str | None = None) -> Employee:
    """Find or auto-register an employee by number, tolerating a racing insert."""
    result = await store.execute(
        db, select(Employee).where(Employee.employee_number == employee_number)
    )
    employee = result.scalar_one_or_none()
    if employee is not None:
        return employee

    employee = Employee(
        employee_number=employee_number,
        name=name or f"Employee-{employee_number}",
        department="Unassigned",
    )
    try:
        async with db.begin_nested():
            db.add(employee)
    except IntegrityError:
        result = await store.execute(
            db, select(Employee).where(Employee.employee_number == employee_number)
        )
        employee = result.scalar_one()
        logger.info("Race condition handled for employee number %s", employee_number)
    else:
        logger.info("Auto-registered employee %s (%s)", employee.name, employee_number)
    return employee


async def _ingest_row(db: AsyncSession, row: PunchRow) -> None:
    async with db.begin_nested():
        employee = await ensure_employee(db, row.employee_number, row.employee_name)
        await submit_punch(
            db,
            employee.id,
            row.timestamp,
            direction=row.direction,
            shift_hint=row.shift_hint,
            annotation=row.annotation,
            custom_start=row.custom_start,
            custom_end=row.custom_end,
        )


async def ingest_punches(
    db: AsyncSession,
    rows: Sequence[PunchRow],
    *,
    chunk_size: int | None = None,
    pause: float | None = None,
    should_cancel: ShouldCancel | None = None,
) -> BatchResult:
    """Ingest *rows* in committed chunks, reporting failed rows individually."""

    async def _ingest_chunk(chunk: Sequence[PunchRow]) -> tuple[int, list[dict]]:
        successes = 0
        errors: list[dict] = []
        for row in chunk:
            try:
                await store.retry_transient(lambda row=row: _ingest_row(db, row))
            except ShiftLedgerError as exc:
                logger.warning("Rejected punch for %s: %s", row.employee_number, exc.detail)
                errors.append(
                    {
                        "employee_number": row.employee_number,
                        "timestamp": row.timestamp.isoformat(),
                        "error": exc.detail,
                    }
                )
                continue
            successes += 1
        return successes, errors

    return await run_in_chunks(
        db,
        rows,
        _ingest_chunk,
        label="Punch ingestion",
        chunk_size=chunk_size,
        pause=pause,
        should_cancel=should_cancel,
    )
