"""
Approved-hours aggregation for payroll.

Only approved records count.  Penalties are subtracted here, at reporting
time; the stored ``hours_worked`` is never reduced.  Hours worked on a
double-time day (Friday or holiday) earn the same amount again as bonus.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shiftledger.core.config import settings
from shiftledger.core.exceptions import NotFoundError, OperationCancelled
from shiftledger.models.daily_record import DailyRecord
from shiftledger.models.employee import Employee
from shiftledger.services import store
from shiftledger.services.batching import ShouldCancel
from shiftledger.services.calendar import DoubleTimeCalendar, double_time_bonus
from shiftledger.services.hours import credited_hours

logger = logging.getLogger(__name__)


@dataclass
class IssueCounts:
    late: int = 0
    early_leave: int = 0
    missing_punches: int = 0
    excessive_overtime: int = 0
    penalties: int = 0


@dataclass
class EmployeeHours:
    employee_id: int
    name: str
    total_days: int = 0
    working_days: int = 0
    off_days: int = 0
    leave_days: int = 0
    regular_hours: float = 0.0
    penalty_hours: float = 0.0
    double_time_hours: float = 0.0
    payable_hours: float = 0.0
    issues: IssueCounts = field(default_factory=IssueCounts)
    # Days are distinct dates; two shifts on one date count once
    dates: set[date] = field(default_factory=set, repr=False)
    off_dates: set[date] = field(default_factory=set, repr=False)
    leave_dates: set[date] = field(default_factory=set, repr=False)

    def add(self, record: DailyRecord, double_time_days: set[date]) -> None:
        self.dates.add(record.working_day)
        if record.day_kind == "off_day":
            self.off_dates.add(record.working_day)
        elif record.day_kind == "leave":
            self.leave_dates.add(record.working_day)

        credited = credited_hours(record.day_kind, record.hours_worked, record.penalty_minutes)
        self.regular_hours += credited
        self.penalty_hours += record.penalty_minutes / 60
        if record.day_kind == "work":
            self.double_time_hours += double_time_bonus(
                credited, record.working_day, double_time_days
            )

        self.issues.late += int(bool(record.is_late))
        self.issues.early_leave += int(bool(record.early_leave))
        self.issues.missing_punches += int(
            bool(record.missing_check_in or record.missing_check_out)
        )
        self.issues.excessive_overtime += int(bool(record.excessive_overtime))
        self.issues.penalties += int(record.penalty_minutes > 0)

    def finalize(self) -> None:
        self.total_days = len(self.dates)
        self.off_days = len(self.off_dates)
        self.leave_days = len(self.leave_dates)
        self.working_days = len(self.dates - self.off_dates)
        self.regular_hours = round(self.regular_hours, 2)
        self.penalty_hours = round(self.penalty_hours, 2)
        self.double_time_hours = round(self.double_time_hours, 2)
        self.payable_hours = round(self.regular_hours + self.double_time_hours, 2)


@dataclass
class ApprovedHoursReport:
    employees: list[EmployeeHours]
    totals: EmployeeHours
    date_from: date | None = None
    date_to: date | None = None


def summarize(
    records: Iterable[DailyRecord],
    names: dict[int, str],
    double_time_days: set[date],
) -> ApprovedHoursReport:
    """Fold approved records into per-employee rows and grand totals."""
    rows: dict[int, EmployeeHours] = {}
    totals = EmployeeHours(employee_id=0, name="Total")
    for record in records:
        row = rows.get(record.employee_id)
        if row is None:
            row = EmployeeHours(
                employee_id=record.employee_id,
                name=names.get(record.employee_id, f"Employee {record.employee_id}"),
            )
            rows[record.employee_id] = row
        row.add(record, double_time_days)
        totals.add(record, double_time_days)

    for row in rows.values():
        row.finalize()
    totals.finalize()
    # Grand totals count employee-days, not calendar dates
    for name in ("total_days", "working_days", "off_days", "leave_days"):
        setattr(totals, name, sum(getattr(row, name) for row in rows.values()))
    ordered = sorted(rows.values(), key=lambda r: (r.name.lower(), r.employee_id))
    return ApprovedHoursReport(employees=ordered, totals=totals)


def _approved_query(
    date_from: date | None,
    date_to: date | None,
    employee_ids: Sequence[int] | None,
):
    query = (
        select(DailyRecord, Employee.name)
        .join(Employee, DailyRecord.employee_id == Employee.id)
        .where(DailyRecord.approved.is_(True))
        .order_by(DailyRecord.id)
    )
    if date_from is not None:
        query = query.where(DailyRecord.working_day >= date_from)
    if date_to is not None:
        query = query.where(DailyRecord.working_day <= date_to)
    if employee_ids:
        query = query.where(DailyRecord.employee_id.in_(employee_ids))
    return query


async def _load_approved(
    db: AsyncSession,
    date_from: date | None,
    date_to: date | None,
    employee_ids: Sequence[int] | None,
    should_cancel: ShouldCancel | None,
) -> tuple[list[DailyRecord], dict[int, str]]:
    records: list[DailyRecord] = []
    names: dict[int, str] = {}
    page_size = settings.AGGREGATION_PAGE_SIZE
    last_id = 0
    while True:
        if should_cancel is not None and await should_cancel():
            raise OperationCancelled("Aggregation cancelled")
        query = (
            _approved_query(date_from, date_to, employee_ids)
            .where(DailyRecord.id > last_id)
            .limit(page_size)
        )
        rows = (await store.execute(db, query)).all()
        for record, name in rows:
            records.append(record)
            names[record.employee_id] = name
        if len(rows) < page_size:
            return records, names
        last_id = rows[-1][0].id


async def _double_time_days(
    calendar: DoubleTimeCalendar,
    records: Sequence[DailyRecord],
    date_from: date | None,
    date_to: date | None,
) -> set[date]:
    if not records:
        return set()
    start = date_from or min(r.working_day for r in records)
    end = date_to or max(r.working_day for r in records)
    return await calendar.get_double_time_days(start, end)


async def get_approved_hours(
    db: AsyncSession,
    calendar: DoubleTimeCalendar,
    date_from: date | None = None,
    date_to: date | None = None,
    employee_ids: Sequence[int] | None = None,
    should_cancel: ShouldCancel | None = None,
) -> ApprovedHoursReport:
    records, names = await _load_approved(db, date_from, date_to, employee_ids, should_cancel)
    days = await _double_time_days(calendar, records, date_from, date_to)
    report = summarize(records, names, days)
    report.date_from, report.date_to = date_from, date_to
    logger.info(
        "Approved hours: %d employees, %d records, %.2f payable",
        len(report.employees),
        len(records),
        report.totals.payable_hours,
    )
    return report


@dataclass
class EmployeeDetail:
    summary: EmployeeHours
    records: list[DailyRecord]
    double_time_days: set[date]


async def get_employee_detail(
    db: AsyncSession,
    calendar: DoubleTimeCalendar,
    employee_id: int,
    date_from: date | None = None,
    date_to: date | None = None,
) -> EmployeeDetail:
    """One employee's approved days plus their summary row."""
    result = await store.execute(db, select(Employee).where(Employee.id == employee_id))
    employee = result.scalar_one_or_none()
    if employee is None:
        raise NotFoundError(f"Employee {employee_id} not found")

    records, _names = await _load_approved(db, date_from, date_to, [employee_id], None)
    records.sort(key=lambda r: (r.working_day, r.id))
    days = await _double_time_days(calendar, records, date_from, date_to)
    report = summarize(records, {employee.id: employee.name}, days)
    summary = report.employees[0] if report.employees else EmployeeHours(
        employee_id=employee.id, name=employee.name
    )
    return EmployeeDetail(summary=summary, records=records, double_time_days=days)
