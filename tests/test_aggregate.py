"""
Aggregator tests on in-memory records.
"""

from datetime import date
from types import SimpleNamespace

import pytest

from shiftledger.services.aggregate import summarize


def _record(employee_id, day, kind="work", hours=9.0, penalty=0, **flags):
    values = {
        "employee_id": employee_id,
        "working_day": day,
        "day_kind": kind,
        "hours_worked": hours,
        "penalty_minutes": penalty,
        "is_late": False,
        "early_leave": False,
        "missing_check_in": False,
        "missing_check_out": False,
        "excessive_overtime": False,
    }
    values.update(flags)
    return SimpleNamespace(**values)


def test_friday_earns_double_time():
    report = summarize(
        [_record(1, date(2024, 3, 8))],
        {1: "Alice"},
        {date(2024, 3, 8)},
    )
    row = report.employees[0]
    assert row.regular_hours == 9.0
    assert row.double_time_hours == 9.0
    assert row.payable_hours == 18.0


def test_penalty_deducted_and_counted():
    report = summarize(
        [_record(1, date(2024, 3, 4), penalty=30, is_late=True)],
        {1: "Alice"},
        set(),
    )
    row = report.employees[0]
    assert row.regular_hours == 8.5
    assert row.penalty_hours == 0.5
    assert row.issues.penalties == 1
    assert row.issues.late == 1


def test_day_kinds_are_counted_separately():
    records = [
        _record(1, date(2024, 3, 4)),
        _record(1, date(2024, 3, 5), kind="leave", hours=9.0),
        _record(1, date(2024, 3, 6), kind="off_day", hours=0.0),
        _record(1, date(2024, 3, 7), kind="work", hours=4.0, missing_check_out=True),
    ]
    row = summarize(records, {1: "Alice"}, set()).employees[0]
    assert row.total_days == 4
    assert row.off_days == 1
    assert row.leave_days == 1
    assert row.working_days == 3
    assert row.regular_hours == 22.0
    assert row.issues.missing_punches == 1


def test_leave_on_holiday_gets_no_bonus():
    report = summarize(
        [_record(1, date(2024, 3, 8), kind="leave")],
        {1: "Alice"},
        {date(2024, 3, 8)},
    )
    assert report.employees[0].double_time_hours == 0.0


def test_rows_sorted_by_name_and_totals_summed():
    records = [
        _record(2, date(2024, 3, 4), hours=8.0),
        _record(1, date(2024, 3, 4), hours=7.25),
    ]
    report = summarize(records, {1: "zed", 2: "Amy"}, set())
    assert [r.name for r in report.employees] == ["Amy", "zed"]
    assert report.totals.regular_hours == pytest.approx(15.25)
    assert report.totals.total_days == 2


def test_empty_input():
    report = summarize([], {}, set())
    assert report.employees == []
    assert report.totals.payable_hours == 0.0


def test_two_shifts_on_one_date_count_as_one_day():
    records = [
        _record(1, date(2024, 3, 4), hours=4.0),
        _record(1, date(2024, 3, 4), hours=5.0),
        _record(2, date(2024, 3, 4)),
    ]
    report = summarize(records, {1: "Alice", 2: "Bob"}, set())
    alice = report.employees[0]
    assert alice.total_days == 1
    assert alice.working_days == 1
    assert alice.regular_hours == 9.0
    assert report.totals.total_days == 2
    assert report.totals.working_days == 2
