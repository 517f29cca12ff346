"""Pydantic schemas for approved-hours reports and service health."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel

from shiftledger.schemas.records import DailyRecordRead


class IssueCountsRead(BaseModel):
    late: int
    early_leave: int
    missing_punches: int
    excessive_overtime: int
    penalties: int

    model_config = {"from_attributes": True}


class EmployeeHoursRead(BaseModel):
    employee_id: int
    name: str
    total_days: int
    working_days: int
    off_days: int
    leave_days: int
    regular_hours: float
    penalty_hours: float
    double_time_hours: float
    payable_hours: float
    issues: IssueCountsRead

    model_config = {"from_attributes": True}


class ApprovedHoursResponse(BaseModel):
    date_from: date | None
    date_to: date | None
    employees: list[EmployeeHoursRead]
    totals: EmployeeHoursRead

    model_config = {"from_attributes": True}


class EmployeeDetailResponse(BaseModel):
    summary: EmployeeHoursRead
    records: list[DailyRecordRead]
    double_time_days: list[date]


# ── Health / Status ────────────────────────────────────────────────
class HealthResponse(BaseModel):
    status: str = "ok"
    db: bool
    redis: bool


class StatusResponse(BaseModel):
    total_employees: int
    pending_submissions: int
    unapproved_records: int
    status: str
