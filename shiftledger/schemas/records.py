"""Pydantic schemas for punches, daily records, leave and submissions."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from shiftledger.services.shifts import LeaveType, ShiftType

_HHMM_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

DirectionLiteral = Literal["check_in", "check_out"]


def _check_hhmm(v: str | None) -> str | None:
    if v is not None and not _HHMM_RE.match(v):
        raise ValueError("Time must be HH:MM")
    return v


# ── Punches ─────────────────────────────────────────────────────────
class PunchCreate(BaseModel):
    employee_id: int
    timestamp: datetime
    direction: DirectionLiteral | None = None
    # Unknown hints are ignored; the punch is then classified by its time
    shift_hint: str | None = Field(default=None, max_length=20)
    annotation: str | None = Field(default=None, max_length=500)
    custom_start: str | None = None
    custom_end: str | None = None

    @field_validator("custom_start", "custom_end")
    @classmethod
    def _hhmm(cls, v: str | None) -> str | None:
        return _check_hhmm(v)


class PunchRead(BaseModel):
    id: int
    employee_id: int
    timestamp: datetime
    direction: str
    shift_hint: str | None
    shift_type: str
    working_day: date
    annotation: str | None
    is_manual: bool
    is_corrected: bool

    model_config = {"from_attributes": True}


class PunchRowIn(BaseModel):
    employee_number: str = Field(min_length=1, max_length=32)
    employee_name: str | None = Field(default=None, max_length=200)
    timestamp: datetime
    direction: DirectionLiteral | None = None
    shift_hint: str | None = Field(default=None, max_length=20)
    annotation: str | None = Field(default=None, max_length=500)
    custom_start: str | None = None
    custom_end: str | None = None

    @field_validator("custom_start", "custom_end")
    @classmethod
    def _hhmm(cls, v: str | None) -> str | None:
        return _check_hhmm(v)


class PunchBatchRequest(BaseModel):
    rows: list[PunchRowIn] = Field(min_length=1, max_length=10000)
    chunk_size: int | None = Field(default=None, ge=1, le=1000)


class BatchResultRead(BaseModel):
    success: bool
    success_count: int
    errors: list[dict]
    cancelled: bool = False


# ── Daily records ───────────────────────────────────────────────────
class DailyRecordRead(BaseModel):
    id: int
    employee_id: int
    working_day: date
    day_kind: str
    shift_type: str | None
    leave_type: str | None
    shift_slot: str
    is_manual_entry: bool
    custom_start: str | None = None
    custom_end: str | None = None
    first_check_in: datetime | None
    last_check_out: datetime | None
    display_check_in: str | None
    display_check_out: str | None
    hours_worked: float
    record_count: int
    missing_check_in: bool
    missing_check_out: bool
    is_late: bool
    early_leave: bool
    excessive_overtime: bool
    corrected_records: bool
    penalty_minutes: int
    notes: str | None
    approved: bool
    approved_at: datetime | None = None

    model_config = {"from_attributes": True}


class PunchResponse(BaseModel):
    success: bool
    created: bool
    punch: PunchRead
    records: list[DailyRecordRead]


class DayRef(BaseModel):
    employee_id: int
    working_day: date
    # Picks one record when a day holds several: a shift type, "leave" or "off_day"
    shift_slot: str | None = None


class PenaltyRequest(DayRef):
    minutes: int = Field(ge=0, le=1440)


class EditTimesRequest(DayRef):
    check_in: datetime | None = None
    check_out: datetime | None = None
    new_shift_type: ShiftType | None = None
    custom_start: str | None = None
    custom_end: str | None = None
    notes: str | None = Field(default=None, max_length=2000)

    @field_validator("custom_start", "custom_end")
    @classmethod
    def _hhmm(cls, v: str | None) -> str | None:
        return _check_hhmm(v)


class DaySubmission(BaseModel):
    employee_id: int
    start: date
    end: date | None = None
    notes: str | None = Field(default=None, max_length=2000)


class LeaveRequest(DaySubmission):
    leave_type: LeaveType


class RecordsResponse(BaseModel):
    success: bool
    records: list[DailyRecordRead]


# ── Shift submissions ───────────────────────────────────────────────
class ShiftSubmissionCreate(BaseModel):
    employee_id: int | None = None
    working_day: date
    shift_type: ShiftType
    custom_start: str | None = None
    custom_end: str | None = None
    notes: str | None = Field(default=None, max_length=500)

    @field_validator("custom_start", "custom_end")
    @classmethod
    def _hhmm(cls, v: str | None) -> str | None:
        return _check_hhmm(v)


class ShiftSubmissionRead(BaseModel):
    id: int
    employee_id: int
    working_day: date
    shift_type: str
    custom_start: str | None
    custom_end: str | None
    status: str
    notes: str | None
    rejection_reason: str | None
    daily_record_id: int | None
    created_at: datetime | None
    decided_at: datetime | None

    model_config = {"from_attributes": True}


class RejectRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


class ConfirmResponse(BaseModel):
    success: bool
    submission: ShiftSubmissionRead
    record: DailyRecordRead


# ── Destructive operations ──────────────────────────────────────────
class ResetResponse(BaseModel):
    success: bool
    holidays_backed_up: int
    deleted_records: int
    deleted_submissions: int
    deleted_punches: int
    holidays_restored: int
    errors: list[dict]
