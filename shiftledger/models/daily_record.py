"""
DailyRecord model: one reconciled shift, leave day or off-day.

The natural key is (employee_id, shift_slot, day_kind, working_day,
is_manual_entry).  ``shift_slot`` repeats the shift type for work days and
the day kind otherwise, so the unique constraint never sees a NULL.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import (Boolean, Column, Date, DateTime, ForeignKey, Index,
                        Integer, Numeric, String, Text, UniqueConstraint)
from sqlalchemy.orm import relationship

from shiftledger.db.base import Base
from shiftledger.services.shifts import (DayKind, Leave, LeaveType, OffDay,
                                         ShiftType, Work)


class DailyRecord(Base):
    __tablename__ = "daily_records"
    __table_args__ = (
        UniqueConstraint(
            "employee_id",
            "shift_slot",
            "day_kind",
            "working_day",
            "is_manual_entry",
            name="uq_daily_record_natural_key",
        ),
        Index("ix_daily_record_employee_day", "employee_id", "working_day"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(Integer, ForeignKey("employees.id"), nullable=False)  # type: ignore[assignment]
    working_day: date = Column(Date, nullable=False, index=True)  # type: ignore[assignment]
    day_kind: str = Column(String(10), nullable=False)  # type: ignore[assignment]  # work | leave | off_day
    shift_type: str | None = Column(String(20), nullable=True)  # type: ignore[assignment]
    leave_type: str | None = Column(String(30), nullable=True)  # type: ignore[assignment]
    shift_slot: str = Column(String(30), nullable=False)  # type: ignore[assignment]
    is_manual_entry: bool = Column(  # type: ignore[assignment]
        Boolean, nullable=False, default=False, server_default="false"
    )
    custom_start: str | None = Column(String(5), nullable=True)  # type: ignore[assignment]
    custom_end: str | None = Column(String(5), nullable=True)  # type: ignore[assignment]

    first_check_in: datetime | None = Column(DateTime, nullable=True)  # type: ignore[assignment]
    last_check_out: datetime | None = Column(DateTime, nullable=True)  # type: ignore[assignment]
    display_check_in: str | None = Column(String(30), nullable=True)  # type: ignore[assignment]
    display_check_out: str | None = Column(String(30), nullable=True)  # type: ignore[assignment]
    hours_worked: float = Column(  # type: ignore[assignment]
        Numeric(6, 2, asdecimal=False), nullable=False, default=0.0
    )
    record_count: int = Column(Integer, nullable=False, default=0)  # type: ignore[assignment]

    missing_check_in: bool = Column(Boolean, default=False)  # type: ignore[assignment]
    missing_check_out: bool = Column(Boolean, default=False)  # type: ignore[assignment]
    is_late: bool = Column(Boolean, default=False)  # type: ignore[assignment]
    early_leave: bool = Column(Boolean, default=False)  # type: ignore[assignment]
    excessive_overtime: bool = Column(Boolean, default=False)  # type: ignore[assignment]
    corrected_records: bool = Column(Boolean, default=False)  # type: ignore[assignment]
    penalty_minutes: int = Column(Integer, nullable=False, default=0)  # type: ignore[assignment]

    notes: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    approved: bool = Column(Boolean, nullable=False, default=False, server_default="false")  # type: ignore[assignment]
    approved_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    approved_by: int | None = Column(Integer, ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]

    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    employee = relationship("Employee", back_populates="daily_records")

    @property
    def kind(self) -> DayKind:
        if self.day_kind == "leave":
            return Leave(LeaveType(self.leave_type))
        if self.day_kind == "off_day":
            return OffDay()
        return Work(ShiftType(self.shift_type))
