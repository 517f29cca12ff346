"""
ShiftSubmission model: a shift entered by hand and awaiting HR review.

Status flow: pending -> confirmed | rejected.  Confirming materialises a
manual DailyRecord and links it here.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import (Column, Date, DateTime, ForeignKey, Index, Integer,
                        String)

from shiftledger.db.base import Base


class ShiftSubmission(Base):
    __tablename__ = "shift_submissions"
    __table_args__ = (Index("ix_submission_employee_day", "employee_id", "working_day"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(Integer, ForeignKey("employees.id"), nullable=False)  # type: ignore[assignment]
    working_day: date = Column(Date, nullable=False)  # type: ignore[assignment]
    shift_type: str = Column(String(20), nullable=False)  # type: ignore[assignment]
    custom_start: str | None = Column(String(5), nullable=True)  # type: ignore[assignment]
    custom_end: str | None = Column(String(5), nullable=True)  # type: ignore[assignment]
    status: str = Column(  # type: ignore[assignment]
        String(12),
        nullable=False,
        default="pending",
        server_default="pending",
    )  # pending | confirmed | rejected
    notes: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    rejection_reason: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    daily_record_id: int | None = Column(  # type: ignore[assignment]
        Integer,
        ForeignKey("daily_records.id", ondelete="SET NULL"),
        nullable=True,
    )
    submitted_by: int | None = Column(Integer, ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
    decided_by: int | None = Column(Integer, ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    decided_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
