"""
Punch model: append-only audit trail of raw clock events.

Rows are never updated except for ``direction`` / ``is_corrected`` when an
operator swaps a mislabeled pair.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import (Boolean, Column, Date, DateTime, ForeignKey, Index,
                        Integer, String, UniqueConstraint)
from sqlalchemy.orm import relationship

from shiftledger.db.base import Base


class Punch(Base):
    __tablename__ = "punches"
    __table_args__ = (
        UniqueConstraint("employee_id", "timestamp", "direction", name="uq_punch_identity"),
        Index("ix_punch_employee_day", "employee_id", "working_day"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(Integer, ForeignKey("employees.id"), nullable=False)  # type: ignore[assignment]
    # Local wall-clock time, no tzinfo
    timestamp: datetime = Column(DateTime, nullable=False)  # type: ignore[assignment]
    direction: str = Column(String(10), nullable=False)  # type: ignore[assignment]  # check_in | check_out
    shift_hint: str | None = Column(String(20), nullable=True)  # type: ignore[assignment]
    shift_type: str = Column(String(20), nullable=False)  # type: ignore[assignment]
    working_day: date = Column(Date, nullable=False)  # type: ignore[assignment]
    custom_start: str | None = Column(String(5), nullable=True)  # type: ignore[assignment]  # HH:MM
    custom_end: str | None = Column(String(5), nullable=True)  # type: ignore[assignment]
    annotation: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    is_manual: bool = Column(Boolean, default=False, server_default="false")  # type: ignore[assignment]
    is_corrected: bool = Column(Boolean, default=False, server_default="false")  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    employee = relationship("Employee", back_populates="punches")
