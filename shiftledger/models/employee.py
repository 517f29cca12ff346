"""
Employee model: the people whose punches are reconciled.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from shiftledger.db.base import Base


class Employee(Base):
    __tablename__ = "employees"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_number: str = Column(String(32), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    department: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    # Canteen staff get the canteen-early / canteen-late windows
    is_canteen: bool = Column(Boolean, default=False, server_default="false")  # type: ignore[assignment]
    is_active: bool = Column(Boolean, default=True, server_default="true")  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    punches = relationship("Punch", back_populates="employee", cascade="all, delete-orphan")
    daily_records = relationship(
        "DailyRecord",
        back_populates="employee",
        cascade="all, delete-orphan",
    )
