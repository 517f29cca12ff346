"""Pydantic schemas for the holiday calendar."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field


class HolidayCreate(BaseModel):
    date: date
    name: str | None = Field(default=None, max_length=200)


class HolidayRead(BaseModel):
    id: int
    date: date
    name: str | None
    created_at: datetime | None

    model_config = {"from_attributes": True}


class DoubleTimeResponse(BaseModel):
    start: date
    end: date
    days: list[date]


class CacheRefreshResponse(BaseModel):
    success: bool
    holidays: int
