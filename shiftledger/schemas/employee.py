"""Pydantic schemas for the employee registry."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, field_validator

_NUMBER_RE = re.compile(r"^[A-Za-z0-9_-]{1,32}$")


class EmployeeCreate(BaseModel):
    employee_number: str
    name: str
    department: str | None = None
    is_canteen: bool = False

    @field_validator("employee_number")
    @classmethod
    def _number(cls, v: str) -> str:
        v = v.strip()
        if not _NUMBER_RE.match(v):
            raise ValueError("Employee number must be 1-32 alphanumeric chars")
        return v

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        if len(v) > 200:
            raise ValueError("Name must not exceed 200 characters")
        return v


class EmployeeUpdate(BaseModel):
    name: str | None = None
    department: str | None = None
    is_canteen: bool | None = None


class EmployeeRead(BaseModel):
    id: int
    employee_number: str
    name: str
    department: str | None
    is_canteen: bool
    is_active: bool
    created_at: datetime | None

    model_config = {"from_attributes": True}


class DeleteResponse(BaseModel):
    success: bool
    message: str
