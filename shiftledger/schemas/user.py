"""Pydantic schemas for User CRUD."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

VALID_ROLES = {"admin", "hr", "employee", "readonly"}


class UserCreate(BaseModel):
    email: str
    password: str
    full_name: str | None = None
    role: str = "readonly"
    employee_id: int | None = None

    @field_validator("role")
    @classmethod
    def _validate_role(cls, v: str) -> str:
        if v not in VALID_ROLES:
            raise ValueError(f"Role must be one of: {sorted(VALID_ROLES)}")
        return v

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v

    @field_validator("password")
    @classmethod
    def _password_length(cls, v: str) -> str:
        if not 8 <= len(v.encode()) <= 72:
            raise ValueError("Password must be 8-72 bytes")
        return v


class UserRead(BaseModel):
    id: int
    email: str
    full_name: str | None
    role: str
    employee_id: int | None = None
    is_active: bool
    created_at: datetime | None

    model_config = {"from_attributes": True}
