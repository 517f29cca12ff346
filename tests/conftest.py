"""
Shared fixtures for the ShiftLedger test suite.

Each test gets its own SQLite database file (aiosqlite) so sessions opened
by the app, the calendar loader and the test itself see the same data.
"""

import os
import sys
from collections.abc import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["TIMEZONE_OFFSET"] = "+00:00"

from functools import partial

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,
                                    create_async_engine)

from shiftledger.api.v1.deps import (get_calendar, get_current_active_user,
                                     get_db)
from shiftledger.db.base import Base
from shiftledger.db.session import configure_sqlite
from shiftledger.main import app
from shiftledger.models.employee import Employee
from shiftledger.models.user import User
from shiftledger.services.calendar import DoubleTimeCalendar
from shiftledger.services.holidays import load_holiday_dates

TEST_USER_ID = 1


@pytest.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh database with all tables and one admin user per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    configure_sqlite(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        session.add(
            User(
                id=TEST_USER_ID,
                email="admin@example.com",
                hashed_password="not-a-real-hash",
                role="admin",
            )
        )
        await session.commit()

    yield factory
    await engine.dispose()


@pytest.fixture
def calendar(session_factory) -> DoubleTimeCalendar:
    return DoubleTimeCalendar(partial(load_holiday_dates, session_factory), ttl_seconds=300)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct service calls and queries."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def current_user() -> dict:
    """Mutable so a test can switch roles mid-way."""
    return {"role": "admin", "employee_id": None}


@pytest.fixture
async def async_client(session_factory, calendar, current_user) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app with auth stubbed out."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    async def _override_get_current_active_user() -> User:
        return User(
            id=TEST_USER_ID,
            email="admin@example.com",
            is_active=True,
            role=current_user["role"],
            employee_id=current_user["employee_id"],
        )

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_calendar] = lambda: calendar
    app.dependency_overrides[get_current_active_user] = _override_get_current_active_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
async def employee(db_session) -> Employee:
    emp = Employee(employee_number="E001", name="Alice Able", department="Ops")
    db_session.add(emp)
    await db_session.commit()
    return emp


@pytest.fixture
async def second_employee(db_session) -> Employee:
    emp = Employee(employee_number="E002", name="Bob Baker", department="Ops")
    db_session.add(emp)
    await db_session.commit()
    return emp
