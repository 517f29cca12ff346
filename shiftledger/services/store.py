"""
Store boundary: timeouts, error translation and transient retries.

SQLAlchemy / driver exceptions are mapped to the domain taxonomy here and
nowhere else.  PostgreSQL errors are recognised by SQLSTATE, SQLite ones
by message since the sqlite3 driver exposes no codes.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from shiftledger.core.config import settings
from shiftledger.core.exceptions import (ConflictError,
                                         ForeignKeyNotVisibleError,
                                         ShiftLedgerError, TransientStoreError)

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    for attr in ("sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)
    cause = getattr(orig, "__cause__", None)
    code = getattr(cause, "sqlstate", None)
    return str(code) if code else None


def translate_store_error(exc: Exception) -> ShiftLedgerError | None:
    """Map a store exception to a domain error, or ``None`` if unrecognised."""
    if isinstance(exc, ShiftLedgerError):
        return exc
    if isinstance(exc, asyncio.TimeoutError):
        return TransientStoreError("Store call timed out")
    if isinstance(exc, IntegrityError):
        code = _sqlstate(exc)
        message = str(exc.orig)
        if code == UNIQUE_VIOLATION or "UNIQUE constraint failed" in message:
            return ConflictError("Record already exists for this natural key")
        if code == FOREIGN_KEY_VIOLATION or "FOREIGN KEY constraint failed" in message:
            return ForeignKeyNotVisibleError("Referenced row is not visible yet")
        return None
    if isinstance(exc, OperationalError) or (
        isinstance(exc, DBAPIError) and exc.connection_invalidated
    ):
        return TransientStoreError("Database temporarily unavailable")
    return None


async def guarded(awaitable: Awaitable[T], timeout: float | None = None) -> T:
    """Await a store call under a timeout, translating failures."""
    try:
        return await asyncio.wait_for(
            awaitable,
            timeout=settings.STORE_TIMEOUT_SECONDS if timeout is None else timeout,
        )
    except (asyncio.TimeoutError, DBAPIError) as exc:
        translated = translate_store_error(exc)
        if translated is None:
            raise
        raise translated from exc


async def execute(db: AsyncSession, statement: Any) -> Any:
    return await guarded(db.execute(statement))


async def flush(db: AsyncSession) -> None:
    await guarded(db.flush())


async def commit(db: AsyncSession) -> None:
    await guarded(db.commit())


def backoff_delay(
    attempt: int,
    initial: float,
    maximum: float,
    jitter: Callable[[float, float], float] = random.uniform,
) -> float:
    """Capped exponential delay for *attempt* (0-based), jittered by ±25%."""
    base = min(initial * (2 ** attempt), maximum)
    return min(base * jitter(0.75, 1.25), maximum)


async def retry_transient(
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int | None = None,
    initial_delay: float | None = None,
    max_delay: float | None = None,
    retry_on: tuple[type[Exception], ...] = (ForeignKeyNotVisibleError,),
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """Run *operation*, retrying ``retry_on`` errors with capped backoff."""
    attempts = attempts or settings.RETRY_ATTEMPTS
    initial = settings.RETRY_INITIAL_DELAY_SECONDS if initial_delay is None else initial_delay
    maximum = settings.RETRY_MAX_DELAY_SECONDS if max_delay is None else max_delay

    for attempt in range(attempts):
        try:
            return await operation()
        except retry_on as exc:
            if attempt == attempts - 1:
                logger.error("Giving up after %d attempts: %s", attempts, exc)
                raise
            delay = backoff_delay(attempt, initial, maximum)
            logger.warning(
                "Transient store error (attempt %d/%d), retrying in %.2fs: %s",
                attempt + 1,
                attempts,
                delay,
                exc,
            )
            await sleep(delay)
    raise AssertionError("unreachable")
