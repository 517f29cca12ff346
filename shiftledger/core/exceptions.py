"""
Domain error taxonomy and global exception handlers.

Every service raises one of the ``ShiftLedgerError`` subclasses below; the
handlers turn them into ``{"detail": ..., "success": false}`` JSON bodies so
stack traces never leak to clients.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


# ── Domain errors ───────────────────────────────────────────────────
class ShiftLedgerError(Exception):
    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationError(ShiftLedgerError):
    """Malformed input: bad timestamps, unknown shift or leave types."""

    status_code = 422


class NotFoundError(ShiftLedgerError):
    """The target entity vanished (usually deleted concurrently)."""

    status_code = 404


class ConflictError(ShiftLedgerError):
    """Unique-key collision on the natural key of a daily record."""

    status_code = 409


class TransientStoreError(ShiftLedgerError):
    """Timeouts, dropped connections: safe to retry."""

    status_code = 503


class ForeignKeyNotVisibleError(TransientStoreError):
    """A referenced row was committed elsewhere but is not visible yet."""


class BusinessRuleViolation(ShiftLedgerError):
    status_code = 422

    def __init__(self, detail: str, reason: str) -> None:
        super().__init__(detail)
        self.reason = reason


class OperationCancelled(ShiftLedgerError):
    status_code = 499


# ── Handlers ────────────────────────────────────────────────────────
async def _http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "success": False},
    )


async def _domain_error_handler(_request: Request, exc: ShiftLedgerError) -> JSONResponse:
    content: dict = {"detail": exc.detail, "success": False}
    if isinstance(exc, BusinessRuleViolation):
        content["reason"] = exc.reason
    elif isinstance(exc, NotFoundError):
        content["notice"] = "Nothing was changed; refresh and try again"
    elif isinstance(exc, TransientStoreError):
        logger.warning("Transient store failure: %s", exc.detail)
    return JSONResponse(status_code=exc.status_code, content=content)


async def _integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Database integrity error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=409,
        content={"detail": "Database constraint violation", "success": False},
    )


async def _sqlalchemy_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal database error", "success": False},
    )


async def _generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "success": False},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(HTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ShiftLedgerError, _domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
