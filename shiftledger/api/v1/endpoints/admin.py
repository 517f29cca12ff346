"""
Destructive maintenance (ADMIN-ONLY).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shiftledger.api.v1.deps import get_calendar, get_db, require_admin
from shiftledger.models.user import User
from shiftledger.schemas.records import ResetResponse
from shiftledger.services.calendar import DoubleTimeCalendar
from shiftledger.services.reconcile import reset_all

router = APIRouter(prefix="/admin", tags=["admin"])
logger = logging.getLogger(__name__)


@router.post("/reset", response_model=ResetResponse)
async def reset(
    db: AsyncSession = Depends(get_db),
    calendar: DoubleTimeCalendar = Depends(get_calendar),
    admin: User = Depends(require_admin),
) -> ResetResponse:
    """Clear all unapproved data. Approved days and holidays survive."""
    logger.warning("ADMIN %s requested a full reset", admin.email)
    outcome = await reset_all(db)
    if outcome.holidays_restored:
        calendar.invalidate()
    return ResetResponse(
        success=not outcome.errors,
        holidays_backed_up=outcome.holidays_backed_up,
        deleted_records=outcome.deleted_records,
        deleted_submissions=outcome.deleted_submissions,
        deleted_punches=outcome.deleted_punches,
        holidays_restored=outcome.holidays_restored,
        errors=outcome.errors,
    )
