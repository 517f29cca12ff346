"""
Holiday calendar and double-time day lookup.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shiftledger.api.v1.deps import (get_calendar, get_current_active_user,
                                     get_db, require_hr)
from shiftledger.core.exceptions import ValidationError
from shiftledger.models.holiday import Holiday
from shiftledger.models.user import User
from shiftledger.schemas.employee import DeleteResponse
from shiftledger.schemas.holiday import (CacheRefreshResponse,
                                         DoubleTimeResponse, HolidayCreate,
                                         HolidayRead)
from shiftledger.services.calendar import DoubleTimeCalendar
from shiftledger.services.holidays import (add_holiday, list_holidays,
                                           remove_holiday)
from shiftledger.services.periods import resolve_range

router = APIRouter(prefix="/holidays", tags=["holidays"])


@router.get("", response_model=list[HolidayRead])
async def get_holidays(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> list[Holiday]:
    return await list_holidays(db)


@router.post("", response_model=HolidayRead, status_code=201)
async def create_holiday(
    body: HolidayCreate,
    db: AsyncSession = Depends(get_db),
    calendar: DoubleTimeCalendar = Depends(get_calendar),
    _hr: User = Depends(require_hr),
) -> Holiday:
    return await add_holiday(db, calendar, body.date, body.name)


@router.delete("/{holiday_id}", response_model=DeleteResponse)
async def delete_holiday(
    holiday_id: int,
    db: AsyncSession = Depends(get_db),
    calendar: DoubleTimeCalendar = Depends(get_calendar),
    _hr: User = Depends(require_hr),
) -> DeleteResponse:
    holiday = await remove_holiday(db, calendar, holiday_id)
    return DeleteResponse(success=True, message=f"Holiday on {holiday.date} removed")


@router.get("/double-time", response_model=DoubleTimeResponse)
async def double_time_days(
    period: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    calendar: DoubleTimeCalendar = Depends(get_calendar),
    _user: User = Depends(get_current_active_user),
) -> DoubleTimeResponse:
    """Fridays and holidays in the requested range."""
    start, end = resolve_range(period, date_from, date_to)
    if start is None or end is None:
        raise ValidationError("Give a period or both date_from and date_to")
    days = await calendar.get_double_time_days(start, end)
    return DoubleTimeResponse(start=start, end=end, days=sorted(days))


@router.post("/refresh-cache", response_model=CacheRefreshResponse)
async def refresh_cache(
    calendar: DoubleTimeCalendar = Depends(get_calendar),
    _hr: User = Depends(require_hr),
) -> CacheRefreshResponse:
    holidays = await calendar.refresh()
    return CacheRefreshResponse(success=True, holidays=len(holidays))
