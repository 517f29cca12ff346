"""
Holiday calendar maintenance, backup and restore.

Writes commit before invalidating the double-time cache so a concurrent
reload can never cache the pre-write state.
"""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shiftledger.core.exceptions import NotFoundError
from shiftledger.models.holiday import Holiday, HolidayBackup
from shiftledger.services import store
from shiftledger.services.calendar import DoubleTimeCalendar

logger = logging.getLogger(__name__)


async def load_holiday_dates(session_factory: async_sessionmaker[AsyncSession]) -> set[date]:
    """Calendar loader: every holiday date in the live table."""
    async with session_factory() as session:
        result = await store.execute(session, select(Holiday.date))
        return set(result.scalars().all())


async def list_holidays(db: AsyncSession) -> list[Holiday]:
    result = await store.execute(db, select(Holiday).order_by(Holiday.date))
    return list(result.scalars().all())


async def add_holiday(
    db: AsyncSession,
    calendar: DoubleTimeCalendar,
    day: date,
    name: str | None = None,
) -> Holiday:
    """Mark *day* as a holiday; re-adding an existing date renames it."""
    result = await store.execute(db, select(Holiday).where(Holiday.date == day))
    holiday = result.scalar_one_or_none()
    if holiday is None:
        holiday = Holiday(date=day, name=name)
        db.add(holiday)
    elif name is not None:
        holiday.name = name
    await store.commit(db)
    await db.refresh(holiday)
    calendar.invalidate()
    logger.info("Holiday set on %s (%s)", day, name or "unnamed")
    return holiday


async def remove_holiday(db: AsyncSession, calendar: DoubleTimeCalendar, holiday_id: int) -> Holiday:
    result = await store.execute(db, select(Holiday).where(Holiday.id == holiday_id))
    holiday = result.scalar_one_or_none()
    if holiday is None:
        raise NotFoundError(f"Holiday {holiday_id} no longer exists")
    await db.delete(holiday)
    await store.commit(db)
    calendar.invalidate()
    logger.info("Holiday removed from %s", holiday.date)
    return holiday


async def backup_holidays(db: AsyncSession) -> int:
    """Replace the backup table with the live holiday list. Does not commit."""
    holidays = await list_holidays(db)
    await store.execute(db, sa_delete(HolidayBackup))
    db.add_all(HolidayBackup(date=h.date, name=h.name) for h in holidays)
    await store.flush(db)
    logger.info("Backed up %d holidays", len(holidays))
    return len(holidays)


async def restore_holidays_if_empty(db: AsyncSession) -> int:
    """Refill an empty holiday table from the backup. Does not commit."""
    count = await store.execute(db, select(func.count(Holiday.id)))
    if count.scalar():
        return 0
    result = await store.execute(db, select(HolidayBackup).order_by(HolidayBackup.date))
    backups = list(result.scalars().all())
    seen: set[date] = set()
    for backup in backups:
        if backup.date in seen:
            continue
        seen.add(backup.date)
        db.add(Holiday(date=backup.date, name=backup.name))
    await store.flush(db)
    if seen:
        logger.warning("Holiday table was empty; restored %d holidays from backup", len(seen))
    return len(seen)
