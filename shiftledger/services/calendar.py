"""
Double-time calendar: Fridays and marked holidays.

The holiday set is cached for ``ttl_seconds``.  Holiday writes call
``invalidate()`` right after committing so the next lookup reloads.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from datetime import date, timedelta

logger = logging.getLogger(__name__)

FRIDAY = 4

HolidayLoader = Callable[[], Awaitable[set[date]]]


def is_friday(day: date) -> bool:
    return day.weekday() == FRIDAY


class DoubleTimeCalendar:
    def __init__(
        self,
        loader: HolidayLoader,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self._ttl = ttl_seconds
        self._clock = clock
        self._holidays: frozenset[date] | None = None
        self._loaded_at = 0.0
        self._lock = asyncio.Lock()

    @property
    def is_stale(self) -> bool:
        return self._holidays is None or self._clock() - self._loaded_at >= self._ttl

    def invalidate(self) -> None:
        self._holidays = None
        logger.debug("Double-time cache invalidated")

    async def _load(self) -> frozenset[date]:
        holidays = frozenset(await self._loader())
        self._holidays = holidays
        self._loaded_at = self._clock()
        logger.info("Double-time cache loaded %d holidays", len(holidays))
        return holidays

    async def refresh(self) -> frozenset[date]:
        async with self._lock:
            return await self._load()

    async def holidays(self) -> frozenset[date]:
        cached = self._holidays
        if cached is not None and not self.is_stale:
            return cached
        async with self._lock:
            # Another waiter may have loaded it while this one queued
            if self._holidays is not None and not self.is_stale:
                return self._holidays
            return await self._load()

    async def is_double_time_day(self, day: date) -> bool:
        if is_friday(day):
            return True
        return day in await self.holidays()

    async def get_double_time_days(self, start: date, end: date) -> set[date]:
        """Every Friday and holiday in [start, end]."""
        if end < start:
            return set()
        holidays = await self.holidays()
        days = {h for h in holidays if start <= h <= end}
        offset = (FRIDAY - start.weekday()) % 7
        friday = start + timedelta(days=offset)
        while friday <= end:
            days.add(friday)
            friday += timedelta(days=7)
        return days


def double_time_bonus(hours: float, day: date, double_time_days: set[date]) -> float:
    """Extra hours earned on a double-time day; payable = regular + bonus."""
    return hours if day in double_time_days else 0.0
