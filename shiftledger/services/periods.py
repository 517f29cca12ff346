"""Date filters: ``YYYY-MM`` for a whole month or ``YYYY-MM-DD|YYYY-MM-DD``."""

from __future__ import annotations

import calendar
from datetime import date

from shiftledger.core.exceptions import ValidationError


def parse_period(value: str | None) -> tuple[date | None, date | None]:
    if not value:
        return None, None
    value = value.strip()
    try:
        if "|" in value:
            start_s, end_s = value.split("|", 1)
            start, end = date.fromisoformat(start_s.strip()), date.fromisoformat(end_s.strip())
        else:
            year_s, month_s = value.split("-")
            if len(year_s) != 4 or len(month_s) != 2:
                raise ValueError(value)
            year, month = int(year_s), int(month_s)
            start = date(year, month, 1)
            end = date(year, month, calendar.monthrange(year, month)[1])
    except ValueError:
        raise ValidationError(
            f"Invalid period {value!r}; use YYYY-MM or YYYY-MM-DD|YYYY-MM-DD"
        ) from None
    if end < start:
        raise ValidationError("Period end is before its start")
    return start, end


def resolve_range(
    period: str | None,
    date_from: date | None,
    date_to: date | None,
) -> tuple[date | None, date | None]:
    """Explicit bounds win over *period*."""
    start, end = parse_period(period)
    start = date_from or start
    end = date_to or end
    if start is not None and end is not None and end < start:
        raise ValidationError("date_to is before date_from")
    return start, end
