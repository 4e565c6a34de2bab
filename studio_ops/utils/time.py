"""Date helpers for month keys and studio-local time."""

import calendar
from datetime import date, datetime
from typing import Iterator
from zoneinfo import ZoneInfo

from studio_ops.config import settings

STUDIO_TZ = ZoneInfo(settings.TIMEZONE)


def now_local_naive() -> datetime:
    """
    Current studio-local time, returned as naive datetime for DB storage.
    """
    return datetime.now(STUDIO_TZ).replace(tzinfo=None)


def today_local() -> date:
    return datetime.now(STUDIO_TZ).date()


def month_key(day: date) -> str:
    """YYYY-MM key for the month containing `day`."""
    return f"{day.year:04d}-{day.month:02d}"


def month_start(key: str) -> date:
    year, month = (int(part) for part in key.split("-"))
    return date(year, month, 1)


def month_end(key: str) -> date:
    """Last calendar day of the YYYY-MM month."""
    start = month_start(key)
    return start.replace(day=calendar.monthrange(start.year, start.month)[1])


def iter_month_keys(start: date, end: date) -> Iterator[str]:
    """YYYY-MM keys from the month of `start` through the month of `end`, inclusive."""
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        yield f"{year:04d}-{month:02d}"
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
