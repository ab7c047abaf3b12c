from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta, tzinfo
from functools import lru_cache
from typing import Iterator, Optional, Union
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE
from ..core.exceptions import ValidationError

PunchValue = Union[datetime, str, None]


@lru_cache(maxsize=None)
def get_zone(name: str = DEFAULT_TIMEZONE) -> ZoneInfo:
    return ZoneInfo(name)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def now_local(tz: Optional[tzinfo] = None) -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(tz or get_zone())


def to_local(value: datetime, tz: tzinfo) -> datetime:
    # Naive timestamps are wall-clock times in the employee's zone.
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def parse_punch(value: PunchValue, tz: tzinfo) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_local(value, tz)
    text = str(value).strip()
    if not text:
        return None
    try:
        return to_local(datetime.fromisoformat(text), tz)
    except ValueError:
        raise ValidationError(f"Invalid punch timestamp: {value!r}")


def at_local_time(day: date, at: time, tz: tzinfo) -> datetime:
    return datetime.combine(day, at, tzinfo=tz)


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_end(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def previous_month_start(day: date) -> date:
    return month_start(month_start(day) - timedelta(days=1))


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
