"""
Calendar helpers for the analytics engine.

All day arithmetic goes through this module so that results never depend on
the host's locale or timezone: callers pass dates (or datetimes already in
the configured zone), weekdays are numbered 0=Sunday..6=Saturday from the
ISO weekday, and windows are plain sequences of dates.
"""

from datetime import date, datetime, timedelta
from typing import Iterator, List, Optional, Union

import pytz

WEEKDAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]
SHORT_WEEKDAY_NAMES = [name[:3] for name in WEEKDAY_NAMES]

DayLike = Union[date, datetime]


def weekday_index(day: DayLike) -> int:
    """0 for Sunday through 6 for Saturday."""
    return day.isoweekday() % 7


def start_of_day(value: DayLike) -> date:
    """Normalize a date or datetime to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def local_now(tz=None) -> datetime:
    """Current time in `tz` (UTC when omitted)."""
    return datetime.now(tz or pytz.utc)


def to_local_day(moment: datetime, tz) -> date:
    """
    Calendar day of `moment` in `tz`.
    Naive datetimes are treated as UTC.
    """
    if moment.tzinfo is None:
        moment = pytz.utc.localize(moment)
    return moment.astimezone(tz).date()


def days_back(today: date, count: int) -> Iterator[date]:
    """Yield `count` days starting at `today` and going backward."""
    for offset in range(count):
        yield today - timedelta(days=offset)


def trailing_window(today: date, count: int) -> List[date]:
    """The last `count` days, oldest first, ending with `today`."""
    return list(reversed(list(days_back(today, count))))


def earliest(*days: Optional[date]) -> Optional[date]:
    known = [d for d in days if d is not None]
    return min(known) if known else None
