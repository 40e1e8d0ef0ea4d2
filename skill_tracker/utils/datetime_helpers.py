"""
Calendar-day handling utilities

All completion bookkeeping happens on calendar days: a timestamp is reduced to
the local date it falls on before it is used as a key or compared.

RULES:
- Aware datetimes are converted into the tracker timezone before taking the date
- Naive datetimes are assumed to already be local time
- Weeks start on Monday
"""

import calendar
import logging
from datetime import datetime, date, timedelta
from typing import Callable, Optional, Union
from zoneinfo import ZoneInfo

from skill_tracker.config import TRACKER_TIMEZONE

logger = logging.getLogger(__name__)

DayLike = Union[date, datetime, str]


def get_tracker_timezone(tz_name: Optional[str] = None) -> Optional[ZoneInfo]:
    """
    Resolve the timezone used for calendar-day normalization

    Args:
        tz_name: IANA timezone name; falls back to TRACKER_TIMEZONE

    Returns:
        ZoneInfo, or None to use the system's local time
    """
    tz_str = tz_name if tz_name is not None else TRACKER_TIMEZONE
    if not tz_str:
        return None

    try:
        return ZoneInfo(tz_str)
    except Exception as e:
        logger.error(f"Invalid timezone '{tz_str}', using system local time: {e}")
        return None


def to_calendar_day(value: DayLike, tz: Optional[ZoneInfo] = None) -> date:
    """
    Normalize a date, datetime or ISO string to its calendar day

    Args:
        value: date, naive/aware datetime, or ISO 8601 string
        tz: Target timezone for aware datetimes (None = system local)

    Returns:
        The local calendar day

    Raises:
        ValueError: If a string is not ISO 8601
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz) if tz else value.astimezone()
        return value.date()

    if isinstance(value, date):
        return value

    raise ValueError(f"Cannot convert {type(value).__name__} to a calendar day")


def add_days(day: date, days: int) -> date:
    """Add (or subtract) whole days"""
    return day + timedelta(days=days)


def days_between(start: date, end: date) -> int:
    """Signed number of calendar days from start to end"""
    return (end - start).days


def start_of_week(day: date) -> date:
    """Monday on or before the given day"""
    return day - timedelta(days=day.weekday())


def start_of_month(day: date) -> date:
    """First day of the day's month"""
    return day.replace(day=1)


def days_in_month(day: date) -> int:
    """Number of days in the day's month"""
    return calendar.monthrange(day.year, day.month)[1]


def subtract_years(day: date, years: int) -> date:
    """
    Same calendar day `years` years earlier

    Feb 29 maps to Feb 28 when the target year is not a leap year.
    """
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)


class Clock:
    """
    Supplies "now" and calendar-day arithmetic in one timezone

    Every component of the engine shares one Clock, so a single logical
    operation sees one consistent "today".
    """

    def __init__(
        self,
        timezone: Optional[Union[str, ZoneInfo]] = None,
        now_fn: Optional[Callable[[], datetime]] = None
    ):
        if isinstance(timezone, str):
            timezone = get_tracker_timezone(timezone)
        elif timezone is None:
            timezone = get_tracker_timezone()
        self.timezone = timezone
        self._now_fn = now_fn

    def now(self) -> datetime:
        """Current datetime in the tracker timezone"""
        if self._now_fn is not None:
            return self._now_fn()
        if self.timezone is not None:
            return datetime.now(self.timezone)
        return datetime.now()

    def today(self) -> date:
        """Current calendar day"""
        return self.to_calendar_day(self.now())

    def yesterday(self) -> date:
        return add_days(self.today(), -1)

    def to_calendar_day(self, value: DayLike) -> date:
        return to_calendar_day(value, self.timezone)

    def is_today(self, value: DayLike) -> bool:
        return self.to_calendar_day(value) == self.today()


def coerce_calendar_day(value):
    """
    Pydantic `before` hook for calendar-day fields

    Passes plain dates and YYYY-MM-DD strings through and reduces datetimes
    (objects or ISO strings with a time part) to their calendar day in the
    tracker timezone, the same day a default Clock computes.
    """
    if isinstance(value, datetime) or (isinstance(value, str) and len(value.strip()) > 10):
        return to_calendar_day(value, get_tracker_timezone())
    return value
