"""
Clock and calendar-date helpers.

All "today" and "now" values used for scheduling and streaks come from here so
the day boundary is evaluated in one configured timezone.
"""

from datetime import date, datetime, timedelta
from typing import Optional
import pytz

from config.config import APP_TIMEZONE, DATE_FORMAT, EPOCH_DATE
from services.errors import ValidationError

__all__ = [
    'EPOCH_DATE', 'get_today', 'get_now', 'add_days', 'yesterday',
    'days_between', 'format_date', 'parse_date', 'format_timestamp',
]


def get_now(timezone: Optional[str] = None) -> datetime:
    """
    Get current datetime in the given timezone (defaults to APP_TIMEZONE).

    Returns:
        Timezone-aware datetime
    """
    tz = pytz.timezone(timezone or APP_TIMEZONE)
    return datetime.now(tz)


def get_today(timezone: Optional[str] = None) -> date:
    """
    Get today's calendar date in the given timezone (defaults to APP_TIMEZONE).

    Example:
        >>> get_today('Asia/Tokyo')  # 9 hours ahead of UTC
        datetime.date(2025, 12, 14)  # when it is after 3 PM UTC on the 13th
    """
    return get_now(timezone).date()


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def yesterday(today: date) -> date:
    return today - timedelta(days=1)


def days_between(earlier: date, later: date) -> int:
    """Whole calendar days from earlier to later (negative if reversed)."""
    return (later - earlier).days


def format_date(day: Optional[date]) -> Optional[str]:
    if day is None:
        return None
    return day.strftime(DATE_FORMAT)


def parse_date(text: str) -> date:
    """
    Parse a YYYY-MM-DD date string.

    Raises:
        ValidationError: If the text is not a valid calendar date
    """
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date '{text}'. Expected format YYYY-MM-DD")


def format_timestamp(moment: Optional[datetime]) -> Optional[str]:
    if moment is None:
        return None
    return moment.isoformat()
