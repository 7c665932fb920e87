"""
Validators
==========

Common validation utilities.
"""

from datetime import date
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from questlog.core.errors import ValidationError


def validate_timezone(tz_str: Optional[str]) -> Optional[str]:
    """
    Validate timezone string.

    Args:
        tz_str: IANA timezone name (e.g., "America/New_York")

    Returns:
        Validated timezone string or None

    Raises:
        ValidationError: If timezone is invalid
    """
    if tz_str is None:
        return None

    try:
        ZoneInfo(tz_str)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(
            message="Invalid timezone",
            field="timezone",
        )

    return tz_str


# Calendar bounds are local midnights, shifted to UTC for the query.
MIN_CALENDAR_YEAR = date.min.year + 1
MAX_CALENDAR_YEAR = date.max.year - 1


def validate_month(year: int, month: int) -> tuple[int, int]:
    """
    Validate a calendar month.

    Raises:
        ValidationError: If the month is outside 1-12 or the year is unusable
    """
    if not 1 <= month <= 12:
        raise ValidationError(
            message="Month must be between 1 and 12",
            field="month",
        )
    if not MIN_CALENDAR_YEAR <= year <= MAX_CALENDAR_YEAR:
        raise ValidationError(
            message="Invalid year",
            field="year",
        )
    return year, month


def validate_calendar_date(day: date) -> date:
    """Reject dates too close to the ends of the representable range."""
    if not MIN_CALENDAR_YEAR <= day.year <= MAX_CALENDAR_YEAR:
        raise ValidationError(
            message="Invalid date",
            field="date",
        )
    return day
