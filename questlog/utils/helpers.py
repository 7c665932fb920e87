"""
Helper Functions
================

Common utility functions used across the application.
"""

from datetime import date, datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def utc_now() -> datetime:
    """Get current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """Return the ``ZoneInfo`` for ``name``, falling back to UTC."""
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone.utc


def local_datetime(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Convert ``value`` to ``tz``; naive datetimes are treated as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz or timezone.utc)


def calendar_day(value: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar date of ``value`` as seen in ``tz``."""
    return local_datetime(value, tz).date()


LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape ``%`` and ``_`` so ``value`` matches literally in LIKE/ILIKE."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
