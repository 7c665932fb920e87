"""
Statistics API Endpoints
========================

Dashboard statistics over a trailing window, the all-time summary and the
streak calendar. Everything is derived in memory from the user's entries.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from questlog.config import settings
from questlog.db.session import get_db
from questlog.dependencies import CurrentProfile, CurrentUser
from questlog.schemas.common import DataResponse
from questlog.services.achievement_service import AchievementService
from questlog.services.cache import CacheKeys, CacheManager
from questlog.services.gamification import level_progress
from questlog.services.journal_service import JournalService, entry_to_dict
from questlog.services.stats import (
    calendar_month,
    compute_window_stats,
    month_bounds,
    summarize_entries,
)
from questlog.utils.helpers import calendar_day, resolve_timezone, utc_now
from questlog.utils.validators import validate_calendar_date, validate_month

logger = logging.getLogger(__name__)

router = APIRouter()

SUMMARY_TAG_LIMIT = 10


def day_start(day: date, tz) -> datetime:
    """Midnight of ``day`` in ``tz``."""
    return datetime.combine(day, time.min, tzinfo=tz)


@router.get(
    "/dashboard",
    response_model=DataResponse,
)
async def get_dashboard(
    current_user: CurrentUser,
    profile: CurrentProfile,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Dashboard cards.

    Statistics cover the last ``STATS_WINDOW_DAYS`` days; the level, streak
    and achievement cards come from the profile.
    """
    user_id_str = str(current_user.user_id)

    cached = await CacheManager.get(CacheKeys.dashboard_stats(user_id_str))
    if cached:
        return DataResponse(success=True, data=cached)

    journal_service = JournalService(db)
    achievement_service = AchievementService(db)
    tz = resolve_timezone(profile.timezone)

    since = utc_now() - timedelta(days=settings.STATS_WINDOW_DAYS)
    window_entries = await journal_service.get_entries_between(
        current_user.user_id,
        start=since,
    )
    recent = await journal_service.get_recent_entries(
        current_user.user_id,
        limit=settings.RECENT_JOURNALS_LIMIT,
    )
    statuses = await achievement_service.get_statuses(current_user.user_id)

    data = {
        "window_days": settings.STATS_WINDOW_DAYS,
        "stats": compute_window_stats(window_entries, tz).to_dict(),
        "level": level_progress(profile.xp).to_dict(),
        "streak_count": profile.streak_count,
        "recent_journals": [entry_to_dict(e) for e in recent],
        "achievements": {
            "unlocked": sum(1 for s in statuses if s.unlocked),
            "total": len(statuses),
            "items": [s.to_dict() for s in statuses],
        },
    }

    await CacheManager.set(
        CacheKeys.dashboard_stats(user_id_str),
        data,
        ttl=CacheManager.TTL_SHORT,
    )

    return DataResponse(success=True, data=data)


@router.get(
    "/summary",
    response_model=DataResponse,
)
async def get_summary(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """All-time totals: journals, words, mood counts and unique tags."""
    user_id_str = str(current_user.user_id)

    cached = await CacheManager.get(CacheKeys.stats_summary(user_id_str))
    if cached:
        return DataResponse(success=True, data=cached)

    journal_service = JournalService(db)
    entries = await journal_service.get_all_entries(current_user.user_id)

    data = summarize_entries(entries).to_dict(tag_limit=SUMMARY_TAG_LIMIT)

    await CacheManager.set(
        CacheKeys.stats_summary(user_id_str),
        data,
        ttl=CacheManager.TTL_SHORT,
    )

    return DataResponse(success=True, data=data)


@router.get(
    "/calendar",
    response_model=DataResponse,
)
async def get_calendar(
    current_user: CurrentUser,
    profile: CurrentProfile,
    db: Annotated[AsyncSession, Depends(get_db)],
    year: Optional[int] = Query(default=None),
    month: Optional[int] = Query(default=None),
    day: Optional[date] = Query(default=None, alias="date"),
):
    """
    Entry counts for every day of a month, in the profile's timezone.

    Defaults to the month of ``date`` when given, else the current month.
    With ``date`` the entries written on that day are included too.
    """
    tz = resolve_timezone(profile.timezone)
    if day is not None:
        validate_calendar_date(day)
    anchor = day or calendar_day(utc_now(), tz)
    year, month = validate_month(
        year if year is not None else anchor.year,
        month if month is not None else anchor.month,
    )

    user_id_str = str(current_user.user_id)
    journal_service = JournalService(db)

    cache_key = CacheKeys.calendar_month(user_id_str, year, month)
    days = await CacheManager.get(cache_key)
    if days is None:
        first, last = month_bounds(year, month)
        entries = await journal_service.get_entries_between(
            current_user.user_id,
            start=day_start(first, tz),
            end=day_start(last + timedelta(days=1), tz),
        )
        days = calendar_month(entries, year, month, tz)
        await CacheManager.set(cache_key, days, ttl=CacheManager.TTL_SHORT)

    data = {
        "year": year,
        "month": month,
        "timezone": profile.timezone,
        "days": days,
        "active_days": sum(1 for d in days if d["count"] > 0),
    }

    if day is not None:
        selected = await journal_service.get_entries_between(
            current_user.user_id,
            start=day_start(day, tz),
            end=day_start(day + timedelta(days=1), tz),
        )
        data["date"] = day.isoformat()
        data["entries"] = [entry_to_dict(e) for e in selected]

    return DataResponse(success=True, data=data)
