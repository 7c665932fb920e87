"""
Journal Statistics
==================

In-memory derivation of journaling statistics: word counts, mood
distribution, weekday/hour activity histograms, longest consecutive-day
streak and calendar month counts.

Every function takes already-fetched entries (anything with ``created_at``,
``content``, ``mood`` and ``tags`` attributes) and does a single pass over
them. Calendar days are resolved in the caller-supplied timezone.
"""

import math
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from enum import Enum
from typing import Iterable, Optional, Sequence
import calendar

from questlog.services.gamification import ProgressSnapshot
from questlog.utils.helpers import calendar_day, local_datetime

NO_DATA = "No data"

DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def word_count(content: Optional[str]) -> int:
    """Number of whitespace-separated words in ``content``."""
    if not content:
        return 0
    return len(content.split())


def mood_label(mood) -> Optional[str]:
    """Plain string for a mood column value, ``None`` when unset."""
    if mood is None:
        return None
    if isinstance(mood, Enum):
        return mood.value
    return str(mood) or None


def hour_label(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """Hour-of-day bucket, e.g. ``"09:00"``."""
    return f"{local_datetime(value, tz).hour:02d}:00"


def day_label(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """Weekday name, e.g. ``"Monday"``."""
    return DAY_NAMES[local_datetime(value, tz).weekday()]


def most_frequent(counts: dict[str, int]) -> str:
    """
    Key with the highest count.

    Ties go to the key that was counted first; ``"No data"`` when empty.
    """
    if not counts:
        return NO_DATA
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return ranked[0][0]


def longest_streak(days: Iterable[date]) -> int:
    """
    Longest run of consecutive calendar days in an ascending sequence.

    Repeated days neither extend nor break the run.
    """
    longest = 0
    current = 0
    last: Optional[date] = None

    for day in days:
        if last is None:
            current = 1
        else:
            gap = (day - last).days
            if gap == 0:
                continue
            current = current + 1 if gap == 1 else 1
        longest = max(longest, current)
        last = day

    return longest


def average_words(total_words: int, total_entries: int) -> int:
    """Average words per entry rounded half up; 0 without entries."""
    if total_entries == 0:
        return 0
    return math.floor(total_words / total_entries + 0.5)


def mood_distribution(entries: Iterable) -> dict[str, int]:
    """Count of entries per mood, skipping entries without one."""
    counts: dict[str, int] = {}
    for entry in entries:
        label = mood_label(entry.mood)
        if label:
            counts[label] = counts.get(label, 0) + 1
    return counts


@dataclass
class WindowStats:
    """Statistics over a trailing window of entries."""

    total_entries: int = 0
    total_words: int = 0
    average_words_per_entry: int = 0
    streak_days: int = 0
    most_active_day: str = NO_DATA
    most_active_time: str = NO_DATA
    mood_distribution: dict[str, int] = field(default_factory=dict)
    activity_by_day: dict[str, int] = field(default_factory=dict)
    activity_by_time: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


def compute_window_stats(
    entries: Sequence,
    tz: Optional[tzinfo] = None,
) -> WindowStats:
    """
    Derive dashboard statistics from entries ordered by ``created_at``.

    The caller is responsible for restricting ``entries`` to the window.
    """
    total_words = 0
    day_counts: dict[str, int] = {}
    time_counts: dict[str, int] = {}
    days: list[date] = []

    for entry in entries:
        total_words += word_count(entry.content)

        day = day_label(entry.created_at, tz)
        day_counts[day] = day_counts.get(day, 0) + 1

        hour = hour_label(entry.created_at, tz)
        time_counts[hour] = time_counts.get(hour, 0) + 1

        days.append(calendar_day(entry.created_at, tz))

    total_entries = len(entries)

    return WindowStats(
        total_entries=total_entries,
        total_words=total_words,
        average_words_per_entry=average_words(total_words, total_entries),
        streak_days=longest_streak(days),
        most_active_day=most_frequent(day_counts),
        most_active_time=most_frequent(time_counts),
        mood_distribution=mood_distribution(entries),
        activity_by_day=day_counts,
        activity_by_time=time_counts,
    )


@dataclass
class EntrySummary:
    """All-time totals shown on the stats page."""

    total_journals: int = 0
    total_words: int = 0
    mood_counts: dict[str, int] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)

    def to_dict(self, tag_limit: Optional[int] = None) -> dict:
        data = asdict(self)
        data["unique_tags"] = len(self.tags)
        if tag_limit is not None:
            data["tags"] = self.tags[:tag_limit]
        return data


def unique_tags(entries: Iterable) -> list[str]:
    """Distinct tags across entries in first-seen order."""
    seen: dict[str, None] = {}
    for entry in entries:
        for tag in entry.tags or []:
            seen.setdefault(tag, None)
    return list(seen)


def summarize_entries(entries: Sequence) -> EntrySummary:
    """Totals, mood counts and unique tags across every entry."""
    return EntrySummary(
        total_journals=len(entries),
        total_words=sum(word_count(e.content) for e in entries),
        mood_counts=mood_distribution(entries),
        tags=unique_tags(entries),
    )


def progress_snapshot(entries: Sequence, streak_count: int) -> ProgressSnapshot:
    """Collect the facts achievement rules need from a user's entries."""
    return ProgressSnapshot(
        entry_count=len(entries),
        streak_count=streak_count,
        has_mood=any(mood_label(e.mood) for e in entries),
        distinct_tags=len(unique_tags(entries)),
        max_words=max((word_count(e.content) for e in entries), default=0),
    )


# =============================================================================
# Calendar
# =============================================================================

def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a month."""
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def calendar_month(
    entries: Iterable,
    year: int,
    month: int,
    tz: Optional[tzinfo] = None,
) -> list[dict]:
    """Every day of the month with its entry count."""
    first, last = month_bounds(year, month)
    counts: dict[date, int] = {}
    for entry in entries:
        day = calendar_day(entry.created_at, tz)
        if first <= day <= last:
            counts[day] = counts.get(day, 0) + 1

    days = []
    current = first
    while current <= last:
        days.append({
            "date": current.isoformat(),
            "weekday": DAY_NAMES[current.weekday()],
            "count": counts.get(current, 0),
        })
        current += timedelta(days=1)
    return days
