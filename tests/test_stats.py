"""
Statistics Derivation Tests
===========================
"""

from datetime import date, datetime, timezone
from types import SimpleNamespace
from zoneinfo import ZoneInfo

from questlog.models.journal import Mood
from questlog.services.stats import (
    NO_DATA,
    average_words,
    calendar_month,
    compute_window_stats,
    longest_streak,
    month_bounds,
    most_frequent,
    progress_snapshot,
    summarize_entries,
    word_count,
)


def _entry(
    created_at: datetime,
    content: str = "",
    mood=None,
    tags=None,
) -> SimpleNamespace:
    return SimpleNamespace(
        created_at=created_at,
        content=content,
        mood=mood,
        tags=tags or [],
    )


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestLongestStreak:

    def test_gap_breaks_run(self):
        days = [date(2026, 5, 1), date(2026, 5, 2), date(2026, 5, 4)]
        assert longest_streak(days) == 2

    def test_same_day_entries_do_not_extend_or_break(self):
        days = [
            date(2026, 5, 1),
            date(2026, 5, 1),
            date(2026, 5, 2),
            date(2026, 5, 2),
            date(2026, 5, 3),
        ]
        assert longest_streak(days) == 3

    def test_across_month_end(self):
        days = [date(2026, 4, 29), date(2026, 4, 30), date(2026, 5, 1)]
        assert longest_streak(days) == 3

    def test_later_run_can_be_longest(self):
        days = [
            date(2026, 5, 1),
            date(2026, 5, 3),
            date(2026, 5, 4),
            date(2026, 5, 5),
        ]
        assert longest_streak(days) == 3

    def test_empty(self):
        assert longest_streak([]) == 0


class TestHelpers:

    def test_word_count_ignores_extra_whitespace(self):
        assert word_count("  one   two\nthree\t ") == 3
        assert word_count("") == 0
        assert word_count(None) == 0

    def test_average_rounds_half_up(self):
        assert average_words(7, 2) == 4
        assert average_words(5, 2) == 3
        assert average_words(10, 3) == 3

    def test_average_without_entries(self):
        assert average_words(0, 0) == 0

    def test_most_frequent_tie_goes_to_first_counted(self):
        assert most_frequent({"Tuesday": 2, "Monday": 2, "Friday": 1}) == "Tuesday"

    def test_most_frequent_empty(self):
        assert most_frequent({}) == NO_DATA

    def test_month_bounds(self):
        assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
        assert month_bounds(2026, 12) == (date(2026, 12, 1), date(2026, 12, 31))


class TestComputeWindowStats:

    def test_no_entries(self):
        stats = compute_window_stats([])

        assert stats.total_entries == 0
        assert stats.total_words == 0
        assert stats.average_words_per_entry == 0
        assert stats.streak_days == 0
        assert stats.most_active_day == NO_DATA
        assert stats.most_active_time == NO_DATA
        assert stats.mood_distribution == {}

    def test_aggregates_entries(self):
        entries = [
            # 2026-05-01 is a Friday
            _entry(_utc(2026, 5, 1, 9, 15), "one two three", Mood.HAPPY),
            _entry(_utc(2026, 5, 2, 9, 45), "one two three four", Mood.HAPPY),
            _entry(_utc(2026, 5, 4, 21, 0), "", None),
            _entry(_utc(2026, 5, 8, 21, 30), "five", Mood.CALM),
        ]

        stats = compute_window_stats(entries)

        assert stats.total_entries == 4
        assert stats.total_words == 8
        assert stats.average_words_per_entry == 2
        assert stats.streak_days == 2
        assert stats.activity_by_day == {"Friday": 2, "Saturday": 1, "Monday": 1}
        assert stats.most_active_day == "Friday"
        assert stats.activity_by_time == {"09:00": 2, "21:00": 2}
        assert stats.most_active_time == "09:00"
        assert stats.mood_distribution == {"happy": 2, "calm": 1}

    def test_mood_counts_sum_to_entries_with_mood(self):
        moods = [Mood.SAD, None, Mood.SAD, Mood.EXCITED, None, Mood.NEUTRAL]
        entries = [
            _entry(_utc(2026, 5, day, 12), "x", mood)
            for day, mood in enumerate(moods, start=1)
        ]

        stats = compute_window_stats(entries)

        assert sum(stats.mood_distribution.values()) == 4

    def test_days_follow_timezone(self):
        # 23:30 UTC on May 1 is already May 2 in Tokyo
        entries = [
            _entry(_utc(2026, 5, 1, 23, 30), "late"),
            _entry(_utc(2026, 5, 2, 2, 0), "early"),
        ]

        utc_stats = compute_window_stats(entries)
        tokyo_stats = compute_window_stats(entries, ZoneInfo("Asia/Tokyo"))

        assert utc_stats.streak_days == 2
        assert tokyo_stats.streak_days == 1
        assert tokyo_stats.activity_by_time == {"08:00": 1, "11:00": 1}

    def test_to_dict(self):
        data = compute_window_stats([_entry(_utc(2026, 5, 1, 9), "hi")]).to_dict()
        assert data["total_entries"] == 1
        assert data["most_active_time"] == "09:00"


class TestSummary:

    def test_summarize_entries(self):
        entries = [
            _entry(_utc(2026, 5, 1, 9), "a b c", Mood.HAPPY, ["work", "gym"]),
            _entry(_utc(2026, 5, 2, 9), "d e", Mood.SAD, ["gym", "family"]),
            _entry(_utc(2026, 5, 3, 9), "", None, []),
        ]

        summary = summarize_entries(entries)

        assert summary.total_journals == 3
        assert summary.total_words == 5
        assert summary.mood_counts == {"happy": 1, "sad": 1}
        assert summary.tags == ["work", "gym", "family"]

        data = summary.to_dict(tag_limit=2)
        assert data["unique_tags"] == 3
        assert data["tags"] == ["work", "gym"]

    def test_progress_snapshot(self):
        entries = [
            _entry(_utc(2026, 5, 1, 9), "word " * 10, None, ["a", "b"]),
            _entry(_utc(2026, 5, 2, 9), "word " * 40, Mood.CALM, ["b", "c"]),
        ]

        snapshot = progress_snapshot(entries, streak_count=2)

        assert snapshot.entry_count == 2
        assert snapshot.streak_count == 2
        assert snapshot.has_mood is True
        assert snapshot.distinct_tags == 3
        assert snapshot.max_words == 40


class TestCalendar:

    def test_counts_every_day_of_month(self):
        entries = [
            _entry(_utc(2026, 2, 1, 10)),
            _entry(_utc(2026, 2, 1, 18)),
            _entry(_utc(2026, 2, 28, 12)),
            _entry(_utc(2026, 3, 1, 12)),
        ]

        days = calendar_month(entries, 2026, 2)

        assert len(days) == 28
        assert days[0] == {"date": "2026-02-01", "weekday": "Sunday", "count": 2}
        assert days[27]["count"] == 1
        assert sum(d["count"] for d in days) == 3
