"""
Statistics, Profile and Achievement API Tests
=============================================
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from questlog.models.journal import JournalEntry, Mood
from questlog.services.achievement_service import AchievementService
from questlog.services.cache import CacheInvalidator
from questlog.services.gamification import AchievementStatus
from questlog.services.journal_service import JournalService


def _entry(user_id, created_at, content="", mood=None, tags=None) -> JournalEntry:
    return JournalEntry(
        entry_id=uuid.uuid4(),
        user_id=user_id,
        title="Entry",
        content=content,
        mood=mood,
        tags=tags or [],
        is_private=True,
        created_at=created_at,
        updated_at=created_at,
    )


def _status(name: str, unlocked: bool) -> AchievementStatus:
    return AchievementStatus(
        achievement_id=uuid.uuid4(),
        name=name,
        description=name,
        icon="*",
        xp_reward=50,
        unlocked=unlocked,
        achieved_at=datetime(2026, 5, 1, tzinfo=timezone.utc) if unlocked else None,
    )


@pytest.mark.asyncio
async def test_dashboard(client: AsyncClient, user, profile):
    profile.xp = 150
    profile.level = 2
    profile.streak_count = 2
    entries = [
        _entry(user.user_id, datetime(2026, 5, 1, 9, tzinfo=timezone.utc), "a b", Mood.CALM),
        _entry(user.user_id, datetime(2026, 5, 2, 9, tzinfo=timezone.utc), "c d e f"),
    ]

    with patch.object(
        JournalService, "get_entries_between", AsyncMock(return_value=entries)
    ), patch.object(
        JournalService, "get_recent_entries", AsyncMock(return_value=entries[::-1])
    ), patch.object(
        AchievementService,
        "get_statuses",
        AsyncMock(return_value=[_status("First Journal", True), _status("Wordsmith", False)]),
    ):
        response = await client.get("/api/v1/stats/dashboard")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["window_days"] == 30
    assert data["stats"]["total_entries"] == 2
    assert data["stats"]["total_words"] == 6
    assert data["stats"]["average_words_per_entry"] == 3
    assert data["stats"]["streak_days"] == 2
    assert data["stats"]["mood_distribution"] == {"calm": 1}
    assert data["level"]["level"] == 2
    assert data["level"]["xp_into_level"] == 50
    assert data["streak_count"] == 2
    assert len(data["recent_journals"]) == 2
    assert data["achievements"]["unlocked"] == 1
    assert data["achievements"]["total"] == 2


@pytest.mark.asyncio
async def test_dashboard_without_entries(client: AsyncClient):
    with patch.object(
        JournalService, "get_entries_between", AsyncMock(return_value=[])
    ), patch.object(
        JournalService, "get_recent_entries", AsyncMock(return_value=[])
    ), patch.object(
        AchievementService, "get_statuses", AsyncMock(return_value=[])
    ):
        response = await client.get("/api/v1/stats/dashboard")

    stats = response.json()["data"]["stats"]
    assert stats["total_entries"] == 0
    assert stats["total_words"] == 0
    assert stats["average_words_per_entry"] == 0
    assert stats["most_active_day"] == "No data"
    assert stats["most_active_time"] == "No data"


@pytest.mark.asyncio
async def test_summary(client: AsyncClient, user):
    entries = [
        _entry(user.user_id, datetime(2026, 5, 1, tzinfo=timezone.utc), "one", Mood.SAD,
               [f"tag{i}" for i in range(12)]),
    ]

    with patch.object(JournalService, "get_all_entries", AsyncMock(return_value=entries)):
        response = await client.get("/api/v1/stats/summary")

    data = response.json()["data"]
    assert data["total_journals"] == 1
    assert data["mood_counts"] == {"sad": 1}
    assert data["unique_tags"] == 12
    assert len(data["tags"]) == 10


@pytest.mark.asyncio
async def test_calendar_with_selected_date(client: AsyncClient, user):
    day_entries = [
        _entry(user.user_id, datetime(2026, 2, 14, 8, tzinfo=timezone.utc)),
        _entry(user.user_id, datetime(2026, 2, 14, 20, tzinfo=timezone.utc)),
    ]

    with patch.object(
        JournalService, "get_entries_between", AsyncMock(return_value=day_entries)
    ) as between:
        response = await client.get("/api/v1/stats/calendar", params={"date": "2026-02-14"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert (data["year"], data["month"]) == (2026, 2)
    assert len(data["days"]) == 28
    assert data["days"][13] == {"date": "2026-02-14", "weekday": "Saturday", "count": 2}
    assert data["active_days"] == 1
    assert data["date"] == "2026-02-14"
    assert len(data["entries"]) == 2

    month_call = between.await_args_list[0].kwargs
    assert month_call["start"] == datetime(2026, 2, 1, tzinfo=timezone.utc)
    assert month_call["end"] == datetime(2026, 3, 1, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_calendar_rejects_bad_month(client: AsyncClient):
    response = await client.get("/api/v1/stats/calendar", params={"year": 2026, "month": 13})

    assert response.status_code == 400
    assert response.json()["error"]["field"] == "month"


@pytest.mark.asyncio
async def test_achievements(client: AsyncClient):
    statuses = [_status("First Journal", True), _status("Tag Master", False)]

    with patch.object(AchievementService, "get_statuses", AsyncMock(return_value=statuses)):
        response = await client.get("/api/v1/achievements")

    data = response.json()["data"]
    assert data["unlocked_count"] == 1
    assert data["total"] == 2
    assert data["achievements"][0]["unlocked"] is True
    assert data["achievements"][1]["achieved_at"] is None


@pytest.mark.asyncio
async def test_profile_level(client: AsyncClient, profile):
    profile.xp = 320
    profile.streak_count = 4

    response = await client.get("/api/v1/profile/level")

    data = response.json()["data"]
    assert data["level"] == 3
    assert data["xp_into_level"] == 20
    assert data["xp_for_level"] == 300
    assert data["streak_count"] == 4


@pytest.mark.asyncio
async def test_profile_includes_email(client: AsyncClient, user):
    response = await client.get("/api/v1/profile")

    data = response.json()["data"]
    assert data["email"] == user.email
    assert data["username"] == "writer"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params, field",
    [
        ({"year": 2026, "month": 0}, "month"),
        ({"year": 0, "month": 5}, "year"),
        ({"year": 9999, "month": 12}, "year"),
        ({"date": "9999-12-31"}, "date"),
    ],
)
async def test_calendar_rejects_out_of_range(client: AsyncClient, params, field):
    with patch.object(
        JournalService, "get_entries_between", AsyncMock(return_value=[])
    ) as between:
        response = await client.get("/api/v1/stats/calendar", params=params)

    assert response.status_code == 400
    body = response.json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["error"]["field"] == field
    between.assert_not_awaited()


@pytest.mark.asyncio
async def test_calendar_latest_supported_month(client: AsyncClient):
    with patch.object(
        JournalService, "get_entries_between", AsyncMock(return_value=[])
    ) as between:
        response = await client.get("/api/v1/stats/calendar", params={"year": 9998, "month": 12})

    assert response.status_code == 200
    assert len(response.json()["data"]["days"]) == 31
    assert between.await_args.kwargs["end"] == datetime(9999, 1, 1, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_profile_update_commits_before_invalidating(client: AsyncClient, db):
    commits_seen = []

    async def record(*args):
        commits_seen.append(db.commit.await_count)

    with patch.object(CacheInvalidator, "on_profile_update", AsyncMock(side_effect=record)):
        response = await client.put("/api/v1/profile", json={"full_name": "Renamed"})

    assert response.status_code == 200
    assert response.json()["data"]["full_name"] == "Renamed"
    assert commits_seen == [1]
