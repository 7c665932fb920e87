"""
Journal API Tests
=================

Endpoint behaviour with the services patched out.
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from questlog.models.journal import JournalEntry, Mood
from questlog.schemas.common import PaginationMeta
from questlog.services.cache import CacheInvalidator
from questlog.services.gamification import level_progress
from questlog.services.journal_service import JournalService
from questlog.services.progress_service import ProgressResult, ProgressService

CREATED = datetime(2026, 5, 2, 9, 30, tzinfo=timezone.utc)


def _entry(user_id: uuid.UUID, **overrides) -> JournalEntry:
    fields = dict(
        entry_id=uuid.uuid4(),
        user_id=user_id,
        title="Morning pages",
        content="Slept well and went for a run",
        mood=Mood.HAPPY,
        tags=["health"],
        is_private=True,
        created_at=CREATED,
        updated_at=CREATED,
    )
    fields.update(overrides)
    return JournalEntry(**fields)


@pytest.mark.asyncio
async def test_requires_authentication(anon_client: AsyncClient):
    response = await anon_client.get("/api/v1/journals")

    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "AUTH_002"
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_rejects_invalid_token(anon_client: AsyncClient):
    response = await anon_client.get(
        "/api/v1/journals",
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTH_005"


@pytest.mark.asyncio
async def test_create_entry_returns_progress(client: AsyncClient, user):
    entry = _entry(user.user_id)
    progress = ProgressResult(
        entry_xp=7,
        streak_count=2,
        level=level_progress(57),
        previous_level=1,
    )

    with patch.object(
        JournalService, "create_entry", AsyncMock(return_value=entry)
    ) as create, patch.object(
        ProgressService, "record_entry", AsyncMock(return_value=progress)
    ):
        response = await client.post(
            "/api/v1/journals",
            json={
                "title": "  Morning pages ",
                "content": "Slept well and went for a run",
                "mood": "happy",
                "tags": ["health", " health", ""],
            },
        )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["entry"]["title"] == "Morning pages"
    assert body["data"]["entry"]["mood_icon"] == "😊"
    assert body["data"]["entry"]["word_count"] == 7
    assert body["data"]["progress"]["xp_earned"] == 7
    assert body["data"]["progress"]["streak_count"] == 2

    entry_data = create.await_args.kwargs["entry_data"]
    assert entry_data.title == "Morning pages"
    assert entry_data.tags == ["health"]


@pytest.mark.asyncio
async def test_create_entry_requires_title(client: AsyncClient):
    response = await client.post("/api/v1/journals", json={"title": "   "})

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_create_entry_rejects_unknown_mood(client: AsyncClient):
    response = await client.post(
        "/api/v1/journals",
        json={"title": "Hi", "mood": "ecstatic"},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_missing_entry(client: AsyncClient):
    with patch.object(JournalService, "get_entry_by_id", AsyncMock(return_value=None)):
        response = await client.get(f"/api/v1/journals/{uuid.uuid4()}")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "JOURNAL_003"


@pytest.mark.asyncio
async def test_get_entry(client: AsyncClient, user):
    entry = _entry(user.user_id)

    with patch.object(JournalService, "get_entry_by_id", AsyncMock(return_value=entry)) as get:
        response = await client.get(f"/api/v1/journals/{entry.entry_id}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["entry_id"] == str(entry.entry_id)
    assert data["created_at"] == CREATED.isoformat()
    # ownership is part of the lookup
    assert get.await_args.args == (entry.entry_id, user.user_id)


@pytest.mark.asyncio
async def test_list_entries(client: AsyncClient, user):
    entries = [_entry(user.user_id, title=f"Entry {i}") for i in range(3)]
    page = {
        "entries": entries,
        "pagination": PaginationMeta.build(page=1, limit=3, total=7),
    }

    with patch.object(
        JournalService, "get_entries_paginated", AsyncMock(return_value=page)
    ) as listing:
        response = await client.get(
            "/api/v1/journals",
            params={"limit": 3, "search": " run ", "mood": "happy", "tag": "health"},
        )

    assert response.status_code == 200
    data = response.json()["data"]
    assert [e["title"] for e in data["entries"]] == ["Entry 0", "Entry 1", "Entry 2"]
    assert data["pagination"]["total_pages"] == 3
    assert data["pagination"]["has_next"] is True

    kwargs = listing.await_args.kwargs
    assert kwargs["search"] == "run"
    assert kwargs["mood_filter"] == Mood.HAPPY
    assert kwargs["tag"] == "health"


@pytest.mark.asyncio
async def test_update_entry_clears_mood(client: AsyncClient, db, user):
    entry = _entry(user.user_id)

    with patch.object(JournalService, "get_entry_by_id", AsyncMock(return_value=entry)):
        response = await client.put(
            f"/api/v1/journals/{entry.entry_id}",
            json={"mood": None, "content": "Edited"},
        )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["mood"] is None
    assert data["mood_icon"] == "📝"
    assert data["content"] == "Edited"
    assert data["title"] == "Morning pages"
    db.flush.assert_awaited()


@pytest.mark.asyncio
async def test_delete_entry(client: AsyncClient, db, user):
    entry = _entry(user.user_id)

    with patch.object(JournalService, "get_entry_by_id", AsyncMock(return_value=entry)):
        response = await client.delete(f"/api/v1/journals/{entry.entry_id}")

    assert response.status_code == 200
    assert response.json()["data"]["entry_id"] == str(entry.entry_id)
    db.delete.assert_awaited_once_with(entry)


@pytest.mark.asyncio
async def test_create_entry_commits_before_invalidating(client: AsyncClient, db, user):
    entry = _entry(user.user_id)
    progress = ProgressResult(
        entry_xp=2,
        streak_count=1,
        level=level_progress(2),
        previous_level=1,
    )
    commits_seen = []

    async def record(*args):
        commits_seen.append(db.commit.await_count)

    with patch.object(
        JournalService, "create_entry", AsyncMock(return_value=entry)
    ), patch.object(
        ProgressService, "record_entry", AsyncMock(return_value=progress)
    ), patch.object(
        CacheInvalidator, "on_journal_change", AsyncMock(side_effect=record)
    ), patch.object(
        CacheInvalidator, "on_progress_change", AsyncMock(side_effect=record)
    ):
        response = await client.post("/api/v1/journals", json={"title": "Short"})

    assert response.status_code == 201
    assert commits_seen == [1, 1]


@pytest.mark.asyncio
async def test_delete_commits_before_invalidating(client: AsyncClient, db, user):
    entry = _entry(user.user_id)
    commits_seen = []

    async def record(*args):
        commits_seen.append(db.commit.await_count)

    with patch.object(
        JournalService, "get_entry_by_id", AsyncMock(return_value=entry)
    ), patch.object(
        CacheInvalidator, "on_journal_change", AsyncMock(side_effect=record)
    ):
        response = await client.delete(f"/api/v1/journals/{entry.entry_id}")

    assert response.status_code == 200
    assert commits_seen == [1]
