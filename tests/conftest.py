"""
Shared Test Fixtures
====================

The app is exercised over ``httpx.AsyncClient`` with the database session,
the authenticated user and Redis replaced by in-memory stand-ins.
"""

import os
import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("DEV_AUTH_DISABLED", "false")

import pytest
from httpx import ASGITransport, AsyncClient

from questlog.db.session import get_db
from questlog.dependencies import get_current_profile, get_current_user
from questlog.main import app
from questlog.models.profile import Profile
from questlog.models.user import User


USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000042")
NOW = datetime(2026, 5, 2, 9, 30, tzinfo=timezone.utc)


def make_db() -> MagicMock:
    """Session stand-in: sync ``add``/``delete`` calls, async I/O."""
    db = MagicMock()
    db.execute = AsyncMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.delete = AsyncMock()
    return db


@pytest.fixture
def db() -> MagicMock:
    return make_db()


@pytest.fixture
def user() -> User:
    return User(
        user_id=USER_ID,
        email="writer@example.com",
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.fixture
def profile() -> Profile:
    return Profile(
        user_id=USER_ID,
        username="writer",
        full_name="Test Writer",
        timezone="UTC",
        xp=0,
        level=1,
        streak_count=0,
        last_streak_date=None,
        email_notifications=False,
        reminder_time="20:00",
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.fixture(autouse=True)
def redis_down():
    """Every cache call fails, so reads fall through to the services."""
    with patch(
        "questlog.services.cache.get_redis",
        AsyncMock(side_effect=ConnectionError("Redis down")),
    ):
        yield


@pytest.fixture
async def anon_client(db):
    """Client with a mocked session but no authenticated user."""

    async def override_db():
        yield db

    app.dependency_overrides[get_db] = override_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def client(db, user, profile):
    """Client authenticated as ``user`` with ``profile``."""

    async def override_db():
        yield db

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_current_profile] = lambda: profile
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
