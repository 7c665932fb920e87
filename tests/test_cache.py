"""
Cache Layer Tests
=================

Tests for the Redis cache helpers including:
- JSON round trip through Redis
- Redis failure graceful degradation
- Invalidation after journal and profile changes
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from questlog.services.cache import CacheInvalidator, CacheKeys, CacheManager

USER_ID = "00000000-0000-0000-0000-000000000001"


class TestCacheManager:
    """Tests for CacheManager get/set/delete."""

    @pytest.mark.asyncio
    async def test_get_parses_json(self):
        mock_client = AsyncMock()
        mock_client.get.return_value = json.dumps({"level": 3})

        with patch("questlog.services.cache.get_redis", return_value=mock_client):
            result = await CacheManager.get(CacheKeys.profile(USER_ID))

        assert result == {"level": 3}
        mock_client.get.assert_awaited_once_with(f"cache:profile:{USER_ID}")

    @pytest.mark.asyncio
    async def test_get_returns_none_on_miss(self):
        mock_client = AsyncMock()
        mock_client.get.return_value = None

        with patch("questlog.services.cache.get_redis", return_value=mock_client):
            assert await CacheManager.get("cache:missing") is None

    @pytest.mark.asyncio
    async def test_get_returns_none_on_redis_error(self):
        """On Redis failure, reads fall back to the database."""
        mock_client = AsyncMock()
        mock_client.get.side_effect = ConnectionError("Redis down")

        with patch("questlog.services.cache.get_redis", return_value=mock_client):
            assert await CacheManager.get("cache:any") is None

    @pytest.mark.asyncio
    async def test_set_uses_ttl(self):
        mock_client = AsyncMock()

        with patch("questlog.services.cache.get_redis", return_value=mock_client):
            ok = await CacheManager.set("cache:key", {"a": 1}, ttl=CacheManager.TTL_LONG)

        assert ok is True
        mock_client.setex.assert_awaited_once_with("cache:key", 1800, '{"a": 1}')

    @pytest.mark.asyncio
    async def test_set_returns_false_on_redis_error(self):
        mock_client = AsyncMock()
        mock_client.setex.side_effect = ConnectionError("Redis down")

        with patch("questlog.services.cache.get_redis", return_value=mock_client):
            assert await CacheManager.set("cache:key", {"a": 1}) is False

    @pytest.mark.asyncio
    async def test_delete_pattern_removes_matches(self):
        async def scan_iter(match):
            for key in ("cache:stats:calendar:u:2026-04", "cache:stats:calendar:u:2026-05"):
                yield key

        mock_client = MagicMock()
        mock_client.scan_iter = scan_iter
        mock_client.delete = AsyncMock(return_value=2)

        with patch("questlog.services.cache.get_redis", AsyncMock(return_value=mock_client)):
            deleted = await CacheManager.delete_pattern("cache:stats:calendar:u:*")

        assert deleted == 2
        mock_client.delete.assert_awaited_once_with(
            "cache:stats:calendar:u:2026-04",
            "cache:stats:calendar:u:2026-05",
        )


class TestCacheKeys:

    def test_entry_key_is_scoped_to_user(self):
        assert CacheKeys.journal_entry("u1", "e1") != CacheKeys.journal_entry("u2", "e1")

    def test_calendar_key_matches_pattern(self):
        key = CacheKeys.calendar_month(USER_ID, 2026, 5)
        assert key == f"cache:stats:calendar:{USER_ID}:2026-05"
        assert key.startswith(CacheKeys.calendar_pattern(USER_ID)[:-1])


class TestCacheInvalidator:

    @pytest.mark.asyncio
    async def test_journal_change(self):
        with patch.object(CacheManager, "delete", AsyncMock(return_value=True)) as delete, \
                patch.object(CacheManager, "delete_pattern", AsyncMock(return_value=0)) as pattern:
            await CacheInvalidator.on_journal_change(USER_ID, "entry-1")

        deleted = {call.args[0] for call in delete.await_args_list}
        assert deleted == {
            CacheKeys.journal_entry(USER_ID, "entry-1"),
            CacheKeys.dashboard_stats(USER_ID),
            CacheKeys.stats_summary(USER_ID),
        }
        pattern.assert_awaited_once_with(CacheKeys.calendar_pattern(USER_ID))

    @pytest.mark.asyncio
    async def test_progress_change(self):
        with patch.object(CacheManager, "delete", AsyncMock(return_value=True)) as delete:
            await CacheInvalidator.on_progress_change(USER_ID)

        deleted = {call.args[0] for call in delete.await_args_list}
        assert CacheKeys.profile(USER_ID) in deleted
        assert CacheKeys.achievements(USER_ID) in deleted
