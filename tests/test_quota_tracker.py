"""Tests for the sliding-window archive quota."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from server.repositories.quota_repository import QuotaEvent, QuotaEventRepository
from server.services.quota_tracker import QuotaConfig, QuotaTracker


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float):
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def tracker(test_db, clock):
    return QuotaTracker(config=QuotaConfig(limit=3, window_seconds=60), clock=clock)


class TestQuotaConfig:
    def test_defaults(self):
        config = QuotaConfig()
        assert config.limit == 3
        assert config.window_seconds == 60

    def test_rejects_zero_limit(self):
        with pytest.raises(ValueError):
            QuotaConfig(limit=0)

    def test_rejects_zero_window(self):
        with pytest.raises(ValueError):
            QuotaConfig(window_seconds=0)


class TestQuotaTracker:
    @pytest.mark.asyncio
    async def test_fresh_user_is_under_limit(self, tracker):
        status = await tracker.check("user-1")

        assert status.over_limit is False
        assert status.count == 0
        assert status.limit == 3
        assert status.window_seconds == 60

    @pytest.mark.asyncio
    async def test_limit_reached_after_three_events(self, tracker):
        for _ in range(2):
            await tracker.record_usage("user-1", "folder-1", 1)
        assert await tracker.is_over_limit("user-1") is False

        await tracker.record_usage("user-1", "folder-1", 1)

        status = await tracker.check("user-1")
        assert status.over_limit is True
        assert status.count == 3
        assert status.retry_after_seconds == 60

    @pytest.mark.asyncio
    async def test_events_leave_window(self, tracker, clock):
        for _ in range(3):
            await tracker.record_usage("user-1", "folder-1", 2)
        assert await tracker.is_over_limit("user-1") is True

        clock.advance(61)

        assert await tracker.is_over_limit("user-1") is False

    @pytest.mark.asyncio
    async def test_window_is_sliding(self, tracker, clock):
        await tracker.record_usage("user-1", "folder-1", 1)
        clock.advance(30)
        await tracker.record_usage("user-1", "folder-1", 1)
        await tracker.record_usage("user-1", "folder-1", 1)
        assert await tracker.is_over_limit("user-1") is True

        clock.advance(31)

        status = await tracker.check("user-1")
        assert status.count == 2
        assert status.over_limit is False

    @pytest.mark.asyncio
    async def test_users_are_counted_separately(self, tracker):
        for _ in range(3):
            await tracker.record_usage("user-1", "folder-1", 1)

        assert await tracker.is_over_limit("user-1") is True
        assert await tracker.is_over_limit("user-2") is False

    @pytest.mark.asyncio
    async def test_zero_file_events_count(self, tracker):
        for _ in range(3):
            await tracker.record_usage("user-1", "folder-1", 0)

        assert await tracker.is_over_limit("user-1") is True

    @pytest.mark.asyncio
    async def test_events_are_persisted(self, tracker, clock):
        await tracker.record_usage("user-1", "folder-9", 4)

        since = clock() - timedelta(seconds=1)
        assert QuotaEventRepository.count_since("user-1", since) == 1

    @pytest.mark.asyncio
    async def test_check_fails_open_on_store_error(self, clock):
        store = MagicMock()
        store.count_since.side_effect = RuntimeError("database is locked")
        tracker = QuotaTracker(event_store=store, clock=clock)

        status = await tracker.check("user-1")

        assert status.over_limit is False
        assert status.count == 0

    @pytest.mark.asyncio
    async def test_record_usage_swallows_store_error(self, clock):
        store = MagicMock()
        store.append.side_effect = RuntimeError("disk full")
        tracker = QuotaTracker(event_store=store, clock=clock)

        await tracker.record_usage("user-1", "folder-1", 1)

        event = store.append.call_args[0][0]
        assert isinstance(event, QuotaEvent)
        assert event.user_id == "user-1"
        assert event.file_count == 1
        assert event.created_at == clock()
