"""Tests for the archive event bus and its observers."""

import logging
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from common.logging_config import setup_service_log
from common.types import ArchiveCompletionEvent
from server.repositories.audit_repository import AuditRepository
from server.services.event_bus import ArchiveEventBus
from server.services.observers import AuditObserver, UsageLogObserver


@pytest.fixture
def event():
    return ArchiveCompletionEvent(
        folder_id="folder-1",
        user_id="user-1",
        file_count=2,
        timestamp=datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc),
    )


class TestArchiveEventBus:
    @pytest.mark.asyncio
    async def test_every_subscriber_receives_event(self, event):
        first, second = MagicMock(), AsyncMock()
        bus = ArchiveEventBus([first])
        bus.subscribe(second)

        scheduled = bus.publish(event)
        await bus.drain()

        assert scheduled == 2
        first.assert_called_once_with(event)
        second.assert_awaited_once_with(event)

    @pytest.mark.asyncio
    async def test_failing_subscriber_does_not_block_others(self, event):
        broken = AsyncMock(side_effect=RuntimeError("boom"))
        healthy = AsyncMock()
        bus = ArchiveEventBus([broken, healthy])

        bus.publish(event)
        await bus.drain()

        healthy.assert_awaited_once_with(event)

    @pytest.mark.asyncio
    async def test_publish_without_subscribers(self, event):
        bus = ArchiveEventBus()

        assert bus.publish(event) == 0
        await bus.drain()

    @pytest.mark.asyncio
    async def test_publish_does_not_wait_for_delivery(self, event):
        delivered = []

        async def slow(evt):
            delivered.append(evt)

        bus = ArchiveEventBus([slow])
        bus.publish(event)

        assert delivered == []
        await bus.drain()
        assert delivered == [event]


class TestUsageLogObserver:
    @pytest.mark.asyncio
    async def test_writes_one_line(self, tmp_path, event):
        bus = ArchiveEventBus()
        usage_log = setup_service_log("usage", tmp_path)
        UsageLogObserver(bus, usage_log)

        bus.publish(event)
        await bus.drain()

        lines = (tmp_path / "usage.log").read_text().splitlines()
        assert len(lines) == 1
        assert "[ZIP_CREATED] user=user-1 folder=folder-1 files=2" in lines[0]
        assert "createdAt=2024-05-01T12:00:00+00:00" in lines[0]

    @pytest.mark.asyncio
    async def test_log_failure_is_swallowed(self, event):
        usage_log = MagicMock(spec=logging.Logger)
        usage_log.info.side_effect = OSError("read-only file system")
        observer = UsageLogObserver(ArchiveEventBus(), usage_log)

        await observer.on_archive_created(event)


class TestAuditObserver:
    @pytest.mark.asyncio
    async def test_persists_and_logs(self, test_db, tmp_path, event):
        bus = ArchiveEventBus()
        audit_log = setup_service_log("audit", tmp_path)
        AuditObserver(bus, audit_log)

        bus.publish(event)
        await bus.drain()

        entries = AuditRepository.list_for_user("user-1")
        assert len(entries) == 1
        assert entries[0].folder_id == "folder-1"
        assert entries[0].file_count == 2
        assert entries[0].created_at == event.timestamp

        text = (tmp_path / "audit.log").read_text()
        assert "action=auditLog" in text

    @pytest.mark.asyncio
    async def test_store_failure_is_logged(self, tmp_path, event):
        store = MagicMock()
        store.create_entry.side_effect = RuntimeError("no such table: audit_log")
        audit_log = setup_service_log("audit", tmp_path)
        observer = AuditObserver(ArchiveEventBus(), audit_log, audit_store=store)

        await observer.on_archive_created(event)

        text = (tmp_path / "audit.log").read_text()
        assert "Failed to record audit log: no such table: audit_log" in text

    @pytest.mark.asyncio
    async def test_audit_failure_does_not_affect_usage_log(self, tmp_path, event):
        store = MagicMock()
        store.create_entry.side_effect = RuntimeError("database is locked")
        bus = ArchiveEventBus()
        AuditObserver(bus, setup_service_log("audit", tmp_path), audit_store=store)
        UsageLogObserver(bus, setup_service_log("usage", tmp_path))

        bus.publish(event)
        await bus.drain()

        assert "[ZIP_CREATED]" in (tmp_path / "usage.log").read_text()
