"""Wiring of long-lived components (storage, event bus, archive pipeline)."""

from dataclasses import dataclass
from typing import Optional

from common.logging_config import get_logger, setup_service_log
from server.config import (
    LOG_DIR,
    STORAGE_PATH,
    ZIP_FILE_LIMIT,
    ZIP_LEVEL,
    ZIP_QUOTA,
    ZIP_QUOTA_WINDOW,
)
from server.services.archive_builder import ArchiveBuilder
from server.services.event_bus import ArchiveEventBus
from server.services.observers import AuditObserver, UsageLogObserver
from server.services.quota_tracker import QuotaConfig, QuotaTracker
from server.services.zip_access_guard import ZipAccessGuard
from server.storage.base import BlobStorage
from server.storage.local_storage import LocalBlobStorage

logger = get_logger(__name__)


@dataclass
class Container:
    storage: BlobStorage
    event_bus: ArchiveEventBus
    quota_tracker: QuotaTracker
    archive_builder: ArchiveBuilder
    zip_access_guard: ZipAccessGuard
    audit_observer: AuditObserver
    usage_observer: UsageLogObserver


def build_container(
    storage: Optional[BlobStorage] = None,
    quota_config: Optional[QuotaConfig] = None,
) -> Container:
    """
    Build the component graph. Observers subscribe to the event bus here,
    before any archive can be built.
    """
    storage = storage or LocalBlobStorage(STORAGE_PATH)
    quota_config = quota_config or QuotaConfig(limit=ZIP_QUOTA, window_seconds=ZIP_QUOTA_WINDOW)

    event_bus = ArchiveEventBus()
    audit_observer = AuditObserver(event_bus, setup_service_log("audit", LOG_DIR))
    usage_observer = UsageLogObserver(event_bus, setup_service_log("usage", LOG_DIR))

    quota_tracker = QuotaTracker(config=quota_config)
    archive_builder = ArchiveBuilder(storage, event_bus, compression_level=ZIP_LEVEL)
    zip_access_guard = ZipAccessGuard(quota_tracker, archive_builder, max_files=ZIP_FILE_LIMIT)

    logger.info(
        f"Archive pipeline ready: quota {quota_config.limit}/{quota_config.window_seconds}s, "
        f"max {ZIP_FILE_LIMIT} files, {event_bus.subscriber_count} observers"
    )

    return Container(
        storage=storage,
        event_bus=event_bus,
        quota_tracker=quota_tracker,
        archive_builder=archive_builder,
        zip_access_guard=zip_access_guard,
        audit_observer=audit_observer,
        usage_observer=usage_observer,
    )
