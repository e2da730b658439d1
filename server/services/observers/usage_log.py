"""Usage log observer: one line per archive creation in the usage service log."""

import logging

from common.logging_config import get_logger
from common.types import ArchiveCompletionEvent
from server.services.event_bus import ArchiveEventBus

logger = get_logger(__name__)


class UsageLogObserver:
    def __init__(self, event_bus: ArchiveEventBus, usage_log: logging.Logger):
        self.usage_log = usage_log
        event_bus.subscribe(self.on_archive_created)

    async def on_archive_created(self, event: ArchiveCompletionEvent) -> None:
        try:
            self.usage_log.info(
                f"[ZIP_CREATED] user={event.user_id} folder={event.folder_id} "
                f"files={event.file_count} createdAt={event.timestamp.isoformat()}"
            )
        except Exception as e:
            logger.warning(f"Failed to write usage log entry: {e}")
