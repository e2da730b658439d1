"""Audit observer: persists an audit row for every archive created."""

import logging
from typing import Optional

from common.logging_config import get_logger
from common.types import ArchiveCompletionEvent
from server.repositories.audit_repository import AuditRepository
from server.services.event_bus import ArchiveEventBus

logger = get_logger(__name__)


class AuditObserver:
    """
    Records ArchiveCompletionEvents in the audit_log table and mirrors them
    to the audit service log. Persistence errors are reduced to a log line.
    """

    def __init__(
        self,
        event_bus: ArchiveEventBus,
        audit_log: logging.Logger,
        audit_store: Optional[AuditRepository] = None,
    ):
        self.audit_log = audit_log
        self.audit_store = audit_store or AuditRepository()
        event_bus.subscribe(self.on_archive_created)

    async def on_archive_created(self, event: ArchiveCompletionEvent) -> None:
        try:
            self.audit_store.create_entry(
                user_id=event.user_id,
                folder_id=event.folder_id,
                file_count=event.file_count,
                created_at=event.timestamp,
            )
            self.audit_log.info(
                f"[ZIP_CREATED] user={event.user_id} folder={event.folder_id} "
                f"files={event.file_count} createdAt={event.timestamp.isoformat()} action=auditLog"
            )
        except Exception as e:
            try:
                self.audit_log.warning(f"Failed to record audit log: {e}")
            except Exception:
                logger.error(f"Failed to record audit log: {e}", exc_info=True)
