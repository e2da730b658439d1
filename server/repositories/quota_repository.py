"""Append-only store of archive-creation quota events."""

from dataclasses import dataclass
from datetime import datetime

from common.logging_config import get_logger
from server.database import get_db_connection, to_db_timestamp

logger = get_logger(__name__)


@dataclass(frozen=True)
class QuotaEvent:
    user_id: str
    folder_id: str
    file_count: int
    created_at: datetime


class QuotaEventRepository:
    """
    Events are never updated or deleted here; the window is applied by
    the count query.
    """

    @staticmethod
    def append(event: QuotaEvent) -> None:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO quota_events (user_id, folder_id, file_count, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (event.user_id, event.folder_id, event.file_count, to_db_timestamp(event.created_at))
            )
            conn.commit()
        logger.debug(f"Quota event appended [user_id={event.user_id}] [folder_id={event.folder_id}]")

    @staticmethod
    def count_since(user_id: str, since: datetime) -> int:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT COUNT(*) AS total FROM quota_events WHERE user_id = ? AND created_at >= ?",
                (user_id, to_db_timestamp(since))
            )
            return cursor.fetchone()["total"]
