"""Audit trail repository for archive creation."""

from dataclasses import dataclass
from datetime import datetime
from typing import List

from server.database import get_db_connection, to_db_timestamp, from_db_timestamp


@dataclass
class AuditEntry:
    user_id: str
    folder_id: str
    file_count: int
    created_at: datetime


class AuditRepository:
    @staticmethod
    def create_entry(user_id: str, folder_id: str, file_count: int, created_at: datetime) -> AuditEntry:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO audit_log (user_id, folder_id, file_count, created_at) VALUES (?, ?, ?, ?)",
                (user_id, folder_id, file_count, to_db_timestamp(created_at))
            )
            conn.commit()

        return AuditEntry(user_id=user_id, folder_id=folder_id, file_count=file_count, created_at=created_at)

    @staticmethod
    def list_for_user(user_id: str) -> List[AuditEntry]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT user_id, folder_id, file_count, created_at FROM audit_log
                WHERE user_id = ?
                ORDER BY entry_id ASC
                """,
                (user_id,)
            )
            return [
                AuditEntry(
                    user_id=row["user_id"],
                    folder_id=row["folder_id"],
                    file_count=row["file_count"],
                    created_at=from_db_timestamp(row["created_at"]),
                )
                for row in cursor.fetchall()
            ]
