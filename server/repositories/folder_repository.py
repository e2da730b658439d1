"""Folder repository for database operations."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from common.logging_config import get_logger
from server.database import get_db_connection, to_db_timestamp, from_db_timestamp

logger = get_logger(__name__)


@dataclass
class Folder:
    folder_id: str
    owner_id: str
    name: str
    created_at: datetime


def _row_to_folder(row) -> Folder:
    return Folder(
        folder_id=row["folder_id"],
        owner_id=row["owner_id"],
        name=row["name"],
        created_at=from_db_timestamp(row["created_at"]),
    )


class FolderRepository:
    @staticmethod
    def create_folder(folder_id: str, owner_id: str, name: str, created_at: datetime) -> Folder:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO folders (folder_id, owner_id, name, created_at) VALUES (?, ?, ?, ?)",
                (folder_id, owner_id, name, to_db_timestamp(created_at))
            )
            conn.commit()

        logger.info(f"Folder created [folder_id={folder_id}] [owner_id={owner_id}]")
        return Folder(folder_id=folder_id, owner_id=owner_id, name=name, created_at=created_at)

    @staticmethod
    def get_by_id(folder_id: str) -> Optional[Folder]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT folder_id, owner_id, name, created_at FROM folders WHERE folder_id = ?",
                (folder_id,)
            )
            row = cursor.fetchone()

            if row is None:
                return None

            return _row_to_folder(row)

    @staticmethod
    def list_by_owner(owner_id: str) -> List[Folder]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT folder_id, owner_id, name, created_at FROM folders
                WHERE owner_id = ?
                ORDER BY created_at DESC, rowid DESC
                """,
                (owner_id,)
            )
            return [_row_to_folder(row) for row in cursor.fetchall()]

    @staticmethod
    def rename_folder(folder_id: str, name: str) -> None:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("UPDATE folders SET name = ? WHERE folder_id = ?", (name, folder_id))
            conn.commit()

    @staticmethod
    def delete_folder(folder_id: str) -> None:
        logger.debug(f"Deleting folder [folder_id={folder_id}]")
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM folders WHERE folder_id = ?", (folder_id,))
            conn.commit()
