"""File repository for database operations."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from common.logging_config import get_logger
from server.database import get_db_connection, to_db_timestamp, from_db_timestamp

logger = get_logger(__name__)

FILE_COLUMNS = """
    file_id, owner_id, folder_id, name, size, content_type, storage_key,
    public_id, share_expires_at, deleted_at, last_accessed_at, created_at
"""


@dataclass
class FileRecord:
    file_id: str
    owner_id: str
    folder_id: str
    name: str
    size: int
    content_type: str
    storage_key: str
    created_at: datetime
    public_id: Optional[str] = None
    share_expires_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    last_accessed_at: Optional[datetime] = None

    @property
    def in_trash(self) -> bool:
        return self.deleted_at is not None


def _row_to_file(row) -> FileRecord:
    return FileRecord(
        file_id=row["file_id"],
        owner_id=row["owner_id"],
        folder_id=row["folder_id"],
        name=row["name"],
        size=row["size"],
        content_type=row["content_type"],
        storage_key=row["storage_key"],
        created_at=from_db_timestamp(row["created_at"]),
        public_id=row["public_id"],
        share_expires_at=from_db_timestamp(row["share_expires_at"]),
        deleted_at=from_db_timestamp(row["deleted_at"]),
        last_accessed_at=from_db_timestamp(row["last_accessed_at"]),
    )


class FileRepository:
    @staticmethod
    def create_file(
        file_id: str,
        owner_id: str,
        folder_id: str,
        name: str,
        size: int,
        content_type: str,
        storage_key: str,
        created_at: datetime,
    ) -> FileRecord:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO files (file_id, owner_id, folder_id, name, size, content_type, storage_key, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (file_id, owner_id, folder_id, name, size, content_type, storage_key, to_db_timestamp(created_at))
            )
            conn.commit()

        return FileRecord(
            file_id=file_id,
            owner_id=owner_id,
            folder_id=folder_id,
            name=name,
            size=size,
            content_type=content_type,
            storage_key=storage_key,
            created_at=created_at,
        )

    @staticmethod
    def get_by_id(file_id: str) -> Optional[FileRecord]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {FILE_COLUMNS} FROM files WHERE file_id = ?", (file_id,))
            row = cursor.fetchone()

            if row is None:
                return None

            return _row_to_file(row)

    @staticmethod
    def get_by_public_id(public_id: str) -> Optional[FileRecord]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {FILE_COLUMNS} FROM files WHERE public_id = ?", (public_id,))
            row = cursor.fetchone()

            if row is None:
                return None

            return _row_to_file(row)

    @staticmethod
    def list_by_folder(owner_id: str, folder_id: str) -> List[FileRecord]:
        """
        List the live (not trashed) files of a folder owned by owner_id,
        in upload order.
        """
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {FILE_COLUMNS} FROM files
                WHERE owner_id = ? AND folder_id = ? AND deleted_at IS NULL
                ORDER BY created_at ASC, rowid ASC
                """,
                (owner_id, folder_id)
            )
            return [_row_to_file(row) for row in cursor.fetchall()]

    @staticmethod
    def count_in_folder(folder_id: str) -> int:
        """
        Count every file record in a folder, trashed ones included.
        """
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) AS total FROM files WHERE folder_id = ?", (folder_id,))
            return cursor.fetchone()["total"]

    @staticmethod
    def list_trashed(owner_id: str) -> List[FileRecord]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {FILE_COLUMNS} FROM files
                WHERE owner_id = ? AND deleted_at IS NOT NULL
                ORDER BY deleted_at DESC, rowid DESC
                """,
                (owner_id,)
            )
            return [_row_to_file(row) for row in cursor.fetchall()]

    @staticmethod
    def list_recent(owner_id: str, limit: int) -> List[FileRecord]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {FILE_COLUMNS} FROM files
                WHERE owner_id = ? AND deleted_at IS NULL AND last_accessed_at IS NOT NULL
                ORDER BY last_accessed_at DESC
                LIMIT ?
                """,
                (owner_id, limit)
            )
            return [_row_to_file(row) for row in cursor.fetchall()]

    @staticmethod
    def rename_file(file_id: str, name: str) -> None:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("UPDATE files SET name = ? WHERE file_id = ?", (name, file_id))
            conn.commit()

    @staticmethod
    def set_share(file_id: str, public_id: str, expires_at: datetime) -> None:
        """
        Attach a public share id, replacing any previous one.
        """
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE files SET public_id = ?, share_expires_at = ? WHERE file_id = ?",
                (public_id, to_db_timestamp(expires_at), file_id)
            )
            conn.commit()

    @staticmethod
    def set_deleted_at(file_id: str, deleted_at: Optional[datetime]) -> None:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE files SET deleted_at = ? WHERE file_id = ?",
                (to_db_timestamp(deleted_at), file_id)
            )
            conn.commit()

    @staticmethod
    def touch_access(file_id: str, accessed_at: datetime) -> None:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE files SET last_accessed_at = ? WHERE file_id = ?",
                (to_db_timestamp(accessed_at), file_id)
            )
            conn.commit()

    @staticmethod
    def delete_file(file_id: str) -> None:
        """
        Remove the file record permanently.
        """
        logger.debug(f"Purging file record [file_id={file_id}]")
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM files WHERE file_id = ?", (file_id,))
            conn.commit()
        logger.info(f"File record purged [file_id={file_id}]")
