"""Trash bin: list, restore and purge soft-deleted files."""

from typing import List

from common.logging_config import get_logger
from server.exceptions import ForbiddenError, InvalidArgumentError, NotFoundError
from server.repositories.file_repository import FileRecord, FileRepository
from server.storage.base import BlobStorage

logger = get_logger(__name__)


class TrashService:
    def __init__(self, storage: BlobStorage):
        self.storage = storage
        self.file_repo = FileRepository()

    def _get_trashed_file(self, user_id: str, file_id: str, action: str) -> FileRecord:
        file = self.file_repo.get_by_id(file_id)
        if file is None:
            raise NotFoundError("File not found")
        if file.owner_id != user_id:
            raise ForbiddenError(f"Not authorized to {action} this file")
        if not file.in_trash:
            raise InvalidArgumentError("File is not in trash")
        return file

    def list_trash(self, user_id: str) -> List[FileRecord]:
        return self.file_repo.list_trashed(user_id)

    def restore(self, user_id: str, file_id: str) -> FileRecord:
        file = self._get_trashed_file(user_id, file_id, "restore")
        self.file_repo.set_deleted_at(file_id, None)
        file.deleted_at = None
        logger.info(f"File restored [file_id={file_id}] [user_id={user_id}]")
        return file

    async def purge(self, user_id: str, file_id: str) -> None:
        file = self._get_trashed_file(user_id, file_id, "permanently delete")
        await self.storage.remove(file.storage_key)
        self.file_repo.delete_file(file_id)
        logger.info(f"File permanently deleted [file_id={file_id}] [user_id={user_id}]")
