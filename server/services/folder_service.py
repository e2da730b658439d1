"""Folder service for business logic."""

from typing import List

from common.logging_config import get_logger
from server.exceptions import ForbiddenError, InvalidArgumentError, NotFoundError
from server.repositories.file_repository import FileRepository
from server.repositories.folder_repository import Folder, FolderRepository
from server.utils import generate_uuid, utcnow

logger = get_logger(__name__)


class FolderService:
    def __init__(self):
        self.folder_repo = FolderRepository()
        self.file_repo = FileRepository()

    def get_owned_folder(self, user_id: str, folder_id: str, action: str = "access") -> Folder:
        folder = self.folder_repo.get_by_id(folder_id)
        if folder is None:
            raise NotFoundError("Folder not found")
        if folder.owner_id != user_id:
            raise ForbiddenError(f"Not authorized to {action} this folder")
        return folder

    def list_folders(self, user_id: str) -> List[Folder]:
        return self.folder_repo.list_by_owner(user_id)

    def create_folder(self, user_id: str, name: str) -> Folder:
        if not name or not name.strip():
            raise InvalidArgumentError("Folder name is required")

        return self.folder_repo.create_folder(
            folder_id=generate_uuid(),
            owner_id=user_id,
            name=name.strip(),
            created_at=utcnow(),
        )

    def rename_folder(self, user_id: str, folder_id: str, name: str) -> Folder:
        if not name or not name.strip():
            raise InvalidArgumentError("Folder name is required")

        folder = self.get_owned_folder(user_id, folder_id, "update")
        self.folder_repo.rename_folder(folder_id, name.strip())
        folder.name = name.strip()
        return folder

    def delete_folder(self, user_id: str, folder_id: str) -> None:
        self.get_owned_folder(user_id, folder_id, "delete")

        if self.file_repo.count_in_folder(folder_id) > 0:
            raise InvalidArgumentError("Folder is not empty")

        self.folder_repo.delete_folder(folder_id)
        logger.info(f"Folder deleted [folder_id={folder_id}] [user_id={user_id}]")
