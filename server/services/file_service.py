"""File service for business logic."""

from datetime import timedelta
from typing import AsyncIterable, AsyncIterator, Dict, List, Optional

from common.constants import DEFAULT_CONTENT_TYPE, SHARE_LINK_TTL_HOURS
from common.logging_config import get_logger
from server.exceptions import (
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
    ShareLinkExpiredError,
)
from server.repositories.file_repository import FileRecord, FileRepository
from server.services.folder_service import FolderService
from server.services.preview import PreviewFactory
from server.storage.base import BlobStorage
from server.utils import generate_uuid, utcnow

logger = get_logger(__name__)


class FileService:
    def __init__(
        self,
        storage: BlobStorage,
        share_ttl_hours: int = SHARE_LINK_TTL_HOURS,
        preview_factory: Optional[PreviewFactory] = None,
    ):
        self.storage = storage
        self.preview_factory = preview_factory or PreviewFactory()
        self.share_ttl = timedelta(hours=share_ttl_hours)
        self.file_repo = FileRepository()
        self.folder_service = FolderService()

    def get_owned_file(self, user_id: str, file_id: str, action: str = "access") -> FileRecord:
        file = self.file_repo.get_by_id(file_id)
        if file is None:
            raise NotFoundError("File not found")
        if file.owner_id != user_id:
            raise ForbiddenError(f"Not authorized to {action} this file")
        return file

    def _get_live_file(self, user_id: str, file_id: str, action: str) -> FileRecord:
        file = self.get_owned_file(user_id, file_id, action)
        if file.in_trash:
            raise NotFoundError("File not found")
        return file

    def list_in_folder(self, user_id: str, folder_id: str) -> List[FileRecord]:
        self.folder_service.get_owned_folder(user_id, folder_id, "view")
        return self.file_repo.list_by_folder(user_id, folder_id)

    async def upload_to_folder(
        self,
        user_id: str,
        folder_id: str,
        file_name: Optional[str],
        content_type: Optional[str],
        chunks: AsyncIterable[bytes],
    ) -> FileRecord:
        self.folder_service.get_owned_folder(user_id, folder_id, "upload to")

        if not file_name or not file_name.strip():
            raise InvalidArgumentError("Uploaded file is missing a name")

        blob = await self.storage.save(chunks, file_name)

        try:
            file = self.file_repo.create_file(
                file_id=generate_uuid(),
                owner_id=user_id,
                folder_id=folder_id,
                name=file_name,
                size=blob.size,
                content_type=content_type or DEFAULT_CONTENT_TYPE,
                storage_key=blob.storage_key,
                created_at=utcnow(),
            )
        except Exception as e:
            logger.error(f"Upload failed for {file_name} in folder {folder_id}: {e}")
            await self.storage.remove(blob.storage_key)
            raise

        logger.info(f"Uploaded file {file.file_id} ({file.size} bytes) to folder {folder_id}")
        return file

    async def download(self, user_id: str, file_id: str) -> tuple[FileRecord, AsyncIterator[bytes]]:
        file = self._get_live_file(user_id, file_id, "download")
        blob = await self.storage.open_read_stream(file.storage_key)
        self.file_repo.touch_access(file_id, utcnow())
        return file, blob

    def get_details(self, user_id: str, file_id: str) -> FileRecord:
        return self._get_live_file(user_id, file_id, "view")

    async def preview(
        self, user_id: str, file_id: str
    ) -> tuple[FileRecord, AsyncIterator[bytes], Dict[str, str]]:
        """
        Open a file for inline display.

        The renderer is chosen before any bytes are opened, so an
        unsupported type is refused without touching storage.

        Returns:
            The file, its byte stream and the response headers

        Raises:
            UnsupportedPreviewError: if no renderer handles the content type
        """
        file = self._get_live_file(user_id, file_id, "preview")
        headers = self.preview_factory.renderer_for(file.content_type).headers(file)

        blob = await self.storage.open_read_stream(file.storage_key)
        self.file_repo.touch_access(file_id, utcnow())
        return file, blob, headers

    def rename(self, user_id: str, file_id: str, name: str) -> FileRecord:
        if not name or not name.strip():
            raise InvalidArgumentError("New file name is required")

        file = self._get_live_file(user_id, file_id, "rename")
        self.file_repo.rename_file(file_id, name.strip())
        file.name = name.strip()
        return file

    def move_to_trash(self, user_id: str, file_id: str) -> FileRecord:
        file = self._get_live_file(user_id, file_id, "delete")
        file.deleted_at = utcnow()
        self.file_repo.set_deleted_at(file_id, file.deleted_at)
        logger.info(f"File moved to trash [file_id={file_id}] [user_id={user_id}]")
        return file

    def generate_share_link(self, user_id: str, file_id: str, base_url: str) -> tuple[str, FileRecord]:
        file = self._get_live_file(user_id, file_id, "share")
        file.public_id = generate_uuid()
        file.share_expires_at = utcnow() + self.share_ttl
        self.file_repo.set_share(file_id, file.public_id, file.share_expires_at)

        public_url = f"{base_url.rstrip('/')}/public/{file.public_id}"
        logger.info(f"Share link generated [file_id={file_id}] expires={file.share_expires_at.isoformat()}")
        return public_url, file

    async def access_public(self, public_id: str) -> tuple[FileRecord, AsyncIterator[bytes]]:
        file = self.file_repo.get_by_public_id(public_id)
        if file is None or file.in_trash:
            raise NotFoundError("Shared file not found")

        if file.share_expires_at is not None and utcnow() > file.share_expires_at:
            raise ShareLinkExpiredError("This link has expired.")

        blob = await self.storage.open_read_stream(file.storage_key)
        return file, blob
