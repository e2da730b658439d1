"""Access, quota and selection checks in front of the archive builder."""

from typing import Any, Optional, Sequence

from common.constants import ZIP_MAX_FILES
from common.logging_config import get_logger
from server.exceptions import (
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
    RateLimitedError,
)
from server.repositories.file_repository import FileRepository
from server.repositories.folder_repository import FolderRepository
from server.services.archive_builder import ArchiveBuilder
from server.services.quota_tracker import QuotaTracker
from server.types import ArchiveResult
from server.utils import canonical_id

logger = get_logger(__name__)


class ZipAccessGuard:
    """
    Single entry point for folder ZIP downloads.

    Checks run in a fixed order and the first failure wins:
    folder exists -> caller owns it -> quota -> selection size ->
    resolve selected files -> record usage -> build.
    Nothing is recorded when a check fails.
    """

    def __init__(
        self,
        quota_tracker: QuotaTracker,
        archive_builder: ArchiveBuilder,
        folder_store: Optional[FolderRepository] = None,
        file_store: Optional[FileRepository] = None,
        max_files: int = ZIP_MAX_FILES,
    ):
        self.quota_tracker = quota_tracker
        self.archive_builder = archive_builder
        self.folder_store = folder_store or FolderRepository()
        self.file_store = file_store or FileRepository()
        self.max_files = max_files

    async def build_archive(
        self,
        user_id: str,
        folder_id: str,
        requested_file_ids: Optional[Sequence[Any]],
    ) -> ArchiveResult:
        folder = self.folder_store.get_by_id(folder_id)
        if folder is None:
            raise NotFoundError("Folder not found")

        if folder.owner_id != user_id:
            logger.warning(f"User {user_id} denied archive of folder {folder_id}")
            raise ForbiddenError("Not authorized to access this folder")

        quota = await self.quota_tracker.check(user_id)
        if quota.over_limit:
            raise RateLimitedError(
                "You have reached your quota. Try again later.",
                retry_after_seconds=quota.retry_after_seconds,
                limit=quota.limit,
                window_seconds=quota.window_seconds,
                count=quota.count,
            )

        requested = list(requested_file_ids or [])
        if not requested:
            raise InvalidArgumentError("No file is selected")
        if len(requested) > self.max_files:
            raise InvalidArgumentError(f"Maximum {self.max_files} files allowed")

        wanted = {canonical_id(file_id) for file_id in requested}
        folder_files = self.file_store.list_by_folder(user_id, folder_id)
        files = [f for f in folder_files if canonical_id(f.file_id) in wanted]

        if len(files) != len(wanted):
            logger.info(
                f"Archive of folder {folder_id}: {len(wanted)} ids requested, {len(files)} resolved"
            )

        await self.quota_tracker.record_usage(user_id, folder_id, len(files))

        return await self.archive_builder.build(folder, files)
