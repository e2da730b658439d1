"""Service layer for business logic."""

from server.services.account_service import AccountService
from server.services.folder_service import FolderService
from server.services.file_service import FileService
from server.services.trash_service import TrashService
from server.services.recent_service import RecentService
from server.services.event_bus import ArchiveEventBus
from server.services.quota_tracker import QuotaConfig, QuotaTracker
from server.services.archive_builder import ArchiveBuilder
from server.services.zip_access_guard import ZipAccessGuard

__all__ = [
    "AccountService",
    "FolderService",
    "FileService",
    "TrashService",
    "RecentService",
    "ArchiveEventBus",
    "QuotaConfig",
    "QuotaTracker",
    "ArchiveBuilder",
    "ZipAccessGuard",
]
