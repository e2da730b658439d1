"""Service locator and FastAPI dependencies for shared components."""

from typing import Optional

from server.container import Container
from server.services.account_service import AccountService
from server.services.file_service import FileService
from server.services.folder_service import FolderService
from server.services.trash_service import TrashService
from server.services.zip_access_guard import ZipAccessGuard
from server.config import SHARE_TTL_HOURS

_container: Optional[Container] = None


def set_container(container: Optional[Container]):
    """Set global component container"""
    global _container
    _container = container


def get_container() -> Container:
    """Get global component container"""
    if _container is None:
        raise RuntimeError("Component container not initialized")
    return _container


def get_zip_access_guard() -> ZipAccessGuard:
    return get_container().zip_access_guard


def get_account_service() -> AccountService:
    return AccountService()


def get_folder_service() -> FolderService:
    return FolderService()


def get_file_service() -> FileService:
    return FileService(get_container().storage, share_ttl_hours=SHARE_TTL_HOURS)


def get_trash_service() -> TrashService:
    return TrashService(get_container().storage)
