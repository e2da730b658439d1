"""Repository layer for data access."""

from server.repositories.user_repository import UserRepository
from server.repositories.folder_repository import FolderRepository
from server.repositories.file_repository import FileRepository
from server.repositories.quota_repository import QuotaEventRepository
from server.repositories.audit_repository import AuditRepository

__all__ = [
    "UserRepository",
    "FolderRepository",
    "FileRepository",
    "QuotaEventRepository",
    "AuditRepository",
]
