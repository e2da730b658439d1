"""Pydantic schemas for API requests and responses."""

from server.schemas.accounts import (
    Credentials,
    RegisterRequest,
    SessionResponse,
    ProfileResponse,
    ProfileUpdateRequest
)
from server.schemas.folders import (
    FolderRequest,
    FolderResponse,
    ListFoldersResponse
)
from server.schemas.files import (
    FileMetadataResponse,
    ListFilesResponse,
    RenameFileRequest,
    ShareLinkResponse
)
from server.schemas.common import ErrorResponse, RateLimitedResponse, MessageResponse

__all__ = [
    "Credentials",
    "RegisterRequest",
    "SessionResponse",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "FolderRequest",
    "FolderResponse",
    "ListFoldersResponse",
    "FileMetadataResponse",
    "ListFilesResponse",
    "RenameFileRequest",
    "ShareLinkResponse",
    "ErrorResponse",
    "RateLimitedResponse",
    "MessageResponse"
]
