"""Pydantic schemas for file endpoints."""

from typing import List, Optional

from pydantic import BaseModel


class FileMetadataResponse(BaseModel):
    """Response model for file metadata."""
    file_id: str
    folder_id: str
    name: str
    size: int
    content_type: str
    owner_id: str
    created_at: str
    deleted_at: Optional[str] = None
    last_accessed_at: Optional[str] = None


class ListFilesResponse(BaseModel):
    """Response model for file listing."""
    files: List[FileMetadataResponse]


class RenameFileRequest(BaseModel):
    """Request model for renaming a file."""
    name: str


class ShareLinkResponse(BaseModel):
    """Response model for a generated share link."""
    public_url: str
    expires_at: str


def file_to_response(file) -> FileMetadataResponse:
    return FileMetadataResponse(
        file_id=file.file_id,
        folder_id=file.folder_id,
        name=file.name,
        size=file.size,
        content_type=file.content_type,
        owner_id=file.owner_id,
        created_at=file.created_at.isoformat(),
        deleted_at=file.deleted_at.isoformat() if file.deleted_at else None,
        last_accessed_at=file.last_accessed_at.isoformat() if file.last_accessed_at else None,
    )
