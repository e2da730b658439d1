"""Pydantic schemas for folder endpoints."""

from typing import List

from pydantic import BaseModel


class FolderRequest(BaseModel):
    """Request model for creating or renaming a folder."""
    name: str


class FolderResponse(BaseModel):
    """Response model for a folder."""
    folder_id: str
    name: str
    owner_id: str
    created_at: str


class ListFoldersResponse(BaseModel):
    """Response model for folder listing."""
    folders: List[FolderResponse]


def folder_to_response(folder) -> FolderResponse:
    return FolderResponse(
        folder_id=folder.folder_id,
        name=folder.name,
        owner_id=folder.owner_id,
        created_at=folder.created_at.isoformat(),
    )
