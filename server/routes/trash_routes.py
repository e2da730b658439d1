"""Trash bin API routes."""

from fastapi import APIRouter, Depends

from server.auth import get_current_user
from server.schemas.common import MessageResponse
from server.schemas.files import FileMetadataResponse, ListFilesResponse, file_to_response
from server.service_locator import get_trash_service
from server.services.trash_service import TrashService

router = APIRouter(prefix="/trash", tags=["Trash"])


@router.get("", response_model=ListFilesResponse)
async def list_trash(
    current_user: str = Depends(get_current_user),
    trash_service: TrashService = Depends(get_trash_service)
):
    files = trash_service.list_trash(current_user)
    return ListFilesResponse(files=[file_to_response(f) for f in files])


@router.post("/{file_id}/restore", response_model=FileMetadataResponse)
async def restore_file(
    file_id: str,
    current_user: str = Depends(get_current_user),
    trash_service: TrashService = Depends(get_trash_service)
):
    """
    Restore a trashed file.

    Raises:
        - 400: File is not in trash
        - 403: User does not own this file
        - 404: File not found
    """
    file = trash_service.restore(current_user, file_id)
    return file_to_response(file)


@router.delete("/{file_id}", response_model=MessageResponse)
async def purge_file(
    file_id: str,
    current_user: str = Depends(get_current_user),
    trash_service: TrashService = Depends(get_trash_service)
):
    """
    Permanently delete a trashed file and its stored bytes.
    """
    await trash_service.purge(current_user, file_id)
    return MessageResponse(message="File permanently deleted", id=file_id)
