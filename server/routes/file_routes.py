"""File operation API routes."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from server.auth import get_current_user
from server.schemas.common import MessageResponse
from server.schemas.files import (
    FileMetadataResponse,
    RenameFileRequest,
    ShareLinkResponse,
    file_to_response
)
from server.service_locator import get_file_service
from server.services.file_service import FileService
from server.streaming import iterate_and_close
from server.utils import content_disposition

router = APIRouter(prefix="/files", tags=["Files"])


@router.get("/{file_id}/download")
async def download_file(
    file_id: str,
    current_user: str = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service)
):
    """
    Download a file by file_id.

    Raises:
        - 401: Invalid or missing API Key
        - 403: User does not own this file
        - 404: File not found (or its bytes are missing)
    """
    file, blob = await file_service.download(current_user, file_id)

    return StreamingResponse(
        iterate_and_close(blob),
        media_type=file.content_type,
        headers={
            "Content-Disposition": content_disposition(file.name),
            "Content-Length": str(file.size),
        }
    )


@router.get("/{file_id}/preview")
async def preview_file(
    file_id: str,
    current_user: str = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service)
):
    """
    Show a file inline. Images and PDFs are supported.

    Raises:
        - 401: Invalid or missing API Key
        - 403: User does not own this file
        - 404: File not found (or its bytes are missing)
        - 415: File type cannot be previewed
    """
    file, blob, headers = await file_service.preview(current_user, file_id)

    media_type = headers.pop("Content-Type")
    headers["Content-Length"] = str(file.size)
    return StreamingResponse(iterate_and_close(blob), media_type=media_type, headers=headers)


@router.get("/{file_id}", response_model=FileMetadataResponse)
async def get_file_details(
    file_id: str,
    current_user: str = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service)
):
    return file_to_response(file_service.get_details(current_user, file_id))


@router.patch("/{file_id}", response_model=FileMetadataResponse)
async def rename_file(
    file_id: str,
    request: RenameFileRequest,
    current_user: str = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service)
):
    file = file_service.rename(current_user, file_id, request.name)
    return file_to_response(file)


@router.delete("/{file_id}", response_model=MessageResponse)
async def delete_file(
    file_id: str,
    current_user: str = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service)
):
    """
    Move a file to the trash. It can be restored from /trash.
    """
    file_service.move_to_trash(current_user, file_id)
    return MessageResponse(message="File moved to trash", id=file_id)


@router.post("/{file_id}/share", response_model=ShareLinkResponse)
async def share_file(
    file_id: str,
    request: Request,
    current_user: str = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service)
):
    """
    Generate a public link for a file. Any earlier link stops working.
    """
    public_url, file = file_service.generate_share_link(current_user, file_id, str(request.base_url))
    return ShareLinkResponse(public_url=public_url, expires_at=file.share_expires_at.isoformat())
