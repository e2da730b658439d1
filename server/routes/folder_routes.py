"""Folder API routes, including folder ZIP download."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import StreamingResponse

from common.constants import STREAM_PIECE_SIZE_BYTES
from common.logging_config import get_logger
from server.auth import get_current_user
from server.schemas.common import ErrorResponse, MessageResponse, RateLimitedResponse
from server.schemas.files import FileMetadataResponse, ListFilesResponse, file_to_response
from server.schemas.folders import (
    FolderRequest,
    FolderResponse,
    ListFoldersResponse,
    folder_to_response
)
from server.service_locator import get_file_service, get_folder_service, get_zip_access_guard
from server.services.file_service import FileService
from server.services.folder_service import FolderService
from server.services.zip_access_guard import ZipAccessGuard
from server.streaming import prime_stream
from server.utils import content_disposition, parse_id_list

logger = get_logger(__name__)

router = APIRouter(prefix="/folders", tags=["Folders"])


@router.get("", response_model=ListFoldersResponse)
async def list_folders(
    current_user: str = Depends(get_current_user),
    folder_service: FolderService = Depends(get_folder_service)
):
    """
    List the current user's folders, newest first.
    """
    folders = folder_service.list_folders(current_user)
    return ListFoldersResponse(folders=[folder_to_response(f) for f in folders])


@router.post("", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
async def create_folder(
    request: FolderRequest,
    current_user: str = Depends(get_current_user),
    folder_service: FolderService = Depends(get_folder_service)
):
    """
    Create a folder.

    Raises:
        - 400: Blank folder name
        - 401: Invalid or missing API Key
    """
    folder = folder_service.create_folder(current_user, request.name)
    return folder_to_response(folder)


@router.patch("/{folder_id}", response_model=FolderResponse)
async def rename_folder(
    folder_id: str,
    request: FolderRequest,
    current_user: str = Depends(get_current_user),
    folder_service: FolderService = Depends(get_folder_service)
):
    folder = folder_service.rename_folder(current_user, folder_id, request.name)
    return folder_to_response(folder)


@router.delete("/{folder_id}", response_model=MessageResponse)
async def delete_folder(
    folder_id: str,
    current_user: str = Depends(get_current_user),
    folder_service: FolderService = Depends(get_folder_service)
):
    """
    Delete an empty folder.

    Raises:
        - 400: Folder still holds files (trashed files included)
        - 403: User does not own this folder
        - 404: Folder not found
    """
    folder_service.delete_folder(current_user, folder_id)
    return MessageResponse(message="Folder deleted successfully", id=folder_id)


@router.get("/{folder_id}/files", response_model=ListFilesResponse)
async def list_folder_files(
    folder_id: str,
    current_user: str = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service)
):
    files = file_service.list_in_folder(current_user, folder_id)
    return ListFilesResponse(files=[file_to_response(f) for f in files])


@router.post("/{folder_id}/files", response_model=FileMetadataResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    folder_id: str,
    file: UploadFile = File(...),
    current_user: str = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service)
):
    """
    Upload a file into a folder (multipart/form-data).

    Raises:
        - 401: Invalid or missing API Key
        - 403: User does not own this folder
        - 404: Folder not found
    """
    async def read_upload():
        while True:
            piece = await file.read(STREAM_PIECE_SIZE_BYTES)
            if not piece:
                break
            yield piece

    record = await file_service.upload_to_folder(
        user_id=current_user,
        folder_id=folder_id,
        file_name=file.filename,
        content_type=file.content_type,
        chunks=read_upload(),
    )
    return file_to_response(record)


@router.get(
    "/{folder_id}/zip",
    response_class=StreamingResponse,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        429: {"model": RateLimitedResponse},
        500: {"model": ErrorResponse},
    }
)
async def download_folder_zip(
    folder_id: str,
    files: Optional[str] = Query(None, description="Comma-separated ids of the files to include"),
    current_user: str = Depends(get_current_user),
    guard: ZipAccessGuard = Depends(get_zip_access_guard)
):
    """
    Download selected files of a folder as one ZIP archive.

    Parameters:
        - files: Comma-separated file ids (1 to 5)
        - Authorization header: Bearer <api_key> (required)

    Returns:
        - StreamingResponse with the archive, named "<folder name>.zip"

    Raises:
        - 400: No file selected, or more than 5 selected
        - 401: Invalid or missing API Key
        - 403: User does not own this folder
        - 404: Folder not found
        - 429: Archive quota exceeded (Retry-After header)
        - 500: Archive could not be started
    """
    file_ids = parse_id_list(files)

    archive = await guard.build_archive(current_user, folder_id, file_ids)
    body = await prime_stream(archive.stream)

    headers = {k: v for k, v in archive.headers.items() if k.lower() != "content-type"}
    headers["Content-Disposition"] = content_disposition(archive.filename)

    logger.info(f"Streaming archive {archive.filename!r} to user {current_user}")

    return StreamingResponse(
        body,
        media_type=archive.headers.get("Content-Type", "application/zip"),
        headers=headers,
    )
