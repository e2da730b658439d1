"""Unauthenticated access to shared files."""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from server.service_locator import get_file_service
from server.services.file_service import FileService
from server.streaming import iterate_and_close
from server.utils import content_disposition

router = APIRouter(prefix="/public", tags=["Public"])


@router.get("/{public_id}")
async def access_shared_file(
    public_id: str,
    file_service: FileService = Depends(get_file_service)
):
    """
    Stream a shared file.

    Raises:
        - 404: Unknown link, or the file is in the trash
        - 410: Link expired
    """
    file, blob = await file_service.access_public(public_id)

    return StreamingResponse(
        iterate_and_close(blob),
        media_type=file.content_type,
        headers={
            "Content-Disposition": content_disposition(file.name, "inline"),
            "Content-Length": str(file.size),
        }
    )
