"""Recently accessed files API route."""

from fastapi import APIRouter, Depends, Query

from common.constants import RECENT_FILES_LIMIT
from server.auth import get_current_user
from server.schemas.files import ListFilesResponse, file_to_response
from server.services.recent_service import RecentService

router = APIRouter(prefix="/recent", tags=["Recent"])


@router.get("", response_model=ListFilesResponse)
async def list_recent(
    limit: int = Query(RECENT_FILES_LIMIT, ge=1, le=100),
    current_user: str = Depends(get_current_user)
):
    files = RecentService().list_recent(current_user, limit)
    return ListFilesResponse(files=[file_to_response(f) for f in files])
