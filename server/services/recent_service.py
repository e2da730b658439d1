"""Recently accessed files."""

from typing import List

from common.constants import RECENT_FILES_LIMIT
from server.repositories.file_repository import FileRecord, FileRepository


class RecentService:
    def __init__(self):
        self.file_repo = FileRepository()

    def list_recent(self, user_id: str, limit: int = RECENT_FILES_LIMIT) -> List[FileRecord]:
        return self.file_repo.list_recent(user_id, max(1, limit))
