"""Shared data type definitions (ArchiveCompletionEvent, QuotaStatus, etc.)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ArchiveCompletionEvent:
    """
    Emitted once per successful archive build.
    Never persisted as-is; observers decide what to record.
    """
    folder_id: str
    user_id: str
    file_count: int
    timestamp: datetime


@dataclass(frozen=True)
class QuotaStatus:
    """
    Result of a sliding-window quota check for one user.
    """
    over_limit: bool
    count: int
    limit: int
    window_seconds: int

    @property
    def retry_after_seconds(self) -> int:
        return self.window_seconds
