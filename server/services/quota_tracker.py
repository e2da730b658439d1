"""Sliding-window quota for archive creation."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from common.constants import ZIP_QUOTA_LIMIT, ZIP_QUOTA_WINDOW_SECONDS
from common.logging_config import get_logger
from common.types import QuotaStatus
from server.repositories.quota_repository import QuotaEvent, QuotaEventRepository
from server.utils import utcnow

logger = get_logger(__name__)


@dataclass(frozen=True)
class QuotaConfig:
    limit: int = ZIP_QUOTA_LIMIT
    window_seconds: int = ZIP_QUOTA_WINDOW_SECONDS

    def __post_init__(self):
        if self.limit < 1:
            raise ValueError("Quota limit must be at least 1")
        if self.window_seconds < 1:
            raise ValueError("Quota window must be at least 1 second")


class QuotaTracker:
    """
    Counts a user's archive events within the trailing window.

    Events are never pruned; the window is applied at query time. Checks
    and records are not serialized, so concurrent requests from one user
    can both pass before either is recorded.
    """

    def __init__(
        self,
        event_store: Optional[QuotaEventRepository] = None,
        config: Optional[QuotaConfig] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.event_store = event_store or QuotaEventRepository()
        self.config = config or QuotaConfig()
        self.clock = clock

    async def check(self, user_id: str) -> QuotaStatus:
        """
        Count the user's events since now - window.

        A failed read is logged and reported as under the limit.
        """
        since = self.clock() - timedelta(seconds=self.config.window_seconds)

        try:
            count = self.event_store.count_since(user_id, since)
        except Exception as e:
            logger.error(f"Quota count failed for user {user_id}, allowing request: {e}", exc_info=True)
            count = 0

        over_limit = count >= self.config.limit
        if over_limit:
            logger.info(
                f"User {user_id} over archive quota: {count}/{self.config.limit} "
                f"in {self.config.window_seconds}s"
            )

        return QuotaStatus(
            over_limit=over_limit,
            count=count,
            limit=self.config.limit,
            window_seconds=self.config.window_seconds,
        )

    async def is_over_limit(self, user_id: str) -> bool:
        status = await self.check(user_id)
        return status.over_limit

    async def record_usage(self, user_id: str, folder_id: str, file_count: int) -> None:
        """
        Append one quota event. Best effort: failures are logged, never raised.
        """
        event = QuotaEvent(
            user_id=user_id,
            folder_id=folder_id,
            file_count=file_count,
            created_at=self.clock(),
        )

        try:
            self.event_store.append(event)
        except Exception as e:
            logger.error(f"Failed to record quota usage for user {user_id}: {e}", exc_info=True)
