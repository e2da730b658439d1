"""Broadcast channel for archive completion events."""

import asyncio
import inspect
from typing import Awaitable, Callable, Iterable, List, Optional, Set, Union

from common.logging_config import get_logger
from common.types import ArchiveCompletionEvent

logger = get_logger(__name__)

Subscriber = Callable[[ArchiveCompletionEvent], Union[Awaitable[None], None]]


class ArchiveEventBus:
    """
    Delivers each published event to every subscriber in its own task.

    Delivery never raises back into the publisher, and one subscriber's
    failure does not affect the others. Ordering between subscribers is
    not defined.
    """

    def __init__(self, subscribers: Optional[Iterable[Subscriber]] = None):
        self._subscribers: List[Subscriber] = list(subscribers or [])
        self._pending: Set[asyncio.Task] = set()

    def subscribe(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, event: ArchiveCompletionEvent) -> int:
        """
        Schedule delivery of event to all current subscribers.

        Must be called from within a running event loop.

        Returns:
            Number of deliveries scheduled
        """
        for callback in list(self._subscribers):
            task = asyncio.create_task(self._deliver(callback, event))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        logger.debug(
            f"Published archive event [folder_id={event.folder_id}] "
            f"to {len(self._subscribers)} subscribers"
        )
        return len(self._subscribers)

    async def _deliver(self, callback: Subscriber, event: ArchiveCompletionEvent) -> None:
        try:
            result = callback(event)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            name = getattr(callback, "__qualname__", repr(callback))
            logger.error(f"Archive event subscriber {name} failed: {e}", exc_info=True)

    async def drain(self) -> None:
        """
        Wait until every delivery scheduled so far has finished.
        """
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
