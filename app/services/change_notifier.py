"""
ChangeNotifier - in-process side of the change-notification boundary.

Two kinds of consumers:
- handlers: coroutines registered per event type (the settlement reactor,
  the leaderboard cache). They run inline in publish() and their errors
  propagate to the publisher.
- subscribers: one queue per open websocket. Events are hints ("something
  changed"); clients re-query instead of applying deltas. Queues are
  bounded: a subscriber that stops reading misses events instead of
  growing its queue without limit.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Awaitable, Callable

from app.models.change_event import ChangeEvent

logger = logging.getLogger(__name__)

Handler = Callable[[ChangeEvent], Awaitable[None]]

# Eventos pendientes por websocket antes de empezar a descartar
DEFAULT_QUEUE_SIZE = 100


class ChangeNotifier:
    def __init__(self, max_queue_size: int = DEFAULT_QUEUE_SIZE):
        self.max_queue_size = max_queue_size
        self._handlers: dict[type, list[Handler]] = {}
        self._subscribers: set[asyncio.Queue] = set()

    def on(self, event_type: type, handler: Handler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def clear_handlers(self) -> None:
        self._handlers.clear()

    async def publish(self, event: ChangeEvent) -> None:
        logger.debug("Publishing %s", event.type)

        for queue in list(self._subscribers):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                # A stalled client misses this hint; it re-reads on the next one
                logger.warning("Change subscriber queue full, dropping %s", event.type)

        for handler in self._handlers.get(type(event), []):
            await handler(event)

    @asynccontextmanager
    async def subscribe(self):
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.max_queue_size)
        self._subscribers.add(queue)
        try:
            yield queue
        finally:
            self._subscribers.discard(queue)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)


# Singleton del proceso
notifier = ChangeNotifier()


def get_notifier() -> ChangeNotifier:
    """FastAPI dependency"""
    return notifier
