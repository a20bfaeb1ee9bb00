"""EventBus implementation for chat event fan-out."""

import asyncio
from collections import defaultdict
from typing import Awaitable, Callable, Protocol

from ..logging_config import get_logger
from ..models import ChatEvent

logger = get_logger(__name__)


EventHandler = Callable[[ChatEvent], Awaitable[None]]


class IEventBus(Protocol):
    """In-memory pub/sub for inbound chat events, keyed by event type."""

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """Subscribe a handler to an event type."""
        ...

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        """Remove a handler; unknown handlers are ignored."""
        ...

    async def publish(self, event: ChatEvent) -> None:
        """Call every handler subscribed to event.type."""
        ...


class EventBus:
    """In-memory pub/sub event bus."""

    def __init__(self):
        self._subscribers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """Subscribe a handler to an event type."""
        self._subscribers[event_type].append(handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = self._subscribers.get(event_type)
        if not handlers:
            return
        try:
            handlers.remove(handler)
        except ValueError:
            return
        if not handlers:
            del self._subscribers[event_type]

    def handler_count(self, event_type: str) -> int:
        return len(self._subscribers.get(event_type, []))

    async def publish(self, event: ChatEvent) -> None:
        """Call all handlers concurrently; handler errors are logged, not raised."""
        # Snapshot: handlers may unsubscribe while we run
        handlers = list(self._subscribers.get(event.type, []))
        if not handlers:
            logger.debug("No handlers for %s", event.type)
            return

        results = await asyncio.gather(
            *[handler(event) for handler in handlers],
            return_exceptions=True,
        )

        for i, result in enumerate(results):
            if isinstance(result, Exception):
                logger.error(
                    "Error in handler %s for %s: %s",
                    i,
                    event.type,
                    result,
                    exc_info=result,
                    extra={"event_type": event.type, "cid": event.cid},
                )
