"""Payload-free publish/subscribe between the coordinator and its observers.

Observers are told *that* something changed and re-read the index snapshot
themselves.
"""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

TODOS_UPDATED = "todos:updated"
SETTINGS_LOADED = "settings:loaded"

Handler = Callable[[], Awaitable[None] | None]


class EventBus:
    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def subscribe(self, topic: str, handler: Handler) -> Callable[[], None]:
        """Register *handler* for *topic* and return a function that removes it."""
        self._handlers[topic].append(handler)

        def _unsubscribe() -> None:
            handlers = self._handlers.get(topic, [])
            if handler in handlers:
                handlers.remove(handler)

        return _unsubscribe

    async def publish(self, topic: str) -> None:
        for handler in list(self._handlers.get(topic, ())):
            try:
                result = handler()
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Error in %s handler", topic)
