"""Synchronous in-process bus for calendar domain events."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable

from pydantic import BaseModel

logger = logging.getLogger(__name__)

Handler = Callable[[BaseModel], None]


class EventBus:
    """Publish/subscribe bus.

    Handlers run synchronously in registration order; a handler error
    propagates to the publisher.
    """

    def __init__(self) -> None:
        self._subscribers: dict[type[BaseModel], list[Handler]] = defaultdict(list)

    def subscribe(self, message_type: type[BaseModel], handler: Handler) -> None:
        self._subscribers[message_type].append(handler)

    def publish(self, message: BaseModel) -> None:
        handlers = self._subscribers.get(type(message), [])
        logger.debug("publishing %s to %d handlers", type(message).__name__, len(handlers))
        for handler in handlers:
            handler(message)
