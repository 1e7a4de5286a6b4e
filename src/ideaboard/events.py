"""
In-process publish/subscribe for GraphQL subscriptions
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Any

from .logging import get_logger

logger = get_logger(__name__)

USER_ADDED = "USER_ADDED"

_CLOSED = object()


class Subscription:
    """Async iterator over the events published to one topic.

    Registered with the bus as soon as it is created, so nothing published
    after ``EventBus.subscribe`` returns is missed.
    """

    def __init__(self, bus: EventBus, topic: str, queue: asyncio.Queue[Any]):
        self._bus = bus
        self.topic = topic
        self._queue = queue
        self._closed = False

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> Any:
        if self._closed:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            self.close()
            raise StopAsyncIteration
        return item

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._bus._unsubscribe(self.topic, self._queue)


class EventBus:
    """Fan-out of events to whoever is subscribed at publish time.

    Delivery is at-most-once and nothing is persisted: an event published
    while a topic has no subscribers is dropped, and a subscriber whose
    queue is full misses the event. One bus is created per process by the
    application lifespan and closed on shutdown.
    """

    def __init__(self, max_queue_size: int = 100):
        self.max_queue_size = max_queue_size
        self._subscribers: dict[str, set[asyncio.Queue[Any]]] = defaultdict(set)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, topic: str) -> Subscription:
        if self._closed:
            raise RuntimeError("Event bus is closed")
        queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=self.max_queue_size)
        self._subscribers[topic].add(queue)
        logger.debug("Subscriber attached", topic=topic, subscribers=len(self._subscribers[topic]))
        return Subscription(self, topic, queue)

    def _unsubscribe(self, topic: str, queue: asyncio.Queue[Any]) -> None:
        queues = self._subscribers.get(topic)
        if queues is None:
            return
        queues.discard(queue)
        if not queues:
            del self._subscribers[topic]
        logger.debug("Subscriber detached", topic=topic)

    def publish(self, topic: str, payload: Any) -> int:
        """Hand ``payload`` to every current subscriber; return how many got it."""
        if self._closed:
            logger.warning("Publish on closed event bus dropped", topic=topic)
            return 0

        delivered = 0
        for queue in list(self._subscribers.get(topic, ())):
            try:
                queue.put_nowait(payload)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning("Subscriber queue full, event dropped", topic=topic)

        logger.debug("Event published", topic=topic, delivered=delivered)
        return delivered

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, ()))

    async def close(self) -> None:
        """Detach everyone; open subscriptions finish their iteration."""
        self._closed = True
        for queues in self._subscribers.values():
            for queue in queues:
                # Make room so the sentinel always lands
                while queue.full():
                    queue.get_nowait()
                queue.put_nowait(_CLOSED)
        self._subscribers.clear()
        logger.info("Event bus closed")
