"""
Kumo – Event Bus (asyncio.Queue fan-out)
========================================
Decouples the feed client (producer) from the ingest use case (consumer).

  ┌──────────┐            ┌───────────┐
  │  Kraken  │──ohlc────▸│ Event Bus │──▸ ProcessCandleUseCase
  │  Feed    │            │ (fan-out) │──▸ ...
  └──────────┘            └───────────┘

ORDERING:
- Each consumer owns one asyncio.Queue, so it sees updates in arrival
  order and processes them one at a time.

BACK-PRESSURE:
- Queues are bounded. When a consumer falls that far behind, the OLDEST
  queued update is dropped so the feed never blocks. Later updates for the
  same bar carry the newer values anyway.

THREAD-SAFETY:
- asyncio.Queue is safe inside one event loop, which is the only mode used.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict

from kumo.shared.logging.logger import get_logger

logger = get_logger("event_bus")


class EventBus:
    """Fan-out event bus on top of asyncio.Queue."""

    def __init__(self, max_queue_size: int = 10_000) -> None:
        self._max_queue_size = max_queue_size
        # topic → [(queue, consumer_name)]
        self._subscribers: Dict[str, list[tuple[asyncio.Queue, str]]] = {}
        self._dropped = 0

    def subscribe(self, topic: str, consumer_name: str) -> asyncio.Queue:
        """Register a consumer on a topic and return its private queue."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._max_queue_size)
        self._subscribers.setdefault(topic, []).append((queue, consumer_name))
        logger.info(
            "Consumer '%s' subscribed to topic '%s' (max_queue=%d)",
            consumer_name,
            topic,
            self._max_queue_size,
        )
        return queue

    async def publish(self, topic: str, data: Any) -> None:
        """Deliver an event to every subscriber of the topic. Never blocks."""
        for queue, consumer_name in self._subscribers.get(topic, []):
            if queue.full():
                try:
                    queue.get_nowait()
                    self._dropped += 1
                    logger.warning(
                        "Queue full for '%s' on topic '%s', oldest event dropped",
                        consumer_name,
                        topic,
                    )
                except asyncio.QueueEmpty:
                    pass
            queue.put_nowait(data)

    def unsubscribe_all(self, topic: str | None = None) -> None:
        """Remove subscribers (shutdown cleanup)."""
        if topic:
            self._subscribers.pop(topic, None)
        else:
            self._subscribers.clear()
        logger.info("Subscribers removed (%s)", topic or "all topics")

    @property
    def subscriber_count(self) -> int:
        return sum(len(subs) for subs in self._subscribers.values())

    @property
    def dropped(self) -> int:
        return self._dropped
