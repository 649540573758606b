"""
Kumo – Process Candle Use Case
==============================
Single ingest path of the service: every candle, from the backfill or the
live feed, goes through ingest().

FLOW:
  EventBus ("ohlc" topic)            BackfillCandlesUseCase
       │                                     │
       ▼                                     ▼
  ProcessCandleUseCase._run() ───────▸ ingest(pair, candle)
                                             │
                                             ├── CandleStore.upsert()
                                             ├── IchimokuCalculator.compute(window)
                                             │       └── None while < 52 candles
                                             └── SignalRegistry.publish()
                                                     └── alias mirrors + flip log

ORDERING:
- One consumer, one queue: feed updates are applied strictly one at a time
  in arrival order. The backfill calls ingest() directly and is awaited to
  completion before the feed starts, so both never interleave.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Optional

from kumo.domain.entities.candle import Candle
from kumo.domain.entities.signal import IchimokuSignal
from kumo.domain.services.ichimoku_calculator import IchimokuCalculator
from kumo.domain.value_objects.ohlc_update import OHLC_TOPIC, OhlcUpdate
from kumo.infrastructure.messaging.event_bus import EventBus
from kumo.shared.logging.logger import get_logger
from kumo.state.candle_store import CandleStore
from kumo.state.signal_registry import SignalRegistry

logger = get_logger("process_candle")


class ProcessCandleUseCase:

    def __init__(
        self,
        event_bus: EventBus,
        candle_store: CandleStore,
        calculator: IchimokuCalculator,
        registry: SignalRegistry,
    ) -> None:
        self._event_bus = event_bus
        self._store = candle_store
        self._calculator = calculator
        self._registry = registry
        self._queue: Optional[asyncio.Queue] = None
        self._running = False
        self._processed_count = 0
        self._signals_published = 0

    def ingest(self, pair: str, candle: Candle) -> Optional[IchimokuSignal]:
        """
        Upsert one candle and recompute the pair's signal.

        Returns:
            The published signal, or None while the window is still warming up.
        """
        appended = self._store.upsert(pair, candle)
        self._processed_count += 1

        reading = self._calculator.compute(self._store.window(pair))
        if reading is None:
            if appended:
                logger.debug(
                    "%s: %d/%d candles, no signal yet",
                    pair, self._store.count(pair), self._store.capacity,
                )
            return None

        signal = IchimokuSignal.from_reading(
            pair, reading, updated=datetime.now(timezone.utc)
        )
        self._registry.publish(signal)
        self._signals_published += 1
        return signal

    async def start(self) -> None:
        """Subscribe to the EventBus and consume until stop()."""
        self.subscribe()
        logger.info("ProcessCandleUseCase started, consuming topic '%s'", OHLC_TOPIC)
        await self._run()

    def subscribe(self) -> None:
        if self._queue is None:
            self._queue = self._event_bus.subscribe(OHLC_TOPIC, "process_candle_usecase")
        self._running = True

    async def stop(self) -> None:
        self._running = False
        logger.info(
            "ProcessCandleUseCase stopped. Candles processed: %d, signals published: %d",
            self._processed_count,
            self._signals_published,
        )

    async def _run(self) -> None:
        assert self._queue is not None

        while self._running:
            try:
                # Timeout so stop() is noticed without a new update
                try:
                    update: OhlcUpdate = await asyncio.wait_for(self._queue.get(), timeout=1.0)
                except asyncio.TimeoutError:
                    continue

                self.ingest(update.pair, update.candle)

            except asyncio.CancelledError:
                logger.info("ProcessCandleUseCase cancelled")
                break
            except Exception as e:
                logger.error("Error processing candle update: %s", e, exc_info=True)
                continue

    @property
    def stats(self) -> dict:
        return {
            "running": self._running,
            "processed": self._processed_count,
            "signals_published": self._signals_published,
            "queued": self._queue.qsize() if self._queue is not None else 0,
        }
