"""
Kumo – Status Logger
====================
Periodic diagnostic dump of candle collection progress, one line per pair:

  XBT/USD  52/52 (100.0%) last=2024-05-01T08:00:00+00:00 signal=BUY/high
  SOL/USD  17/52 (32.7%)  last=2024-04-28T12:00:00+00:00 signal=-

Read-only: it never mutates the store or the registry.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from kumo.application.use_cases.signal_query_usecase import SignalQueryUseCase
from kumo.shared.logging.logger import get_logger
from kumo.state.signal_registry import SignalRegistry

logger = get_logger("status")


class StatusLogger:

    def __init__(
        self,
        query: SignalQueryUseCase,
        registry: SignalRegistry,
        interval: float = 60.0,
    ) -> None:
        self._query = query
        self._registry = registry
        self._interval = interval
        self._task: Optional[asyncio.Task] = None

    def log_status(self) -> None:
        progress = self._query.collection_progress()
        if not progress:
            logger.info("Candle collection: no candles stored yet")
            return

        for pair, info in progress.items():
            signal = self._registry.get(pair)
            label = f"{signal.signal}/{signal.confidence or '-'}" if signal else "-"
            logger.info(
                "%-9s %d/%d (%.1f%%) last=%s signal=%s",
                pair,
                info["candles"],
                info["required"],
                info["percent"],
                info["last_candle_time"],
                label,
            )

    async def _loop(self) -> None:
        try:
            while True:
                await asyncio.sleep(self._interval)
                self.log_status()
        except asyncio.CancelledError:
            pass

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._loop(), name="status-logger")

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
