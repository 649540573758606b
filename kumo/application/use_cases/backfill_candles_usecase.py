"""
Kumo – Backfill Candles Use Case
================================
One-time historical load at start-up, run BEFORE the live feed is started
so the calculator has a full window as soon as live updates arrive.

- Pairs are fetched one at a time, in the configured order.
- A failing pair is logged and skipped; its window stays empty and fills
  up from live updates instead.
- Each bar goes through ProcessCandleUseCase.ingest(), exactly like a
  live update.
"""

from __future__ import annotations

from typing import Dict, Iterable

from kumo.application.ports.market_data_provider import IMarketDataProvider
from kumo.application.use_cases.process_candle_usecase import ProcessCandleUseCase
from kumo.domain.exceptions.domain_errors import DomainError
from kumo.shared.logging.logger import get_logger

logger = get_logger("backfill")


class BackfillCandlesUseCase:

    def __init__(
        self,
        provider: IMarketDataProvider,
        process_candle: ProcessCandleUseCase,
        interval_minutes: int = 240,
    ) -> None:
        self._provider = provider
        self._process_candle = process_candle
        self._interval = interval_minutes

    async def execute(self, pairs: Iterable[str]) -> Dict[str, int]:
        """
        Backfill every pair.

        Returns:
            pair → number of bars ingested (0 for failed pairs)
        """
        loaded: Dict[str, int] = {}
        for pair in pairs:
            try:
                candles = await self._provider.get_historical_candles(pair, self._interval)
            except DomainError as e:
                logger.error("Backfill failed for %s: %s", pair, e.message)
                loaded[pair] = 0
                continue

            for candle in candles:
                self._process_candle.ingest(pair, candle)
            loaded[pair] = len(candles)

        logger.info(
            "Backfill complete: %s",
            ", ".join(f"{pair}={count}" for pair, count in loaded.items()) or "no pairs",
        )
        return loaded
