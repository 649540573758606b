"""
Kumo – Candle Store
===================
In-memory candle window per pair, keyed by period_start.

UPSERT RULES:
- Same period_start already stored → replace in place (length unchanged).
  This is how a still-forming bar is refreshed by repeated feed updates.
- New period_start → append, then keep only the `capacity` most recent
  candles by period_start (the oldest one is dropped).
- After any upsert the window is sorted ascending by period_start, so a
  late or out-of-order delivery cannot break the ordering invariant.

MEMORY:
- At most `capacity` candles per pair (52 by default, the longest Ichimoku
  lookback).

RACE CONDITIONS:
- Every write happens on the single ingest path inside the event loop.
- window() hands out a copy, readers never see a half-applied upsert.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from kumo.domain.entities.candle import Candle
from kumo.domain.services.ichimoku_calculator import MIN_CANDLES
from kumo.shared.logging.logger import get_logger

logger = get_logger("candle_store")


@dataclass
class PairWindow:
    """Candle window and counters for ONE pair."""

    pair: str
    candles: list[Candle] = field(default_factory=list)
    total_updates: int = 0
    last_update: float = 0.0

    @property
    def latest(self) -> Optional[Candle]:
        return self.candles[-1] if self.candles else None


class CandleStore:
    """
    Bounded, ordered candle windows for all pairs.

    Access: store.window(pair) → list[Candle] (oldest first)
    """

    def __init__(self, capacity: int = MIN_CANDLES, pairs: Iterable[str] = ()) -> None:
        self._capacity = capacity
        self._windows: Dict[str, PairWindow] = {}
        for pair in pairs:
            self._get_or_create(pair)

    @property
    def capacity(self) -> int:
        return self._capacity

    def _get_or_create(self, pair: str) -> PairWindow:
        if pair not in self._windows:
            self._windows[pair] = PairWindow(pair=pair)
            logger.info("Candle window created for '%s' (capacity=%d)", pair, self._capacity)
        return self._windows[pair]

    def upsert(self, pair: str, candle: Candle) -> bool:
        """
        Insert or replace a candle.

        Returns:
            True if the candle was appended as a new period, False if it
            replaced the stored candle with the same period_start.
        """
        state = self._get_or_create(pair)
        candles = state.candles

        appended = True
        for index, existing in enumerate(candles):
            if existing.period_start == candle.period_start:
                candles[index] = candle
                appended = False
                break
        else:
            candles.append(candle)

        candles.sort(key=lambda c: c.period_start)
        if appended and len(candles) > self._capacity:
            dropped = len(candles) - self._capacity
            del candles[:dropped]

        state.total_updates += 1
        state.last_update = time.time()
        return appended

    def window(self, pair: str) -> list[Candle]:
        """Current window of a pair, oldest first. Empty for unknown pairs."""
        state = self._windows.get(pair)
        if state is None:
            return []
        return list(state.candles)

    def count(self, pair: str) -> int:
        state = self._windows.get(pair)
        return len(state.candles) if state else 0

    def latest(self, pair: str) -> Optional[Candle]:
        state = self._windows.get(pair)
        return state.latest if state else None

    def pairs(self) -> list[str]:
        return list(self._windows.keys())

    def snapshot(self) -> dict:
        """Per-pair diagnostics for the status endpoint."""
        result = {}
        for pair, state in self._windows.items():
            latest = state.latest
            result[pair] = {
                "candles": len(state.candles),
                "capacity": self._capacity,
                "total_updates": state.total_updates,
                "last_period_start": latest.period_start if latest else None,
                "last_update": state.last_update,
            }
        return result
