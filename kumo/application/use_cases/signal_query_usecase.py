"""
Kumo – Signal Query Use Case
============================
Read-only view served to the polling dashboard:

  {
    "signals":    { "ETH/USD": {...IchimokuSignal...}, ... },
    "collection": { "ETH/USD": {"candles": 52, "required": 52, "percent": 100.0,
                                "last_candle_time": "...", "has_signal": true}, ... },
    "required_candles": 52,
    "generated_at": "..."
  }

`signals` may list fewer pairs than are tracked (entries only appear after
52 candles) and also lists alias pairs. `collection` lists every stored
pair with at least one candle.

Only copies are read (CandleStore.window/latest, SignalRegistry.snapshot),
so a call never observes a half-applied update.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from kumo.domain.services.ichimoku_calculator import MIN_CANDLES
from kumo.state.candle_store import CandleStore
from kumo.state.signal_registry import SignalRegistry


class SignalQueryUseCase:

    def __init__(self, candle_store: CandleStore, registry: SignalRegistry) -> None:
        self._store = candle_store
        self._registry = registry

    def progress(self, pair: str) -> Optional[dict]:
        """Collection progress of one pair, None when nothing is stored yet."""
        count = self._store.count(pair)
        if count == 0:
            return None
        latest = self._store.latest(pair)
        collected = min(count, MIN_CANDLES)
        return {
            "candles": count,
            "required": MIN_CANDLES,
            "percent": round(collected / MIN_CANDLES * 100, 1),
            "last_candle_time": latest.start_time.isoformat() if latest else None,
            "has_signal": pair in self._registry,
        }

    def collection_progress(self) -> dict:
        result = {}
        for pair in self._store.pairs():
            info = self.progress(pair)
            if info is not None:
                result[pair] = info
        return result

    def snapshot(self) -> dict:
        signals = self._registry.snapshot()
        return {
            "signals": {pair: signal.to_dict() for pair, signal in signals.items()},
            "collection": self.collection_progress(),
            "required_candles": MIN_CANDLES,
            "generated_at": datetime.now(timezone.utc).isoformat(),
        }

    def get_signal(self, pair: str) -> Optional[dict]:
        signal = self._registry.get(pair)
        return signal.to_dict() if signal is not None else None
