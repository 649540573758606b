"""
Kumo – Domain Entity: Candle
============================
One fixed-duration OHLCV bar for one pair.

Design decisions:
- frozen=True: a still-forming bar is replaced by a NEW Candle with the
  same period_start, never mutated in place. Readers holding a window copy
  keep seeing consistent values.
- The pair lives in the window that owns the candle, not in the candle.
- Plain dataclass instead of Pydantic, this is on the hot path.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True, slots=True)
class Candle:
    """OHLCV bar keyed by the start of its period."""

    period_start: int    # epoch seconds, unique within a pair window
    open: float
    high: float
    low: float
    close: float
    volume: float

    @property
    def start_time(self) -> datetime:
        return datetime.fromtimestamp(self.period_start, tz=timezone.utc)

    def to_dict(self) -> dict:
        """Serialisation for the API."""
        return {
            "period_start": self.period_start,
            "time": self.start_time.isoformat(),
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }
