"""
Kumo – Domain Entity: Ichimoku Signal
=====================================
Latest Ichimoku Cloud reading for one display pair, as held by the
SignalRegistry and served to the dashboard.

DESIGN DECISIONS:
- IchimokuReading is what the calculator returns. It holds no wall-clock
  data, so the same window always yields an equal reading.
- IchimokuSignal = reading + pair + `updated` (moment of the write). It is
  created by the ingest use case, never by the calculator.
- Both are frozen: a new candle produces a new object that supersedes the
  previous one in the registry. Alias mirrors are built with
  dataclasses.replace().

FIELDS:
- signal:       "BUY" | "SELL" | "NEUTRAL"
- confidence:   "high" | "medium" | "low" or None when not computed
- price:        close of the latest candle
- tenkan_sen / kijun_sen / senkou_span_a / senkou_span_b: cloud lines
- chikou_span:  close 26 candles before the latest (optional)
- timestamp:    start of the candle the reading was derived from
- updated:      when the registry entry was written
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

BUY = "BUY"
SELL = "SELL"
NEUTRAL = "NEUTRAL"

CONFIDENCE_HIGH = "high"
CONFIDENCE_MEDIUM = "medium"
CONFIDENCE_LOW = "low"


@dataclass(frozen=True, slots=True)
class IchimokuReading:
    """Pure calculator output for one candle window."""

    signal: str
    confidence: Optional[str]
    price: float
    tenkan_sen: float
    kijun_sen: float
    senkou_span_a: float
    senkou_span_b: float
    chikou_span: Optional[float]
    candle_time: int     # period_start of the latest candle

    @property
    def cloud_top(self) -> float:
        return max(self.senkou_span_a, self.senkou_span_b)

    @property
    def cloud_bottom(self) -> float:
        return min(self.senkou_span_a, self.senkou_span_b)


@dataclass(frozen=True, slots=True)
class IchimokuSignal:
    """Registry entry for one display pair."""

    pair: str
    signal: str
    confidence: Optional[str]
    price: float
    tenkan_sen: float
    kijun_sen: float
    senkou_span_a: float
    senkou_span_b: float
    chikou_span: Optional[float]
    timestamp: datetime
    updated: datetime

    @classmethod
    def from_reading(
        cls,
        pair: str,
        reading: IchimokuReading,
        updated: Optional[datetime] = None,
    ) -> "IchimokuSignal":
        return cls(
            pair=pair,
            signal=reading.signal,
            confidence=reading.confidence,
            price=reading.price,
            tenkan_sen=reading.tenkan_sen,
            kijun_sen=reading.kijun_sen,
            senkou_span_a=reading.senkou_span_a,
            senkou_span_b=reading.senkou_span_b,
            chikou_span=reading.chikou_span,
            timestamp=datetime.fromtimestamp(reading.candle_time, tz=timezone.utc),
            updated=updated or datetime.now(timezone.utc),
        )

    def to_dict(self) -> dict:
        """Serialisation with the field names the dashboard reads."""
        result = {
            "pair": self.pair,
            "signal": self.signal,
            "price": self.price,
            "tenkanSen": self.tenkan_sen,
            "kijunSen": self.kijun_sen,
            "senkouSpanA": self.senkou_span_a,
            "senkouSpanB": self.senkou_span_b,
            "timestamp": self.timestamp.isoformat(),
            "updated": self.updated.isoformat(),
        }
        if self.chikou_span is not None:
            result["chikouSpan"] = self.chikou_span
        if self.confidence is not None:
            result["confidence"] = self.confidence
        return result
