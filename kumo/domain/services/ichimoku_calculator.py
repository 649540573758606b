"""
Kumo – Domain Service: Ichimoku Calculator
==========================================
Ichimoku Cloud lines and the derived cloud-breakout signal, computed from a
pair's candle window. Plain arithmetic, no pandas / TA-Lib.

═══════════════════════════════════════════════════════════════════
                         FORMULAS
═══════════════════════════════════════════════════════════════════

  midpoint(n)   = (max(high, last n) + min(low, last n)) / 2

  Tenkan-sen    = midpoint(9)
  Kijun-sen     = midpoint(26)
  Senkou Span A = (Tenkan-sen + Kijun-sen) / 2
  Senkou Span B = midpoint(52)
  Chikou Span   = close 26 candles before the latest
  Price         = close of the latest candle

  The cloud lines are evaluated on the current window, not shifted 26
  periods forward as on a chart.

─── Signal ─────────────────────────────────────────────────────

  price > max(A, B)   → BUY       (price above the cloud)
  price < min(A, B)   → SELL      (price below the cloud)
  otherwise           → NEUTRAL   (price inside the cloud)

─── Confidence ─────────────────────────────────────────────────

  BUY  and price > Tenkan > Kijun  → high if price > Chikou else medium
  SELL and price < Tenkan < Kijun  → high if price < Chikou else medium
  anything else                    → low

WARM-UP:
  Fewer than 52 candles → None. This is the normal state while history
  accumulates, not an error.
"""

from __future__ import annotations

from typing import Optional, Sequence

from kumo.domain.entities.candle import Candle
from kumo.domain.entities.signal import (
    BUY,
    CONFIDENCE_HIGH,
    CONFIDENCE_LOW,
    CONFIDENCE_MEDIUM,
    NEUTRAL,
    SELL,
    IchimokuReading,
)

TENKAN_PERIOD = 9
KIJUN_PERIOD = 26
SENKOU_B_PERIOD = 52
CHIKOU_SHIFT = 26

# Longest lookback, also the candle window capacity
MIN_CANDLES = SENKOU_B_PERIOD


class IchimokuCalculator:
    """
    Stateless Ichimoku calculator.

    The window must be sorted by period_start ascending (CandleStore
    guarantees it). Only the last MIN_CANDLES entries are looked at.
    """

    @staticmethod
    def midpoint(candles: Sequence[Candle], period: int) -> float:
        """(highest high + lowest low) / 2 over the last `period` candles."""
        recent = candles[-period:]
        highest = max(c.high for c in recent)
        lowest = min(c.low for c in recent)
        return (highest + lowest) / 2

    @staticmethod
    def classify(price: float, senkou_span_a: float, senkou_span_b: float) -> str:
        """Position of the price relative to the cloud."""
        if price > max(senkou_span_a, senkou_span_b):
            return BUY
        if price < min(senkou_span_a, senkou_span_b):
            return SELL
        return NEUTRAL

    @staticmethod
    def confidence(
        signal: str,
        price: float,
        tenkan_sen: float,
        kijun_sen: float,
        chikou_span: Optional[float],
    ) -> str:
        """Refinement of a cloud breakout using the TK lines and Chikou."""
        if signal == BUY and price > tenkan_sen > kijun_sen:
            if chikou_span is not None and price > chikou_span:
                return CONFIDENCE_HIGH
            return CONFIDENCE_MEDIUM
        if signal == SELL and price < tenkan_sen < kijun_sen:
            if chikou_span is not None and price < chikou_span:
                return CONFIDENCE_HIGH
            return CONFIDENCE_MEDIUM
        return CONFIDENCE_LOW

    def compute(self, candles: Sequence[Candle]) -> Optional[IchimokuReading]:
        """
        Compute the reading for a window.

        Returns:
            IchimokuReading, or None when the window holds fewer than
            MIN_CANDLES candles.
        """
        if len(candles) < MIN_CANDLES:
            return None

        window = list(candles[-MIN_CANDLES:])
        latest = window[-1]
        price = latest.close

        tenkan_sen = self.midpoint(window, TENKAN_PERIOD)
        kijun_sen = self.midpoint(window, KIJUN_PERIOD)
        senkou_span_a = (tenkan_sen + kijun_sen) / 2
        senkou_span_b = self.midpoint(window, SENKOU_B_PERIOD)

        chikou_span: Optional[float] = None
        if len(window) > CHIKOU_SHIFT:
            chikou_span = window[-(CHIKOU_SHIFT + 1)].close

        signal = self.classify(price, senkou_span_a, senkou_span_b)

        return IchimokuReading(
            signal=signal,
            confidence=self.confidence(signal, price, tenkan_sen, kijun_sen, chikou_span),
            price=price,
            tenkan_sen=tenkan_sen,
            kijun_sen=kijun_sen,
            senkou_span_a=senkou_span_a,
            senkou_span_b=senkou_span_b,
            chikou_span=chikou_span,
            candle_time=latest.period_start,
        )
