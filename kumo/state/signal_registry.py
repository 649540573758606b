"""
Kumo – Signal Registry
======================
Latest Ichimoku signal per display pair.

ALIASES:
- Configured as (source, alias) pairs, e.g. ("XBT/USD", "BTC/USD").
- Each publish() for a source also overwrites every alias entry with the
  same payload and `pair` rewritten. An alias entry is always a mirror of
  the most recent source write; it is never written on its own.

FLIPS:
- A flip is a new signal value (BUY/SELL/NEUTRAL) different from the stored
  one for the same pair. Flips are logged and counted, nothing else.

READS:
- snapshot() returns a new dict of immutable IchimokuSignal objects, safe
  to serialise while the ingest path keeps publishing.
"""

from __future__ import annotations

import dataclasses
from typing import Dict, Iterable, Optional, Tuple

from kumo.domain.entities.signal import IchimokuSignal
from kumo.shared.logging.logger import get_logger

logger = get_logger("signal_registry")


class SignalRegistry:

    def __init__(self, aliases: Iterable[Tuple[str, str]] = ()) -> None:
        self._signals: Dict[str, IchimokuSignal] = {}
        # source → aliases
        self._aliases: Dict[str, list[str]] = {}
        for source, alias in aliases:
            self._aliases.setdefault(source, []).append(alias)

        self._publish_count = 0
        self._flip_count = 0

    def aliases_of(self, pair: str) -> list[str]:
        return list(self._aliases.get(pair, []))

    def publish(self, signal: IchimokuSignal) -> IchimokuSignal:
        """Store the signal for its pair and mirror it under every alias."""
        previous = self._signals.get(signal.pair)
        if previous is not None and previous.signal != signal.signal:
            self._flip_count += 1
            logger.info(
                "Signal flip %s: %s → %s (price=%.5f, cloud=[%.5f, %.5f])",
                signal.pair,
                previous.signal,
                signal.signal,
                signal.price,
                min(signal.senkou_span_a, signal.senkou_span_b),
                max(signal.senkou_span_a, signal.senkou_span_b),
            )

        self._signals[signal.pair] = signal
        for alias in self._aliases.get(signal.pair, []):
            self._signals[alias] = dataclasses.replace(signal, pair=alias)

        self._publish_count += 1
        return signal

    def get(self, pair: str) -> Optional[IchimokuSignal]:
        return self._signals.get(pair)

    def __contains__(self, pair: str) -> bool:
        return pair in self._signals

    def __len__(self) -> int:
        return len(self._signals)

    def snapshot(self) -> Dict[str, IchimokuSignal]:
        """Copy of the display pair → latest signal mapping."""
        return dict(self._signals)

    @property
    def stats(self) -> dict:
        return {
            "pairs": len(self._signals),
            "publishes": self._publish_count,
            "flips": self._flip_count,
        }
