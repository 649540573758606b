"""
Kumo – Value Object: OhlcUpdate
===============================
One normalised bar update received from the live feed. Carried on the
event bus from the feed client to the ingest use case.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from kumo.domain.entities.candle import Candle

# EventBus topic carrying OhlcUpdate objects from the feed to the ingest path
OHLC_TOPIC = "ohlc"


@dataclass(frozen=True, slots=True)
class OhlcUpdate:
    pair: str                # display pair, e.g. "ETH/USD"
    candle: Candle
    received_at: float = field(default_factory=time.time)
