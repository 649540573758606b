"""Domain entities."""

from kumo.domain.entities.candle import Candle
from kumo.domain.entities.signal import IchimokuReading, IchimokuSignal

__all__ = ["Candle", "IchimokuReading", "IchimokuSignal"]
