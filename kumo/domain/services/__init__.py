"""Stateless domain services."""

from kumo.domain.services.ichimoku_calculator import IchimokuCalculator, MIN_CANDLES

__all__ = ["IchimokuCalculator", "MIN_CANDLES"]
