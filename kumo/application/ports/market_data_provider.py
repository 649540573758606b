"""
Kumo – Application Port: Market Data Provider
=============================================
Pull-side market data used by the use cases. The infrastructure decides
HOW it is fetched (Kraken REST today, a fake in tests).

All methods raise MarketDataError when the provider cannot answer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from kumo.domain.entities.candle import Candle


class IMarketDataProvider(ABC):

    @abstractmethod
    async def get_historical_candles(self, pair: str, interval: int) -> List[Candle]:
        """
        Most recent historical bars of a pair.

        Args:
            pair: Display pair (e.g. "XBT/USD")
            interval: Bar length in minutes

        Returns:
            Candles ordered by period_start ASC
        """

    @abstractmethod
    async def get_server_time(self) -> Dict[str, Any]:
        """Provider clock, used as a connectivity probe."""

    @abstractmethod
    async def get_recent_trades(self, pair: str, count: int = 100) -> List[list]:
        """Recent public trades: [price, volume, time, side, order_type, ...]."""

    @abstractmethod
    async def get_order_book(self, pair: str, count: int = 500) -> Dict[str, list]:
        """Order book: {"asks": [[price, volume, ts], ...], "bids": [...]}."""

    @abstractmethod
    async def get_ticker(self, pair: str) -> Dict[str, Any]:
        """Raw ticker object of the pair."""

    async def close(self) -> None:
        """Release network resources. No-op by default."""
