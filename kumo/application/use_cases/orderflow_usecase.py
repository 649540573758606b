"""
Kumo – Order Flow Use Case
==========================
On-demand snapshot of recent trades, order book and ticker for one pair,
with a few order-flow metrics:

  buyVolume / sellVolume       Σ volume of trades by aggressor side
  bidWallsCount / askWallsCount book levels with volume > WALL_MIN_VOLUME

Also hosts the provider connectivity probe (server time).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from kumo.application.ports.market_data_provider import IMarketDataProvider
from kumo.shared.logging.logger import get_logger

logger = get_logger("orderflow")

TRADES_COUNT = 100
WALL_MIN_VOLUME = 5.0


def _ticker_value(ticker: Dict[str, Any], key: str, index: int) -> float:
    """Kraken ticker fields are arrays of strings, e.g. "c": ["price", "lot"]."""
    try:
        return float(ticker[key][index])
    except (KeyError, IndexError, TypeError, ValueError):
        return 0.0


def summarize_ticker(ticker: Dict[str, Any]) -> Dict[str, float]:
    return {
        "ask": _ticker_value(ticker, "a", 0),
        "bid": _ticker_value(ticker, "b", 0),
        "last": _ticker_value(ticker, "c", 0),
        "volume": _ticker_value(ticker, "v", 1),
        "volumeWeightedAvgPrice": _ticker_value(ticker, "p", 1),
        "high": _ticker_value(ticker, "h", 1),
        "low": _ticker_value(ticker, "l", 1),
    }


def compute_metrics(trades: List[list], book: Dict[str, list]) -> Dict[str, float]:
    buy_volume = sum(float(t[1]) for t in trades if len(t) > 3 and t[3] == "b")
    sell_volume = sum(float(t[1]) for t in trades if len(t) > 3 and t[3] == "s")
    bids = book.get("bids", [])
    asks = book.get("asks", [])
    return {
        "buyVolume": buy_volume,
        "sellVolume": sell_volume,
        "bidWallsCount": sum(1 for level in bids if float(level[1]) > WALL_MIN_VOLUME),
        "askWallsCount": sum(1 for level in asks if float(level[1]) > WALL_MIN_VOLUME),
    }


class OrderFlowUseCase:

    def __init__(self, provider: IMarketDataProvider) -> None:
        self._provider = provider

    async def snapshot(self, pair: str = "XBTUSD", depth_count: int = 500) -> dict:
        """
        Raises:
            MarketDataError: any of the three provider calls failed
        """
        trades = await self._provider.get_recent_trades(pair, TRADES_COUNT)
        book = await self._provider.get_order_book(pair, depth_count)
        ticker = await self._provider.get_ticker(pair)

        metrics = compute_metrics(trades, book)
        logger.info(
            "Order flow %s: %d trades, %d book levels, buy=%.4f sell=%.4f",
            pair,
            len(trades),
            len(book.get("asks", [])) + len(book.get("bids", [])),
            metrics["buyVolume"],
            metrics["sellVolume"],
        )
        return {
            "success": True,
            "pair": pair,
            "fetchedAt": datetime.now(timezone.utc).isoformat(),
            "trades": trades,
            "orderbook": book,
            "ticker": summarize_ticker(ticker),
            "metrics": metrics,
        }

    async def check_connectivity(self) -> dict:
        """Provider server time; raises MarketDataError when unreachable."""
        result = await self._provider.get_server_time()
        logger.info("Kraken server time: %s", result.get("rfc1123", result))
        return {"success": True, "data": result}
