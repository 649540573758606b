"""
Kumo – Kraken REST client (aiohttp)
===================================
IMarketDataProvider implementation on Kraken's public REST API.

Endpoints used:
  GET /Time                               connectivity probe
  GET /OHLC?pair=XBTUSD&interval=240      historical backfill
  GET /Trades?pair=XBTUSD&count=100       order flow
  GET /Depth?pair=XBTUSD&count=500        order flow
  GET /Ticker?pair=XBTUSD                 order flow

Kraken answers {"error": [...], "result": {...}}. A non-empty error list,
a non-200 status, a transport failure or timeout and an undecodable or
non-object body all surface as MarketDataError.

The aiohttp session is created lazily and shared by every request; close()
must be awaited at shutdown.

Pairs may be given as display names ("XBT/USD") or REST names ("XBTUSD").
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp

from kumo.application.ports.market_data_provider import IMarketDataProvider
from kumo.domain.entities.candle import Candle
from kumo.domain.exceptions.domain_errors import MarketDataError
from kumo.infrastructure.external.kraken_codec import parse_rest_ohlc, rest_symbol
from kumo.shared.config.settings import Settings
from kumo.shared.logging.logger import get_logger

logger = get_logger("kraken_rest")


def _first_pair_entry(result: dict, endpoint: str) -> Any:
    """Kraken keys results by its own pair name; take the first real entry."""
    key = next((k for k in result if k != "last"), None)
    if key is None:
        raise MarketDataError("Empty result from Kraken", endpoint=endpoint)
    return result[key]


class KrakenRestClient(IMarketDataProvider):

    def __init__(
        self,
        settings: Settings,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self._settings = settings
        self._session = session
        self._owns_session = session is None
        self._requests = 0
        self._failures = 0

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"Accept": "application/json"},
                timeout=aiohttp.ClientTimeout(total=self._settings.kraken_rest_timeout),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            logger.info("Kraken REST session closed")

    async def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET a public endpoint and return its `result` object."""
        url = f"{self._settings.kraken_rest_url}/{endpoint}"
        self._requests += 1
        try:
            async with self._get_session().get(url, params=params) as response:
                if response.status != 200:
                    self._failures += 1
                    raise MarketDataError(
                        f"Kraken {endpoint} returned HTTP {response.status}",
                        endpoint=endpoint,
                    )
                payload = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            self._failures += 1
            raise MarketDataError(
                f"Kraken {endpoint} request failed: {e}", endpoint=endpoint
            ) from e

        if not isinstance(payload, dict):
            self._failures += 1
            raise MarketDataError(
                f"Kraken {endpoint} returned a non-object body", endpoint=endpoint
            )

        errors = payload.get("error") or []
        if errors:
            self._failures += 1
            raise MarketDataError(
                f"Kraken {endpoint} error: {', '.join(errors)}",
                endpoint=endpoint,
                details=errors,
            )
        return payload.get("result", {})

    # ════════════════════════════════════════════════════════════════
    #  IMarketDataProvider
    # ════════════════════════════════════════════════════════════════

    async def get_historical_candles(self, pair: str, interval: int) -> List[Candle]:
        result = await self._get("OHLC", {"pair": rest_symbol(pair), "interval": interval})
        candles = parse_rest_ohlc(result)
        candles.sort(key=lambda c: c.period_start)
        logger.info("Fetched %d historical %dm bars for %s", len(candles), interval, pair)
        return candles

    async def get_server_time(self) -> Dict[str, Any]:
        return await self._get("Time")

    async def get_recent_trades(self, pair: str, count: int = 100) -> List[list]:
        result = await self._get("Trades", {"pair": rest_symbol(pair), "count": count})
        return _first_pair_entry(result, "Trades")

    async def get_order_book(self, pair: str, count: int = 500) -> Dict[str, list]:
        result = await self._get("Depth", {"pair": rest_symbol(pair), "count": count})
        return _first_pair_entry(result, "Depth")

    async def get_ticker(self, pair: str) -> Dict[str, Any]:
        result = await self._get("Ticker", {"pair": rest_symbol(pair)})
        return _first_pair_entry(result, "Ticker")

    @property
    def stats(self) -> dict:
        return {"requests": self._requests, "failures": self._failures}
