"""
Shared fixtures: candle builders, settings and a fake market-data provider.
"""

import asyncio

import pytest

from kumo.application.ports.market_data_provider import IMarketDataProvider
from kumo.domain.entities.candle import Candle
from kumo.domain.exceptions.domain_errors import MarketDataError
from kumo.shared.config.settings import Settings

FOUR_HOURS = 4 * 60 * 60
BASE_TIME = 1_700_000_000 - (1_700_000_000 % FOUR_HOURS)


def candle_at(index: int, close: float, spread: float = 0.0, volume: float = 1.0) -> Candle:
    """Candle number `index` of a 4h series, high/low `spread` around the close."""
    return Candle(
        period_start=BASE_TIME + index * FOUR_HOURS,
        open=close,
        high=close + spread,
        low=close - spread,
        close=close,
        volume=volume,
    )


def series(closes, spread: float = 0.0) -> list:
    return [candle_at(i, float(c), spread) for i, c in enumerate(closes)]


async def wait_until(predicate, timeout: float = 2.0) -> None:
    """Poll until predicate() is true or fail the test."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            pytest.fail("condition not reached in time")
        await asyncio.sleep(0.01)


class FakeMarketDataProvider(IMarketDataProvider):
    """In-memory provider. Pairs listed in `failing` raise MarketDataError."""

    def __init__(self, history=None, failing=(), trades=None, book=None, ticker=None):
        self.history = history or {}
        self.failing = set(failing)
        self.trades = trades or []
        self.book = book or {"asks": [], "bids": []}
        self.ticker = ticker or {}
        self.calls = []

    def _check(self, pair):
        if pair in self.failing:
            raise MarketDataError(f"Kraken OHLC error for {pair}", endpoint="OHLC")

    async def get_historical_candles(self, pair, interval):
        self.calls.append(("ohlc", pair, interval))
        self._check(pair)
        return list(self.history.get(pair, []))

    async def get_server_time(self):
        self.calls.append(("time",))
        self._check("*")
        return {"unixtime": 1700000000, "rfc1123": "Tue, 14 Nov 23 22:13:20 +0000"}

    async def get_recent_trades(self, pair, count=100):
        self.calls.append(("trades", pair, count))
        self._check(pair)
        return self.trades

    async def get_order_book(self, pair, count=500):
        self.calls.append(("depth", pair, count))
        self._check(pair)
        return self.book

    async def get_ticker(self, pair):
        self.calls.append(("ticker", pair))
        self._check(pair)
        return self.ticker


@pytest.fixture
def rising_window():
    """52 candles with closes 1..52."""
    return series(range(1, 53))


@pytest.fixture
def falling_window():
    """52 candles with closes 52..1."""
    return series(range(52, 0, -1))


@pytest.fixture
def test_settings():
    return Settings(
        tracked_pairs=["XBT/USD", "ETH/USD"],
        pair_aliases=[("XBT/USD", "BTC/USD")],
        ws_reconnect_delay=0.01,
        ws_heartbeat_interval=3600,
        status_log_interval=3600,
    )
