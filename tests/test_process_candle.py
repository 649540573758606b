"""
Ingest path: warm-up, first signal, EventBus consumption and backfill.
"""

import asyncio

import pytest

from kumo.application.use_cases.backfill_candles_usecase import BackfillCandlesUseCase
from kumo.application.use_cases.process_candle_usecase import ProcessCandleUseCase
from kumo.domain.services.ichimoku_calculator import IchimokuCalculator
from kumo.domain.value_objects.ohlc_update import OHLC_TOPIC, OhlcUpdate
from kumo.infrastructure.messaging.event_bus import EventBus
from kumo.state.candle_store import CandleStore
from kumo.state.signal_registry import SignalRegistry

from conftest import FakeMarketDataProvider, candle_at, series, wait_until


@pytest.fixture
def components():
    bus = EventBus(max_queue_size=100)
    store = CandleStore(pairs=["XBT/USD", "ETH/USD"])
    registry = SignalRegistry([("XBT/USD", "BTC/USD")])
    usecase = ProcessCandleUseCase(bus, store, IchimokuCalculator(), registry)
    return bus, store, registry, usecase


def test_no_signal_before_52_candles(components, rising_window):
    _, store, registry, usecase = components

    for candle in rising_window[:51]:
        assert usecase.ingest("XBT/USD", candle) is None

    assert store.count("XBT/USD") == 51
    assert len(registry) == 0


def test_52nd_candle_publishes_once(components, rising_window):
    _, _, registry, usecase = components
    for candle in rising_window[:51]:
        usecase.ingest("XBT/USD", candle)

    signal = usecase.ingest("XBT/USD", rising_window[51])

    assert signal is not None
    assert signal.signal == "BUY"
    assert registry.stats["publishes"] == 1
    assert registry.get("XBT/USD") == signal
    assert registry.get("BTC/USD").signal == "BUY"
    assert usecase.stats["signals_published"] == 1


def test_forming_candle_update_recomputes(components, rising_window):
    _, store, registry, usecase = components
    for candle in rising_window:
        usecase.ingest("ETH/USD", candle)

    # the latest bar drops to 1.0 before closing
    usecase.ingest("ETH/USD", candle_at(51, 1.0))

    assert store.count("ETH/USD") == 52
    assert registry.get("ETH/USD").signal == "SELL"
    assert registry.stats["flips"] == 1


async def test_consumes_feed_updates(components, rising_window):
    bus, store, registry, usecase = components
    usecase.subscribe()
    task = asyncio.create_task(usecase.start())

    for candle in rising_window:
        await bus.publish(OHLC_TOPIC, OhlcUpdate(pair="XBT/USD", candle=candle))

    await wait_until(lambda: store.count("XBT/USD") == 52)
    await wait_until(lambda: "BTC/USD" in registry)

    await usecase.stop()
    task.cancel()
    await asyncio.gather(task, return_exceptions=True)
    assert usecase.stats["processed"] == 52


async def test_backfill_isolates_failing_pair(components):
    _, store, registry, usecase = components
    provider = FakeMarketDataProvider(
        history={
            "XBT/USD": series(range(1, 53)),
            "SOL/USD": series([5.0, 6.0, 7.0]),
        },
        failing={"ETH/USD"},
    )
    backfill = BackfillCandlesUseCase(provider, usecase, interval_minutes=240)

    loaded = await backfill.execute(["XBT/USD", "ETH/USD", "SOL/USD"])

    assert loaded == {"XBT/USD": 52, "ETH/USD": 0, "SOL/USD": 3}
    assert [c[1] for c in provider.calls] == ["XBT/USD", "ETH/USD", "SOL/USD"]
    assert all(c[2] == 240 for c in provider.calls)
    assert store.count("ETH/USD") == 0
    assert store.count("SOL/USD") == 3
    assert "XBT/USD" in registry
    assert "SOL/USD" not in registry
