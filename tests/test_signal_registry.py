"""
SignalRegistry: alias mirroring, flip detection and snapshots.
"""

from datetime import datetime, timezone

from kumo.domain.entities.signal import BUY, NEUTRAL, SELL, IchimokuSignal
from kumo.state.signal_registry import SignalRegistry


def make_signal(pair, signal=BUY, price=100.0):
    now = datetime(2024, 5, 1, 8, tzinfo=timezone.utc)
    return IchimokuSignal(
        pair=pair,
        signal=signal,
        confidence="medium",
        price=price,
        tenkan_sen=99.0,
        kijun_sen=98.0,
        senkou_span_a=98.5,
        senkou_span_b=95.0,
        chikou_span=90.0,
        timestamp=now,
        updated=now,
    )


def test_alias_mirrors_source():
    registry = SignalRegistry([("XBT/USD", "BTC/USD")])

    registry.publish(make_signal("XBT/USD", price=64000.0))

    mirror = registry.get("BTC/USD")
    assert mirror.pair == "BTC/USD"
    assert mirror.price == 64000.0
    assert mirror.to_dict() == {**registry.get("XBT/USD").to_dict(), "pair": "BTC/USD"}
    assert len(registry) == 2


def test_alias_follows_every_write():
    registry = SignalRegistry([("XBT/USD", "BTC/USD")])
    registry.publish(make_signal("XBT/USD", BUY))
    registry.publish(make_signal("XBT/USD", SELL, price=60000.0))

    assert registry.get("BTC/USD").signal == SELL
    assert registry.get("BTC/USD").price == 60000.0


def test_pair_without_alias():
    registry = SignalRegistry([("XBT/USD", "BTC/USD")])
    registry.publish(make_signal("ETH/USD"))

    assert "ETH/USD" in registry
    assert "BTC/USD" not in registry
    assert registry.aliases_of("ETH/USD") == []


def test_flips_are_counted():
    registry = SignalRegistry()
    registry.publish(make_signal("ETH/USD", BUY))
    registry.publish(make_signal("ETH/USD", BUY))
    registry.publish(make_signal("ETH/USD", NEUTRAL))
    registry.publish(make_signal("ETH/USD", SELL))

    assert registry.stats == {"pairs": 1, "publishes": 4, "flips": 2}


def test_flip_is_logged(caplog):
    caplog.set_level("INFO", logger="kumo")
    registry = SignalRegistry()
    registry.publish(make_signal("ETH/USD", BUY))
    registry.publish(make_signal("ETH/USD", SELL))

    assert any("Signal flip ETH/USD: BUY → SELL" in r.message for r in caplog.records)


def test_snapshot_is_detached():
    registry = SignalRegistry()
    registry.publish(make_signal("ETH/USD"))

    snapshot = registry.snapshot()
    registry.publish(make_signal("SOL/USD"))

    assert list(snapshot) == ["ETH/USD"]
