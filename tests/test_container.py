import pytest
from pydantic import ValidationError

from kumo.container import Container
from kumo.shared.config.settings import Settings

from conftest import candle_at


def test_default_settings():
    settings = Settings()

    assert settings.tracked_pairs == ["XBT/USD", "ETH/USD", "SOL/USD"]
    assert settings.pair_aliases == [("XBT/USD", "BTC/USD")]
    assert settings.candle_interval_minutes == 240
    assert settings.max_candles_buffer == 52
    assert settings.ws_reconnect_delay == 5.0


def test_window_must_hold_52_candles():
    with pytest.raises(ValidationError):
        Settings(max_candles_buffer=26)


def test_pairs_from_environment(monkeypatch):
    monkeypatch.setenv("TRACKED_PAIRS", '["ETH/USD"]')
    monkeypatch.setenv("PAIR_ALIASES", "[]")

    settings = Settings()

    assert settings.tracked_pairs == ["ETH/USD"]
    assert settings.pair_aliases == []


def test_components_share_state(test_settings):
    container = Container(settings=test_settings)

    assert container.process_candle is container.process_candle
    assert container.candle_store.pairs() == ["XBT/USD", "ETH/USD"]
    assert container.signal_registry.aliases_of("XBT/USD") == ["BTC/USD"]

    container.process_candle.ingest("ETH/USD", candle_at(0, 1.0))
    assert container.signal_query.progress("ETH/USD")["candles"] == 1


def test_override_and_reset(test_settings):
    container = Container(settings=test_settings)
    fake = object()

    container.override("market_data_provider", fake)
    assert container.market_data_provider is fake

    container.reset()
    assert container.market_data_provider is not fake

    with pytest.raises(ValueError):
        container.override("database", fake)

