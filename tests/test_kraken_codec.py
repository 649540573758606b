"""
Kraken wire format: REST and WebSocket bar layouts, filtering, bad input.
"""

import json

import pytest

from kumo.domain.exceptions.domain_errors import MalformedMessageError
from kumo.infrastructure.external.kraken_codec import (
    decode,
    parse_feed_message,
    parse_rest_ohlc,
    ping_message,
    rest_symbol,
    subscribe_message,
)

FEED_ROW = [
    "1700001000.321",   # last trade time
    "1700006400.000",   # end of the bar
    "36500.1", "36800.0", "36400.5", "36750.2",
    "36600.0",          # vwap
    "12.5",
    420,
]


def test_rest_symbol():
    assert rest_symbol("XBT/USD") == "XBTUSD"
    assert rest_symbol("XBTUSD") == "XBTUSD"


def test_parse_rest_ohlc():
    result = {
        "XXBTZUSD": [
            [1699977600, "36000.0", "36500.0", "35900.0", "36400.0", "36200.0", "101.5", 900],
            [1699992000, "36400.0", "36800.0", "36300.0", "36700.0", "36550.0", "88.0", 700],
        ],
        "last": 1699992000,
    }

    candles = parse_rest_ohlc(result)

    assert [c.period_start for c in candles] == [1699977600, 1699992000]
    first = candles[0]
    assert (first.open, first.high, first.low, first.close) == (36000.0, 36500.0, 35900.0, 36400.0)
    assert first.volume == 101.5


def test_parse_rest_ohlc_bad_row():
    with pytest.raises(MalformedMessageError):
        parse_rest_ohlc({"XXBTZUSD": [[1699977600, "1", "2"]], "last": 0})
    with pytest.raises(MalformedMessageError):
        parse_rest_ohlc({"last": 0})


def test_parse_feed_message():
    update = parse_feed_message([42, FEED_ROW, "ohlc-240", "XBT/USD"], 240, {"XBT/USD"})

    assert update.pair == "XBT/USD"
    # start = end - 4h
    assert update.candle.period_start == 1700006400 - 240 * 60
    assert update.candle.open == 36500.1
    assert update.candle.close == 36750.2
    assert update.candle.volume == 12.5


@pytest.mark.parametrize(
    "data",
    [
        {"event": "heartbeat"},
        [42, FEED_ROW, "ohlc-60", "XBT/USD"],
        [42, FEED_ROW, "trade", "XBT/USD"],
        [42, FEED_ROW, "ohlc-240", "DOGE/USD"],
        [42, FEED_ROW],
    ],
)
def test_parse_feed_message_ignores(data):
    assert parse_feed_message(data, 240, {"XBT/USD"}) is None


@pytest.mark.parametrize(
    "data",
    [
        [42, ["1700001000", "1700006400"], "ohlc-240", "XBT/USD"],
        [42, ["x", "y", "a", "b", "c", "d", "e", "f", 1], "ohlc-240", "XBT/USD"],
        [42, FEED_ROW, "ohlc-240", None],
    ],
)
def test_parse_feed_message_malformed(data):
    with pytest.raises(MalformedMessageError):
        parse_feed_message(data, 240, {"XBT/USD"})


def test_decode_rejects_garbage():
    with pytest.raises(MalformedMessageError):
        decode("{not json")


def test_outgoing_messages():
    assert json.loads(subscribe_message("ETH/USD", 240)) == {
        "event": "subscribe",
        "pair": ["ETH/USD"],
        "subscription": {"name": "ohlc", "interval": 240},
    }
    assert json.loads(ping_message(7)) == {"event": "ping", "reqid": 7}
