"""
Kumo – Kraken wire format
=========================
Normalisation of Kraken OHLC payloads into Candle objects, plus the
outgoing feed messages.

BAR LAYOUTS (Kraken public API docs):

  REST /OHLC row          [time, open, high, low, close, vwap, volume, count]
                           time = start of the bar

  WebSocket v1 ohlc row   [time, etime, open, high, low, close, vwap, volume, count]
                           time  = time of the last update inside the bar
                           etime = END of the bar → start = etime - interval

  WebSocket v1 message    [channelID, <row>, "ohlc-<interval>", "<pair>"]

Prices and volumes arrive as decimal strings. vwap and count are not used.
"""

from __future__ import annotations

import json
from typing import Any, Collection, Optional

from kumo.domain.entities.candle import Candle
from kumo.domain.exceptions.domain_errors import MalformedMessageError
from kumo.domain.value_objects.ohlc_update import OhlcUpdate

REST_ROW_FIELDS = 8
FEED_ROW_FIELDS = 9


def rest_symbol(pair: str) -> str:
    """Display/WebSocket pair → REST pair name ("XBT/USD" → "XBTUSD")."""
    return pair.replace("/", "")


def ohlc_channel(interval_minutes: int) -> str:
    return f"ohlc-{interval_minutes}"


def parse_rest_bar(row: Any) -> Candle:
    """Normalise one REST /OHLC row."""
    if not isinstance(row, (list, tuple)) or len(row) < REST_ROW_FIELDS:
        raise MalformedMessageError("Unexpected REST OHLC row layout", payload=row)
    try:
        return Candle(
            period_start=int(row[0]),
            open=float(row[1]),
            high=float(row[2]),
            low=float(row[3]),
            close=float(row[4]),
            volume=float(row[6]),
        )
    except (TypeError, ValueError) as e:
        raise MalformedMessageError(f"Invalid REST OHLC row: {e}", payload=row) from e


def parse_rest_ohlc(result: dict) -> list[Candle]:
    """
    Normalise the `result` object of a REST /OHLC response.

    Kraken keys the rows by its own pair name (e.g. "XXBTZUSD") next to a
    "last" cursor, so the first non-"last" key is taken.
    """
    if not isinstance(result, dict):
        raise MalformedMessageError("OHLC result is not an object", payload=result)
    key = next((k for k in result if k != "last"), None)
    if key is None:
        raise MalformedMessageError("OHLC result holds no pair data", payload=result)
    rows = result[key]
    if not isinstance(rows, list):
        raise MalformedMessageError("OHLC rows are not a list", payload=rows)
    return [parse_rest_bar(row) for row in rows]


def parse_feed_bar(row: Any, interval_minutes: int) -> Candle:
    """Normalise one WebSocket v1 ohlc row."""
    if not isinstance(row, (list, tuple)) or len(row) < FEED_ROW_FIELDS:
        raise MalformedMessageError("Unexpected feed OHLC row layout", payload=row)
    try:
        end_time = int(round(float(row[1])))
        return Candle(
            period_start=end_time - interval_minutes * 60,
            open=float(row[2]),
            high=float(row[3]),
            low=float(row[4]),
            close=float(row[5]),
            volume=float(row[7]),
        )
    except (TypeError, ValueError) as e:
        raise MalformedMessageError(f"Invalid feed OHLC row: {e}", payload=row) from e


def parse_feed_message(
    data: Any,
    interval_minutes: int,
    pairs: Optional[Collection[str]] = None,
) -> Optional[OhlcUpdate]:
    """
    Turn a decoded WebSocket v1 payload into an OhlcUpdate.

    Returns None for anything that is not an OHLC message of the wanted
    interval (event objects, other channels, untracked pairs).

    Raises:
        MalformedMessageError: it IS an OHLC message of the wanted interval
            but the bar cannot be normalised.
    """
    if not isinstance(data, list) or len(data) < 4:
        return None

    channel, pair = data[-2], data[-1]
    if channel != ohlc_channel(interval_minutes):
        return None
    if not isinstance(pair, str):
        raise MalformedMessageError("OHLC message without pair name", payload=data)
    if pairs is not None and pair not in pairs:
        return None

    return OhlcUpdate(pair=pair, candle=parse_feed_bar(data[1], interval_minutes))


def decode(raw: str | bytes) -> Any:
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedMessageError("Feed message is not valid JSON", payload=raw) from e


def subscribe_message(pair: str, interval_minutes: int) -> str:
    return json.dumps({
        "event": "subscribe",
        "pair": [pair],
        "subscription": {"name": "ohlc", "interval": interval_minutes},
    })


def ping_message(reqid: int) -> str:
    return json.dumps({"event": "ping", "reqid": reqid})
