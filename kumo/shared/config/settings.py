"""
Kumo – Settings (Pydantic BaseSettings)
=======================================
Centralised configuration loaded from environment variables / .env.
pydantic-settings validates everything once at start-up.

List and tuple options are read from the environment as JSON, e.g.:
    TRACKED_PAIRS='["XBT/USD", "ETH/USD"]'
    PAIR_ALIASES='[["XBT/USD", "BTC/USD"]]'
"""

from __future__ import annotations

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Tuple


class Settings(BaseSettings):
    # ─── Kraken ─────────────────────────────────────────────────────────
    kraken_ws_url: str = Field(
        default="wss://ws.kraken.com",
        description="Kraken public WebSocket (v1) endpoint",
    )
    kraken_rest_url: str = Field(
        default="https://api.kraken.com/0/public",
        description="Kraken public REST base URL",
    )
    kraken_rest_timeout: float = Field(
        default=10.0, description="Total timeout (sec) for one REST request"
    )

    # Display pairs, also the WebSocket v1 pair names
    tracked_pairs: List[str] = Field(
        default=["XBT/USD", "ETH/USD", "SOL/USD"],
        description="Pairs subscribed on the feed and backfilled at start-up",
    )
    # (source, alias): every signal written for source is mirrored under alias
    pair_aliases: List[Tuple[str, str]] = Field(
        default=[("XBT/USD", "BTC/USD")],
        description="Signal mirroring between a venue symbol and its display name",
    )

    # ─── Candles ────────────────────────────────────────────────────────
    candle_interval_minutes: int = Field(
        default=240, description="OHLC interval requested from Kraken (minutes)"
    )
    max_candles_buffer: int = Field(
        default=52,
        ge=52,
        description="Candles kept per pair; Senkou Span B needs at least 52",
    )

    # ─── Feed connection ────────────────────────────────────────────────
    ws_reconnect_delay: float = Field(
        default=5.0, description="Fixed delay (sec) before reconnecting the feed"
    )
    ws_heartbeat_interval: float = Field(
        default=30.0, description="Interval (sec) between keep-alive pings"
    )

    # ─── Diagnostics ────────────────────────────────────────────────────
    status_log_interval: int = Field(
        default=60, description="Interval (sec) of the collection progress dump"
    )

    # ─── Event Bus ──────────────────────────────────────────────────────
    event_bus_max_queue_size: int = Field(
        default=10_000,
        description="Max queued feed updates per consumer",
    )

    # ─── Server ─────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Global singleton, import where needed
settings = Settings()
