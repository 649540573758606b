"""
Kumo – Kraken WebSocket Feed Client
===================================
Persistent connection to Kraken's public WebSocket (v1) that streams
4-hour OHLC bars for every tracked pair and publishes each normalised bar
on the EventBus.

LIFECYCLE:
  1. start()          → launches the connect loop task
  2. _connect_loop()  → connect, subscribe every pair, listen; forever
  3. _listen()        → decode, filter, normalise, publish
  4. _heartbeat()     → {"event": "ping"} every ws_heartbeat_interval
  5. stop()           → clean shutdown

RECONNECT:
- Any transport error or closure ends the current session. After a FIXED
  delay (ws_reconnect_delay, 5 s by default) a new connection is opened and
  every tracked pair is subscribed again from scratch. There is no resume
  cursor: already stored candles stay in the CandleStore and live updates
  simply continue from there.

BAD INPUT:
- A message that cannot be decoded or normalised is logged and dropped.
  The connection stays up.

IN-PROGRESS BARS:
- Kraken pushes every change of the still-forming bar. Each push is
  published as-is; the CandleStore replaces it by period_start.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Callable, Optional

import websockets

from kumo.domain.exceptions.domain_errors import MalformedMessageError
from kumo.domain.value_objects.ohlc_update import OHLC_TOPIC
from kumo.infrastructure.external.kraken_codec import (
    decode,
    parse_feed_message,
    ping_message,
    subscribe_message,
)
from kumo.infrastructure.messaging.event_bus import EventBus
from kumo.shared.config.settings import Settings
from kumo.shared.logging.logger import get_logger

logger = get_logger("kraken_feed")


class KrakenFeedClient:
    """
    Asynchronous OHLC feed client.

    `connect` is the connection factory; it defaults to websockets.connect
    and is replaced by a fake in tests.
    """

    def __init__(
        self,
        event_bus: EventBus,
        settings: Settings,
        connect: Optional[Callable[..., Any]] = None,
    ) -> None:
        self._event_bus = event_bus
        self._settings = settings
        self._connect = connect or websockets.connect
        self._pairs = list(settings.tracked_pairs)
        self._pair_set = frozenset(self._pairs)
        self._interval = settings.candle_interval_minutes

        self._ws = None
        self._running = False
        self._connect_task: Optional[asyncio.Task] = None
        self._heartbeat_task: Optional[asyncio.Task] = None
        self._ping_reqid = 0

        # Monitoring counters
        self._connections: int = 0
        self._reconnects: int = 0
        self._messages_received: int = 0
        self._updates_published: int = 0
        self._malformed_messages: int = 0
        self._last_update_time: float = 0.0
        self._connected_since: float = 0.0

    # ──────────────────────── Lifecycle ──────────────────────────────────

    async def start(self) -> None:
        """Start the client. Idempotent."""
        if self._running:
            logger.warning("KrakenFeedClient already running, start() ignored")
            return

        self._running = True
        self._connect_task = asyncio.create_task(
            self._connect_loop(), name="kraken-connect-loop"
        )
        logger.info("KrakenFeedClient started for %s", ", ".join(self._pairs))

    async def stop(self) -> None:
        """Close the connection and cancel the background tasks."""
        self._running = False
        logger.info("Stopping KrakenFeedClient...")

        if self._heartbeat_task and not self._heartbeat_task.done():
            self._heartbeat_task.cancel()

        if self._ws is not None:
            try:
                await self._ws.close()
            except Exception as e:
                logger.debug("Error closing feed connection: %s", e)

        if self._connect_task and not self._connect_task.done():
            self._connect_task.cancel()
            try:
                await self._connect_task
            except asyncio.CancelledError:
                pass

        logger.info(
            "KrakenFeedClient stopped. Updates published: %d", self._updates_published
        )

    # ──────────────────────── Connection Loop ───────────────────────────

    async def _connect_loop(self) -> None:
        """Connect / listen / wait / reconnect until stop()."""
        url = self._settings.kraken_ws_url

        while self._running:
            try:
                logger.info("Connecting to Kraken: %s", url)
                async with self._connect(
                    url,
                    ping_interval=None,   # keep-alive handled by _heartbeat
                    ping_timeout=None,
                    close_timeout=10,
                    max_size=2**20,
                ) as ws:
                    self._ws = ws
                    self._connections += 1
                    self._connected_since = time.time()
                    logger.info("✓ Connected to Kraken WebSocket")

                    await self._subscribe_pairs(ws)

                    self._heartbeat_task = asyncio.create_task(
                        self._heartbeat(ws), name="kraken-heartbeat"
                    )

                    await self._listen(ws)
                    logger.warning("Kraken feed closed by server")

            except websockets.exceptions.ConnectionClosed as e:
                logger.warning("Connection closed: %s", e)
            except OSError as e:
                logger.error("Network error: %s", e)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error("Unexpected error in connect loop: %s", e, exc_info=True)
            finally:
                self._ws = None
                if self._heartbeat_task and not self._heartbeat_task.done():
                    self._heartbeat_task.cancel()

            if not self._running:
                break

            self._reconnects += 1
            logger.info(
                "Reconnecting in %.1fs (attempt #%d)...",
                self._settings.ws_reconnect_delay,
                self._reconnects,
            )
            await asyncio.sleep(self._settings.ws_reconnect_delay)

    # ──────────────────────── Subscribe ─────────────────────────────────

    async def _subscribe_pairs(self, ws) -> None:
        """One subscription request per tracked pair."""
        for pair in self._pairs:
            await ws.send(subscribe_message(pair, self._interval))
            logger.info("Subscribed to %dm OHLC of '%s'", self._interval, pair)

    # ──────────────────────── Listener ──────────────────────────────────

    async def _listen(self, ws) -> None:
        async for raw_msg in ws:
            if not self._running:
                break
            self._messages_received += 1

            try:
                data = decode(raw_msg)
                if isinstance(data, dict):
                    self._handle_event(data)
                    continue

                update = parse_feed_message(data, self._interval, self._pair_set)
            except MalformedMessageError as e:
                self._malformed_messages += 1
                logger.warning("Dropping malformed feed message: %s | %s",
                               e.message, str(raw_msg)[:200])
                continue

            if update is None:
                continue

            self._updates_published += 1
            self._last_update_time = update.received_at
            await self._event_bus.publish(OHLC_TOPIC, update)

    def _handle_event(self, data: dict) -> None:
        """Kraken event objects: status, subscription acks, heartbeats, pongs."""
        event = data.get("event")
        if event in ("heartbeat", "pong"):
            return
        if event == "systemStatus":
            logger.info("Kraken system status: %s (v%s)",
                        data.get("status"), data.get("version", "?"))
        elif event == "subscriptionStatus":
            if data.get("status") == "error":
                logger.error("Subscription error for %s: %s",
                             data.get("pair"), data.get("errorMessage"))
            else:
                logger.info("Subscription %s: %s %s",
                            data.get("status"), data.get("pair"), data.get("channelName"))
        else:
            logger.debug("Ignoring feed event: %s", event)

    # ──────────────────────── Heartbeat ─────────────────────────────────

    async def _heartbeat(self, ws) -> None:
        """Periodic ping so idle connections are not timed out."""
        try:
            while self._running:
                await asyncio.sleep(self._settings.ws_heartbeat_interval)
                self._ping_reqid += 1
                try:
                    await ws.send(ping_message(self._ping_reqid))
                except Exception:
                    logger.warning("Heartbeat failed, connection probably lost")
                    break
        except asyncio.CancelledError:
            pass

    # ──────────────────────── Stats ─────────────────────────────────────

    @property
    def connected(self) -> bool:
        return self._ws is not None

    @property
    def stats(self) -> dict:
        return {
            "running": self._running,
            "connected": self.connected,
            "pairs": list(self._pairs),
            "interval_minutes": self._interval,
            "connections": self._connections,
            "reconnects": self._reconnects,
            "messages_received": self._messages_received,
            "updates_published": self._updates_published,
            "malformed_messages": self._malformed_messages,
            "last_update_time": self._last_update_time,
            "connected_since": self._connected_since,
        }
