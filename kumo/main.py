"""
Kumo – Main Application Entry Point
===================================
Wires the Ichimoku signal backend and runs it inside FastAPI's lifespan.

START-UP ORDER:
  1. Logging
  2. Container (EventBus, CandleStore, SignalRegistry, clients, use cases)
  3. Lifespan start:
     a. ProcessCandleUseCase subscribes to the EventBus and starts consuming
     b. Historical backfill for every tracked pair (awaited to completion)
     c. KrakenFeedClient connects and subscribes (live updates)
     d. StatusLogger periodic dump
  4. Lifespan shutdown: everything stopped in reverse order

DATA FLOW:
  Kraken REST ──backfill──────────────────────┐
  Kraken WS → KrakenFeedClient → EventBus(ohlc) → ProcessCandleUseCase
       → CandleStore.upsert → IchimokuCalculator → SignalRegistry
       → GET /api/ichimoku-signals (polled by the dashboard)

  uvicorn kumo.main:app --host 0.0.0.0 --port 5000
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kumo.container import init_container
from kumo.presentation.api.routes import init_routes, router
from kumo.shared.config.settings import settings
from kumo.shared.logging.logger import get_logger, setup_logging

# ─── Logging ────────────────────────────────────────────────────────────
setup_logging(settings.log_level)
logger = get_logger("main")

# ─── Dependency container ───────────────────────────────────────────────
container = init_container(settings)

_background_tasks: list[asyncio.Task] = []


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start-up / shutdown of the long running components."""
    logger.info("=" * 60)
    logger.info("  Kumo - Ichimoku Cloud signals")
    logger.info("  Pairs: %s", ", ".join(settings.tracked_pairs))
    logger.info("  Aliases: %s",
                ", ".join(f"{src}→{alias}" for src, alias in settings.pair_aliases) or "none")
    logger.info("  Candles: %dm, window %d per pair",
                settings.candle_interval_minutes, settings.max_candles_buffer)
    logger.info("  Feed: %s (reconnect %.0fs, ping %.0fs)",
                settings.kraken_ws_url, settings.ws_reconnect_delay,
                settings.ws_heartbeat_interval)
    logger.info("=" * 60)

    init_routes(
        container.signal_query,
        container.candle_store,
        signal_registry=container.signal_registry,
        feed_client=container.feed_client,
        process_candle=container.process_candle,
        orderflow=container.get_orderflow_usecase(),
    )

    # Consumer first, so no feed update is published before it listens
    container.process_candle.subscribe()
    consumer = asyncio.create_task(
        container.process_candle.start(), name="process-candle-usecase"
    )
    _background_tasks.append(consumer)

    # Backfill must settle before live updates start
    await container.get_backfill_usecase().execute(settings.tracked_pairs)

    await container.feed_client.start()
    container.status_logger.start()
    container.status_logger.log_status()

    logger.info("✓ All components started")

    yield

    # ── SHUTDOWN ──
    logger.info("Shutting down...")

    await container.status_logger.stop()
    await container.feed_client.stop()
    await container.process_candle.stop()

    for task in _background_tasks:
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
    _background_tasks.clear()

    await container.market_data_provider.close()
    container.event_bus.unsubscribe_all()
    logger.info("✓ Shutdown complete")


# ─── FastAPI App ────────────────────────────────────────────────────────

app = FastAPI(
    title="Kumo - Ichimoku Signals",
    description="Streaming 4h candle aggregation and Ichimoku Cloud signals for crypto pairs",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


def run() -> None:
    uvicorn.run(
        "kumo.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
