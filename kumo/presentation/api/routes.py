"""
Kumo – API Routes (FastAPI)
===========================
REST endpoints polled by the dashboard.

  GET  /api/health                              → health check
  GET  /api/status                              → feed, store and registry diagnostics
  GET  /api/ichimoku-signals                    → all signals + collection progress
  GET  /api/ichimoku-signals/{base}/{quote}     → one pair's signal
  GET  /api/candles/{base}/{quote}              → current candle window of a pair
  GET  /api/kraken-orderflow                    → trades + book + ticker snapshot
  POST /api/test-kraken                         → provider connectivity probe

Pairs contain a slash, so they are taken as two path segments:
/api/ichimoku-signals/ETH/USD → "ETH/USD".
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from kumo.domain.exceptions.domain_errors import MarketDataError
from kumo.presentation.api.schemas import (
    CandlesResponse,
    HealthResponse,
    IchimokuSignalSchema,
    SignalsResponse,
)
from kumo.shared.logging.logger import get_logger

logger = get_logger("api.routes")

router = APIRouter()

# Components injected from main.py at start-up
_signal_query = None
_candle_store = None
_signal_registry = None
_feed_client = None
_process_candle = None
_orderflow = None


def init_routes(
    signal_query,
    candle_store,
    signal_registry=None,
    feed_client=None,
    process_candle=None,
    orderflow=None,
) -> None:
    """Inject dependencies from main.py."""
    global _signal_query, _candle_store, _signal_registry
    global _feed_client, _process_candle, _orderflow
    _signal_query = signal_query
    _candle_store = candle_store
    _signal_registry = signal_registry
    _feed_client = feed_client
    _process_candle = process_candle
    _orderflow = orderflow


def _provider_error(e: MarketDataError) -> JSONResponse:
    logger.error("Market data request failed: %s", e.message)
    return JSONResponse(status_code=502, content={"success": False, **e.to_dict()})


# ─── Health / status ──────────────────────────────────────────────────

@router.get("/api/health", response_model=HealthResponse)
async def health_check() -> dict:
    return {"status": "ok", "service": "kumo"}


@router.get("/api/status")
async def system_status() -> dict:
    """Diagnostics of every component."""
    return {
        "feed": _feed_client.stats if _feed_client is not None else {},
        "ingest": _process_candle.stats if _process_candle is not None else {},
        "candles": _candle_store.snapshot() if _candle_store is not None else {},
        "registry": _signal_registry.stats if _signal_registry is not None else {},
    }


# ─── Ichimoku signals ─────────────────────────────────────────────────

@router.get("/api/ichimoku-signals", response_model=SignalsResponse)
async def ichimoku_signals() -> dict:
    """Latest signal per pair plus collection progress of every pair."""
    if _signal_query is None:
        raise HTTPException(status_code=503, detail="Signal service not ready")
    return _signal_query.snapshot()


@router.get("/api/ichimoku-signals/{base}/{quote}", response_model=IchimokuSignalSchema)
async def ichimoku_signal(base: str, quote: str) -> dict:
    if _signal_query is None:
        raise HTTPException(status_code=503, detail="Signal service not ready")

    pair = f"{base.upper()}/{quote.upper()}"
    signal = _signal_query.get_signal(pair)
    if signal is None:
        progress = _signal_query.progress(pair)
        detail = f"No signal for {pair} yet"
        if progress is not None:
            detail += f" ({progress['candles']}/{progress['required']} candles collected)"
        raise HTTPException(status_code=404, detail=detail)
    return signal


# ─── Candles ──────────────────────────────────────────────────────────

@router.get("/api/candles/{base}/{quote}", response_model=CandlesResponse)
async def get_candles(base: str, quote: str) -> dict:
    if _candle_store is None:
        raise HTTPException(status_code=503, detail="Candle store not ready")

    pair = f"{base.upper()}/{quote.upper()}"
    candles = _candle_store.window(pair)
    return {
        "pair": pair,
        "count": len(candles),
        "candles": [c.to_dict() for c in candles],
    }


# ─── Kraken passthrough ───────────────────────────────────────────────

@router.get("/api/kraken-orderflow")
async def kraken_orderflow(
    pair: str = Query(default="XBTUSD", description="Kraken REST pair name"),
    depth_count: int = Query(default=500, alias="depthCount", ge=1, le=500),
):
    """Recent trades, order book and ticker with order-flow metrics."""
    if _orderflow is None:
        raise HTTPException(status_code=503, detail="Order flow service not ready")
    try:
        return await _orderflow.snapshot(pair, depth_count)
    except MarketDataError as e:
        return _provider_error(e)


@router.post("/api/test-kraken")
async def test_kraken():
    """Check that Kraken's public API answers."""
    if _orderflow is None:
        raise HTTPException(status_code=503, detail="Order flow service not ready")
    try:
        return await _orderflow.check_connectivity()
    except MarketDataError as e:
        return _provider_error(e)
