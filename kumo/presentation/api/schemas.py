"""
Kumo – API Schemas (Pydantic)
=============================
Response models of the signal endpoints. Field names follow the camelCase
contract of the dashboard.
"""

from __future__ import annotations

from pydantic import BaseModel
from typing import Dict, List, Optional


class HealthResponse(BaseModel):
    status: str
    service: str


class IchimokuSignalSchema(BaseModel):
    pair: str
    signal: str
    confidence: Optional[str] = None
    price: float
    tenkanSen: float
    kijunSen: float
    senkouSpanA: float
    senkouSpanB: float
    chikouSpan: Optional[float] = None
    timestamp: str
    updated: str


class CollectionProgressSchema(BaseModel):
    candles: int
    required: int
    percent: float
    last_candle_time: Optional[str] = None
    has_signal: bool


class SignalsResponse(BaseModel):
    signals: Dict[str, IchimokuSignalSchema]
    collection: Dict[str, CollectionProgressSchema]
    required_candles: int
    generated_at: str


class CandleSchema(BaseModel):
    period_start: int
    time: str
    open: float
    high: float
    low: float
    close: float
    volume: float


class CandlesResponse(BaseModel):
    pair: str
    count: int
    candles: List[CandleSchema]
