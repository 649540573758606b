"""
Kumo – Ichimoku Cloud signal backend
====================================
Streams 4h OHLC candles from Kraken, keeps a 52-candle window per pair and
serves the latest Ichimoku Cloud signal of every pair over HTTP.
"""

__version__ = "0.1.0"
