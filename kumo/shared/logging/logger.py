"""
Kumo – Logging configuration
============================
Human readable single-line format on stdout. Every module asks for its
logger through get_logger() so the whole service lives under "kumo.*".
"""

from __future__ import annotations

import logging
import sys


def setup_logging(level: int | str = logging.INFO) -> None:
    """Configure the root logger once at start-up."""
    fmt = (
        "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    # Calling twice must not duplicate output
    if not root.handlers:
        root.addHandler(handler)
    root.setLevel(level)

    # Noisy libraries
    logging.getLogger("websockets").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger factory with the service namespace prefixed."""
    return logging.getLogger(f"kumo.{name}")
