"""
Kumo – In-memory State
======================
Process-wide candle windows and latest signals. Nothing is persisted; both
are rebuilt by the backfill and the live feed on every start.
"""

from kumo.state.candle_store import CandleStore
from kumo.state.signal_registry import SignalRegistry

__all__ = ["CandleStore", "SignalRegistry"]
