"""Domain value objects."""

from kumo.domain.value_objects.ohlc_update import OHLC_TOPIC, OhlcUpdate

__all__ = ["OHLC_TOPIC", "OhlcUpdate"]
