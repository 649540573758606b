"""Domain exceptions."""

from kumo.domain.exceptions.domain_errors import (
    DomainError,
    MalformedMessageError,
    MarketDataError,
)

__all__ = ["DomainError", "MalformedMessageError", "MarketDataError"]
