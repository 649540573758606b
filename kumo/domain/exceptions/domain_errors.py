"""
Kumo – Domain Exceptions
========================

HIERARCHY:
    DomainError (base)
    ├── MalformedMessageError   provider payload cannot be normalised
    └── MarketDataError         provider request failed (HTTP, transport, API error)

Insufficient candle history is NOT an exception: the calculator returns
None and the query service reports collection progress instead.
"""

from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base class for errors raised by Kumo itself."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
        }


class MalformedMessageError(DomainError):
    """A bar or feed message does not have the expected layout."""

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message, code="MALFORMED_MESSAGE")
        self.payload = payload


class MarketDataError(DomainError):
    """The market-data provider could not serve a request."""

    def __init__(self, message: str, endpoint: Optional[str] = None, details: Any = None):
        super().__init__(message, code="MARKET_DATA_ERROR")
        self.endpoint = endpoint
        self.details = details

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.endpoint:
            result["endpoint"] = self.endpoint
        if self.details is not None:
            result["details"] = self.details
        return result
