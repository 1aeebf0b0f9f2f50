"""
Domain Error Taxonomy.

All domain-specific exceptions with clear categorization.
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """
    Base class for all domain errors.

    Includes structured error info for logging and debugging.
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(
        self,
        message: str,
        *,
        symbol: str | None = None,
        exchange: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.symbol = symbol
        self.exchange = exchange
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for logging."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "symbol": self.symbol,
            "exchange": self.exchange,
            "details": self.details,
        }


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(DomainError):
    """Invalid input or configuration."""

    error_code = "VALIDATION_ERROR"


# =============================================================================
# Exchange/API Errors
# =============================================================================


class ExchangeError(DomainError):
    """Error from exchange API (transport or HTTP level)."""

    error_code = "EXCHANGE_ERROR"


class ApiResponseError(ExchangeError):
    """Exchange answered, but the response envelope reports a failure (code != 0)."""

    error_code = "API_RESPONSE_ERROR"

    def __init__(self, message: str, *, api_code: int | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.api_code = api_code
        self.details["api_code"] = api_code


# =============================================================================
# Storage Errors
# =============================================================================


class StoreError(DomainError):
    """Error reading from or writing to the local cache."""

    error_code = "STORE_ERROR"


class StoreNotInitializedError(StoreError):
    """Store used before initialize() or after close()."""

    error_code = "STORE_NOT_INITIALIZED"
