"""Observability: logging."""

from perp_datafeed.observability.logging import (
    LOG_TAG_FETCH,
    LOG_TAG_STORE,
    get_logger,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "LOG_TAG_FETCH",
    "LOG_TAG_STORE",
]
