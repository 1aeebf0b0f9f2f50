"""
Exchange Port: Abstract interface for perpetuals market-data sources.

Implementations return the raw response envelope; mapping to domain types
happens in the service layer so every source is stored the same way.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from perp_datafeed.domain.models import Exchange


class PerpetualsMarketPort(ABC):
    """Read-only public market data for one exchange."""

    @property
    @abstractmethod
    def exchange(self) -> Exchange:
        """Return the exchange identifier."""
        ...

    @abstractmethod
    async def get_markets(self) -> dict[str, Any]:
        """
        Fetch all perpetual markets.

        Returns the response envelope: {"code": int, "data": list[dict], "message": str}.
        """
        ...

    @abstractmethod
    async def get_funding_rates(self) -> dict[str, Any]:
        """
        Fetch current funding rates for all markets.

        Returns the response envelope: {"code": int, "data": list[dict], "message": str}.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close connections and cleanup resources."""
        ...
