"""
Perpetuals Store Port: Abstract interface for the local market-data cache.

Handles storage and retrieval of perpetual contracts, funding snapshots and metadata.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from perp_datafeed.domain.models import CoinexFundingRate, CoinexPerpetualContract, DatabaseStats


class PerpetualsStorePort(ABC):
    """
    Abstract interface for perpetuals storage.

    Implementations can be in-memory, SQLite, or any other storage.
    """

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the store (create tables, etc)."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close connections and cleanup."""
        ...

    # =========================================================================
    # Perpetual contracts
    # =========================================================================

    @abstractmethod
    async def upsert_coinex_perpetuals(self, contracts: list[CoinexPerpetualContract]) -> int:
        """Insert or replace contracts keyed by market. Returns rows written."""
        ...

    @abstractmethod
    async def get_all_coinex_perpetuals(self) -> list[CoinexPerpetualContract]:
        """All stored contracts ordered by market."""
        ...

    @abstractmethod
    async def get_active_coinex_perpetuals(self) -> list[CoinexPerpetualContract]:
        """Stored contracts that are currently tradable."""
        ...

    @abstractmethod
    async def get_coinex_perpetual_by_market(self, market: str) -> CoinexPerpetualContract | None:
        """Single contract lookup."""
        ...

    @abstractmethod
    async def clear_coinex_perpetuals(self) -> None:
        """Delete all stored contracts."""
        ...

    # =========================================================================
    # Funding rates
    # =========================================================================

    @abstractmethod
    async def insert_coinex_funding_rates(self, rates: list[CoinexFundingRate]) -> int:
        """Append funding snapshots. Returns rows written."""
        ...

    @abstractmethod
    async def get_latest_coinex_funding_rates(self) -> list[CoinexFundingRate]:
        """Most recent snapshot per market."""
        ...

    # =========================================================================
    # Metadata & stats
    # =========================================================================

    @abstractmethod
    async def update_metadata(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    async def get_metadata(self, key: str) -> str | None:
        ...

    @abstractmethod
    async def get_coinex_stats(self) -> DatabaseStats:
        """Contract counts and last update time."""
        ...
