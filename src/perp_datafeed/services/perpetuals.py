"""
CoinEx Perpetuals Fetcher.

Pulls perpetual contracts and funding rates from CoinEx, maps them to domain
models and persists them in the local cache. Cached data can be read back
without touching the network.

Usage:
    async with CoinexPerpetualsFetcher() as fetcher:
        contracts = await fetcher.fetch_all_perpetuals()
        stats = await fetcher.get_database_stats()
"""

from __future__ import annotations

from datetime import UTC, datetime
from types import TracebackType
from typing import Any

from perp_datafeed.adapters.exchanges.coinex import CoinexRestClient
from perp_datafeed.adapters.store.sqlite import SQLitePerpetualsStore
from perp_datafeed.adapters.store.sqlite.schema import (
    META_FUNDING_RATES_LAST_UPDATE,
    META_PERPETUALS_COUNT,
    META_PERPETUALS_LAST_UPDATE,
)
from perp_datafeed.config.settings import Settings, get_settings
from perp_datafeed.domain.errors import ApiResponseError, ExchangeError, StoreNotInitializedError
from perp_datafeed.domain.models import CoinexFundingRate, CoinexPerpetualContract, DatabaseStats, Exchange
from perp_datafeed.observability.logging import LOG_TAG_FETCH, get_logger
from perp_datafeed.ports.exchange import PerpetualsMarketPort
from perp_datafeed.ports.store import PerpetualsStorePort

logger = get_logger(__name__)


def _unwrap_envelope(response: dict[str, Any]) -> list[dict[str, Any]]:
    """
    Return `data` from a CoinEx envelope.

    Raises:
        ApiResponseError: if `code` is not 0 or `data` is not a list.
    """
    code = response.get("code")
    if code != 0:
        raise ApiResponseError(
            f"API Error: {response.get('message')}",
            api_code=code if isinstance(code, int) else None,
            exchange=Exchange.COINEX.value,
        )

    data = response.get("data")
    if not isinstance(data, list):
        raise ApiResponseError(
            "API Error: response data is not a list",
            api_code=0,
            exchange=Exchange.COINEX.value,
        )
    return data


class CoinexPerpetualsFetcher:
    """
    Fetch, store and serve CoinEx perpetual market data.

    Builds its REST client and store from settings unless they are injected.
    `close()` closes both either way.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        store: PerpetualsStorePort | None = None,
        client: PerpetualsMarketPort | None = None,
    ):
        self.settings = settings or get_settings()
        self.store: PerpetualsStorePort = store or SQLitePerpetualsStore(self.settings)
        self.client: PerpetualsMarketPort = client or CoinexRestClient(self.settings)
        self._initialized = False
        self._closed = False

    async def initialize(self) -> None:
        """Open the store. Safe to call repeatedly."""
        if self._closed:
            raise StoreNotInitializedError("CoinexPerpetualsFetcher is closed")
        if self._initialized:
            return
        await self.store.initialize()
        self._initialized = True

    async def __aenter__(self) -> CoinexPerpetualsFetcher:
        # Store opens lazily on first use so open failures surface inside the block.
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # =========================================================================
    # Network fetches
    # =========================================================================

    async def fetch_all_perpetuals(self) -> list[CoinexPerpetualContract]:
        """Fetch every CoinEx futures market and upsert it into the store."""
        await self.initialize()

        logger.info(f"{LOG_TAG_FETCH} Fetching CoinEx perpetual markets")
        try:
            response = await self.client.get_markets()
        except ApiResponseError:
            raise
        except ExchangeError as e:
            raise ExchangeError(
                f"Failed to fetch perpetuals: {e.message}",
                exchange=Exchange.COINEX.value,
                details=e.details,
            ) from e

        contracts = [CoinexPerpetualContract.from_api(item) for item in _unwrap_envelope(response)]

        await self.store.upsert_coinex_perpetuals(contracts)
        await self.store.update_metadata(META_PERPETUALS_LAST_UPDATE, datetime.now(UTC).isoformat())
        await self.store.update_metadata(META_PERPETUALS_COUNT, str(len(contracts)))

        logger.info(f"{LOG_TAG_FETCH} Fetched {len(contracts)} CoinEx perpetual contracts")
        return contracts

    async def fetch_all_funding_rates(self) -> list[CoinexFundingRate]:
        """Fetch current funding rates for all markets and append them to the store."""
        await self.initialize()

        logger.info(f"{LOG_TAG_FETCH} Fetching CoinEx funding rates")
        try:
            response = await self.client.get_funding_rates()
        except ApiResponseError:
            raise
        except ExchangeError as e:
            raise ExchangeError(
                f"Failed to fetch funding rates: {e.message}",
                exchange=Exchange.COINEX.value,
                details=e.details,
            ) from e

        rates = [CoinexFundingRate.from_api(item) for item in _unwrap_envelope(response)]

        await self.store.insert_coinex_funding_rates(rates)
        await self.store.update_metadata(META_FUNDING_RATES_LAST_UPDATE, datetime.now(UTC).isoformat())

        logger.info(f"{LOG_TAG_FETCH} Fetched {len(rates)} CoinEx funding rates")
        return rates

    async def refresh_data(self) -> list[CoinexPerpetualContract]:
        """Force a re-fetch of perpetual contracts."""
        return await self.fetch_all_perpetuals()

    async def refresh_funding_rates(self) -> list[CoinexFundingRate]:
        """Force a re-fetch of funding rates."""
        return await self.fetch_all_funding_rates()

    # =========================================================================
    # Cache reads
    # =========================================================================

    async def get_cached_perpetuals(self) -> list[CoinexPerpetualContract]:
        await self.initialize()
        return await self.store.get_all_coinex_perpetuals()

    async def get_active_cached_perpetuals(self) -> list[CoinexPerpetualContract]:
        await self.initialize()
        return await self.store.get_active_coinex_perpetuals()

    async def get_cached_perpetual_by_market(self, market: str) -> CoinexPerpetualContract | None:
        await self.initialize()
        return await self.store.get_coinex_perpetual_by_market(market)

    async def get_cached_funding_rates(self) -> list[CoinexFundingRate]:
        """Latest stored funding snapshot per market."""
        await self.initialize()
        return await self.store.get_latest_coinex_funding_rates()

    async def get_database_stats(self) -> DatabaseStats:
        await self.initialize()
        return await self.store.get_coinex_stats()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def close(self) -> None:
        """Release the HTTP session and the database connection. Idempotent."""
        if self._closed:
            return
        self._closed = True

        try:
            await self.client.close()
        finally:
            await self.store.close()
