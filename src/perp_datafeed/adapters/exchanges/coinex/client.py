"""
CoinEx REST Client.

Thin aiohttp wrapper around the public CoinEx v2 futures endpoints.
Returns raw response envelopes; domain mapping lives in the service layer.

API: https://docs.coinex.com/api/v2/futures/market/http/list-market
"""

from __future__ import annotations

from typing import Any

import aiohttp

from perp_datafeed.config.settings import Settings
from perp_datafeed.domain.errors import ExchangeError
from perp_datafeed.domain.models import Exchange
from perp_datafeed.observability.logging import LOG_TAG_FETCH, get_logger
from perp_datafeed.ports.exchange import PerpetualsMarketPort

logger = get_logger(__name__)

MARKETS_PATH = "/v2/futures/market"
FUNDING_RATES_PATH = "/v2/futures/funding-rate"


class CoinexRestClient(PerpetualsMarketPort):
    """
    Public CoinEx futures REST client.

    The HTTP session is created lazily on first request. A session passed in by
    the caller is borrowed: `close()` leaves it open.
    """

    def __init__(self, settings: Settings, session: aiohttp.ClientSession | None = None):
        self.settings = settings
        self.base_url = settings.coinex.base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None

    @property
    def exchange(self) -> Exchange:
        return Exchange.COINEX

    async def get_markets(self) -> dict[str, Any]:
        return await self._get(MARKETS_PATH)

    async def get_funding_rates(self) -> dict[str, Any]:
        return await self._get(FUNDING_RATES_PATH)

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
            logger.debug("CoinEx HTTP session closed")
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            cfg = self.settings.coinex
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(
                    total=float(cfg.request_timeout_seconds),
                    connect=float(cfg.connect_timeout_seconds),
                ),
                headers={"User-Agent": cfg.user_agent, "Accept": "application/json"},
            )
            self._owns_session = True
        return self._session

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        GET a CoinEx endpoint and return the decoded JSON envelope.

        Raises:
            ExchangeError: transport failure, HTTP error status or non-JSON body.
                For HTTP errors the exchange's own `message` is used when present.
        """
        url = f"{self.base_url}{path}"
        session = self._get_session()

        logger.debug(f"{LOG_TAG_FETCH} GET {url}")
        try:
            async with session.get(url, params=params) as response:
                try:
                    payload = await response.json(content_type=None)
                except (aiohttp.ContentTypeError, ValueError):
                    payload = None

                if response.status >= 400:
                    message = payload.get("message") if isinstance(payload, dict) else None
                    raise ExchangeError(
                        message or f"HTTP {response.status}",
                        exchange=Exchange.COINEX.value,
                        details={"status": response.status, "endpoint": path},
                    )
        except (TimeoutError, aiohttp.ClientError) as e:
            raise ExchangeError(
                str(e) or type(e).__name__,
                exchange=Exchange.COINEX.value,
                details={"endpoint": path},
            ) from e

        if not isinstance(payload, dict):
            raise ExchangeError(
                f"Malformed response from {path}: expected a JSON object",
                exchange=Exchange.COINEX.value,
                details={"endpoint": path},
            )

        return payload
