"""
Shared fixtures for perp_datafeed tests.

Everything here is offline: settings point at a temporary SQLite file and
exchange payloads are canned CoinEx v2 envelopes.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from perp_datafeed.adapters.store.sqlite import SQLitePerpetualsStore
from perp_datafeed.config.settings import Settings, get_settings
from perp_datafeed.domain.models import Exchange


@pytest.fixture(autouse=True)
def _clear_settings_cache(monkeypatch):
    """Keep tests independent of the developer's environment and of each other."""
    for var in ("COINEX_BASE_URL", "FEED_DATABASE_PATH", "FEED_LOG_LEVEL", "FEED_ENV"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path):
    """Settings backed by a throwaway database and log directory."""
    return Settings(
        database={"path": str(tmp_path / "data" / "coinex_perpetuals.db")},
        logging={"file_enabled": False, "log_dir": str(tmp_path / "logs")},
    )


@pytest.fixture
async def store(settings):
    """Initialized SQLite store on a temporary file."""
    s = SQLitePerpetualsStore(settings)
    await s.initialize()
    yield s
    await s.close()


@pytest.fixture
def markets_payload():
    """`GET /v2/futures/market` response."""
    return {
        "code": 0,
        "message": "OK",
        "data": [
            {
                "market": "BTCUSDT",
                "base_ccy": "BTC",
                "quote_ccy": "USDT",
                "contract_type": "linear",
                "status": "online",
                "base_ccy_precision": 8,
                "quote_ccy_precision": 2,
                "min_amount": "0.0001",
                "tick_size": "0.1",
                "maker_fee_rate": "0.0003",
                "taker_fee_rate": "0.0005",
                "leverage": [1, 2, 3, 5, 8, 10, 15, 20, 30, 50, 100],
                "is_copy_trading_available": True,
                "is_market_available": True,
                "open_interest_volume": "1234.5678",
            },
            {
                "market": "ETHUSDT",
                "base_ccy": "ETH",
                "quote_ccy": "USDT",
                "contract_type": "linear",
                "status": "online",
                "base_ccy_precision": 8,
                "quote_ccy_precision": 2,
                "min_amount": "0.005",
                "tick_size": "0.01",
                "maker_fee_rate": "0.0003",
                "taker_fee_rate": "0.0005",
                "leverage": [1, 2, 3, 5, 10, 20, 50],
                "is_copy_trading_available": False,
                "is_market_available": True,
                "open_interest_volume": "98765.4",
            },
            {
                "market": "BTCUSD",
                "base_ccy": "BTC",
                "quote_ccy": "USD",
                "contract_type": "inverse",
                "status": "offline",
                "base_ccy_precision": 8,
                "quote_ccy_precision": 2,
                "min_amount": "1",
                "tick_size": "0.5",
                "maker_fee_rate": "0.0003",
                "taker_fee_rate": "0.0005",
                "leverage": [1, 2, 3],
                "is_copy_trading_available": False,
                "is_market_available": False,
                "open_interest_volume": "0",
            },
        ],
    }


@pytest.fixture
def funding_payload():
    """`GET /v2/futures/funding-rate` response."""
    return {
        "code": 0,
        "message": "OK",
        "data": [
            {
                "market": "BTCUSDT",
                "mark_price": "67123.45",
                "latest_funding_rate": "0.00015",
                "latest_funding_time": 1718265600000,
                "next_funding_rate": "0.0001",
                "next_funding_time": 1718294400000,
                "max_funding_rate": "0.00375",
                "min_funding_rate": "-0.00375",
            },
            {
                "market": "ETHUSDT",
                "mark_price": "3456.78",
                "latest_funding_rate": "-0.002",
                "latest_funding_time": 1718265600000,
                "next_funding_rate": "",
                "next_funding_time": 1718294400000,
                "max_funding_rate": "0.00375",
                "min_funding_rate": "-0.00375",
            },
        ],
    }


@pytest.fixture
def mock_client(markets_payload, funding_payload):
    """Mock CoinexRestClient returning the canned envelopes."""
    client = MagicMock()
    client.exchange = Exchange.COINEX
    client.get_markets = AsyncMock(return_value=markets_payload)
    client.get_funding_rates = AsyncMock(return_value=funding_payload)
    client.close = AsyncMock()
    return client
