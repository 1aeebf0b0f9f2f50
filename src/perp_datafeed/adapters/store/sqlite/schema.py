"""
SQLite schema for the CoinEx cache.

Decimal values are stored as TEXT to keep exchange precision intact.
"""

from __future__ import annotations

SCHEMA_VERSION = 1

# Metadata keys
META_SCHEMA_VERSION = "schema_version"
META_PERPETUALS_LAST_UPDATE = "coinex_perpetuals_last_update"
META_PERPETUALS_COUNT = "coinex_perpetuals_count"
META_FUNDING_RATES_LAST_UPDATE = "coinex_funding_rates_last_update"

SCHEMA_SQL = """
-- CoinEx perpetual contracts (one row per market, upserted on every fetch)
CREATE TABLE IF NOT EXISTS coinex_perpetuals (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    market TEXT NOT NULL UNIQUE,
    base_ccy TEXT NOT NULL,
    quote_ccy TEXT NOT NULL,
    contract_type TEXT NOT NULL,
    status TEXT NOT NULL,
    base_ccy_precision INTEGER,
    quote_ccy_precision INTEGER,
    min_amount TEXT,
    tick_size TEXT,
    maker_fee_rate TEXT,
    taker_fee_rate TEXT,
    leverage TEXT DEFAULT '[]',
    is_copy_trading_available INTEGER DEFAULT 0,
    is_market_available INTEGER DEFAULT 1,
    open_interest_volume TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_coinex_perpetuals_base_ccy ON coinex_perpetuals(base_ccy);
CREATE INDEX IF NOT EXISTS idx_coinex_perpetuals_quote_ccy ON coinex_perpetuals(quote_ccy);
CREATE INDEX IF NOT EXISTS idx_coinex_perpetuals_status ON coinex_perpetuals(status);

-- CoinEx funding rate snapshots (append-only)
CREATE TABLE IF NOT EXISTS coinex_funding_rates (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    market TEXT NOT NULL,
    latest_funding_rate TEXT NOT NULL,
    latest_funding_time INTEGER,
    next_funding_rate TEXT,
    next_funding_time INTEGER,
    max_funding_rate TEXT,
    min_funding_rate TEXT,
    mark_price TEXT,
    fetched_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_coinex_funding_market ON coinex_funding_rates(market);
CREATE INDEX IF NOT EXISTS idx_coinex_funding_fetched ON coinex_funding_rates(fetched_at);

-- Key/value metadata (last update times, counts)
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""
