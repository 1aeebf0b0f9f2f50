"""
SQLite Perpetuals Store Implementation.

Features:
- WAL mode for concurrent reads
- Idempotent schema creation
- Decimal precision preserved as TEXT
- Batched, transactional writes
"""

from __future__ import annotations

import asyncio
import sqlite3
from pathlib import Path

import aiosqlite

from perp_datafeed.adapters.store.sqlite.funding import (
    get_latest_coinex_funding_rates,
    insert_coinex_funding_rates,
)
from perp_datafeed.adapters.store.sqlite.perpetuals import (
    clear_coinex_perpetuals,
    get_active_coinex_perpetuals,
    get_all_coinex_perpetuals,
    get_coinex_perpetual_by_market,
    upsert_coinex_perpetuals,
)
from perp_datafeed.adapters.store.sqlite.schema import META_SCHEMA_VERSION, SCHEMA_SQL, SCHEMA_VERSION
from perp_datafeed.adapters.store.sqlite.stats import get_coinex_stats, get_metadata, update_metadata
from perp_datafeed.config.settings import Settings
from perp_datafeed.domain.errors import StoreError, StoreNotInitializedError
from perp_datafeed.observability.logging import get_logger
from perp_datafeed.ports.store import PerpetualsStorePort

logger = get_logger(__name__)

IN_MEMORY_PATH = ":memory:"


class SQLitePerpetualsStore(PerpetualsStorePort):
    """
    SQLite-backed cache of CoinEx contracts, funding snapshots and metadata.

    All writes go through one connection guarded by `_write_lock`.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.db_path = settings.database.path
        self._conn: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Open the database and create the schema."""
        if self._initialized:
            return

        logger.info(f"Initializing SQLite store: {self.db_path}")

        try:
            if self.db_path != IN_MEMORY_PATH:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

            self._conn = await aiosqlite.connect(self.db_path)

            if self.settings.database.wal_mode and self.db_path != IN_MEMORY_PATH:
                await self._conn.execute("PRAGMA journal_mode=WAL")
                await self._conn.execute("PRAGMA synchronous=NORMAL")

            await self._conn.execute(f"PRAGMA busy_timeout={int(self.settings.database.busy_timeout_ms)}")

            await self._conn.executescript(SCHEMA_SQL)
            await self._conn.commit()
        except (sqlite3.Error, OSError) as e:
            if self._conn is not None:
                await self._conn.close()
                self._conn = None
            raise StoreError(f"Failed to open database {self.db_path}: {e}") from e

        self._initialized = True
        await self.update_metadata(META_SCHEMA_VERSION, str(SCHEMA_VERSION))
        logger.info("SQLite store initialized")

    async def close(self) -> None:
        """Close database connection. Safe to call more than once."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite store closed")
        self._initialized = False

    def _require_conn(self) -> aiosqlite.Connection:
        if self._conn is None or not self._initialized:
            raise StoreNotInitializedError("SQLite store is not initialized")
        return self._conn

    upsert_coinex_perpetuals = upsert_coinex_perpetuals
    get_all_coinex_perpetuals = get_all_coinex_perpetuals
    get_active_coinex_perpetuals = get_active_coinex_perpetuals
    get_coinex_perpetual_by_market = get_coinex_perpetual_by_market
    clear_coinex_perpetuals = clear_coinex_perpetuals

    insert_coinex_funding_rates = insert_coinex_funding_rates
    get_latest_coinex_funding_rates = get_latest_coinex_funding_rates

    update_metadata = update_metadata
    get_metadata = get_metadata
    get_coinex_stats = get_coinex_stats
