"""
Metadata and stats helpers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from perp_datafeed.adapters.store.sqlite.schema import META_PERPETUALS_LAST_UPDATE
from perp_datafeed.adapters.store.sqlite.utils import _utc_now_iso
from perp_datafeed.domain.models import ACTIVE_MARKET_STATUS, DatabaseStats

if TYPE_CHECKING:
    from perp_datafeed.adapters.store.sqlite.store import SQLitePerpetualsStore


async def update_metadata(self: SQLitePerpetualsStore, key: str, value: str) -> None:
    conn = self._require_conn()
    async with self._write_lock:
        await conn.execute(
            """
            INSERT INTO metadata (key, value, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
            """,
            (key, value, _utc_now_iso()),
        )
        await conn.commit()


async def get_metadata(self: SQLitePerpetualsStore, key: str) -> str | None:
    conn = self._require_conn()
    cursor = await conn.execute("SELECT value FROM metadata WHERE key = ?", (key,))
    row = await cursor.fetchone()
    return row[0] if row else None


async def get_coinex_stats(self: SQLitePerpetualsStore) -> DatabaseStats:
    """Contract counts plus the last successful contracts fetch time."""
    conn = self._require_conn()
    cursor = await conn.execute(
        """
        SELECT
            COUNT(*) AS total_contracts,
            COALESCE(SUM(CASE WHEN status = ? THEN 1 ELSE 0 END), 0) AS active_contracts
        FROM coinex_perpetuals
        """,
        (ACTIVE_MARKET_STATUS,),
    )
    row = await cursor.fetchone()
    last_update = await self.get_metadata(META_PERPETUALS_LAST_UPDATE)

    return DatabaseStats(
        total_contracts=int(row[0] or 0) if row else 0,
        active_contracts=int(row[1] or 0) if row else 0,
        last_update=last_update,
    )
