"""
CoinEx funding rate snapshots.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from perp_datafeed.adapters.store.sqlite.utils import _row_to_dict
from perp_datafeed.domain.models import CoinexFundingRate
from perp_datafeed.observability.logging import LOG_TAG_STORE, get_logger

if TYPE_CHECKING:
    from perp_datafeed.adapters.store.sqlite.store import SQLitePerpetualsStore

logger = get_logger(__name__)

_INSERT_SQL = """
    INSERT INTO coinex_funding_rates (
        market, latest_funding_rate, latest_funding_time,
        next_funding_rate, next_funding_time,
        max_funding_rate, min_funding_rate, mark_price, fetched_at
    ) VALUES (
        :market, :latest_funding_rate, :latest_funding_time,
        :next_funding_rate, :next_funding_time,
        :max_funding_rate, :min_funding_rate, :mark_price, :fetched_at
    )
"""


async def insert_coinex_funding_rates(
    self: SQLitePerpetualsStore,
    rates: list[CoinexFundingRate],
) -> int:
    """Append a batch of funding snapshots in one transaction."""
    conn = self._require_conn()
    if not rates:
        return 0

    rows = [rate.to_row() for rate in rates]
    async with self._write_lock:
        try:
            await conn.executemany(_INSERT_SQL, rows)
            await conn.commit()
        except Exception:
            await conn.rollback()
            raise

    logger.info(f"{LOG_TAG_STORE} Stored {len(rows)} CoinEx funding rate snapshots")
    return len(rows)


async def get_latest_coinex_funding_rates(self: SQLitePerpetualsStore) -> list[CoinexFundingRate]:
    """Newest snapshot per market (highest id wins on equal fetched_at)."""
    conn = self._require_conn()
    cursor = await conn.execute(
        """
        SELECT f.* FROM coinex_funding_rates f
        JOIN (
            SELECT market, MAX(id) AS max_id FROM coinex_funding_rates GROUP BY market
        ) latest ON latest.max_id = f.id
        ORDER BY f.market
        """
    )
    rows = await cursor.fetchall()
    return [CoinexFundingRate.from_row(_row_to_dict(row, cursor.description)) for row in rows]
