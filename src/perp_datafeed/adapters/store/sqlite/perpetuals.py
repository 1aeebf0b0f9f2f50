"""
CoinEx perpetual contract CRUD.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from perp_datafeed.adapters.store.sqlite.schema import META_PERPETUALS_COUNT
from perp_datafeed.adapters.store.sqlite.utils import _row_to_dict, _utc_now_iso
from perp_datafeed.domain.models import ACTIVE_MARKET_STATUS, CoinexPerpetualContract
from perp_datafeed.observability.logging import LOG_TAG_STORE, get_logger

if TYPE_CHECKING:
    from perp_datafeed.adapters.store.sqlite.store import SQLitePerpetualsStore

logger = get_logger(__name__)

_UPSERT_SQL = """
    INSERT INTO coinex_perpetuals (
        market, base_ccy, quote_ccy, contract_type, status,
        base_ccy_precision, quote_ccy_precision, min_amount, tick_size,
        maker_fee_rate, taker_fee_rate, leverage,
        is_copy_trading_available, is_market_available, open_interest_volume,
        created_at, updated_at
    ) VALUES (
        :market, :base_ccy, :quote_ccy, :contract_type, :status,
        :base_ccy_precision, :quote_ccy_precision, :min_amount, :tick_size,
        :maker_fee_rate, :taker_fee_rate, :leverage,
        :is_copy_trading_available, :is_market_available, :open_interest_volume,
        :now, :now
    )
    ON CONFLICT(market) DO UPDATE SET
        base_ccy = excluded.base_ccy,
        quote_ccy = excluded.quote_ccy,
        contract_type = excluded.contract_type,
        status = excluded.status,
        base_ccy_precision = excluded.base_ccy_precision,
        quote_ccy_precision = excluded.quote_ccy_precision,
        min_amount = excluded.min_amount,
        tick_size = excluded.tick_size,
        maker_fee_rate = excluded.maker_fee_rate,
        taker_fee_rate = excluded.taker_fee_rate,
        leverage = excluded.leverage,
        is_copy_trading_available = excluded.is_copy_trading_available,
        is_market_available = excluded.is_market_available,
        open_interest_volume = excluded.open_interest_volume,
        updated_at = excluded.updated_at
"""


async def upsert_coinex_perpetuals(
    self: SQLitePerpetualsStore,
    contracts: list[CoinexPerpetualContract],
) -> int:
    """Insert or update contracts in one transaction. created_at survives updates."""
    conn = self._require_conn()
    if not contracts:
        return 0

    now = _utc_now_iso()
    rows = [{**contract.to_row(), "now": now} for contract in contracts]

    async with self._write_lock:
        try:
            await conn.executemany(_UPSERT_SQL, rows)
            await conn.commit()
        except Exception:
            await conn.rollback()
            raise

    logger.info(f"{LOG_TAG_STORE} Upserted {len(rows)} CoinEx perpetual contracts")
    return len(rows)


async def get_all_coinex_perpetuals(self: SQLitePerpetualsStore) -> list[CoinexPerpetualContract]:
    conn = self._require_conn()
    cursor = await conn.execute("SELECT * FROM coinex_perpetuals ORDER BY market")
    rows = await cursor.fetchall()
    return [CoinexPerpetualContract.from_row(_row_to_dict(row, cursor.description)) for row in rows]


async def get_active_coinex_perpetuals(self: SQLitePerpetualsStore) -> list[CoinexPerpetualContract]:
    conn = self._require_conn()
    cursor = await conn.execute(
        "SELECT * FROM coinex_perpetuals WHERE status = ? ORDER BY market",
        (ACTIVE_MARKET_STATUS,),
    )
    rows = await cursor.fetchall()
    return [CoinexPerpetualContract.from_row(_row_to_dict(row, cursor.description)) for row in rows]


async def get_coinex_perpetual_by_market(
    self: SQLitePerpetualsStore,
    market: str,
) -> CoinexPerpetualContract | None:
    conn = self._require_conn()
    cursor = await conn.execute("SELECT * FROM coinex_perpetuals WHERE market = ?", (market,))
    row = await cursor.fetchone()
    if row is None:
        return None
    return CoinexPerpetualContract.from_row(_row_to_dict(row, cursor.description))


async def clear_coinex_perpetuals(self: SQLitePerpetualsStore) -> None:
    """Delete all contracts and reset the stored count."""
    conn = self._require_conn()
    async with self._write_lock:
        await conn.execute("DELETE FROM coinex_perpetuals")
        await conn.commit()
    await self.update_metadata(META_PERPETUALS_COUNT, "0")
    logger.info(f"{LOG_TAG_STORE} Cleared CoinEx perpetual contracts")
