"""
Unit Tests: SQLitePerpetualsStore

Runs against a real SQLite file in tmp_path (plus one in-memory case).
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from perp_datafeed.adapters.store.sqlite import SQLitePerpetualsStore
from perp_datafeed.adapters.store.sqlite.schema import (
    META_PERPETUALS_COUNT,
    META_PERPETUALS_LAST_UPDATE,
    META_SCHEMA_VERSION,
    SCHEMA_VERSION,
)
from perp_datafeed.domain.errors import StoreError, StoreNotInitializedError
from perp_datafeed.domain.models import CoinexFundingRate, CoinexPerpetualContract, ContractType


def _contract(market: str, status: str = "online", **overrides) -> CoinexPerpetualContract:
    base = market.removesuffix("USDT")
    fields = {
        "market": market,
        "base_ccy": base,
        "quote_ccy": "USDT",
        "contract_type": ContractType.LINEAR,
        "status": status,
        "min_amount": Decimal("0.001"),
        "tick_size": Decimal("0.01"),
        "maker_fee_rate": Decimal("0.0003"),
        "taker_fee_rate": Decimal("0.0005"),
        "leverage": [1, 5, 10, 20],
    }
    fields.update(overrides)
    return CoinexPerpetualContract(**fields)


@pytest.mark.asyncio
class TestStoreLifecycle:
    """initialize()/close() behaviour."""

    async def test_initialize_creates_parent_dir_and_schema(self, settings, tmp_path):
        store = SQLitePerpetualsStore(settings)

        await store.initialize()
        try:
            assert (tmp_path / "data" / "coinex_perpetuals.db").exists()
            assert await store.get_metadata(META_SCHEMA_VERSION) == str(SCHEMA_VERSION)
        finally:
            await store.close()

    async def test_initialize_is_idempotent(self, store):
        await store.upsert_coinex_perpetuals([_contract("BTCUSDT")])

        await store.initialize()

        assert len(await store.get_all_coinex_perpetuals()) == 1

    async def test_data_survives_reopen(self, settings):
        first = SQLitePerpetualsStore(settings)
        await first.initialize()
        await first.upsert_coinex_perpetuals([_contract("BTCUSDT")])
        await first.close()

        second = SQLitePerpetualsStore(settings)
        await second.initialize()
        try:
            assert (await second.get_coinex_perpetual_by_market("BTCUSDT")) is not None
        finally:
            await second.close()

    async def test_in_memory_database(self, settings):
        settings.database.path = ":memory:"
        store = SQLitePerpetualsStore(settings)
        await store.initialize()
        try:
            await store.upsert_coinex_perpetuals([_contract("BTCUSDT")])
            assert len(await store.get_all_coinex_perpetuals()) == 1
        finally:
            await store.close()

    async def test_use_before_initialize_raises(self, settings):
        store = SQLitePerpetualsStore(settings)

        with pytest.raises(StoreNotInitializedError):
            await store.get_all_coinex_perpetuals()

    async def test_use_after_close_raises(self, store):
        await store.close()

        with pytest.raises(StoreNotInitializedError):
            await store.get_coinex_stats()

    async def test_close_twice(self, store):
        await store.close()
        await store.close()

        assert not store.is_initialized

    async def test_unopenable_path_raises_store_error(self, settings, tmp_path):
        # A directory where the database file should be
        db_dir = tmp_path / "is_a_dir.db"
        db_dir.mkdir()
        settings.database.path = str(db_dir)
        store = SQLitePerpetualsStore(settings)

        with pytest.raises(StoreError):
            await store.initialize()

        assert not store.is_initialized

    async def test_parent_is_a_file_raises_store_error(self, settings, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        settings.database.path = str(blocker / "coinex_perpetuals.db")
        store = SQLitePerpetualsStore(settings)

        with pytest.raises(StoreError, match="Failed to open database") as exc_info:
            await store.initialize()

        assert isinstance(exc_info.value.__cause__, OSError)
        assert not store.is_initialized


@pytest.mark.asyncio
class TestPerpetualContracts:
    """Contract upsert and lookups."""

    async def test_upsert_and_read_ordered(self, store):
        written = await store.upsert_coinex_perpetuals(
            [_contract("ETHUSDT"), _contract("BTCUSDT"), _contract("ADAUSDT")]
        )

        assert written == 3
        assert [c.market for c in await store.get_all_coinex_perpetuals()] == ["ADAUSDT", "BTCUSDT", "ETHUSDT"]

    async def test_upsert_empty_list(self, store):
        assert await store.upsert_coinex_perpetuals([]) == 0

    async def test_upsert_replaces_by_market(self, store):
        await store.upsert_coinex_perpetuals([_contract("BTCUSDT", status="online")])
        await store.upsert_coinex_perpetuals(
            [_contract("BTCUSDT", status="offline", taker_fee_rate=Decimal("0.0007"))]
        )

        all_contracts = await store.get_all_coinex_perpetuals()
        assert len(all_contracts) == 1
        assert all_contracts[0].status == "offline"
        assert all_contracts[0].taker_fee_rate == Decimal("0.0007")

    async def test_round_trip_preserves_fields(self, store):
        original = _contract(
            "BTCUSDT",
            min_amount=Decimal("0.00000001"),
            open_interest_volume=Decimal("123456.78901234"),
            is_copy_trading_available=True,
            is_market_available=False,
            base_ccy_precision=8,
            quote_ccy_precision=2,
        )
        await store.upsert_coinex_perpetuals([original])

        loaded = await store.get_coinex_perpetual_by_market("BTCUSDT")

        assert loaded == original

    async def test_unknown_contract_type_kept(self, store):
        await store.upsert_coinex_perpetuals([_contract("XYZUSDT", contract_type="quanto")])

        loaded = await store.get_coinex_perpetual_by_market("XYZUSDT")

        assert loaded.contract_type == "quanto"

    async def test_active_filter(self, store):
        await store.upsert_coinex_perpetuals(
            [
                _contract("BTCUSDT"),
                _contract("LUNAUSDT", status="offline"),
                _contract("ETHUSDT"),
                _contract("NEWUSDT", status="pending"),
            ]
        )

        active = await store.get_active_coinex_perpetuals()

        assert [c.market for c in active] == ["BTCUSDT", "ETHUSDT"]
        assert all(c.is_active for c in active)

    async def test_missing_market(self, store):
        assert await store.get_coinex_perpetual_by_market("NOPEUSDT") is None

    async def test_clear_resets_count(self, store):
        await store.upsert_coinex_perpetuals([_contract("BTCUSDT"), _contract("ETHUSDT")])
        await store.update_metadata(META_PERPETUALS_COUNT, "2")

        await store.clear_coinex_perpetuals()

        assert await store.get_all_coinex_perpetuals() == []
        assert await store.get_metadata(META_PERPETUALS_COUNT) == "0"


@pytest.mark.asyncio
class TestFundingRates:
    """Append-only funding snapshots."""

    async def test_latest_snapshot_per_market(self, store):
        await store.insert_coinex_funding_rates(
            [
                CoinexFundingRate(market="BTCUSDT", latest_funding_rate=Decimal("0.0001")),
                CoinexFundingRate(market="ETHUSDT", latest_funding_rate=Decimal("-0.0002")),
            ]
        )
        await store.insert_coinex_funding_rates(
            [CoinexFundingRate(market="BTCUSDT", latest_funding_rate=Decimal("0.00025"))]
        )

        latest = {r.market: r for r in await store.get_latest_coinex_funding_rates()}

        assert set(latest) == {"BTCUSDT", "ETHUSDT"}
        assert latest["BTCUSDT"].latest_funding_rate == Decimal("0.00025")
        assert latest["ETHUSDT"].latest_funding_rate == Decimal("-0.0002")

    async def test_optional_fields_stay_none(self, store):
        await store.insert_coinex_funding_rates(
            [
                CoinexFundingRate(
                    market="BTCUSDT",
                    latest_funding_rate=Decimal("0.0001"),
                    latest_funding_time=1718265600000,
                    mark_price=Decimal("67000.5"),
                )
            ]
        )

        (rate,) = await store.get_latest_coinex_funding_rates()

        assert rate.latest_funding_time == 1718265600000
        assert rate.mark_price == Decimal("67000.5")
        assert rate.next_funding_rate is None
        assert rate.next_funding_time is None

    async def test_insert_empty(self, store):
        assert await store.insert_coinex_funding_rates([]) == 0
        assert await store.get_latest_coinex_funding_rates() == []


@pytest.mark.asyncio
class TestMetadataAndStats:
    """Key/value metadata and the stats snapshot."""

    async def test_metadata_upsert(self, store):
        assert await store.get_metadata("missing") is None

        await store.update_metadata("k", "v1")
        await store.update_metadata("k", "v2")

        assert await store.get_metadata("k") == "v2"

    async def test_stats_empty(self, store):
        stats = await store.get_coinex_stats()

        assert stats.total_contracts == 0
        assert stats.active_contracts == 0
        assert stats.last_update is None

    async def test_stats_counts_and_last_update(self, store):
        await store.upsert_coinex_perpetuals(
            [_contract("BTCUSDT"), _contract("ETHUSDT"), _contract("LUNAUSDT", status="offline")]
        )
        await store.update_metadata(META_PERPETUALS_LAST_UPDATE, "2024-06-13T08:00:00+00:00")

        stats = await store.get_coinex_stats()

        assert stats.to_dict() == {
            "total_contracts": 3,
            "active_contracts": 2,
            "last_update": "2024-06-13T08:00:00+00:00",
        }
