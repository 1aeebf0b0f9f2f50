"""
CoinEx fetch-and-report.

Fetches all perpetual contracts and funding rates from CoinEx, stores them in
the local cache and prints a short summary with a few samples.

Usage:
    python -m perp_datafeed.app.fetch_coinex
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Callable

from perp_datafeed.domain.models import contract_type_label
from perp_datafeed.services.perpetuals import CoinexPerpetualsFetcher
from perp_datafeed.utils.decimals import format_rate_pct

SAMPLE_SIZE = 5


async def run_fetch_coinex(
    fetcher_factory: Callable[[], CoinexPerpetualsFetcher] = CoinexPerpetualsFetcher,
) -> None:
    """Fetch CoinEx data, print stats and samples. Errors are reported, not raised."""
    print("🚀 Starting CoinEx perpetuals fetcher...")

    async with fetcher_factory() as fetcher:
        try:
            print("📊 Fetching all perpetual contracts...")
            perpetuals = await fetcher.fetch_all_perpetuals()
            print(f"✅ Fetched {len(perpetuals)} perpetual contracts")

            print("💰 Fetching all funding rates...")
            funding_rates = await fetcher.fetch_all_funding_rates()
            print(f"✅ Fetched {len(funding_rates)} funding rates")

            stats = await fetcher.get_database_stats()
            print("\n📈 Database Statistics:")
            print(f"Total contracts: {stats.total_contracts}")
            print(f"Active contracts: {stats.active_contracts}")
            print(f"Last update: {stats.last_update}")

            print("\n🔍 Sample perpetual contracts:")
            for contract in perpetuals[:SAMPLE_SIZE]:
                contract_type = contract_type_label(contract.contract_type)
                print(f"- {contract.market}: {contract.base_ccy}/{contract.quote_ccy} ({contract_type})")

            print("\n💸 Sample funding rates:")
            for rate in funding_rates[:SAMPLE_SIZE]:
                print(f"- {rate.market}: {format_rate_pct(rate.latest_funding_rate)}")
        except Exception as e:
            print(f"❌ Error: {e}", file=sys.stderr)


def main() -> None:
    asyncio.run(run_fetch_coinex())


if __name__ == "__main__":
    main()
