"""
Rich renderers for cached CoinEx data.
"""

from __future__ import annotations

from collections.abc import Iterable

from rich import box
from rich.table import Table

from perp_datafeed.domain.models import CoinexPerpetualContract, DatabaseStats, contract_type_label
from perp_datafeed.utils.decimals import format_rate_pct


def build_contracts_table(contracts: Iterable[CoinexPerpetualContract], *, title: str | None = None) -> Table:
    t = Table(box=box.SIMPLE_HEAVY, expand=True, title=title)
    t.add_column("Market", style="bold")
    t.add_column("Pair")
    t.add_column("Type")
    t.add_column("Status")
    t.add_column("Maker", justify="right")
    t.add_column("Taker", justify="right")
    t.add_column("Max Lev", justify="right")
    t.add_column("Min Amount", justify="right")

    for c in contracts:
        status_style = "green" if c.is_active else "yellow"
        t.add_row(
            c.market,
            f"{c.base_ccy}/{c.quote_ccy}",
            contract_type_label(c.contract_type),
            f"[{status_style}]{c.status}[/{status_style}]",
            format_rate_pct(c.maker_fee_rate),
            format_rate_pct(c.taker_fee_rate),
            f"{c.max_leverage}x" if c.max_leverage else "-",
            str(c.min_amount),
        )
    return t


def build_stats_table(stats: DatabaseStats) -> Table:
    t = Table(box=box.MINIMAL, show_header=False, title="CoinEx cache")
    t.add_column("Key", style="bold")
    t.add_column("Value", justify="right")
    t.add_row("Total contracts", str(stats.total_contracts))
    t.add_row("Active contracts", str(stats.active_contracts))
    t.add_row("Last update", stats.last_update or "never")
    return t
