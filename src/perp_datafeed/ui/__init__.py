"""
UI components for the datafeed CLI.
"""

from perp_datafeed.ui.tables import build_contracts_table, build_stats_table

__all__ = [
    "build_contracts_table",
    "build_stats_table",
]
