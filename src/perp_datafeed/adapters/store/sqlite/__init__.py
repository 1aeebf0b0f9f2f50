"""
SQLite perpetuals store package (facade).
"""

from __future__ import annotations

from perp_datafeed.adapters.store.sqlite.store import SQLitePerpetualsStore

__all__ = ["SQLitePerpetualsStore"]
