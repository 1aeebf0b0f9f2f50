"""
Shared helpers for SQLite store modules.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any


def _row_to_dict(row: Sequence[Any], description: Sequence[Sequence[Any]]) -> dict[str, Any]:
    """Zip a result row with cursor.description column names."""
    return {col[0]: row[idx] for idx, col in enumerate(description)}


def _utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()
