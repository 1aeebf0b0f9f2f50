"""
Decimal helpers.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

# Funding rates are displayed as percent with this many decimals.
FUNDING_RATE_DISPLAY_PLACES = 4


def safe_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """Safely convert a value to Decimal.

    Returns default for None, empty strings, NaN, Infinity, and invalid values.
    """
    if value is None or value == "":
        return default
    if isinstance(value, Decimal):
        if value.is_nan() or value.is_infinite():
            return default
        return value
    try:
        result = Decimal(str(value))
        if result.is_nan() or result.is_infinite():
            return default
        return result
    except Exception:
        return default


def optional_decimal(value: Any) -> Decimal | None:
    """Like safe_decimal, but keeps "missing" distinguishable from zero."""
    if value is None or value == "":
        return None
    result = safe_decimal(value, default=Decimal("NaN"))
    return None if result.is_nan() else result


def format_rate_pct(rate: Decimal | float, places: int = FUNDING_RATE_DISPLAY_PLACES) -> str:
    """
    Format a fractional rate as a percent string.

    0.00015 -> "0.0150%", -0.002 -> "-0.2000%". Ties round away from zero,
    so 0.0000125 -> "0.0013%".
    """
    pct = (safe_decimal(rate) * 100).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    return f"{pct:.{places}f}%"
