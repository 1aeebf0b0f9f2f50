"""Shared utility helpers."""

from perp_datafeed.utils.decimals import format_rate_pct, optional_decimal, safe_decimal

__all__ = ["safe_decimal", "optional_decimal", "format_rate_pct"]
