"""
Canonical Domain Models.

All market values use Decimal for precision.
These models are the single source of truth - raw API payloads are mapped to these.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from perp_datafeed.utils.decimals import optional_decimal, safe_decimal

# =============================================================================
# ENUMS
# =============================================================================

# CoinEx reports tradable markets with this status.
ACTIVE_MARKET_STATUS = "online"


class Exchange(str, Enum):
    """Supported exchanges."""

    COINEX = "COINEX"


class ContractType(str, Enum):
    """Perpetual contract margin type."""

    LINEAR = "linear"
    INVERSE = "inverse"

    @classmethod
    def parse(cls, value: Any) -> ContractType | str:
        """Parse a contract type; anything else is kept as the raw string."""
        raw = str(value or "").strip()
        try:
            return cls(raw)
        except ValueError:
            return raw


def contract_type_label(value: ContractType | str) -> str:
    """Display and storage form of a contract type."""
    return value.value if isinstance(value, ContractType) else str(value)


def _parse_leverage(value: Any) -> list[int]:
    """Leverage tiers arrive as a list (API) or a JSON string (DB)."""
    if value is None or value == "":
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return []
    if not isinstance(value, list | tuple):
        return []
    tiers = []
    for item in value:
        try:
            tiers.append(int(item))
        except (TypeError, ValueError):
            continue
    return tiers


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _parse_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


# =============================================================================
# MARKET DATA
# =============================================================================


@dataclass(frozen=True, slots=True)
class CoinexPerpetualContract:
    """
    CoinEx futures market metadata (`GET /v2/futures/market`).

    Fee rates are fractions (0.0003 = 0.03%).
    """

    market: str
    base_ccy: str
    quote_ccy: str
    contract_type: ContractType | str
    status: str = ACTIVE_MARKET_STATUS

    base_ccy_precision: int = 8
    quote_ccy_precision: int = 2
    min_amount: Decimal = Decimal("0")
    tick_size: Decimal = Decimal("0")

    maker_fee_rate: Decimal = Decimal("0")
    taker_fee_rate: Decimal = Decimal("0")
    leverage: list[int] = field(default_factory=list)

    is_copy_trading_available: bool = False
    is_market_available: bool = True
    open_interest_volume: Decimal = Decimal("0")

    @property
    def is_active(self) -> bool:
        return self.status == ACTIVE_MARKET_STATUS

    @property
    def max_leverage(self) -> int:
        return max(self.leverage) if self.leverage else 0

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> CoinexPerpetualContract:
        """Map one item of the market endpoint payload."""
        return cls(
            market=str(item["market"]),
            base_ccy=str(item.get("base_ccy") or ""),
            quote_ccy=str(item.get("quote_ccy") or ""),
            contract_type=ContractType.parse(item.get("contract_type")),
            status=str(item.get("status") or ""),
            base_ccy_precision=_parse_int(item.get("base_ccy_precision")) or 0,
            quote_ccy_precision=_parse_int(item.get("quote_ccy_precision")) or 0,
            min_amount=safe_decimal(item.get("min_amount")),
            tick_size=safe_decimal(item.get("tick_size")),
            maker_fee_rate=safe_decimal(item.get("maker_fee_rate")),
            taker_fee_rate=safe_decimal(item.get("taker_fee_rate")),
            leverage=_parse_leverage(item.get("leverage")),
            is_copy_trading_available=_parse_bool(item.get("is_copy_trading_available")),
            is_market_available=_parse_bool(item.get("is_market_available", True)),
            open_interest_volume=safe_decimal(item.get("open_interest_volume")),
        )

    def to_row(self) -> dict[str, Any]:
        """Flatten for SQLite storage (Decimals as TEXT, leverage as JSON)."""
        return {
            "market": self.market,
            "base_ccy": self.base_ccy,
            "quote_ccy": self.quote_ccy,
            "contract_type": contract_type_label(self.contract_type),
            "status": self.status,
            "base_ccy_precision": self.base_ccy_precision,
            "quote_ccy_precision": self.quote_ccy_precision,
            "min_amount": str(self.min_amount),
            "tick_size": str(self.tick_size),
            "maker_fee_rate": str(self.maker_fee_rate),
            "taker_fee_rate": str(self.taker_fee_rate),
            "leverage": json.dumps(self.leverage),
            "is_copy_trading_available": 1 if self.is_copy_trading_available else 0,
            "is_market_available": 1 if self.is_market_available else 0,
            "open_interest_volume": str(self.open_interest_volume),
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> CoinexPerpetualContract:
        """Rebuild from a `coinex_perpetuals` row."""
        return cls(
            market=row["market"],
            base_ccy=row["base_ccy"],
            quote_ccy=row["quote_ccy"],
            contract_type=ContractType.parse(row["contract_type"]),
            status=row["status"],
            base_ccy_precision=_parse_int(row.get("base_ccy_precision")) or 0,
            quote_ccy_precision=_parse_int(row.get("quote_ccy_precision")) or 0,
            min_amount=safe_decimal(row.get("min_amount")),
            tick_size=safe_decimal(row.get("tick_size")),
            maker_fee_rate=safe_decimal(row.get("maker_fee_rate")),
            taker_fee_rate=safe_decimal(row.get("taker_fee_rate")),
            leverage=_parse_leverage(row.get("leverage")),
            is_copy_trading_available=_parse_bool(row.get("is_copy_trading_available")),
            is_market_available=_parse_bool(row.get("is_market_available")),
            open_interest_volume=safe_decimal(row.get("open_interest_volume")),
        )


@dataclass(frozen=True, slots=True)
class CoinexFundingRate:
    """
    Funding rate snapshot (`GET /v2/futures/funding-rate`).

    Rates are fractions per funding interval (0.0001 = 0.01%).
    Funding times are Unix timestamps in milliseconds.
    """

    market: str
    latest_funding_rate: Decimal
    latest_funding_time: int | None = None
    next_funding_rate: Decimal | None = None
    next_funding_time: int | None = None
    max_funding_rate: Decimal | None = None
    min_funding_rate: Decimal | None = None
    mark_price: Decimal | None = None
    fetched_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def latest_rate_pct(self) -> Decimal:
        """Latest funding rate in percent."""
        return self.latest_funding_rate * 100

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> CoinexFundingRate:
        """Map one item of the funding-rate endpoint payload."""
        return cls(
            market=str(item["market"]),
            latest_funding_rate=safe_decimal(item.get("latest_funding_rate")),
            latest_funding_time=_parse_int(item.get("latest_funding_time")),
            next_funding_rate=optional_decimal(item.get("next_funding_rate")),
            next_funding_time=_parse_int(item.get("next_funding_time")),
            max_funding_rate=optional_decimal(item.get("max_funding_rate")),
            min_funding_rate=optional_decimal(item.get("min_funding_rate")),
            mark_price=optional_decimal(item.get("mark_price")),
        )

    def to_row(self) -> dict[str, Any]:
        def _text(value: Decimal | None) -> str | None:
            return None if value is None else str(value)

        return {
            "market": self.market,
            "latest_funding_rate": str(self.latest_funding_rate),
            "latest_funding_time": self.latest_funding_time,
            "next_funding_rate": _text(self.next_funding_rate),
            "next_funding_time": self.next_funding_time,
            "max_funding_rate": _text(self.max_funding_rate),
            "min_funding_rate": _text(self.min_funding_rate),
            "mark_price": _text(self.mark_price),
            "fetched_at": self.fetched_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> CoinexFundingRate:
        fetched_at = row.get("fetched_at")
        return cls(
            market=row["market"],
            latest_funding_rate=safe_decimal(row.get("latest_funding_rate")),
            latest_funding_time=_parse_int(row.get("latest_funding_time")),
            next_funding_rate=optional_decimal(row.get("next_funding_rate")),
            next_funding_time=_parse_int(row.get("next_funding_time")),
            max_funding_rate=optional_decimal(row.get("max_funding_rate")),
            min_funding_rate=optional_decimal(row.get("min_funding_rate")),
            mark_price=optional_decimal(row.get("mark_price")),
            fetched_at=datetime.fromisoformat(fetched_at) if fetched_at else datetime.now(UTC),
        )


@dataclass(frozen=True, slots=True)
class DatabaseStats:
    """Snapshot of the local CoinEx cache."""

    total_contracts: int
    active_contracts: int
    last_update: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_contracts": self.total_contracts,
            "active_contracts": self.active_contracts,
            "last_update": self.last_update,
        }
