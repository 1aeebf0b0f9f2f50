"""
Domain Layer: Pure business logic with no external dependencies.

Contains:
- Models (contracts, funding rates, cache stats)
- Errors (domain error taxonomy)
"""

from perp_datafeed.domain.errors import (
    ApiResponseError,
    DomainError,
    ExchangeError,
    StoreError,
    StoreNotInitializedError,
    ValidationError,
)
from perp_datafeed.domain.models import (
    ACTIVE_MARKET_STATUS,
    CoinexFundingRate,
    CoinexPerpetualContract,
    ContractType,
    DatabaseStats,
    Exchange,
)

__all__ = [
    # Models
    "ACTIVE_MARKET_STATUS",
    "CoinexFundingRate",
    "CoinexPerpetualContract",
    "ContractType",
    "DatabaseStats",
    "Exchange",
    # Errors
    "ApiResponseError",
    "DomainError",
    "ExchangeError",
    "StoreError",
    "StoreNotInitializedError",
    "ValidationError",
]
