"""Application services."""

from perp_datafeed.services.perpetuals import CoinexPerpetualsFetcher

__all__ = ["CoinexPerpetualsFetcher"]
