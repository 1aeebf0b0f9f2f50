"""Exchange adapters: CoinEx implementation."""

from perp_datafeed.adapters.exchanges.coinex import CoinexRestClient

__all__ = ["CoinexRestClient"]
