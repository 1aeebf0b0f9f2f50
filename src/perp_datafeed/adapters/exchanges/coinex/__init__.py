"""CoinEx public futures REST adapter."""

from perp_datafeed.adapters.exchanges.coinex.client import CoinexRestClient

__all__ = ["CoinexRestClient"]
