"""
Ports: Abstract interfaces for external dependencies.

This follows the Ports & Adapters (Hexagonal) architecture pattern.
Business logic depends only on these interfaces, not on concrete implementations.
"""

from perp_datafeed.ports.exchange import PerpetualsMarketPort
from perp_datafeed.ports.store import PerpetualsStorePort

__all__ = ["PerpetualsMarketPort", "PerpetualsStorePort"]
