"""
Adapters: Concrete implementations of ports.

This layer contains all external integrations:
- Exchange adapters (CoinEx REST)
- Storage adapters (SQLite)
"""
