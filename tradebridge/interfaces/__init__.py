"""
Abstract interfaces.

Interfaces:
    ExchangeAdapter: Contract for REST exchange adapters

Example:
    >>> from tradebridge.interfaces import ExchangeAdapter
"""

from tradebridge.interfaces.exchange_adapter import ExchangeAdapter

__all__: list[str] = [
    "ExchangeAdapter",
]
