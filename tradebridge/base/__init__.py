"""
Shared building blocks for exchange adapters.

Components:
    - HttpTransport / RequestDescriptor: async request execution
    - MarketCache: session-scoped market and currency metadata
    - OrderCache: last known state of each order
    - precision: tick-size rounding helpers
    - fields: lossless field parsing helpers
"""

from tradebridge.base.markets import MarketCache
from tradebridge.base.orders import OrderCache
from tradebridge.base.transport import HttpTransport, RequestDescriptor

__all__ = [
    "HttpTransport",
    "MarketCache",
    "OrderCache",
    "RequestDescriptor",
]
