"""
Exchange adapters.

Each adapter implements the ExchangeAdapter interface on top of the shared
transport, market cache and order cache in tradebridge.base.

Supported Exchanges:
    - HitBTC (REST API v2)
"""

from tradebridge.adapters.hitbtc import HitBTCAdapter

__all__: list[str] = [
    "HitBTCAdapter",
]
