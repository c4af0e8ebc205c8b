"""
HitBTC exchange adapter.

Components:
    HitBTCAdapter: Unified REST operations
    HitBTCSigner: Request signing (HTTP Basic auth)
    HitBTCNormalizer: Response to model conversion
    HitBTCErrorClassifier: Error payload classification

Example:
    >>> from tradebridge.adapters.hitbtc import HitBTCAdapter
    >>> adapter = HitBTCAdapter()
"""

from tradebridge.adapters.hitbtc.adapter import HitBTCAdapter
from tradebridge.adapters.hitbtc.endpoints import AccountType
from tradebridge.adapters.hitbtc.errors import HitBTCErrorClassifier
from tradebridge.adapters.hitbtc.normalizer import HitBTCNormalizer
from tradebridge.adapters.hitbtc.signer import HitBTCSigner

__all__: list[str] = [
    "AccountType",
    "HitBTCAdapter",
    "HitBTCErrorClassifier",
    "HitBTCNormalizer",
    "HitBTCSigner",
]
