"""
Per-session cache of the last known state of each order.

Some responses omit the order price (e.g., a market order awaiting fills).
The adapter stores every order it creates, edits or cancels here and later
recovers the last known price from it.

Not thread-safe: one cache belongs to one adapter instance.
"""

from collections import OrderedDict
from decimal import Decimal
from typing import Optional

import structlog

from tradebridge.models.trading import Order

logger = structlog.get_logger(__name__)


class OrderCache:
    """
    Bounded mapping of client order id -> last known Order.

    The oldest entry is evicted once max_size is reached.

    Example:
        >>> cache = OrderCache()
        >>> cache.put(order)
        >>> cache.last_known_price(order.id)
        Decimal('50')
    """

    def __init__(self, max_size: int = 1000):
        if max_size < 1:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self._orders: "OrderedDict[str, Order]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._orders)

    def __contains__(self, order_id: object) -> bool:
        return order_id in self._orders

    def get(self, order_id: str) -> Optional[Order]:
        """Return the cached order, or None."""
        return self._orders.get(order_id)

    def put(self, order: Order) -> None:
        """Store an order, replacing any previous entry with the same id."""
        self._orders.pop(order.id, None)
        self._orders[order.id] = order
        while len(self._orders) > self.max_size:
            self._orders.popitem(last=False)

    def last_known_price(self, order_id: str, symbol: Optional[str] = None) -> Optional[Decimal]:
        """
        Price of the cached order with this id.

        Args:
            order_id: Client order id.
            symbol: Symbol of the order being parsed, if known. A cached
                entry for a different symbol is not reused.

        Returns:
            Optional[Decimal]: Cached price, or None.
        """
        cached = self._orders.get(order_id)
        if cached is None:
            return None
        if symbol is not None and cached.symbol is not None and cached.symbol != symbol:
            logger.warning(
                "order_cache_symbol_mismatch",
                order_id=order_id,
                cached_symbol=cached.symbol,
                symbol=symbol,
            )
            return None
        return cached.price

    def clear(self) -> None:
        """Drop all cached orders."""
        self._orders.clear()
