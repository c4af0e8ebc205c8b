"""
Order book data models.

The adapter reads the REST order book as-is: levels are taken in the order
the exchange sends them and no aggregation is performed.

Models:
    PriceLevel: Single price level in an order book (price, amount)
    OrderBook: Order book snapshot for one market
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field


class PriceLevel(BaseModel):
    """
    Single price level in an order book.

    Attributes:
        price: Price at this level in quote currency.
        amount: Amount available at this level in base currency.

    Example:
        >>> level = PriceLevel(price=Decimal("0.046001"), amount=Decimal("0.005"))
        >>> level.notional
        Decimal('0.000230005')
    """

    model_config = {"frozen": True, "extra": "ignore"}

    price: Decimal = Field(
        ...,
        description="Price at this level in quote currency",
        ge=Decimal("0"),
    )
    amount: Decimal = Field(
        ...,
        description="Amount available at this level in base currency",
        ge=Decimal("0"),
    )

    @computed_field  # type: ignore[misc]
    @property
    def notional(self) -> Decimal:
        """
        Calculate the notional value at this level.

        Returns:
            Decimal: The product of price and amount.
        """
        return self.price * self.amount


class OrderBook(BaseModel):
    """
    Order book snapshot for a single market.

    Attributes:
        symbol: Unified market symbol (e.g., "ETH/BTC").
        timestamp: Exchange timestamp (UTC), if the exchange provides one.
        bids: Bid levels in the order the exchange sent them.
        asks: Ask levels in the order the exchange sent them.
        nonce: Exchange sequence number, if any.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    symbol: str = Field(
        ...,
        description="Unified market symbol",
        min_length=1,
    )
    timestamp: Optional[datetime] = Field(
        default=None,
        description="Exchange timestamp (UTC)",
    )
    bids: List[PriceLevel] = Field(
        default_factory=list,
        description="Bid levels as sent by the exchange",
    )
    asks: List[PriceLevel] = Field(
        default_factory=list,
        description="Ask levels as sent by the exchange",
    )
    nonce: Optional[int] = Field(
        default=None,
        description="Exchange sequence number",
    )

    @computed_field  # type: ignore[misc]
    @property
    def best_bid(self) -> Optional[Decimal]:
        """Highest bid price, or None if no bids."""
        return max((level.price for level in self.bids), default=None)

    @computed_field  # type: ignore[misc]
    @property
    def best_ask(self) -> Optional[Decimal]:
        """Lowest ask price, or None if no asks."""
        return min((level.price for level in self.asks), default=None)
