"""
Order and trade data models.

The exchange-assigned client order id is the canonical order id: most
private endpoints address orders by it.

Models:
    Fee: Fee cost and currency
    Trade: Single fill or public trade
    Order: Order with optional embedded fills
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    """
    Unified order status.

    Attributes:
        OPEN: Resting or partially filled.
        CLOSED: Completely filled.
        CANCELED: Canceled by the user.
        FAILED: Expired or otherwise terminated by the exchange.
    """

    OPEN = "open"
    CLOSED = "closed"
    CANCELED = "canceled"
    FAILED = "failed"


class Fee(BaseModel):
    """Fee charged for a trade, an order or a transaction."""

    model_config = {"frozen": True, "extra": "forbid"}

    cost: Decimal
    currency: Optional[str] = None


class Trade(BaseModel):
    """
    Public trade or private fill.

    Attributes:
        id: Exchange trade id.
        order: Client order id of the parent order, if known.
        timestamp: Execution time (UTC).
        symbol: Unified symbol, or the raw exchange id for unknown markets.
        side: buy or sell.
        price: Execution price.
        amount: Executed quantity in base currency.
        cost: price * amount.
        fee: Fee, only when the exchange reported one.
        info: Raw exchange payload.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(..., min_length=1)
    order: Optional[str] = None
    timestamp: Optional[datetime] = None
    symbol: Optional[str] = None
    type: Optional[str] = None
    side: Optional[str] = None
    taker_or_maker: Optional[str] = None
    price: Optional[Decimal] = None
    amount: Optional[Decimal] = None
    cost: Optional[Decimal] = None
    fee: Optional[Fee] = None
    info: Dict[str, Any] = Field(default_factory=dict)


class Order(BaseModel):
    """
    Unified order record.

    Status is a plain string: known exchange statuses are mapped onto
    OrderStatus values and unknown ones are kept verbatim.

    Attributes:
        id: Client order id.
        client_order_id: Same as id.
        timestamp: Creation time (UTC).
        last_trade_timestamp: Last update time (UTC).
        status: Unified status, or the raw exchange status if unknown.
        symbol: Unified symbol, or the raw exchange id for unknown markets.
        type: limit, market, ...
        side: buy or sell.
        price: Limit price, or the last known / average price.
        average: Average fill price.
        amount: Requested quantity.
        cost: Filled cost.
        filled: Filled quantity.
        remaining: amount - filled.
        fee: Total fee over the embedded fills.
        trades: Embedded fills, None when the exchange sent none.
        info: Raw exchange payload.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(..., min_length=1)
    client_order_id: Optional[str] = None
    timestamp: Optional[datetime] = None
    last_trade_timestamp: Optional[datetime] = None
    status: Optional[str] = None
    symbol: Optional[str] = None
    type: Optional[str] = None
    side: Optional[str] = None
    price: Optional[Decimal] = None
    average: Optional[Decimal] = None
    amount: Optional[Decimal] = None
    cost: Optional[Decimal] = None
    filled: Optional[Decimal] = None
    remaining: Optional[Decimal] = None
    fee: Optional[Fee] = None
    trades: Optional[List[Trade]] = None
    info: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_open(self) -> bool:
        """True if the order is still working on the book."""
        return self.status == OrderStatus.OPEN.value
