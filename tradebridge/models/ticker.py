"""
Ticker and candle data models.

All financial values use Decimal. Derived ticker fields (change, percentage,
average, vwap) are None whenever they cannot be computed, so that "unknown"
is never confused with "zero".

Models:
    Ticker: 24-hour statistics for a market
    Candle: OHLCV 6-tuple
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, NamedTuple, Optional

from pydantic import BaseModel, Field


class Candle(NamedTuple):
    """
    One OHLCV candle.

    Field order is fixed: timestamp, open, high, low, close, volume.
    """

    timestamp: Optional[datetime]
    open: Optional[Decimal]
    high: Optional[Decimal]
    low: Optional[Decimal]
    close: Optional[Decimal]
    volume: Optional[Decimal]


class Ticker(BaseModel):
    """
    Ticker data for a market.

    Attributes:
        symbol: Unified symbol, or the raw exchange id for unknown markets.
        timestamp: Exchange timestamp (UTC).
        high: 24h high price.
        low: 24h low price.
        bid: Best bid price.
        ask: Best ask price.
        vwap: Volume-weighted average price (quote_volume / base_volume).
        open: Opening price of the 24h window.
        close: Same as last.
        last: Last traded price.
        change: last - open.
        percentage: change / open * 100.
        average: (last + open) / 2.
        base_volume: 24h volume in base currency.
        quote_volume: 24h volume in quote currency.
        info: Raw exchange payload.

    Example:
        >>> ticker = Ticker(
        ...     symbol="ETH/BTC",
        ...     last=Decimal("110"),
        ...     open=Decimal("100"),
        ...     change=Decimal("10"),
        ... )
    """

    model_config = {"frozen": True, "extra": "forbid"}

    symbol: Optional[str] = Field(
        default=None,
        description="Unified market symbol",
    )
    timestamp: Optional[datetime] = Field(
        default=None,
        description="Exchange timestamp (UTC)",
    )

    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    bid: Optional[Decimal] = None
    ask: Optional[Decimal] = None
    vwap: Optional[Decimal] = None
    open: Optional[Decimal] = None
    close: Optional[Decimal] = None
    last: Optional[Decimal] = None

    # Derived statistics
    change: Optional[Decimal] = Field(
        default=None,
        description="last - open",
    )
    percentage: Optional[Decimal] = Field(
        default=None,
        description="Change relative to open, in percent",
    )
    average: Optional[Decimal] = Field(
        default=None,
        description="Mean of last and open",
    )

    base_volume: Optional[Decimal] = Field(
        default=None,
        description="24-hour volume in base currency",
    )
    quote_volume: Optional[Decimal] = Field(
        default=None,
        description="24-hour volume in quote currency",
    )

    info: Dict[str, Any] = Field(
        default_factory=dict,
        description="Raw exchange payload",
    )
