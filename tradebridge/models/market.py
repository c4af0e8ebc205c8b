"""
Market and currency metadata models.

Precision and limits are derived once from the exchange listing and are
treated as immutable for the session.

Models:
    MinMax: Optional lower/upper bound pair
    MarketPrecision: Tick size and lot size of a market
    MarketLimits: Amount, price and cost limits of a market
    Market: Unified market record
    CurrencyLimits: Amount, price, cost and withdrawal limits of a currency
    Currency: Unified currency record
    TradingFee: Maker/taker rates of a market for the current account
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class CurrencyType(str, Enum):
    """Kind of currency."""

    CRYPTO = "crypto"
    FIAT = "fiat"


class MinMax(BaseModel):
    """Lower and upper bound; None means unbounded or unknown."""

    model_config = {"frozen": True, "extra": "forbid"}

    min: Optional[Decimal] = None
    max: Optional[Decimal] = None


class MarketPrecision(BaseModel):
    """
    Minimum increments accepted by the exchange.

    Attributes:
        price: Tick size (minimum price increment).
        amount: Lot size (minimum quantity increment).
    """

    model_config = {"frozen": True, "extra": "forbid"}

    price: Optional[Decimal] = Field(
        default=None,
        description="Tick size",
        gt=Decimal("0"),
    )
    amount: Optional[Decimal] = Field(
        default=None,
        description="Lot size",
        gt=Decimal("0"),
    )


class MarketLimits(BaseModel):
    """Trading limits for a market."""

    model_config = {"frozen": True, "extra": "forbid"}

    amount: MinMax = Field(default_factory=MinMax)
    price: MinMax = Field(default_factory=MinMax)
    cost: MinMax = Field(default_factory=MinMax)


class Market(BaseModel):
    """
    Unified market record.

    Attributes:
        id: Exchange-native symbol id (e.g., "ETHBTC").
        symbol: Unified symbol (e.g., "ETH/BTC").
        base: Unified base currency code.
        quote: Unified quote currency code.
        base_id: Exchange-native base currency id.
        quote_id: Exchange-native quote currency id.
        active: Whether the market can be traded.
        maker: Maker fee rate.
        taker: Taker fee rate.
        percentage: Fee rates are fractions of the traded cost.
        tier_based: Fee rates depend on trading volume.
        fee_currency: Currency code in which trading fees are charged.
        precision: Tick size and lot size.
        limits: Amount, price and cost limits.
        info: Raw exchange payload.

    Example:
        >>> market = Market(
        ...     id="ETHBTC",
        ...     symbol="ETH/BTC",
        ...     base="ETH",
        ...     quote="BTC",
        ...     base_id="ETH",
        ...     quote_id="BTC",
        ... )
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(..., min_length=1, description="Exchange-native symbol id")
    symbol: str = Field(..., min_length=1, description="Unified symbol")
    base: str = Field(..., min_length=1)
    quote: str = Field(..., min_length=1)
    base_id: str = Field(..., min_length=1)
    quote_id: str = Field(..., min_length=1)
    active: bool = True

    maker: Optional[Decimal] = None
    taker: Optional[Decimal] = None
    percentage: bool = True
    tier_based: bool = False
    fee_currency: Optional[str] = None

    precision: MarketPrecision = Field(default_factory=MarketPrecision)
    limits: MarketLimits = Field(default_factory=MarketLimits)

    info: Dict[str, Any] = Field(default_factory=dict)


class CurrencyLimits(BaseModel):
    """Limits for a currency."""

    model_config = {"frozen": True, "extra": "forbid"}

    amount: MinMax = Field(default_factory=MinMax)
    price: MinMax = Field(default_factory=MinMax)
    cost: MinMax = Field(default_factory=MinMax)
    withdraw: MinMax = Field(default_factory=MinMax)


class Currency(BaseModel):
    """
    Unified currency record.

    Attributes:
        id: Exchange-native currency id.
        code: Unified currency code.
        name: Full currency name.
        type: crypto or fiat.
        payin: Deposits enabled.
        payout: Withdrawals enabled.
        transfer: Internal transfers enabled.
        active: Deposit, withdrawal and transfer all enabled and not disabled.
        fee: Withdrawal fee.
        precision: Number of decimal places.
        limits: Amount, price, cost and withdrawal limits.
        info: Raw exchange payload.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)
    name: Optional[str] = None
    type: CurrencyType = CurrencyType.FIAT

    payin: Optional[bool] = None
    payout: Optional[bool] = None
    transfer: Optional[bool] = None
    active: bool = False

    fee: Optional[Decimal] = Field(default=None, description="Withdrawal fee")
    precision: int = Field(default=8, ge=0)
    limits: CurrencyLimits = Field(default_factory=CurrencyLimits)

    info: Dict[str, Any] = Field(default_factory=dict)


class TradingFee(BaseModel):
    """Maker and taker fee rates for one market."""

    model_config = {"frozen": True, "extra": "forbid"}

    symbol: str = Field(..., min_length=1)
    maker: Optional[Decimal] = None
    taker: Optional[Decimal] = None
    info: Dict[str, Any] = Field(default_factory=dict)
