"""
Unified Pydantic data models.

Every exchange adapter produces these exchange-agnostic records.
All financial values use Decimal for precision; values the exchange did not
report are None.

Modules:
    market: Markets, currencies and trading fees
    ticker: Tickers and OHLCV candles
    orderbook: Order book snapshots and price levels
    trading: Orders, trades and fees
    account: Balances, deposit addresses and transactions

Example:
    >>> from tradebridge.models import Market, Order, OrderStatus
"""

# Account models
from tradebridge.models.account import (
    Balance,
    BalanceEntry,
    DepositAddress,
    Transaction,
    WithdrawalReceipt,
)

# Market models
from tradebridge.models.market import (
    Currency,
    CurrencyLimits,
    CurrencyType,
    Market,
    MarketLimits,
    MarketPrecision,
    MinMax,
    TradingFee,
)

# Order book models
from tradebridge.models.orderbook import (
    OrderBook,
    PriceLevel,
)

# Ticker models
from tradebridge.models.ticker import (
    Candle,
    Ticker,
)

# Trading models
from tradebridge.models.trading import (
    Fee,
    Order,
    OrderStatus,
    Trade,
)

__all__ = [
    # Market
    "MinMax",
    "MarketPrecision",
    "MarketLimits",
    "Market",
    "CurrencyType",
    "CurrencyLimits",
    "Currency",
    "TradingFee",
    # Ticker
    "Ticker",
    "Candle",
    # Order book
    "PriceLevel",
    "OrderBook",
    # Trading
    "Fee",
    "Trade",
    "Order",
    "OrderStatus",
    # Account
    "BalanceEntry",
    "Balance",
    "DepositAddress",
    "WithdrawalReceipt",
    "Transaction",
]
