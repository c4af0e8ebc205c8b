"""
Abstract base class for exchange adapters.

This module defines the ExchangeAdapter interface that all exchange-specific
implementations must follow. Every unified operation issues one REST call
(after markets are loaded) and returns unified records from
tradebridge.models.

The adapter pattern allows the library to:
- Add new exchanges without modifying callers
- Normalize responses into unified schemas (Market, Order, Trade, ...)
- Translate unified requests into exchange wire formats
- Classify exchange-reported failures into one exception hierarchy

Example:
    >>> class MyExchangeAdapter(ExchangeAdapter):
    ...     async def fetch_markets(self) -> List[Market]:
    ...         raw = await self._request(SYMBOLS)
    ...         return [self._normalizer.parse_market(m) for m in raw]
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from tradebridge.models.account import (
    Balance,
    DepositAddress,
    Transaction,
    WithdrawalReceipt,
)
from tradebridge.models.market import Currency, Market, TradingFee
from tradebridge.models.orderbook import OrderBook
from tradebridge.models.ticker import Candle, Ticker
from tradebridge.models.trading import Order, Trade


class ExchangeAdapter(ABC):
    """
    Abstract base class for REST exchange adapters.

    Attributes:
        exchange_name: Lowercase exchange identifier (e.g., "hitbtc").

    Note:
        All financial values in returned models use Decimal for precision.
        Never use float for prices, quantities, or notional values.
    """

    @property
    @abstractmethod
    def exchange_name(self) -> str:
        """
        Return the lowercase exchange identifier.

        This identifier is attached to every raised ExchangeError and used
        in log events.

        Returns:
            str: Lowercase exchange name (e.g., "hitbtc").
        """

    @abstractmethod
    async def load_markets(self, reload: bool = False) -> Dict[str, Market]:
        """
        Load market and currency metadata once per session.

        Args:
            reload: Fetch again even if already loaded.

        Returns:
            Dict[str, Market]: Markets keyed by unified symbol.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release transport resources. Safe to call more than once."""

    # ------------------------------------------------------------------
    # Public market data
    # ------------------------------------------------------------------

    @abstractmethod
    async def fetch_markets(self) -> List[Market]:
        """List all markets."""

    @abstractmethod
    async def fetch_currencies(self) -> Dict[str, Currency]:
        """List all currencies keyed by unified code."""

    @abstractmethod
    async def fetch_ticker(self, symbol: str) -> Ticker:
        """Get the ticker of one market."""

    @abstractmethod
    async def fetch_tickers(self, symbols: Optional[List[str]] = None) -> Dict[str, Ticker]:
        """Get tickers keyed by symbol, optionally restricted to ``symbols``."""

    @abstractmethod
    async def fetch_trades(
        self,
        symbol: str,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        """List public trades of a market."""

    @abstractmethod
    async def fetch_order_book(self, symbol: str, limit: Optional[int] = None) -> OrderBook:
        """Get the order book of a market."""

    @abstractmethod
    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Candle]:
        """Get OHLCV candles of a market."""

    # ------------------------------------------------------------------
    # Private account data
    # ------------------------------------------------------------------

    @abstractmethod
    async def fetch_balance(self, account_type: str = "trading") -> Balance:
        """Get balances of an account."""

    @abstractmethod
    async def fetch_trading_fee(self, symbol: str) -> TradingFee:
        """Get maker / taker rates of a market for the current account."""

    @abstractmethod
    async def create_order(
        self,
        symbol: str,
        type: str,
        side: str,
        amount: Decimal,
        price: Optional[Decimal] = None,
    ) -> Order:
        """
        Place an order.

        Raises:
            InvalidOrder: If the exchange rejects the order.
            InsufficientFunds: If the balance is too low.
        """

    @abstractmethod
    async def edit_order(
        self,
        id: str,
        symbol: str,
        amount: Optional[Decimal] = None,
        price: Optional[Decimal] = None,
    ) -> Order:
        """Replace the amount and/or price of an open order."""

    @abstractmethod
    async def cancel_order(self, id: str, symbol: Optional[str] = None) -> Order:
        """
        Cancel an open order.

        Raises:
            OrderNotFound: If the order does not exist or is no longer open.
        """

    @abstractmethod
    async def fetch_order(self, id: str, symbol: Optional[str] = None) -> Order:
        """Get an order by id, open or historical."""

    @abstractmethod
    async def fetch_open_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """List open orders."""

    @abstractmethod
    async def fetch_closed_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """List filled and canceled orders."""

    @abstractmethod
    async def fetch_order_trades(
        self,
        id: str,
        symbol: Optional[str] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        """List the fills of one order."""

    @abstractmethod
    async def fetch_my_trades(
        self,
        symbol: Optional[str] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        """List the account's trades."""

    @abstractmethod
    async def fetch_deposit_address(self, code: str) -> DepositAddress:
        """Get the current deposit address of a currency."""

    @abstractmethod
    async def create_deposit_address(self, code: str) -> DepositAddress:
        """Generate a new deposit address for a currency."""

    @abstractmethod
    async def withdraw(
        self,
        code: str,
        amount: Decimal,
        address: str,
        tag: Optional[str] = None,
    ) -> WithdrawalReceipt:
        """Request a withdrawal."""

    @abstractmethod
    async def fetch_transactions(
        self,
        code: Optional[str] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Transaction]:
        """List deposits and withdrawals."""

    async def __aenter__(self) -> "ExchangeAdapter":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
