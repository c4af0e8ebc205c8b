"""
HitBTC exchange adapter.

Main adapter implementation that implements the ExchangeAdapter interface
against the HitBTC REST API v2.

This adapter:
    - Loads market and currency metadata once per session
    - Signs requests (HTTP Basic auth for private endpoints)
    - Normalizes HitBTC responses to unified models
    - Classifies HitBTC error payloads into the unified exception hierarchy
    - Remembers the orders it creates, edits or cancels

HitBTC-Specific Details:
    - The client order id is used as the order id; most private endpoints
      address orders by it and it is at most 32 characters long
    - Non-limit orders are sent with a timeInForce (FOK by default)
    - Balances live in two accounts: trading and main account

Example:
    >>> from tradebridge.adapters.hitbtc import HitBTCAdapter
    >>> from tradebridge.config.loader import load_config
    >>>
    >>> config = load_config()
    >>> async with HitBTCAdapter(config.get_exchange("hitbtc")) as adapter:
    ...     ticker = await adapter.fetch_ticker("ETH/BTC")
    ...     print(f"{ticker.symbol}: {ticker.last}")
"""

import json
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Union

import structlog

from tradebridge.adapters.hitbtc.endpoints import (
    API_URL,
    API_VERSION,
    BALANCE_ENDPOINTS,
    CANCEL_ORDER,
    CANDLES,
    COMMON_CURRENCIES,
    CREATE_DEPOSIT_ADDRESS,
    CREATE_ORDER,
    CURRENCIES,
    DEPOSIT_ADDRESS,
    EDIT_ORDER,
    EXCHANGE_ID,
    OPEN_ORDER,
    OPEN_ORDERS,
    ORDER_BOOK,
    ORDER_HISTORY,
    ORDER_TRADES,
    RATE_LIMIT_MS,
    SYMBOLS,
    TICKER,
    TICKERS,
    TIMEFRAMES,
    TRADE_HISTORY,
    TRADES,
    TRADING_FEE,
    TRANSACTIONS,
    WITHDRAW,
    AccountType,
    Endpoint,
)
from tradebridge.adapters.hitbtc.errors import HitBTCErrorClassifier
from tradebridge.adapters.hitbtc.normalizer import HitBTCNormalizer, check_address
from tradebridge.adapters.hitbtc.signer import HitBTCSigner
from tradebridge.base.fields import (
    filter_by_since_limit,
    iso8601,
    safe_string,
    to_decimal,
    to_milliseconds,
)
from tradebridge.base.markets import MarketCache
from tradebridge.base.orders import OrderCache
from tradebridge.base.precision import amount_to_precision, price_to_precision
from tradebridge.base.transport import HttpTransport
from tradebridge.config.models import (
    ApiUrls,
    ConnectionSettings,
    ExchangeConfig,
    ExchangeOptions,
    TradingFees,
)
from tradebridge.errors import (
    ArgumentsRequired,
    BadRequest,
    ExchangeError,
    InvalidOrder,
    NotSupported,
    OrderNotFound,
)
from tradebridge.interfaces.exchange_adapter import ExchangeAdapter
from tradebridge.models.account import (
    Balance,
    DepositAddress,
    Transaction,
    WithdrawalReceipt,
)
from tradebridge.models.market import Currency, Market, TradingFee
from tradebridge.models.orderbook import OrderBook
from tradebridge.models.ticker import Candle, Ticker
from tradebridge.models.trading import Order, OrderStatus, Trade

logger = structlog.get_logger(__name__)

# HitBTC accepts client order ids of at most 32 characters
CLIENT_ORDER_ID_LENGTH = 32


def new_client_order_id() -> str:
    """Random 32-character hex client order id."""
    return uuid.uuid4().hex[:CLIENT_ORDER_ID_LENGTH]


class HitBTCAdapter(ExchangeAdapter):
    """
    HitBTC exchange adapter implementing ExchangeAdapter interface.

    Attributes:
        exchange_name: Always returns "hitbtc".
        markets: Loaded markets keyed by unified symbol.
        orders: Cache of orders placed through this adapter.

    Example:
        >>> config = HitBTCAdapter.default_config().with_credentials(key, secret)
        >>> adapter = HitBTCAdapter(config)
        >>> order = await adapter.create_order("ETH/BTC", "limit", "buy", Decimal("0.1"), Decimal("0.046"))
        >>> await adapter.cancel_order(order.id)
    """

    def __init__(
        self,
        exchange_config: Optional[ExchangeConfig] = None,
        transport: Optional[HttpTransport] = None,
    ):
        """
        Initialize HitBTC adapter.

        Args:
            exchange_config: Exchange configuration from config/exchanges.yaml.
                Defaults to the built-in HitBTC settings without credentials.
            transport: HTTP transport; one is created from the connection
                settings when omitted.
        """
        self._config = exchange_config or self.default_config()

        self._signer = HitBTCSigner(
            api=self._config.api,
            version=self._config.version,
            credentials=self._config.credentials,
        )
        self._classifier = HitBTCErrorClassifier(self._config.id)
        self._transport = transport or HttpTransport(
            exchange_id=self._config.id,
            rate_limit_ms=self._config.connection.rate_limit_ms,
            timeout_seconds=self._config.connection.timeout_seconds,
        )

        common_currencies = dict(COMMON_CURRENCIES)
        common_currencies.update(self._config.options.common_currencies)
        self._markets = MarketCache(self._config.id, common_currencies)
        self._orders = OrderCache(self._config.options.order_cache_size)
        self._normalizer = HitBTCNormalizer(self._markets, self._orders, self._config.fees)

        logger.info(
            "hitbtc_adapter_initialized",
            exchange=self._config.id,
            public_url=self._config.api.public,
            authenticated=self._config.credentials.is_complete,
        )

    @classmethod
    def default_config(cls) -> ExchangeConfig:
        """
        Built-in HitBTC configuration.

        Returns:
            ExchangeConfig: api.hitbtc.com, API v2, 1500 ms between requests,
            maker 0.1 %, taker 0.2 %, FOK for non-limit orders.
        """
        return ExchangeConfig(
            id=EXCHANGE_ID,
            name="HitBTC",
            version=API_VERSION,
            api=ApiUrls(public=API_URL, private=API_URL),
            connection=ConnectionSettings(rate_limit_ms=RATE_LIMIT_MS),
            fees=TradingFees(maker=Decimal("0.001"), taker=Decimal("0.002")),
            options=ExchangeOptions(default_time_in_force="FOK"),
        )

    @property
    def exchange_name(self) -> str:
        """Return exchange identifier."""
        return self._config.id

    @property
    def markets(self) -> Dict[str, Market]:
        """Loaded markets keyed by unified symbol."""
        return self._markets.markets

    @property
    def orders(self) -> OrderCache:
        """Orders created, edited or canceled through this adapter."""
        return self._orders

    async def _request(self, endpoint: Endpoint, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Sign and execute one REST call."""
        request = self._signer.sign(endpoint, params)
        return await self._transport.fetch(request, self._classifier)

    async def close(self) -> None:
        """Close the HTTP transport."""
        await self._transport.close()
        logger.info("hitbtc_adapter_closed", exchange=self._config.id)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    async def load_markets(self, reload: bool = False) -> Dict[str, Market]:
        """
        Load markets and currencies once per session.

        Args:
            reload: Fetch again even if already loaded.

        Returns:
            Dict[str, Market]: Markets keyed by unified symbol.
        """
        if self._markets.loaded and not reload:
            return self._markets.markets

        currencies = await self.fetch_currencies()
        markets = await self.fetch_markets()
        self._markets.load(markets, currencies.values())

        logger.info(
            "hitbtc_markets_loaded",
            exchange=self._config.id,
            markets=len(markets),
            currencies=len(currencies),
        )
        return self._markets.markets

    async def fetch_markets(self) -> List[Market]:
        """List all markets (GET /public/symbol)."""
        response = await self._request(SYMBOLS)
        return [self._normalizer.parse_market(raw) for raw in response]

    async def fetch_currencies(self) -> Dict[str, Currency]:
        """List all currencies keyed by unified code (GET /public/currency)."""
        response = await self._request(CURRENCIES)
        result: Dict[str, Currency] = {}
        for raw in response:
            currency = self._normalizer.parse_currency(raw)
            result[currency.code] = currency
        return result

    # ------------------------------------------------------------------
    # Public market data
    # ------------------------------------------------------------------

    async def fetch_ticker(self, symbol: str) -> Ticker:
        """
        Get the ticker of one market.

        Raises:
            BadSymbol: If the symbol is unknown.
            ExchangeError: If the response carries a ``message``.
        """
        await self.load_markets()
        market = self._markets.market(symbol)
        response = await self._request(TICKER, {"symbol": market.id})
        if isinstance(response, dict) and "message" in response:
            raise ExchangeError(
                f"{self._config.id} {response['message']}",
                exchange_id=self._config.id,
            )
        return self._normalizer.parse_ticker(response, market)

    async def fetch_tickers(self, symbols: Optional[List[str]] = None) -> Dict[str, Ticker]:
        """
        Get all tickers keyed by symbol.

        Tickers of markets missing from the loaded metadata are keyed by
        their raw exchange id.
        """
        await self.load_markets()
        response = await self._request(TICKERS)
        result: Dict[str, Ticker] = {}
        for raw in response:
            if safe_string(raw, "symbol") is None:
                continue
            ticker = self._normalizer.parse_ticker(raw)
            result[ticker.symbol] = ticker
        if symbols is not None:
            wanted = set(symbols)
            result = {symbol: ticker for symbol, ticker in result.items() if symbol in wanted}
        return result

    async def fetch_trades(
        self,
        symbol: str,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        """List public trades, oldest first when ``since`` is given."""
        await self.load_markets()
        market = self._markets.market(symbol)
        params: Dict[str, Any] = {"symbol": market.id, "limit": limit}
        if since is not None:
            params["sort"] = "ASC"
            params["from"] = iso8601(since)
        response = await self._request(TRADES, params)
        return self._normalizer.parse_trades(response, market, since, limit)

    async def fetch_order_book(self, symbol: str, limit: Optional[int] = None) -> OrderBook:
        """Get the order book (HitBTC default depth 100, 0 = unlimited)."""
        await self.load_markets()
        market = self._markets.market(symbol)
        response = await self._request(ORDER_BOOK, {"symbol": market.id, "limit": limit})
        return self._normalizer.parse_order_book(response, market.symbol)

    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Candle]:
        """
        Get OHLCV candles.

        Raises:
            NotSupported: If the timeframe has no HitBTC period.
        """
        period = TIMEFRAMES.get(timeframe)
        if period is None:
            raise NotSupported(
                f"{self._config.id} does not support timeframe {timeframe}",
                exchange_id=self._config.id,
            )
        await self.load_markets()
        market = self._markets.market(symbol)
        params: Dict[str, Any] = {"symbol": market.id, "period": period, "limit": limit}
        if since is not None:
            params["from"] = iso8601(since)
        response = await self._request(CANDLES, params)
        candles = [self._normalizer.parse_ohlcv(raw) for raw in response]
        return filter_by_since_limit(candles, since, limit)

    # ------------------------------------------------------------------
    # Private account data
    # ------------------------------------------------------------------

    async def fetch_balance(self, account_type: Union[AccountType, str] = AccountType.TRADING) -> Balance:
        """
        Get balances of the trading or the main account.

        Raises:
            NotSupported: If the account type is unknown.
        """
        try:
            account = AccountType(account_type)
        except ValueError as e:
            raise NotSupported(
                f"{self._config.id} does not support balance account type {account_type}",
                exchange_id=self._config.id,
            ) from e
        await self.load_markets()
        response = await self._request(BALANCE_ENDPOINTS[account])
        return self._normalizer.parse_balance(response, account.value)

    async def fetch_trading_fee(self, symbol: str) -> TradingFee:
        """Get maker / taker rates of a market for this account."""
        await self.load_markets()
        market = self._markets.market(symbol)
        response = await self._request(TRADING_FEE, {"symbol": market.id})
        return self._normalizer.parse_trading_fee(response, market.symbol)

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

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

        Limit orders send the price rounded to the tick size; other order
        types send the configured timeInForce.

        Raises:
            ArgumentsRequired: Limit order without price.
            InvalidOrder: Amount below the lot size, or order rejected.
        """
        await self.load_markets()
        market = self._markets.market(symbol)

        client_order_id = new_client_order_id()
        params: Dict[str, Any] = {
            "clientOrderId": client_order_id,
            "symbol": market.id,
            "side": side,
            "quantity": amount_to_precision(amount, market.precision.amount, self._config.id),
            "type": type,
        }
        if type == "limit":
            if price is None:
                raise ArgumentsRequired(
                    f"{self._config.id} create_order requires a price for limit orders",
                    exchange_id=self._config.id,
                )
            params["price"] = price_to_precision(price, market.precision.price, self._config.id)
        else:
            params["timeInForce"] = self._config.options.default_time_in_force

        response = await self._request(CREATE_ORDER, params)
        order = self._normalizer.parse_order(response, market)
        if order.status == "rejected":
            raise InvalidOrder(
                f"{self._config.id} order was rejected by the exchange {json.dumps(response)}",
                exchange_id=self._config.id,
                body=json.dumps(response),
            )

        self._orders.put(order)
        logger.info(
            "order_created",
            exchange=self._config.id,
            order_id=order.id,
            symbol=order.symbol,
            type=type,
            side=side,
            status=order.status,
        )
        return order

    async def edit_order(
        self,
        id: str,
        symbol: str,
        amount: Optional[Decimal] = None,
        price: Optional[Decimal] = None,
    ) -> Order:
        """Replace amount and/or price of an open order (PATCH order/{clientOrderId})."""
        await self.load_markets()
        market = self._markets.market(symbol)
        params: Dict[str, Any] = {
            "clientOrderId": id,
            "requestClientId": new_client_order_id(),
        }
        if amount is not None:
            params["quantity"] = amount_to_precision(amount, market.precision.amount, self._config.id)
        if price is not None:
            params["price"] = price_to_precision(price, market.precision.price, self._config.id)

        response = await self._request(EDIT_ORDER, params)
        order = self._normalizer.parse_order(response, market)
        self._orders.put(order)
        logger.info("order_edited", exchange=self._config.id, order_id=order.id, status=order.status)
        return order

    async def cancel_order(self, id: str, symbol: Optional[str] = None) -> Order:
        """Cancel an open order by client order id."""
        await self.load_markets()
        market = self._markets.market(symbol) if symbol is not None else None
        response = await self._request(CANCEL_ORDER, {"clientOrderId": id})
        order = self._normalizer.parse_order(response, market)
        self._orders.put(order)
        logger.info("order_canceled", exchange=self._config.id, order_id=order.id)
        return order

    async def fetch_order(self, id: str, symbol: Optional[str] = None) -> Order:
        """
        Get an order from the order history.

        Raises:
            OrderNotFound: If the history has no order with this id.
        """
        await self.load_markets()
        market = self._markets.market(symbol) if symbol is not None else None
        response = await self._request(ORDER_HISTORY, {"clientOrderId": id})
        if not response:
            raise OrderNotFound(
                f"{self._config.id} order {id} not found",
                exchange_id=self._config.id,
            )
        return self._normalizer.parse_order(response[0], market)

    async def fetch_open_order(self, id: str, symbol: Optional[str] = None) -> Order:
        """Get a working order by client order id."""
        await self.load_markets()
        market = self._markets.market(symbol) if symbol is not None else None
        response = await self._request(OPEN_ORDER, {"clientOrderId": id})
        return self._normalizer.parse_order(response, market)

    async def fetch_open_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """List working orders, optionally of one market."""
        await self.load_markets()
        market: Optional[Market] = None
        params: Dict[str, Any] = {}
        if symbol is not None:
            market = self._markets.market(symbol)
            params["symbol"] = market.id
        response = await self._request(OPEN_ORDERS, params)
        return self._normalizer.parse_orders(response, market, since, limit)

    async def fetch_closed_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """List filled and canceled orders from the order history."""
        await self.load_markets()
        market: Optional[Market] = None
        params: Dict[str, Any] = {"limit": limit}
        if symbol is not None:
            market = self._markets.market(symbol)
            params["symbol"] = market.id
        if since is not None:
            params["from"] = iso8601(since)
        response = await self._request(ORDER_HISTORY, params)
        orders = [
            order
            for order in self._normalizer.parse_orders(response, market)
            if order.status in (OrderStatus.CLOSED.value, OrderStatus.CANCELED.value)
        ]
        return filter_by_since_limit(orders, since, limit)

    async def fetch_order_trades(
        self,
        id: str,
        symbol: Optional[str] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        """
        List the fills of one order.

        Args:
            id: Exchange order id (``order.info["id"]``), not the client
                order id.

        Raises:
            OrderNotFound: If the order has no fills or does not exist.
        """
        await self.load_markets()
        market = self._markets.market(symbol) if symbol is not None else None
        response = await self._request(ORDER_TRADES, {"orderId": id})
        if not response:
            raise OrderNotFound(
                f"{self._config.id} order {id} not found, fetch_order_trades requires "
                f'the exchange order id from order.info["id"]',
                exchange_id=self._config.id,
            )
        return self._normalizer.parse_trades(response, market, since, limit)

    async def fetch_my_trades(
        self,
        symbol: Optional[str] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        """List this account's trades."""
        await self.load_markets()
        market: Optional[Market] = None
        params: Dict[str, Any] = {"limit": limit}
        if symbol is not None:
            market = self._markets.market(symbol)
            params["symbol"] = market.id
        if since is not None:
            params["from"] = iso8601(since)
        response = await self._request(TRADE_HISTORY, params)
        return self._normalizer.parse_trades(response, market, since, limit)

    # ------------------------------------------------------------------
    # Funding
    # ------------------------------------------------------------------

    async def fetch_deposit_address(self, code: str) -> DepositAddress:
        """
        Get the current deposit address of a currency.

        Raises:
            BadRequest: If the currency is unknown.
            InvalidAddress: If the exchange returns a malformed address.
        """
        await self.load_markets()
        currency = self._markets.currency(code)
        response = await self._request(DEPOSIT_ADDRESS, {"currency": currency.id})
        return self._normalizer.parse_deposit_address(response, currency.code)

    async def create_deposit_address(self, code: str) -> DepositAddress:
        """Generate a new deposit address for a currency."""
        await self.load_markets()
        currency = self._markets.currency(code)
        response = await self._request(CREATE_DEPOSIT_ADDRESS, {"currency": currency.id})
        return self._normalizer.parse_deposit_address(response, currency.code)

    async def withdraw(
        self,
        code: str,
        amount: Decimal,
        address: str,
        tag: Optional[str] = None,
    ) -> WithdrawalReceipt:
        """
        Request a crypto withdrawal.

        ``paymentId`` is sent only for a non-empty tag.

        Raises:
            InvalidAddress: If the address is empty or contains whitespace.
            BadRequest: If the currency is unknown or the amount is missing.
        """
        check_address(address)
        await self.load_markets()
        currency = self._markets.currency(code)

        value = to_decimal(amount)
        if value is None:
            raise BadRequest(
                f"{self._config.id} withdraw requires an amount",
                exchange_id=self._config.id,
            )
        params: Dict[str, Any] = {
            "currency": currency.id,
            "amount": format(value, "f"),
            "address": address,
        }
        if tag:
            params["paymentId"] = tag

        response = await self._request(WITHDRAW, params)
        receipt = WithdrawalReceipt(id=safe_string(response, "id"), info=response)
        logger.info(
            "withdrawal_requested",
            exchange=self._config.id,
            currency=currency.code,
            amount=params["amount"],
            withdrawal_id=receipt.id,
        )
        return receipt

    async def fetch_transactions(
        self,
        code: Optional[str] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Transaction]:
        """List deposits and withdrawals, optionally of one currency."""
        await self.load_markets()
        params: Dict[str, Any] = {}
        if code is not None:
            currency = self._markets.currency(code)
            params["asset"] = currency.id
        if since is not None:
            params["startTime"] = to_milliseconds(since)
        response = await self._request(TRANSACTIONS, params)
        return self._normalizer.parse_transactions(response, code, since, limit)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"HitBTCAdapter(exchange={self._config.id}, markets={len(self._markets.symbols)})"
