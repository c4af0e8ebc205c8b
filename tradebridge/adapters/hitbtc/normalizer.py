"""
HitBTC data normalizer.

Converts HitBTC REST API v2 JSON shapes to the unified Pydantic models.
Numbers arrive as decimal strings and are parsed into Decimal; timestamps
are ISO-8601 strings.

HitBTC Symbol Format:
    {
        "id": "ETHBTC",
        "baseCurrency": "ETH",
        "quoteCurrency": "BTC",
        "quantityIncrement": "0.001",
        "tickSize": "0.000001",
        "takeLiquidityRate": "0.001",
        "provideLiquidityRate": "-0.0001",
        "feeCurrency": "BTC"
    }

HitBTC Order Format:
    {
        "id": "66799540063",
        "clientOrderId": "fe36aa5e190149bf9985fb673bbb2ea0",
        "symbol": "XRPUSDT",
        "side": "sell",
        "status": "filled",
        "type": "market",
        "timeInForce": "FOK",
        "quantity": "1",
        "cumQuantity": "1",
        "createdAt": "2018-10-25T16:41:44.780Z",
        "updatedAt": "2018-10-25T16:41:44.780Z",
        "tradesReport": [
            {"id": 386394956, "price": "0.4644", "quantity": "1",
             "fee": "0.0004644", "timestamp": "2018-10-25T16:41:44.780Z"}
        ]
    }

HitBTC Transaction Format:
    {
        "id": "d53ee9df-89bf-4d09-886e-849f8be64647",
        "type": "payout",
        "status": "success",
        "currency": "ETH",
        "amount": "4.5226832",
        "createdAt": "2018-06-07T00:43:32.426Z",
        "updatedAt": "2018-06-07T00:45:36.447Z",
        "hash": "0x973e...",
        "address": "0xC5a5...",
        "fee": "0.00958"
    }
"""

from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

import structlog

from tradebridge.adapters.hitbtc.endpoints import EXCHANGE_ID
from tradebridge.base.fields import (
    decimal_sum,
    filter_by_since_limit,
    parse8601,
    safe_decimal,
    safe_string,
)
from tradebridge.base.markets import MarketCache
from tradebridge.base.orders import OrderCache
from tradebridge.config.models import TradingFees
from tradebridge.errors import InvalidAddress
from tradebridge.models.account import (
    Balance,
    BalanceEntry,
    DepositAddress,
    Transaction,
)
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
from tradebridge.models.orderbook import OrderBook, PriceLevel
from tradebridge.models.ticker import Candle, Ticker
from tradebridge.models.trading import Fee, Order, OrderStatus, Trade

logger = structlog.get_logger(__name__)

ORDER_STATUSES: Mapping[str, str] = MappingProxyType({
    "new": OrderStatus.OPEN.value,
    "suspended": OrderStatus.OPEN.value,
    "partiallyFilled": OrderStatus.OPEN.value,
    "filled": OrderStatus.CLOSED.value,
    "canceled": OrderStatus.CANCELED.value,
    "expired": OrderStatus.FAILED.value,
})

TRANSACTION_STATUSES: Mapping[str, str] = MappingProxyType({
    "pending": "pending",
    "failed": "failed",
    "success": "ok",
})

TRANSACTION_TYPES: Mapping[str, str] = MappingProxyType({
    "payin": "deposit",
    "payout": "withdrawal",
    "withdraw": "withdrawal",
})

# HitBTC does not publish per-currency precision
CURRENCY_PRECISION = 8


def lookup(table: Mapping[str, str], value: Optional[str]) -> Optional[str]:
    """Map a raw value through a table, passing unknown values through."""
    if value is None:
        return None
    return table.get(value, value)


def parse_order_status(status: Optional[str]) -> Optional[str]:
    """
    Map a HitBTC order status to the unified status.

    Example:
        >>> parse_order_status("partiallyFilled")
        'open'
        >>> parse_order_status("rejected")
        'rejected'
    """
    return lookup(ORDER_STATUSES, status)


def parse_transaction_status(status: Optional[str]) -> Optional[str]:
    """Map a HitBTC transaction status to the unified status."""
    return lookup(TRANSACTION_STATUSES, status)


def parse_transaction_type(type_: Optional[str]) -> Optional[str]:
    """Map a HitBTC transaction type to deposit / withdrawal."""
    return lookup(TRANSACTION_TYPES, type_)


def check_address(address: Optional[str]) -> str:
    """
    Validate a deposit / withdrawal address.

    Raises:
        InvalidAddress: If the address is missing, empty or contains whitespace.
    """
    if address is None or address == "" or any(ch.isspace() for ch in address):
        raise InvalidAddress(
            f"{EXCHANGE_ID} address is invalid or has less than 1 characters: {address!r}",
            exchange_id=EXCHANGE_ID,
        )
    return address


class HitBTCNormalizer:
    """
    Normalizes HitBTC responses to unified models.

    Needs the session's market cache to resolve exchange ids to unified
    symbols and currency codes, and the order cache to recover the last
    known price of orders whose responses omit it.

    Example:
        >>> normalizer = HitBTCNormalizer(MarketCache("hitbtc"), OrderCache())
        >>> market = normalizer.parse_market(raw_symbol)
        >>> market.symbol
        'ETH/BTC'
    """

    def __init__(
        self,
        markets: MarketCache,
        orders: OrderCache,
        fees: Optional[TradingFees] = None,
    ):
        self.markets = markets
        self.orders = orders
        self.fees = fees or TradingFees()

    # ------------------------------------------------------------------
    # Markets and currencies
    # ------------------------------------------------------------------

    def parse_market(self, raw: Dict[str, Any]) -> Market:
        """
        Normalize a symbol listing entry.

        Args:
            raw: Entry of GET /public/symbol.

        Returns:
            Market: Unified market.

        Raises:
            ValueError: If identifying fields are missing or numbers are invalid.
        """
        try:
            market_id = raw["id"]
            base_id = raw["baseCurrency"]
            quote_id = raw["quoteCurrency"]
            base = self.markets.currency_code(base_id)
            quote = self.markets.currency_code(quote_id)

            lot = safe_decimal(raw, "quantityIncrement")
            step = safe_decimal(raw, "tickSize")

            cost_min: Optional[Decimal] = None
            if lot is not None and step is not None:
                cost_min = lot * step

            return Market(
                id=market_id,
                symbol=f"{base}/{quote}",
                base=base,
                quote=quote,
                base_id=base_id,
                quote_id=quote_id,
                active=True,
                taker=safe_decimal(raw, "takeLiquidityRate"),
                maker=safe_decimal(raw, "provideLiquidityRate"),
                percentage=self.fees.percentage,
                tier_based=self.fees.tier_based,
                fee_currency=self.markets.currency_code(safe_string(raw, "feeCurrency")),
                precision=MarketPrecision(price=step, amount=lot),
                limits=MarketLimits(
                    amount=MinMax(min=lot),
                    price=MinMax(min=step),
                    cost=MinMax(min=cost_min),
                ),
                info=raw,
            )

        except KeyError as e:
            logger.error(
                "market_normalization_failed_missing_field",
                exchange=EXCHANGE_ID,
                missing_field=str(e),
            )
            raise ValueError(f"Missing required field in HitBTC symbol: {e}") from e

    def parse_currency(self, raw: Dict[str, Any]) -> Currency:
        """
        Normalize a currency listing entry.

        Currency is active only when deposits, withdrawals and transfers are
        all enabled and the currency is not explicitly disabled.
        """
        currency_id = safe_string(raw, "id")
        if currency_id is None:
            raise ValueError("Missing required field in HitBTC currency: 'id'")

        payin = raw.get("payinEnabled")
        payout = raw.get("payoutEnabled")
        transfer = raw.get("transferEnabled")
        active = bool(payin and payout and transfer)
        if raw.get("disabled"):
            active = False

        bound = Decimal(10) ** CURRENCY_PRECISION
        step = Decimal(10) ** -CURRENCY_PRECISION

        return Currency(
            id=currency_id,
            code=self.markets.currency_code(currency_id),
            name=safe_string(raw, "fullName"),
            type=CurrencyType.CRYPTO if raw.get("crypto") else CurrencyType.FIAT,
            payin=payin,
            payout=payout,
            transfer=transfer,
            active=active,
            fee=safe_decimal(raw, "payoutFee"),
            precision=CURRENCY_PRECISION,
            limits=CurrencyLimits(
                amount=MinMax(min=step, max=bound),
                price=MinMax(min=step, max=bound),
                withdraw=MinMax(max=bound),
            ),
            info=raw,
        )

    def parse_trading_fee(self, raw: Dict[str, Any], symbol: str) -> TradingFee:
        """Normalize GET /trading/fee/{symbol}."""
        return TradingFee(
            symbol=symbol,
            maker=safe_decimal(raw, "provideLiquidityRate"),
            taker=safe_decimal(raw, "takeLiquidityRate"),
            info=raw,
        )

    # ------------------------------------------------------------------
    # Market data
    # ------------------------------------------------------------------

    def _resolve_symbol(self, market_id: Optional[str], market: Optional[Market]) -> tuple[Optional[str], Optional[Market]]:
        """
        Resolve a raw market id to (symbol, market).

        Known ids resolve to their market; unknown ids are returned verbatim
        with the given market unchanged.
        """
        if market_id is not None:
            known = self.markets.market_by_id(market_id)
            if known is not None:
                return known.symbol, known
            return market_id, market
        if market is not None:
            return market.symbol, market
        return None, market

    def parse_ticker(self, raw: Dict[str, Any], market: Optional[Market] = None) -> Ticker:
        """
        Normalize a ticker.

        change and average are computed only when last and open are both
        known; percentage additionally needs open > 0 and vwap needs
        volume > 0.
        """
        if market is not None:
            symbol: Optional[str] = market.symbol
        else:
            symbol, market = self._resolve_symbol(safe_string(raw, "symbol"), None)

        base_volume = safe_decimal(raw, "volume")
        quote_volume = safe_decimal(raw, "volumeQuote")
        open_ = safe_decimal(raw, "open")
        last = safe_decimal(raw, "last")

        change: Optional[Decimal] = None
        percentage: Optional[Decimal] = None
        average: Optional[Decimal] = None
        if last is not None and open_ is not None:
            change = last - open_
            average = (last + open_) / 2
            if open_ > 0:
                percentage = change / open_ * 100

        vwap: Optional[Decimal] = None
        if quote_volume is not None and base_volume is not None and base_volume > 0:
            vwap = quote_volume / base_volume

        return Ticker(
            symbol=symbol,
            timestamp=parse8601(raw.get("timestamp")),
            high=safe_decimal(raw, "high"),
            low=safe_decimal(raw, "low"),
            bid=safe_decimal(raw, "bid"),
            ask=safe_decimal(raw, "ask"),
            vwap=vwap,
            open=open_,
            close=last,
            last=last,
            change=change,
            percentage=percentage,
            average=average,
            base_volume=base_volume,
            quote_volume=quote_volume,
            info=raw,
        )

    @staticmethod
    def parse_ohlcv(raw: Dict[str, Any]) -> Candle:
        """
        Normalize a candle.

        HitBTC names the extremes ``max`` and ``min``.
        """
        return Candle(
            timestamp=parse8601(raw.get("timestamp")),
            open=safe_decimal(raw, "open"),
            high=safe_decimal(raw, "max"),
            low=safe_decimal(raw, "min"),
            close=safe_decimal(raw, "close"),
            volume=safe_decimal(raw, "volume"),
        )

    @staticmethod
    def parse_order_book(raw: Dict[str, Any], symbol: str) -> OrderBook:
        """
        Normalize GET /public/orderbook/{symbol}.

        Format:
            {"ask": [{"price": "0.046002", "size": "0.088"}],
             "bid": [{"price": "0.046001", "size": "0.005"}],
             "timestamp": "2018-11-19T05:00:28.193Z"}
        """
        try:
            bids = [
                PriceLevel(price=Decimal(str(level["price"])), amount=Decimal(str(level["size"])))
                for level in raw.get("bid", [])
            ]
            asks = [
                PriceLevel(price=Decimal(str(level["price"])), amount=Decimal(str(level["size"])))
                for level in raw.get("ask", [])
            ]
        except KeyError as e:
            logger.error(
                "orderbook_normalization_failed_missing_field",
                exchange=EXCHANGE_ID,
                symbol=symbol,
                missing_field=str(e),
            )
            raise ValueError(f"Missing required field in HitBTC order book: {e}") from e

        return OrderBook(
            symbol=symbol,
            timestamp=parse8601(raw.get("timestamp")),
            bids=bids,
            asks=asks,
        )

    # ------------------------------------------------------------------
    # Trades and orders
    # ------------------------------------------------------------------

    def parse_trade(self, raw: Dict[str, Any], market: Optional[Market] = None) -> Trade:
        """
        Normalize a public trade, a private trade or an embedded fill.

        The symbol comes from the market table when the raw symbol is known,
        otherwise the raw symbol is kept. A fee is attached only when the
        response carries one; its currency is the market's fee currency.
        """
        trade_id = safe_string(raw, "id")
        if trade_id is None:
            raise ValueError("Missing required field in HitBTC trade: 'id'")

        symbol, market = self._resolve_symbol(safe_string(raw, "symbol"), market)

        price = safe_decimal(raw, "price")
        amount = safe_decimal(raw, "quantity")
        cost: Optional[Decimal] = None
        if price is not None and amount is not None:
            cost = price * amount

        fee: Optional[Fee] = None
        fee_cost = safe_decimal(raw, "fee")
        if fee_cost is not None:
            fee = Fee(cost=fee_cost, currency=market.fee_currency if market else None)

        return Trade(
            id=trade_id,
            order=safe_string(raw, "clientOrderId"),
            timestamp=parse8601(raw.get("timestamp")),
            symbol=symbol,
            side=safe_string(raw, "side"),
            price=price,
            amount=amount,
            cost=cost,
            fee=fee,
            info=raw,
        )

    def parse_trades(
        self,
        raws: List[Dict[str, Any]],
        market: Optional[Market] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        """Normalize a list of trades, sorted by time, with since / limit applied."""
        trades = [self.parse_trade(raw, market) for raw in raws]
        return filter_by_since_limit(trades, since, limit)

    def parse_order(self, raw: Dict[str, Any], market: Optional[Market] = None) -> Order:
        """
        Normalize an order.

        The client order id is the order id. When the price is missing the
        last known price of the cached order is reused. Embedded fills
        (``tradesReport``) replace the order-level cost with the sum of the
        fills and yield the total fee and the average price; a market order
        without price takes the average as its price.

        Raises:
            ValueError: If clientOrderId is missing or numbers are invalid.
        """
        order_id = safe_string(raw, "clientOrderId")
        if order_id is None:
            logger.error(
                "order_normalization_failed_missing_field",
                exchange=EXCHANGE_ID,
                missing_field="clientOrderId",
            )
            raise ValueError("Missing required field in HitBTC order: 'clientOrderId'")

        symbol, market = self._resolve_symbol(safe_string(raw, "symbol"), market)

        amount = safe_decimal(raw, "quantity")
        filled = safe_decimal(raw, "cumQuantity")
        status = parse_order_status(safe_string(raw, "status"))
        order_type = safe_string(raw, "type")

        price = safe_decimal(raw, "price")
        if price is None and order_id in self.orders:
            price = self.orders.last_known_price(order_id, symbol)

        remaining: Optional[Decimal] = None
        cost: Optional[Decimal] = None
        if amount is not None and filled is not None:
            remaining = amount - filled
            if price is not None:
                cost = filled * price

        fee: Optional[Fee] = None
        average: Optional[Decimal] = None
        trades: Optional[List[Trade]] = None

        raw_trades = raw.get("tradesReport")
        if raw_trades is not None:
            trades = [
                trade if trade.order is not None else trade.model_copy(update={"order": order_id})
                for trade in self.parse_trades(raw_trades, market)
            ]
            cost = decimal_sum(trade.cost for trade in trades)

            fee_cost: Optional[Decimal] = None
            if trades:
                fee_cost = decimal_sum(trade.fee.cost if trade.fee else None for trade in trades)

            if filled is not None and filled > 0:
                average = cost / filled
                if order_type == "market" and price is None:
                    price = average

            if fee_cost is not None:
                fee = Fee(cost=fee_cost, currency=market.quote if market else None)

        return Order(
            id=order_id,
            client_order_id=order_id,
            timestamp=parse8601(raw.get("createdAt")),
            last_trade_timestamp=parse8601(raw.get("updatedAt")),
            status=status,
            symbol=symbol,
            type=order_type,
            side=safe_string(raw, "side"),
            price=price,
            average=average,
            amount=amount,
            cost=cost,
            filled=filled,
            remaining=remaining,
            fee=fee,
            trades=trades,
            info=raw,
        )

    def parse_orders(
        self,
        raws: List[Dict[str, Any]],
        market: Optional[Market] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """Normalize a list of orders, sorted by time, with since / limit applied."""
        orders = [self.parse_order(raw, market) for raw in raws]
        return filter_by_since_limit(orders, since, limit)

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    def parse_balance(self, raws: List[Dict[str, Any]], account_type: str) -> Balance:
        """
        Normalize a balance list.

        Format:
            [{"currency": "ETH", "available": "10.000000000", "reserved": "0.560000000"}]
        """
        currencies: Dict[str, BalanceEntry] = {}
        for raw in raws:
            code = self.markets.currency_code(safe_string(raw, "currency"))
            if code is None:
                continue
            currencies[code] = BalanceEntry(
                free=safe_decimal(raw, "available"),
                used=safe_decimal(raw, "reserved"),
            )
        return Balance(account_type=account_type, currencies=currencies, info=raws)

    def parse_deposit_address(self, raw: Dict[str, Any], code: str) -> DepositAddress:
        """
        Normalize a deposit address; ``paymentId`` is the tag.

        Raises:
            InvalidAddress: If the address is missing or malformed.
        """
        address = check_address(safe_string(raw, "address"))
        return DepositAddress(
            currency=code,
            address=address,
            tag=safe_string(raw, "paymentId"),
            info=raw,
        )

    def parse_transaction(self, raw: Dict[str, Any], code: Optional[str] = None) -> Transaction:
        """
        Normalize a ledger entry.

        Status: pending / failed / success -> ok.
        Type: payin -> deposit, payout / withdraw -> withdrawal.
        Other values pass through unchanged.
        """
        transaction_id = safe_string(raw, "id")
        if transaction_id is None:
            raise ValueError("Missing required field in HitBTC transaction: 'id'")

        currency_code = self.markets.currency_code(safe_string(raw, "currency")) or code

        fee: Optional[Fee] = None
        fee_cost = safe_decimal(raw, "fee")
        if fee_cost is not None:
            fee = Fee(cost=fee_cost, currency=currency_code)

        return Transaction(
            id=transaction_id,
            txid=safe_string(raw, "hash"),
            timestamp=parse8601(raw.get("createdAt")),
            updated=parse8601(raw.get("updatedAt")),
            address=safe_string(raw, "address"),
            tag=None,
            type=parse_transaction_type(safe_string(raw, "type")),
            amount=safe_decimal(raw, "amount"),
            currency=currency_code,
            status=parse_transaction_status(safe_string(raw, "status")),
            fee=fee,
            info=raw,
        )

    def parse_transactions(
        self,
        raws: List[Dict[str, Any]],
        code: Optional[str] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Transaction]:
        """Normalize ledger entries, keeping only ``code`` when given."""
        transactions = [self.parse_transaction(raw, code) for raw in raws]
        if code is not None:
            transactions = [t for t in transactions if t.currency == code]
        return filter_by_since_limit(transactions, since, limit)
