"""Tests for HitBTCAdapter unified operations with a mocked transport."""

import json
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from tests.samples import RAW_CURRENCIES, RAW_SYMBOLS, sent_request
from tradebridge.adapters.hitbtc import AccountType, HitBTCAdapter
from tradebridge.errors import (
    ArgumentsRequired,
    AuthenticationError,
    BadRequest,
    BadSymbol,
    ExchangeError,
    InvalidAddress,
    InvalidOrder,
    NotSupported,
    OrderNotFound,
)


def raw_order(**overrides):
    raw = {
        "id": "840450210",
        "clientOrderId": "c1837634ef81472a9cd13c81e7b91401",
        "symbol": "ETHBTC",
        "side": "buy",
        "status": "new",
        "type": "limit",
        "timeInForce": "GTC",
        "quantity": "0.020",
        "price": "0.046001",
        "cumQuantity": "0.000",
        "createdAt": "2017-05-12T17:17:57.437Z",
        "updatedAt": "2017-05-12T17:17:57.437Z",
    }
    raw.update(overrides)
    return raw


def sent_body(adapter):
    return json.loads(sent_request(adapter).body)


def test_default_config():
    config = HitBTCAdapter.default_config()

    assert config.id == "hitbtc"
    assert config.api.public == "https://api.hitbtc.com"
    assert config.version == "2"
    assert config.connection.rate_limit_ms == 1500
    assert config.options.default_time_in_force == "FOK"
    assert not config.credentials.is_complete


@pytest.mark.asyncio
async def test_load_markets_once():
    adapter = HitBTCAdapter()
    adapter._transport.fetch = AsyncMock(side_effect=[RAW_CURRENCIES, RAW_SYMBOLS])

    markets = await adapter.load_markets()
    again = await adapter.load_markets()

    assert sorted(markets) == ["BTC/USDT", "ETH/BTC"]
    assert again == markets
    assert adapter._transport.fetch.await_count == 2


@pytest.mark.asyncio
async def test_fetch_ticker(adapter):
    adapter._transport.fetch.return_value = {
        "symbol": "ETHBTC", "last": "0.050042", "open": "0.047800", "timestamp": "2017-10-18T10:06:40.280Z",
    }

    ticker = await adapter.fetch_ticker("ETH/BTC")

    assert sent_request(adapter).url == "https://api.hitbtc.com/api/2/public/ticker/ETHBTC"
    assert ticker.symbol == "ETH/BTC"
    assert ticker.last == Decimal("0.050042")


@pytest.mark.asyncio
async def test_fetch_ticker_message_is_error(adapter):
    adapter._transport.fetch.return_value = {"message": "Symbol not found"}

    with pytest.raises(ExchangeError, match="Symbol not found"):
        await adapter.fetch_ticker("ETH/BTC")


@pytest.mark.asyncio
async def test_unknown_symbol_makes_no_request(adapter):
    with pytest.raises(BadSymbol):
        await adapter.fetch_order_book("DOGE/BTC")

    adapter._transport.fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_fetch_tickers_filters_symbols(adapter):
    adapter._transport.fetch.return_value = [
        {"symbol": "ETHBTC", "last": "0.05"},
        {"symbol": "BTCUSD", "last": "6500"},
        {"symbol": "XYZABC", "last": "1"},
        {"last": "2"},
    ]

    tickers = await adapter.fetch_tickers()
    filtered = await adapter.fetch_tickers(["BTC/USDT"])

    assert sorted(tickers) == ["BTC/USDT", "ETH/BTC", "XYZABC"]
    assert list(filtered) == ["BTC/USDT"]


@pytest.mark.asyncio
async def test_fetch_trades_since(adapter):
    adapter._transport.fetch.return_value = [
        {"id": 2, "price": "0.046001", "quantity": "0.2", "side": "sell", "timestamp": "2017-04-14T12:18:41.000Z"},
        {"id": 1, "price": "0.046000", "quantity": "0.1", "side": "buy", "timestamp": "2017-04-14T12:18:40.426Z"},
    ]
    since = datetime(2017, 4, 14, 12, 18, tzinfo=timezone.utc)

    trades = await adapter.fetch_trades("ETH/BTC", since=since, limit=10)

    url = sent_request(adapter).url
    assert "sort=ASC" in url
    assert "from=2017-04-14T12%3A18%3A00.000Z" in url
    assert "limit=10" in url
    assert [t.id for t in trades] == ["1", "2"]
    assert trades[0].symbol == "ETH/BTC"


@pytest.mark.asyncio
async def test_fetch_ohlcv(adapter):
    adapter._transport.fetch.return_value = [
        {"timestamp": "2015-08-20T19:01:00.000Z", "open": "0.006", "close": "0.006",
         "min": "0.006", "max": "0.006", "volume": "0.003"},
    ]

    candles = await adapter.fetch_ohlcv("ETH/BTC", "1h")

    assert "period=H1" in sent_request(adapter).url
    assert candles[0].high == Decimal("0.006")


@pytest.mark.asyncio
async def test_fetch_ohlcv_unsupported_timeframe(adapter):
    with pytest.raises(NotSupported):
        await adapter.fetch_ohlcv("ETH/BTC", "2h")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "account_type,path",
    [(AccountType.TRADING, "/api/2/trading/balance"), ("account", "/api/2/account/balance")],
)
async def test_fetch_balance_account(adapter, account_type, path):
    adapter._transport.fetch.return_value = [
        {"currency": "USD", "available": "100", "reserved": "5"},
    ]

    balance = await adapter.fetch_balance(account_type)

    assert sent_request(adapter).url.endswith(path)
    assert balance.currencies["USDT"].total == Decimal("105")


@pytest.mark.asyncio
async def test_fetch_balance_unknown_account(adapter):
    with pytest.raises(NotSupported) as exc_info:
        await adapter.fetch_balance("margin")

    assert exc_info.value.exchange_id == "hitbtc"
    assert isinstance(exc_info.value.__cause__, ValueError)
    adapter._transport.fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_private_call_requires_credentials():
    adapter = HitBTCAdapter()
    adapter._markets.load([])
    adapter._transport.fetch = AsyncMock()

    with pytest.raises(AuthenticationError):
        await adapter.fetch_balance()


@pytest.mark.asyncio
async def test_create_limit_order(adapter):
    adapter._transport.fetch.return_value = raw_order()

    order = await adapter.create_order("ETH/BTC", "limit", "buy", Decimal("0.0209"), Decimal("0.0460007"))

    request = sent_request(adapter)
    body = sent_body(adapter)
    assert request.method == "POST"
    assert len(body["clientOrderId"]) == 32
    assert body["symbol"] == "ETHBTC"
    assert body["quantity"] == "0.020"
    assert body["price"] == "0.046001"
    assert "timeInForce" not in body
    assert order.id in adapter.orders


@pytest.mark.asyncio
async def test_create_market_order_sends_time_in_force(adapter):
    adapter._transport.fetch.return_value = raw_order(type="market", status="filled", price=None)

    await adapter.create_order("ETH/BTC", "market", "sell", Decimal("1"))

    body = sent_body(adapter)
    assert body["timeInForce"] == "FOK"
    assert "price" not in body


@pytest.mark.asyncio
async def test_create_limit_order_without_price(adapter):
    with pytest.raises(ArgumentsRequired):
        await adapter.create_order("ETH/BTC", "limit", "buy", Decimal("1"))

    adapter._transport.fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_rejected_order_raises(adapter):
    adapter._transport.fetch.return_value = raw_order(status="rejected")

    with pytest.raises(InvalidOrder):
        await adapter.create_order("ETH/BTC", "limit", "buy", Decimal("1"), Decimal("0.05"))

    assert len(adapter.orders) == 0


@pytest.mark.asyncio
async def test_amount_below_lot_size(adapter):
    with pytest.raises(InvalidOrder) as exc_info:
        await adapter.create_order("ETH/BTC", "limit", "buy", Decimal("0.0001"), Decimal("0.05"))

    assert exc_info.value.exchange_id == "hitbtc"
    assert str(exc_info.value).startswith("hitbtc ")
    adapter._transport.fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_edit_order_amount_below_lot_size(adapter):
    with pytest.raises(InvalidOrder) as exc_info:
        await adapter.edit_order("abc", "ETH/BTC", amount=Decimal("0.0001"))

    assert exc_info.value.exchange_id == "hitbtc"


@pytest.mark.asyncio
async def test_edit_order(adapter):
    adapter._transport.fetch.return_value = raw_order(price="0.047")

    order = await adapter.edit_order("c1837634ef81472a9cd13c81e7b91401", "ETH/BTC", price=Decimal("0.047"))

    request = sent_request(adapter)
    body = sent_body(adapter)
    assert request.method == "PATCH"
    assert request.url.endswith("/api/2/order/c1837634ef81472a9cd13c81e7b91401")
    assert len(body["requestClientId"]) == 32
    assert body["price"] == "0.047000"
    assert "quantity" not in body
    assert adapter.orders.get(order.id).price == Decimal("0.047")


@pytest.mark.asyncio
async def test_cancel_order(adapter):
    adapter._transport.fetch.return_value = raw_order(status="canceled")

    order = await adapter.cancel_order("c1837634ef81472a9cd13c81e7b91401")

    assert sent_request(adapter).method == "DELETE"
    assert order.status == "canceled"
    assert order.id in adapter.orders


@pytest.mark.asyncio
async def test_fetch_order_not_found(adapter):
    adapter._transport.fetch.return_value = []

    with pytest.raises(OrderNotFound):
        await adapter.fetch_order("missing")


@pytest.mark.asyncio
async def test_fetch_open_order(adapter):
    adapter._transport.fetch.return_value = raw_order()

    order = await adapter.fetch_open_order("c1837634ef81472a9cd13c81e7b91401")

    assert sent_request(adapter).url.endswith("/api/2/order/c1837634ef81472a9cd13c81e7b91401")
    assert order.is_open


@pytest.mark.asyncio
async def test_fetch_closed_orders_filters_status(adapter):
    adapter._transport.fetch.return_value = [
        raw_order(clientOrderId="a", status="filled"),
        raw_order(clientOrderId="b", status="new"),
        raw_order(clientOrderId="c", status="canceled"),
        raw_order(clientOrderId="d", status="expired"),
    ]

    orders = await adapter.fetch_closed_orders("ETH/BTC")

    assert sorted(order.id for order in orders) == ["a", "c"]
    assert "symbol=ETHBTC" in sent_request(adapter).url


@pytest.mark.asyncio
async def test_fetch_order_trades_not_found(adapter):
    adapter._transport.fetch.return_value = []

    with pytest.raises(OrderNotFound):
        await adapter.fetch_order_trades("816088377")

    assert sent_request(adapter).url.endswith("/api/2/history/order/816088377/trades")


@pytest.mark.asyncio
async def test_withdraw_with_tag(adapter):
    adapter._transport.fetch.return_value = {"id": "d2ce578f-647d-4fa0-b1aa-4a27e5ee597b"}

    receipt = await adapter.withdraw("ETH", Decimal("0.5"), "0xC5a59b21948C1d230c8C54f05590000Eb3e1252c", "12345")

    body = sent_body(adapter)
    assert body == {
        "currency": "ETH",
        "amount": "0.5",
        "address": "0xC5a59b21948C1d230c8C54f05590000Eb3e1252c",
        "paymentId": "12345",
    }
    assert receipt.id == "d2ce578f-647d-4fa0-b1aa-4a27e5ee597b"


@pytest.mark.asyncio
async def test_withdraw_empty_tag_is_omitted(adapter):
    adapter._transport.fetch.return_value = {"id": "1"}

    await adapter.withdraw("ETH", Decimal("0.5"), "0xC5a59b21948C1d230c8C54f05590000Eb3e1252c", "")

    assert "paymentId" not in sent_body(adapter)


@pytest.mark.asyncio
async def test_withdraw_invalid_address(adapter):
    with pytest.raises(InvalidAddress):
        await adapter.withdraw("ETH", Decimal("0.5"), "0xC5a5 9b21")

    adapter._transport.fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_fetch_deposit_address(adapter):
    adapter._transport.fetch.return_value = {"address": "0xC5a59b21948C1d230c8C54f05590000Eb3e1252c"}

    address = await adapter.fetch_deposit_address("ETH")

    assert sent_request(adapter).url.endswith("/api/2/account/crypto/address/ETH")
    assert address.currency == "ETH"
    assert address.tag is None


@pytest.mark.asyncio
async def test_create_deposit_address_uses_currency_id(adapter):
    adapter._transport.fetch.return_value = {"address": "1BvBMSEYstWetqTFn5Au4m4GFg7xJaNVN2", "paymentId": "7"}

    address = await adapter.create_deposit_address("USDT")

    request = sent_request(adapter)
    assert request.method == "POST"
    assert request.url.endswith("/api/2/account/crypto/address/USD")
    assert address.currency == "USDT"
    assert address.tag == "7"


@pytest.mark.asyncio
async def test_unknown_currency(adapter):
    with pytest.raises(BadRequest):
        await adapter.fetch_deposit_address("DOGE")


@pytest.mark.asyncio
async def test_fetch_transactions(adapter):
    adapter._transport.fetch.return_value = [
        {"id": "1", "type": "payin", "status": "success", "currency": "ETH", "amount": "1",
         "createdAt": "2018-06-07T00:43:32.426Z"},
        {"id": "2", "type": "payout", "status": "pending", "currency": "BTC", "amount": "1",
         "createdAt": "2018-06-07T00:44:32.426Z"},
    ]
    since = datetime(2018, 6, 7, tzinfo=timezone.utc)

    transactions = await adapter.fetch_transactions("ETH", since=since)

    url = sent_request(adapter).url
    assert "asset=ETH" in url
    assert "startTime=1528329600000" in url
    assert [t.id for t in transactions] == ["1"]
    assert transactions[0].type == "deposit"
