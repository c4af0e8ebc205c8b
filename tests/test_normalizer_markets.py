"""Tests for market, currency, balance and fee normalization."""

from decimal import Decimal

import pytest

from tests.samples import RAW_CURRENCIES, RAW_SYMBOLS
from tradebridge.errors import InvalidAddress
from tradebridge.models.market import CurrencyType


def test_parse_market(normalizer):
    market = normalizer.parse_market(RAW_SYMBOLS[0])

    assert market.id == "ETHBTC"
    assert market.symbol == "ETH/BTC"
    assert market.base_id == "ETH"
    assert market.precision.price == Decimal("0.000001")
    assert market.precision.amount == Decimal("0.001")
    assert market.limits.amount.min == Decimal("0.001")
    assert market.limits.price.min == Decimal("0.000001")
    assert market.limits.cost.min == Decimal("0.000000001")
    assert market.maker == Decimal("-0.0001")
    assert market.taker == Decimal("0.001")
    assert market.fee_currency == "BTC"


def test_parse_market_is_idempotent(normalizer):
    assert normalizer.parse_market(RAW_SYMBOLS[0]) == normalizer.parse_market(RAW_SYMBOLS[0])


def test_parse_market_applies_currency_aliases(normalizer):
    market = normalizer.parse_market(RAW_SYMBOLS[1])

    assert market.symbol == "BTC/USDT"
    assert market.quote_id == "USD"


def test_parse_market_without_increments(normalizer):
    raw = {"id": "XRPBTC", "baseCurrency": "XRP", "quoteCurrency": "BTC", "tickSize": "0.0000001"}

    market = normalizer.parse_market(raw)

    assert market.precision.amount is None
    assert market.limits.cost.min is None
    assert market.maker is None
    assert market.taker is None


def test_parse_market_missing_id(normalizer):
    with pytest.raises(ValueError):
        normalizer.parse_market({"baseCurrency": "ETH", "quoteCurrency": "BTC"})


def test_parse_currency(normalizer):
    currency = normalizer.parse_currency(RAW_CURRENCIES[0])

    assert currency.code == "ETH"
    assert currency.name == "Ethereum"
    assert currency.type == CurrencyType.CRYPTO
    assert currency.active is True
    assert currency.fee == Decimal("0.00958")
    assert currency.precision == 8
    assert currency.limits.amount.min == Decimal("0.00000001")
    assert currency.limits.withdraw.max == Decimal("100000000")


@pytest.mark.parametrize(
    "overrides",
    [
        {"payinEnabled": False},
        {"payoutEnabled": False},
        {"transferEnabled": None},
        {"disabled": True},
    ],
)
def test_currency_inactive(normalizer, overrides):
    raw = dict(RAW_CURRENCIES[0], **overrides)

    assert normalizer.parse_currency(raw).active is False


def test_fiat_currency_alias(normalizer):
    currency = normalizer.parse_currency(RAW_CURRENCIES[2])

    assert currency.code == "USDT"
    assert currency.type == CurrencyType.FIAT


def test_parse_balance(normalizer):
    raw = [
        {"currency": "ETH", "available": "10.000000000", "reserved": "0.560000000"},
        {"currency": "USD", "available": "1", "reserved": "0"},
    ]

    balance = normalizer.parse_balance(raw, "trading")

    assert balance.account_type == "trading"
    assert balance.currencies["ETH"].total == Decimal("10.56")
    assert balance.currencies["USDT"].free == Decimal("1")
    assert "BTC" not in balance.currencies


def test_parse_trading_fee(normalizer):
    fee = normalizer.parse_trading_fee(
        {"takeLiquidityRate": "0.001", "provideLiquidityRate": "-0.0001"}, "ETH/BTC"
    )

    assert fee.maker == Decimal("-0.0001")
    assert fee.taker == Decimal("0.001")


def test_parse_deposit_address(normalizer):
    address = normalizer.parse_deposit_address(
        {"address": "NXT-G22U-BYF7-H8D9-3J27W", "paymentId": "616598347865"}, "ETH"
    )

    assert address.currency == "ETH"
    assert address.tag == "616598347865"


@pytest.mark.parametrize("value", [None, "", "0xabc def"])
def test_parse_deposit_address_rejects_bad_address(normalizer, value):
    with pytest.raises(InvalidAddress):
        normalizer.parse_deposit_address({"address": value}, "ETH")
