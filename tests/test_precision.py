"""Tests for tick-size precision helpers and field parsing."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from tradebridge.base.fields import iso8601, parse8601, safe_decimal, to_decimal
from tradebridge.base.precision import amount_to_precision, price_to_precision
from tradebridge.errors import InvalidOrder


def test_amount_truncates_to_lot():
    assert amount_to_precision(Decimal("0.0209"), Decimal("0.001")) == "0.020"
    assert amount_to_precision("250", Decimal("100")) == "200"


def test_amount_without_lot_is_unchanged():
    assert amount_to_precision("0.123456789", None) == "0.123456789"


def test_amount_below_lot_raises():
    with pytest.raises(InvalidOrder):
        amount_to_precision("0.0001", Decimal("0.001"))


def test_precision_error_carries_exchange_id():
    with pytest.raises(InvalidOrder) as exc_info:
        amount_to_precision("0.0001", Decimal("0.001"), "hitbtc")

    assert exc_info.value.exchange_id == "hitbtc"
    assert exc_info.value.message.startswith("hitbtc amount 0.0001")

    with pytest.raises(InvalidOrder) as exc_info:
        price_to_precision(None, Decimal("0.01"), "hitbtc")

    assert exc_info.value.exchange_id == "hitbtc"


def test_price_rounds_to_tick():
    assert price_to_precision("0.0464567", Decimal("0.000001")) == "0.046457"
    assert price_to_precision("0.047", Decimal("0.000001")) == "0.047000"
    assert price_to_precision("6500.005", Decimal("0.01")) == "6500.01"


def test_to_decimal():
    assert to_decimal("0.1") == Decimal("0.1")
    assert to_decimal(386394956) == Decimal("386394956")
    assert to_decimal("") is None
    assert to_decimal(None) is None
    with pytest.raises(ValueError):
        to_decimal("abc")
    with pytest.raises(ValueError):
        to_decimal(True)


def test_safe_decimal_missing_key():
    assert safe_decimal({}, "price") is None


def test_iso8601_roundtrip_format():
    value = datetime(2018, 10, 25, 16, 41, 44, 780000, tzinfo=timezone.utc)

    assert iso8601(value) == "2018-10-25T16:41:44.780Z"
    assert parse8601("2018-10-25T16:41:44.780Z") == value


def test_parse8601_invalid():
    assert parse8601("not a date") is None
    assert parse8601(None) is None
