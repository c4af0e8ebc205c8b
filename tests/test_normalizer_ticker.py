"""Tests for ticker, candle and order book normalization."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest


def raw_ticker(**overrides):
    raw = {
        "symbol": "ETHBTC",
        "ask": "0.050043",
        "bid": "0.050042",
        "last": "110",
        "open": "100",
        "low": "0.047800",
        "high": "0.051000",
        "volume": "2",
        "volumeQuote": "210",
        "timestamp": "2017-10-18T10:06:40.280Z",
    }
    raw.update(overrides)
    return raw


def test_ticker_change_average_percentage(normalizer):
    ticker = normalizer.parse_ticker(raw_ticker())

    assert ticker.symbol == "ETH/BTC"
    assert ticker.change == Decimal("10")
    assert ticker.average == Decimal("105")
    assert ticker.percentage == Decimal("10")
    assert ticker.close == ticker.last == Decimal("110")
    assert ticker.timestamp == datetime(2017, 10, 18, 10, 6, 40, 280000, tzinfo=timezone.utc)


def test_ticker_zero_open_has_no_percentage(normalizer):
    ticker = normalizer.parse_ticker(raw_ticker(open="0"))

    assert ticker.percentage is None
    assert ticker.change == Decimal("110")
    assert ticker.average == Decimal("55")


def test_ticker_without_last(normalizer):
    ticker = normalizer.parse_ticker(raw_ticker(last=None))

    assert ticker.change is None
    assert ticker.average is None
    assert ticker.percentage is None


def test_ticker_vwap(normalizer):
    assert normalizer.parse_ticker(raw_ticker()).vwap == Decimal("105")
    assert normalizer.parse_ticker(raw_ticker(volume="0")).vwap is None
    assert normalizer.parse_ticker(raw_ticker(volumeQuote=None)).vwap is None


def test_ticker_unknown_market_keeps_raw_symbol(normalizer):
    assert normalizer.parse_ticker(raw_ticker(symbol="XYZABC")).symbol == "XYZABC"


def test_parse_ohlcv_maps_max_and_min(normalizer):
    candle = normalizer.parse_ohlcv({
        "timestamp": "2015-08-20T19:06:00.000Z",
        "open": "0.0055",
        "close": "0.005",
        "min": "0.005",
        "max": "0.0055",
        "volume": "0.003",
        "volumeQuote": "0.0000155",
    })

    assert candle.high == Decimal("0.0055")
    assert candle.low == Decimal("0.005")
    assert candle.close == Decimal("0.005")
    assert candle.volume == Decimal("0.003")


def test_parse_order_book(normalizer):
    book = normalizer.parse_order_book(
        {
            "ask": [{"price": "0.046002", "size": "0.088"}, {"price": "0.046800", "size": "0.200"}],
            "bid": [{"price": "0.046001", "size": "0.005"}, {"price": "0.046000", "size": "0.200"}],
            "timestamp": "2018-11-19T05:00:28.193Z",
        },
        "ETH/BTC",
    )

    assert book.symbol == "ETH/BTC"
    assert book.best_bid == Decimal("0.046001")
    assert book.best_ask == Decimal("0.046002")
    assert book.bids[0].amount == Decimal("0.005")
    assert book.timestamp is not None


def test_parse_order_book_keeps_exchange_order(normalizer):
    book = normalizer.parse_order_book(
        {"bid": [{"price": "1", "size": "1"}, {"price": "2", "size": "1"}], "ask": []},
        "ETH/BTC",
    )

    assert [level.price for level in book.bids] == [Decimal("1"), Decimal("2")]
    assert book.best_bid == Decimal("2")
    assert book.best_ask is None


def test_parse_order_book_missing_size(normalizer):
    with pytest.raises(ValueError):
        normalizer.parse_order_book({"bid": [{"price": "1"}], "ask": []}, "ETH/BTC")
