"""
HitBTC REST API v2 endpoint catalog.

Purely declarative: route tables, the named endpoints used by the adapter,
candle timeframes, balance accounts and currency aliases.

Base URL: https://api.hitbtc.com
    Public:  /api/2/public/{path}
    Private: /api/2/{path}   (HTTP Basic auth)
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, NamedTuple, Tuple

EXCHANGE_ID = "hitbtc"
API_URL = "https://api.hitbtc.com"
API_VERSION = "2"

# Minimum interval between requests
RATE_LIMIT_MS = 1500


class Endpoint(NamedTuple):
    """One REST route: API section (public/private), HTTP verb and path template."""

    api: str
    method: str
    path: str


PUBLIC_API: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "GET": (
        "symbol",
        "symbol/{symbol}",
        "currency",
        "currency/{currency}",
        "ticker",
        "ticker/{symbol}",
        "trades",
        "trades/{symbol}",
        "orderbook",
        "orderbook/{symbol}",
        "candles",
        "candles/{symbol}",
    ),
})

PRIVATE_API: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "GET": (
        "trading/balance",
        "order",
        "order/{clientOrderId}",
        "trading/fee/all",
        "trading/fee/{symbol}",
        "history/order",
        "history/trades",
        "history/order/{orderId}/trades",
        "account/balance",
        "account/crypto/address/{currency}",
        "account/crypto/is-mine/{address}",
        "account/transactions",
        "account/transactions/{id}",
        "sub-acc",
        "sub-acc/acl",
        "sub-acc/balance/{subAccountUserID}",
        "sub-acc/deposit-address/{subAccountUserId}/{currency}",
    ),
    "POST": (
        "order",
        "account/crypto/address/{currency}",
        "account/crypto/withdraw",
        "account/crypto/transfer-convert",
        "account/transfer",
        "sub-acc/freeze",
        "sub-acc/activate",
        "sub-acc/transfer",
    ),
    "PUT": (
        "order/{clientOrderId}",
        "account/crypto/withdraw/{id}",
        "sub-acc/acl/{subAccountUserId}",
    ),
    "DELETE": (
        "order",
        "order/{clientOrderId}",
        "account/crypto/withdraw/{id}",
    ),
    "PATCH": (
        "order/{clientOrderId}",
    ),
})

API: Mapping[str, Mapping[str, Tuple[str, ...]]] = MappingProxyType({
    "public": PUBLIC_API,
    "private": PRIVATE_API,
})


def is_declared(endpoint: Endpoint) -> bool:
    """True if the endpoint appears in the route tables."""
    section = API.get(endpoint.api, {})
    return endpoint.path in section.get(endpoint.method, ())


# Public
SYMBOLS = Endpoint("public", "GET", "symbol")
CURRENCIES = Endpoint("public", "GET", "currency")
TICKERS = Endpoint("public", "GET", "ticker")
TICKER = Endpoint("public", "GET", "ticker/{symbol}")
TRADES = Endpoint("public", "GET", "trades/{symbol}")
ORDER_BOOK = Endpoint("public", "GET", "orderbook/{symbol}")
CANDLES = Endpoint("public", "GET", "candles/{symbol}")

# Private
TRADING_BALANCE = Endpoint("private", "GET", "trading/balance")
ACCOUNT_BALANCE = Endpoint("private", "GET", "account/balance")
TRADING_FEE = Endpoint("private", "GET", "trading/fee/{symbol}")
OPEN_ORDERS = Endpoint("private", "GET", "order")
OPEN_ORDER = Endpoint("private", "GET", "order/{clientOrderId}")
CREATE_ORDER = Endpoint("private", "POST", "order")
EDIT_ORDER = Endpoint("private", "PATCH", "order/{clientOrderId}")
CANCEL_ORDER = Endpoint("private", "DELETE", "order/{clientOrderId}")
ORDER_HISTORY = Endpoint("private", "GET", "history/order")
TRADE_HISTORY = Endpoint("private", "GET", "history/trades")
ORDER_TRADES = Endpoint("private", "GET", "history/order/{orderId}/trades")
DEPOSIT_ADDRESS = Endpoint("private", "GET", "account/crypto/address/{currency}")
CREATE_DEPOSIT_ADDRESS = Endpoint("private", "POST", "account/crypto/address/{currency}")
WITHDRAW = Endpoint("private", "POST", "account/crypto/withdraw")
TRANSACTIONS = Endpoint("private", "GET", "account/transactions")


class AccountType(str, Enum):
    """Balance accounts: trading (exchange) and main account (funding)."""

    TRADING = "trading"
    ACCOUNT = "account"


BALANCE_ENDPOINTS: Mapping[AccountType, Endpoint] = MappingProxyType({
    AccountType.TRADING: TRADING_BALANCE,
    AccountType.ACCOUNT: ACCOUNT_BALANCE,
})

# Unified timeframe -> HitBTC candle period
TIMEFRAMES: Mapping[str, str] = MappingProxyType({
    "1m": "M1",
    "3m": "M3",
    "5m": "M5",
    "15m": "M15",
    "30m": "M30",
    "1h": "H1",
    "4h": "H4",
    "1d": "D1",
    "1w": "D7",
    "1M": "1M",
})

# HitBTC currency id -> unified code
COMMON_CURRENCIES: Mapping[str, str] = MappingProxyType({
    "BET": "DAO.Casino",
    "CAT": "BitClave",
    "CPT": "Cryptaur",
    "DRK": "DASH",
    "EMGO": "MGO",
    "GET": "Themis",
    "HSR": "HC",
    "LNC": "LinkerCoin",
    "PLA": "PlayChip",
    "UNC": "Unigame",
    "USD": "USDT",
    "XBT": "BTC",
})
