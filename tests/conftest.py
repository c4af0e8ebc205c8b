"""Shared fixtures: a loaded normalizer and a preloaded adapter with a mocked transport."""

from unittest.mock import AsyncMock

import pytest

from tests.samples import load_sample_markets
from tradebridge.adapters.hitbtc import HitBTCAdapter, HitBTCNormalizer
from tradebridge.adapters.hitbtc.endpoints import COMMON_CURRENCIES, EXCHANGE_ID
from tradebridge.base.markets import MarketCache
from tradebridge.base.orders import OrderCache

pytest_plugins = ["pytest_asyncio"]


@pytest.fixture
def market_cache() -> MarketCache:
    return MarketCache(EXCHANGE_ID, COMMON_CURRENCIES)


@pytest.fixture
def order_cache() -> OrderCache:
    return OrderCache(max_size=10)


@pytest.fixture
def normalizer(market_cache, order_cache) -> HitBTCNormalizer:
    normalizer = HitBTCNormalizer(market_cache, order_cache)
    load_sample_markets(market_cache, normalizer)
    return normalizer


@pytest.fixture
def adapter() -> HitBTCAdapter:
    config = HitBTCAdapter.default_config().with_credentials("key", "secret")
    adapter = HitBTCAdapter(config)
    load_sample_markets(adapter._markets, adapter._normalizer)
    adapter._transport.fetch = AsyncMock()
    return adapter
