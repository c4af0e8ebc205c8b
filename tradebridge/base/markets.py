"""
Session-scoped market and currency metadata cache.

Market metadata is loaded once per adapter session and then only read.
Lookups go both ways: unified symbol to exchange id for outgoing requests,
exchange id to unified symbol for incoming responses.
"""

from typing import Dict, Iterable, List, Mapping, Optional

import structlog

from tradebridge.errors import BadRequest, BadSymbol
from tradebridge.models.market import Currency, Market

logger = structlog.get_logger(__name__)


class MarketCache:
    """
    In-memory market / currency lookup tables.

    Attributes:
        exchange_id: Owning adapter's exchange identifier.
        common_currencies: Exchange currency id -> unified code aliases.

    Example:
        >>> cache = MarketCache("hitbtc", {"XBT": "BTC"})
        >>> cache.currency_code("XBT")
        'BTC'
    """

    def __init__(
        self,
        exchange_id: str,
        common_currencies: Optional[Mapping[str, str]] = None,
    ):
        self.exchange_id = exchange_id
        self.common_currencies: Dict[str, str] = dict(common_currencies or {})

        self._markets: Dict[str, Market] = {}
        self._markets_by_id: Dict[str, Market] = {}
        self._currencies: Dict[str, Currency] = {}
        self._currencies_by_id: Dict[str, Currency] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        """True once markets have been loaded."""
        return self._loaded

    @property
    def symbols(self) -> List[str]:
        """Sorted list of unified symbols."""
        return sorted(self._markets)

    @property
    def markets(self) -> Dict[str, Market]:
        """Markets keyed by unified symbol."""
        return dict(self._markets)

    @property
    def currencies(self) -> Dict[str, Currency]:
        """Currencies keyed by unified code."""
        return dict(self._currencies)

    def load(self, markets: Iterable[Market], currencies: Iterable[Currency] = ()) -> None:
        """
        Replace the cached metadata.

        Args:
            markets: Parsed markets.
            currencies: Parsed currencies.
        """
        self._markets = {m.symbol: m for m in markets}
        self._markets_by_id = {m.id: m for m in self._markets.values()}
        self._currencies = {c.code: c for c in currencies}
        self._currencies_by_id = {c.id: c for c in self._currencies.values()}
        self._loaded = True

        logger.debug(
            "market_cache_loaded",
            exchange=self.exchange_id,
            markets=len(self._markets),
            currencies=len(self._currencies),
        )

    def market(self, symbol: str) -> Market:
        """
        Look up a market by unified symbol or exchange id.

        Raises:
            BadSymbol: If the market is unknown.
        """
        market = self._markets.get(symbol) or self._markets_by_id.get(symbol)
        if market is None:
            raise BadSymbol(
                f"{self.exchange_id} does not have market symbol {symbol}",
                exchange_id=self.exchange_id,
            )
        return market

    def market_by_id(self, market_id: Optional[str]) -> Optional[Market]:
        """Look up a market by exchange id; None if unknown."""
        if market_id is None:
            return None
        return self._markets_by_id.get(market_id)

    def currency(self, code: str) -> Currency:
        """
        Look up a currency by unified code.

        Raises:
            BadRequest: If the currency is unknown.
        """
        currency = self._currencies.get(code)
        if currency is None:
            raise BadRequest(
                f"{self.exchange_id} does not have currency code {code}",
                exchange_id=self.exchange_id,
            )
        return currency

    def currency_code(self, currency_id: Optional[str]) -> Optional[str]:
        """
        Unified code for an exchange currency id.

        Known currencies resolve through the loaded table, everything else
        through the common-currency aliases.
        """
        if currency_id is None:
            return None
        currency = self._currencies_by_id.get(currency_id)
        if currency is not None:
            return currency.code
        code = currency_id.upper()
        return self.common_currencies.get(code, code)
