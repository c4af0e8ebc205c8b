"""
HitBTC error classifier.

Maps a failed HTTP response to the unified exception hierarchy. HitBTC
reports failures as:

    {"error": {"code": 20002, "message": "Order not found", "description": ""}}

Decision order:
    1. status < 400 or 429            -> None (429 is left to the transport's
                                          generic rate-limit handling)
    2. error.code in ERROR_CODES      -> mapped exception
    3. status 503 / 504               -> ExchangeNotAvailable
    4. "Duplicate clientOrderId"      -> InvalidOrder
    5. anything else                  -> ExchangeError

Pure function of its inputs; performs no I/O.
"""

from types import MappingProxyType
from typing import Any, Mapping, Optional, Type

import structlog

from tradebridge.adapters.hitbtc.endpoints import EXCHANGE_ID
from tradebridge.errors import (
    AuthenticationError,
    BadSymbol,
    ExchangeError,
    ExchangeNotAvailable,
    InsufficientFunds,
    InvalidOrder,
    OrderNotFound,
    PermissionDenied,
    RequestTimeout,
)

logger = structlog.get_logger(__name__)

ERROR_CODES: Mapping[str, Type[ExchangeError]] = MappingProxyType({
    "504": RequestTimeout,  # Gateway Timeout
    "1002": AuthenticationError,  # Authorization failed
    "1003": PermissionDenied,  # Action is forbidden for this API key
    "2001": BadSymbol,  # Symbol not found
    "2010": InvalidOrder,  # Quantity not a valid number
    "2011": InvalidOrder,  # Quantity too low
    "2020": InvalidOrder,  # Price not a valid number
    "20001": InsufficientFunds,  # Insufficient funds
    "20002": OrderNotFound,  # Order not found
})

UNAVAILABLE_STATUSES = frozenset({503, 504})
RATE_LIMIT_STATUS = 429
DUPLICATE_CLIENT_ORDER_ID = "Duplicate clientOrderId"


class HitBTCErrorClassifier:
    """
    Classifies HitBTC error responses.

    Example:
        >>> classifier = HitBTCErrorClassifier()
        >>> error = classifier(504, body, {"error": {"code": 504}})
        >>> type(error).__name__
        'RequestTimeout'
    """

    def __init__(
        self,
        exchange_id: str = EXCHANGE_ID,
        codes: Mapping[str, Type[ExchangeError]] = ERROR_CODES,
    ):
        self.exchange_id = exchange_id
        self.codes = codes

    def __call__(self, status: int, body: str, response: Any) -> Optional[ExchangeError]:
        return self.classify(status, body, response)

    def classify(self, status: int, body: str, response: Any) -> Optional[ExchangeError]:
        """
        Select the exception for a failed response.

        Args:
            status: HTTP status code.
            body: Raw response body.
            response: Decoded JSON body, or None.

        Returns:
            Optional[ExchangeError]: Exception to raise, or None to defer to
            the transport's generic handling.
        """
        if status < 400 or status == RATE_LIMIT_STATUS:
            return None

        error_cls: Type[ExchangeError] = ExchangeError
        error = response.get("error") if isinstance(response, dict) else None
        code: Optional[str] = None
        message: Optional[str] = None
        if isinstance(error, dict):
            code = str(error["code"]) if error.get("code") is not None else None
            message = error.get("message")

        if code is not None and code in self.codes:
            error_cls = self.codes[code]
        elif status in UNAVAILABLE_STATUSES:
            error_cls = ExchangeNotAvailable
        elif message == DUPLICATE_CLIENT_ORDER_ID:
            error_cls = InvalidOrder

        logger.debug(
            "error_classified",
            exchange=self.exchange_id,
            status=status,
            code=code,
            error=error_cls.__name__,
        )

        return error_cls(
            f"{self.exchange_id} {body}",
            exchange_id=self.exchange_id,
            status=status,
            body=body,
        )
