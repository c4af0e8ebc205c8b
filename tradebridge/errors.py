"""
Unified exception hierarchy for exchange adapters.

Every exchange-reported failure is raised as a subclass of ExchangeError.
The exception carries the adapter's exchange identifier, the HTTP status
(when one is known) and the raw response body so that a failure can be
traced back to the exact server response.

Hierarchy:
    ExchangeError
    ├── AuthenticationError
    │   └── PermissionDenied
    ├── BadRequest
    │   ├── BadSymbol
    │   ├── ArgumentsRequired
    │   └── InvalidAddress
    ├── InvalidOrder
    │   └── OrderNotFound
    ├── InsufficientFunds
    ├── NotSupported
    └── NetworkError
        ├── RequestTimeout
        ├── ExchangeNotAvailable
        └── RateLimitExceeded

Example:
    >>> try:
    ...     await adapter.cancel_order("f8dbaab336d44d5ba3ff578098a68454")
    ... except OrderNotFound as e:
    ...     print(e.exchange_id, e.body)
"""

from typing import Optional


class ExchangeError(Exception):
    """
    Base class for errors reported by (or about) an exchange.

    Attributes:
        message: Human readable message.
        exchange_id: Identifier of the adapter that raised the error.
        status: HTTP status code of the failed response, if any.
        body: Raw response body, if any.
    """

    def __init__(
        self,
        message: str,
        exchange_id: Optional[str] = None,
        status: Optional[int] = None,
        body: Optional[str] = None,
    ):
        """
        Initialize ExchangeError.

        Args:
            message: Error message.
            exchange_id: Exchange identifier (e.g., "hitbtc").
            status: HTTP status code.
            body: Raw response body.
        """
        self.message = message
        self.exchange_id = exchange_id
        self.status = status
        self.body = body
        super().__init__(message)


class AuthenticationError(ExchangeError):
    """Credentials are missing or rejected by the exchange."""


class PermissionDenied(AuthenticationError):
    """The API key is valid but not allowed to perform the action."""


class BadRequest(ExchangeError):
    """The request was malformed or referenced something unknown."""


class BadSymbol(BadRequest):
    """Unknown market symbol."""


class ArgumentsRequired(BadRequest):
    """A required argument was not supplied."""


class InvalidAddress(BadRequest):
    """A deposit or withdrawal address failed validation."""


class InvalidOrder(ExchangeError):
    """Order parameters were rejected."""


class OrderNotFound(InvalidOrder):
    """The referenced order does not exist."""


class InsufficientFunds(ExchangeError):
    """Not enough balance to perform the action."""


class NotSupported(ExchangeError):
    """The exchange does not support the requested feature."""


class NetworkError(ExchangeError):
    """Transient transport-level failure."""


class RequestTimeout(NetworkError):
    """The request timed out."""


class ExchangeNotAvailable(NetworkError):
    """The exchange is temporarily unavailable."""


class RateLimitExceeded(NetworkError):
    """The exchange throttled the request."""
