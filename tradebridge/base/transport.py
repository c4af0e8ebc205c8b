"""
Async HTTP transport shared by all REST adapters.

The transport executes an already signed RequestDescriptor, decodes the JSON
response and turns failures into the unified exception hierarchy:

    - Exchange-reported failures (HTTP >= 400) are first offered to the
      adapter's error classifier; if it returns None the transport falls back
      to status-based generic errors (429 -> RateLimitExceeded, ...).
    - aiohttp client errors become NetworkError, timeouts RequestTimeout.

Requests are throttled with a minimum interval between calls. There are no
retries here.
"""

import asyncio
import json
from typing import Any, Callable, Dict, Optional

import aiohttp
import structlog
from pydantic import BaseModel, Field

from tradebridge.errors import (
    AuthenticationError,
    ExchangeError,
    ExchangeNotAvailable,
    NetworkError,
    PermissionDenied,
    RateLimitExceeded,
    RequestTimeout,
)

logger = structlog.get_logger(__name__)

# (status, raw body, decoded body or None) -> exception to raise, or None
ErrorClassifier = Callable[[int, str, Any], Optional[ExchangeError]]


class RequestDescriptor(BaseModel):
    """
    Fully formed outgoing request.

    Attributes:
        url: Absolute URL including the query string.
        method: HTTP verb.
        headers: Request headers.
        body: Serialized JSON body, if any.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    url: str = Field(..., min_length=1)
    method: str = Field(default="GET")
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None


def decode_json(text: str) -> Any:
    """
    Decode a JSON document, returning None for non-JSON bodies.

    Example:
        >>> decode_json('{"error": {"code": 20002}}')
        {'error': {'code': 20002}}
        >>> decode_json("<html>Bad Gateway</html>") is None
        True
    """
    stripped = text.lstrip()
    if not stripped or stripped[0] not in "{[":
        return None
    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        return None


class HttpTransport:
    """
    aiohttp-based request executor.

    Attributes:
        exchange_id: Exchange identifier used in errors and logs.
        rate_limit_ms: Minimum interval between requests in milliseconds.
        timeout_seconds: Total request timeout.

    Example:
        >>> transport = HttpTransport("hitbtc", rate_limit_ms=1500)
        >>> data = await transport.fetch(request, classifier)
        >>> await transport.close()
    """

    def __init__(
        self,
        exchange_id: str,
        rate_limit_ms: int = 1000,
        timeout_seconds: int = 10,
        user_agent: str = "tradebridge/0.1",
    ):
        """
        Initialize transport.

        Args:
            exchange_id: Exchange identifier.
            rate_limit_ms: Minimum interval between requests in milliseconds.
            timeout_seconds: Request timeout in seconds.
            user_agent: User-Agent header value.
        """
        self.exchange_id = exchange_id
        self.rate_limit_ms = rate_limit_ms
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent

        self._session: Optional[aiohttp.ClientSession] = None
        self._last_request_time: float = 0.0
        self._request_interval = rate_limit_ms / 1000.0

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session is created."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": self.user_agent},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            logger.debug("transport_session_closed", exchange=self.exchange_id)

    async def _throttle(self) -> None:
        """Ensure the minimum interval between requests."""
        loop = asyncio.get_running_loop()
        time_since_last = loop.time() - self._last_request_time

        if time_since_last < self._request_interval:
            await asyncio.sleep(self._request_interval - time_since_last)

        self._last_request_time = loop.time()

    def default_error(self, status: int, body: str) -> ExchangeError:
        """
        Map an HTTP status to a generic error.

        Args:
            status: HTTP status code (>= 400).
            body: Raw response body.

        Returns:
            ExchangeError: Error instance to raise.
        """
        message = f"{self.exchange_id} {body}"
        if status == 429:
            error_cls: type = RateLimitExceeded
        elif status == 401:
            error_cls = AuthenticationError
        elif status == 403:
            error_cls = PermissionDenied
        elif status in (408, 504):
            error_cls = RequestTimeout
        elif status >= 500:
            error_cls = ExchangeNotAvailable
        else:
            error_cls = ExchangeError
        return error_cls(message, exchange_id=self.exchange_id, status=status, body=body)

    async def fetch(
        self,
        request: RequestDescriptor,
        classify: Optional[ErrorClassifier] = None,
    ) -> Any:
        """
        Execute a request and return the decoded JSON response.

        Args:
            request: Signed request.
            classify: Exchange-specific error classifier.

        Returns:
            Any: Decoded JSON document.

        Raises:
            ExchangeError: Exchange-reported failure (classified).
            NetworkError: Transport failure.
            RequestTimeout: Request timed out.
        """
        await self._throttle()
        session = await self._ensure_session()

        logger.debug(
            "transport_request",
            exchange=self.exchange_id,
            method=request.method,
            url=request.url,
        )

        try:
            async with session.request(
                request.method,
                request.url,
                headers=request.headers,
                data=request.body,
            ) as response:
                status = response.status
                text = await response.text()
        except asyncio.TimeoutError as e:
            logger.error(
                "transport_timeout",
                exchange=self.exchange_id,
                url=request.url,
                timeout=self.timeout_seconds,
            )
            raise RequestTimeout(
                f"{self.exchange_id} {request.method} {request.url} timed out after {self.timeout_seconds}s",
                exchange_id=self.exchange_id,
            ) from e
        except aiohttp.ClientError as e:
            logger.error(
                "transport_client_error",
                exchange=self.exchange_id,
                url=request.url,
                error=str(e),
            )
            raise NetworkError(
                f"{self.exchange_id} {request.method} {request.url} {e}",
                exchange_id=self.exchange_id,
            ) from e

        decoded = decode_json(text)

        if status >= 400:
            logger.warning(
                "transport_request_failed",
                exchange=self.exchange_id,
                url=request.url,
                status=status,
                body=text,
            )
            error = classify(status, text, decoded) if classify else None
            if error is None:
                error = self.default_error(status, text)
            raise error

        if decoded is None:
            raise ExchangeError(
                f"{self.exchange_id} returned a non-JSON response: {text}",
                exchange_id=self.exchange_id,
                status=status,
                body=text,
            )

        return decoded

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"HttpTransport(exchange={self.exchange_id}, "
            f"rate_limit={self.rate_limit_ms}ms)"
        )
