"""Tests for the HTTP transport's response handling."""

import aiohttp
import pytest

from tradebridge.adapters.hitbtc.errors import HitBTCErrorClassifier
from tradebridge.base.transport import HttpTransport, RequestDescriptor, decode_json
from tradebridge.errors import (
    AuthenticationError,
    ExchangeError,
    ExchangeNotAvailable,
    NetworkError,
    OrderNotFound,
    RateLimitExceeded,
    RequestTimeout,
)


class FakeResponse:
    def __init__(self, status, text):
        self.status = status
        self._text = text

    async def text(self):
        return self._text

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    closed = False

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self):
        self.closed = True


def make_transport(session):
    transport = HttpTransport("hitbtc", rate_limit_ms=0)
    transport._session = session
    return transport


REQUEST = RequestDescriptor(url="https://api.hitbtc.com/api/2/order/abc", method="DELETE")


def test_decode_json():
    assert decode_json('{"error": {"code": 20002}}') == {"error": {"code": 20002}}
    assert decode_json("[]") == []
    assert decode_json("<html>Bad Gateway</html>") is None
    assert decode_json("") is None
    assert decode_json("{broken") is None


@pytest.mark.parametrize(
    "status,expected",
    [
        (429, RateLimitExceeded),
        (401, AuthenticationError),
        (408, RequestTimeout),
        (502, ExchangeNotAvailable),
        (400, ExchangeError),
    ],
)
def test_default_error(status, expected):
    error = HttpTransport("hitbtc").default_error(status, "body")

    assert type(error) is expected
    assert error.status == status
    assert error.exchange_id == "hitbtc"


@pytest.mark.asyncio
async def test_fetch_success():
    session = FakeSession(FakeResponse(200, '{"id": "1"}'))
    transport = make_transport(session)

    assert await transport.fetch(REQUEST) == {"id": "1"}
    assert session.calls[0][0] == "DELETE"


@pytest.mark.asyncio
async def test_fetch_classified_error():
    body = '{"error": {"code": 20002, "message": "Order not found"}}'
    transport = make_transport(FakeSession(FakeResponse(400, body)))

    with pytest.raises(OrderNotFound) as exc_info:
        await transport.fetch(REQUEST, HitBTCErrorClassifier())

    assert exc_info.value.body == body


@pytest.mark.asyncio
async def test_fetch_rate_limit_falls_back_to_generic_error():
    transport = make_transport(FakeSession(FakeResponse(429, "Too Many Requests")))

    with pytest.raises(RateLimitExceeded):
        await transport.fetch(REQUEST, HitBTCErrorClassifier())


@pytest.mark.asyncio
async def test_fetch_non_json_success():
    transport = make_transport(FakeSession(FakeResponse(200, "<html></html>")))

    with pytest.raises(ExchangeError):
        await transport.fetch(REQUEST)


@pytest.mark.asyncio
async def test_fetch_client_error():
    transport = make_transport(FakeSession(error=aiohttp.ClientConnectionError("refused")))

    with pytest.raises(NetworkError):
        await transport.fetch(REQUEST)


@pytest.mark.asyncio
async def test_close_is_idempotent():
    session = FakeSession()
    transport = make_transport(session)

    await transport.close()
    await transport.close()

    assert session.closed
