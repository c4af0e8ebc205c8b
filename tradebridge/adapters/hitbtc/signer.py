"""
HitBTC request signer.

Turns an endpoint plus a parameter map into a RequestDescriptor:

    - ``{name}`` placeholders in the path are filled from the parameters
    - remaining parameters become the query string for public calls and
      private GETs, and a JSON body for private POST/PUT/PATCH/DELETE
    - private calls carry ``Authorization: Basic base64(key:secret)``

No network I/O happens here.
"""

import base64
import json
import re
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote, urlencode

from tradebridge.adapters.hitbtc.endpoints import API_VERSION, EXCHANGE_ID, Endpoint
from tradebridge.base.transport import RequestDescriptor
from tradebridge.config.models import ApiCredentials, ApiUrls
from tradebridge.errors import ArgumentsRequired, AuthenticationError

_PLACEHOLDER = re.compile(r"\{([^}]+)\}")


def extract_params(path: str) -> List[str]:
    """
    Names of the placeholders in a path template.

    Example:
        >>> extract_params("history/order/{orderId}/trades")
        ['orderId']
    """
    return _PLACEHOLDER.findall(path)


def implode_params(path: str, params: Mapping[str, Any]) -> str:
    """
    Substitute placeholders in a path template.

    Raises:
        ArgumentsRequired: If a placeholder has no value.
    """

    def replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        if params.get(name) is None:
            raise ArgumentsRequired(
                f"{EXCHANGE_ID} {path} requires a '{name}' parameter",
                exchange_id=EXCHANGE_ID,
            )
        return quote(str(params[name]), safe="")

    return _PLACEHOLDER.sub(replace, path)


def _wire_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    return value


def basic_auth(api_key: str, secret: str) -> str:
    """
    Build an HTTP Basic ``Authorization`` header value.

    Example:
        >>> basic_auth("key", "secret")
        'Basic a2V5OnNlY3JldA=='
    """
    token = base64.b64encode(f"{api_key}:{secret}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


class HitBTCSigner:
    """
    Builds signed requests for the HitBTC REST API.

    Attributes:
        api: Public / private base URLs.
        version: API version path segment.
        credentials: API key pair (may be incomplete for public-only use).

    Example:
        >>> signer = HitBTCSigner(ApiUrls(public=API_URL, private=API_URL))
        >>> signer.sign(TICKER, {"symbol": "ETHBTC"}).url
        'https://api.hitbtc.com/api/2/public/ticker/ETHBTC'
    """

    def __init__(
        self,
        api: ApiUrls,
        version: str = API_VERSION,
        credentials: Optional[ApiCredentials] = None,
    ):
        self.api = api
        self.version = version
        self.credentials = credentials or ApiCredentials()

    def check_required_credentials(self) -> None:
        """
        Raises:
            AuthenticationError: If the key or the secret is missing.
        """
        if not self.credentials.is_complete:
            raise AuthenticationError(
                f'{EXCHANGE_ID} requires "api_key" and "secret" credentials',
                exchange_id=EXCHANGE_ID,
            )

    def sign(self, endpoint: Endpoint, params: Optional[Mapping[str, Any]] = None) -> RequestDescriptor:
        """
        Build the request for an endpoint.

        Args:
            endpoint: Catalog endpoint.
            params: Path and query/body parameters.

        Returns:
            RequestDescriptor: URL, method, headers and body.

        Raises:
            AuthenticationError: Private endpoint without credentials.
            ArgumentsRequired: Missing path parameter.
        """
        params = dict(params or {})
        path_names = extract_params(endpoint.path)
        query: Dict[str, Any] = {
            key: _wire_value(value)
            for key, value in params.items()
            if key not in path_names and value is not None
        }

        url = f"/api/{self.version}/"
        headers: Dict[str, str] = {}
        body: Optional[str] = None

        if endpoint.api == "public":
            url += "public/" + implode_params(endpoint.path, params)
            if query:
                url += "?" + urlencode(query)
            base_url = self.api.public
        else:
            self.check_required_credentials()
            url += implode_params(endpoint.path, params)
            if endpoint.method == "GET":
                if query:
                    url += "?" + urlencode(query)
            elif query:
                body = json.dumps(query, separators=(",", ":"))
            secret = self.credentials.secret
            headers = {
                "Authorization": basic_auth(
                    self.credentials.api_key or "",
                    secret.get_secret_value() if secret else "",
                ),
                "Content-Type": "application/json",
            }
            base_url = self.api.private

        return RequestDescriptor(
            url=base_url + url,
            method=endpoint.method,
            headers=headers,
            body=body,
        )
