"""REST transport wrapper.

Turns a ``RequestIntent`` into one HTTP exchange against the configured API
root and classifies the result. ``perform`` is the single-attempt capability
that the retry and pagination engines call.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import quote, urlencode

from orb_billing.core.config import ClientConfig
from orb_billing.core.exceptions import error_from_response
from orb_billing.core.request import RequestIntent

from .http_client import HTTPClient, RawResponse


def path(*segments: str) -> str:
    """Join path segments, percent-encoding each one.

    Examples:
        >>> path("customers", "external_customer_id", "a/b")
        '/customers/external_customer_id/a%2Fb'
    """
    return "/" + "/".join(quote(str(segment), safe="") for segment in segments)


class RESTTransport:
    """Authenticated transport bound to one API root."""

    def __init__(self, config: ClientConfig, http: HTTPClient | None = None) -> None:
        self._config = config
        self._http = http or HTTPClient()

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def build_url(self, intent: RequestIntent) -> str:
        url = f"{self._config.base_url}{intent.path}"
        if intent.query:
            url = f"{url}?{urlencode(intent.query)}"
        return url

    def build_headers(self, intent: RequestIntent) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "Accept": "application/json",
            "User-Agent": self._config.user_agent,
        }
        if intent.body is not None:
            headers["Content-Type"] = "application/json"
        headers.update(dict(intent.headers))
        return headers

    @staticmethod
    def encode_body(body: Any) -> bytes | None:
        if body is None:
            return None
        return json.dumps(body).encode("utf-8")

    async def send(self, intent: RequestIntent) -> RawResponse:
        """Send the intent once and return the raw response, whatever its status."""
        return await self._http.send(
            intent.method.value,
            self.build_url(intent),
            headers=self.build_headers(intent),
            body=self.encode_body(intent.body),
        )

    async def perform(self, intent: RequestIntent) -> bytes:
        """Send the intent once and return the body of a 2xx response.

        Raises:
            ServerError, RateLimitError, ClientError: Non-2xx responses
            TransportError: Network-level failures
        """
        response = await self.send(intent)
        if not response.ok:
            raise error_from_response(response.status, response.headers, response.body)
        if response.status == 204:
            return b""
        return response.body

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> RESTTransport:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
