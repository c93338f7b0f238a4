"""HTTP client helper."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field

import aiohttp

from orb_billing.core.exceptions import TransportError


@dataclass(frozen=True)
class RawResponse:
    """Status, headers and body of one HTTP exchange."""

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class HTTPClient:
    """Async HTTP client wrapper.

    Sends one request per call and never retries; retry policy lives above
    this layer. Safe to share between concurrent operations.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> RawResponse:
        """Send one request and read the full response body.

        Raises:
            TransportError: Connection failure, timeout or broken response.
                ``request_sent`` is False only when no connection was made.
        """
        try:
            async with self.session.request(
                method, url, headers=dict(headers or {}), data=body
            ) as response:
                payload = await response.read()
                return RawResponse(
                    status=response.status,
                    headers=dict(response.headers),
                    body=payload,
                )
        except aiohttp.ClientConnectorError as e:
            raise TransportError(f"Connection to {url} failed: {e}", request_sent=False) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"{method} {url} failed: {type(e).__name__}: {e}") from e

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
