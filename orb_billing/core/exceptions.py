"""Custom exception hierarchy.

Every error raised by the library derives from ``OrbError``. Errors carry a
class-level ``retryable`` flag that the retry engine uses to classify an
attempt outcome, and an ``attempts`` annotation that the engine fills in
with the number of attempts made before the error surfaced.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any


class OrbError(Exception):
    """Base exception for all library errors."""

    retryable: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.attempts: int | None = None


class TransportError(OrbError):
    """Network-level failure before a complete response was received.

    ``request_sent`` is False when the connection could not be established,
    which means the server never saw the request.
    """

    retryable = True

    def __init__(self, message: str, *, request_sent: bool = True) -> None:
        super().__init__(message)
        self.request_sent = request_sent


class AttemptTimeoutError(TransportError):
    """A single attempt exceeded the per-attempt timeout."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"Attempt timed out after {timeout:g}s", request_sent=True)
        self.timeout = timeout


class ApiError(OrbError):
    """Non-success HTTP response from the billing API."""

    def __init__(
        self,
        message: str,
        status_code: int,
        *,
        body: bytes = b"",
        title: str | None = None,
        detail: str | None = None,
        error_type: str | None = None,
        validation_errors: list[Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.title = title
        self.detail = detail
        self.error_type = error_type
        self.validation_errors = validation_errors or []


class ServerError(ApiError):
    """5xx response."""

    retryable = True


class RateLimitError(ApiError):
    """429 response, optionally carrying the server's Retry-After hint."""

    retryable = True

    def __init__(self, message: str, *, retry_after: float | None = None, **kwargs: Any) -> None:
        super().__init__(message, 429, **kwargs)
        self.retry_after = retry_after


class ClientError(ApiError):
    """4xx response other than 429. Never retried."""


class DecodeError(OrbError):
    """Response body could not be decoded into the expected shape.

    Usually indicates drift between the API and the library's models.
    """

    def __init__(self, message: str, *, body: bytes | None = None) -> None:
        super().__init__(message)
        self.body = body


class ProtocolLoopError(OrbError):
    """The server violated the pagination contract.

    Raised when a listing hands back a cursor that was already used, or when
    a listing exceeds the configured page ceiling.
    """

    def __init__(self, message: str, *, cursor: str | None = None, pages_fetched: int = 0) -> None:
        super().__init__(message)
        self.cursor = cursor
        self.pages_fetched = pages_fetched


class RetriesExhaustedError(OrbError):
    """All attempts failed with retryable errors.

    ``last_error`` holds the final underlying error.
    """

    def __init__(self, last_error: OrbError, attempts: int) -> None:
        super().__init__(f"Gave up after {attempts} attempts: {last_error}")
        self.last_error = last_error
        self.attempts = attempts
        self.__cause__ = last_error


def parse_retry_after(value: str | None, *, now: datetime | None = None) -> float | None:
    """Parse a Retry-After header into seconds.

    Accepts both delta-seconds and HTTP-date forms. Returns None when the
    header is absent or unparseable. Dates in the past yield 0.
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        try:
            when = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            return None
        if when.tzinfo is None:
            when = when.replace(tzinfo=UTC)
        seconds = (when - (now or datetime.now(UTC))).total_seconds()
    if math.isnan(seconds):
        return None
    return max(seconds, 0.0)


def _parse_error_body(body: bytes) -> dict[str, Any]:
    try:
        payload = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return {}
    return payload if isinstance(payload, dict) else {}


def error_from_response(status: int, headers: Mapping[str, str], body: bytes) -> ApiError:
    """Build the classified error for a non-2xx response.

    Args:
        status: HTTP status code
        headers: Response headers (case-insensitive lookup is not assumed)
        body: Raw response body, kept verbatim on the error

    Returns:
        ServerError, RateLimitError or ClientError
    """
    payload = _parse_error_body(body)
    title = payload.get("title")
    detail = payload.get("detail")
    fields: dict[str, Any] = {
        "body": body,
        "title": title,
        "detail": detail,
        "error_type": payload.get("type"),
        "validation_errors": payload.get("validation_errors"),
    }
    summary = detail or title or body[:200].decode("utf-8", errors="replace") or "no body"
    message = f"HTTP {status}: {summary}"

    if status == 429:
        retry_after = None
        for name, value in headers.items():
            if name.lower() == "retry-after":
                retry_after = parse_retry_after(value)
                break
        return RateLimitError(message, retry_after=retry_after, **fields)
    if status >= 500:
        return ServerError(message, status, **fields)
    return ClientError(message, status, **fields)
