"""Client configuration.

Architecture:
    Configuration is a small set of frozen dataclasses validated on
    construction. The retry and pagination engines read only the fields they
    need, so a single ``ClientConfig`` can be shared across any number of
    concurrent operations.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

DEFAULT_BASE_URL = "https://api.withorb.com/v1"
DEFAULT_USER_AGENT = "orb-billing-python"

MAX_PAGE_SIZE = 500


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy settings.

    Attributes:
        max_attempts: Total attempts per logical request, including the first
        base_delay: Backoff delay before the first retry, in seconds
        max_delay: Upper bound on any single wait, in seconds
        per_attempt_timeout: Timeout for one attempt in seconds (None disables it)
    """

    max_attempts: int = 4
    base_delay: float = 0.25
    max_delay: float = 30.0
    per_attempt_timeout: float | None = 30.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay cannot be negative")
        if self.max_delay <= 0:
            raise ValueError("max_delay must be positive")
        if self.base_delay > self.max_delay:
            raise ValueError("base_delay cannot exceed max_delay")
        if self.per_attempt_timeout is not None and self.per_attempt_timeout <= 0:
            raise ValueError("per_attempt_timeout must be positive or None")


@dataclass(frozen=True)
class ListParams:
    """Parameters shared by every list operation."""

    page_size: int = 20

    def __post_init__(self) -> None:
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")

    def with_page_size(self, page_size: int) -> ListParams:
        return replace(self, page_size=page_size)


@dataclass(frozen=True)
class ClientConfig:
    """Top-level client configuration.

    Attributes:
        api_key: Secret API key, sent as a bearer token
        base_url: API root, without a trailing slash
        retry: Retry policy applied to every request
        max_pages_per_listing: Circuit breaker on pages fetched by one listing
        user_agent: Value of the User-Agent header
    """

    api_key: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    retry: RetryConfig = field(default_factory=RetryConfig)
    max_pages_per_listing: int = 10_000
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ValueError("api_key must be a non-empty string")
        if self.max_pages_per_listing < 1:
            raise ValueError("max_pages_per_listing must be at least 1")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
