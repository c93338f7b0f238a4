"""Retry data structures: outcome classes, attempt records and decisions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from orb_billing.core.exceptions import (
    ClientError,
    DecodeError,
    OrbError,
    RateLimitError,
    ServerError,
    TransportError,
)

T = TypeVar("T")


class Outcome(str, Enum):
    """Classification of one attempt's result."""

    SUCCESS = "success"
    RETRYABLE_SERVER_ERROR = "retryable_server_error"
    RATE_LIMITED = "rate_limited"
    CLIENT_ERROR = "client_error"
    MALFORMED = "malformed"
    TERMINAL = "terminal"

    @property
    def is_retryable(self) -> bool:
        return self in (Outcome.RETRYABLE_SERVER_ERROR, Outcome.RATE_LIMITED)


def classify_error(error: OrbError) -> Outcome:
    """Map a raised library error onto an outcome class.

    Transport failures, including per-attempt timeouts, count as retryable
    server errors.
    """
    if isinstance(error, RateLimitError):
        return Outcome.RATE_LIMITED
    if isinstance(error, (ServerError, TransportError)):
        return Outcome.RETRYABLE_SERVER_ERROR
    if isinstance(error, ClientError):
        return Outcome.CLIENT_ERROR
    if isinstance(error, DecodeError):
        return Outcome.MALFORMED
    return Outcome.TERMINAL


@dataclass
class AttemptRecord:
    """State of one in-flight retry loop.

    Attributes:
        attempts: Attempts started so far
        total_wait: Cumulative backoff wait in seconds
        waits: Individual waits, in order
        last_error: Most recent failure, if any
    """

    attempts: int = 0
    total_wait: float = 0.0
    waits: list[float] = field(default_factory=list)
    last_error: OrbError | None = None

    def record_wait(self, delay: float) -> None:
        self.waits.append(delay)
        self.total_wait += delay


@dataclass(frozen=True)
class RetryDecision:
    """Verdict for a failed attempt: wait ``delay`` seconds, or give up with ``error``."""

    delay: float | None = None
    error: OrbError | None = None

    def __post_init__(self) -> None:
        if (self.delay is None) == (self.error is None):
            raise ValueError("RetryDecision needs exactly one of delay or error")
        if self.delay is not None and self.delay < 0:
            raise ValueError("delay cannot be negative")

    @classmethod
    def retry_after(cls, delay: float) -> RetryDecision:
        return cls(delay=delay)

    @classmethod
    def give_up(cls, error: OrbError) -> RetryDecision:
        return cls(error=error)

    @property
    def should_retry(self) -> bool:
        return self.delay is not None


@dataclass(frozen=True)
class RetryResult(Generic[T]):
    """Successful result of a retry loop."""

    value: T
    attempts: int
    total_wait: float = 0.0
