"""Retry policy and retry loop.

Architecture:
    ``RetryPolicy`` is a pure decision function: given the attempt record and
    the latest error it returns a ``RetryDecision``. ``RetryEngine`` runs the
    loop around an attempt callable, applying the per-attempt timeout and
    suspending between attempts with an injectable ``sleep``.

    Each ``call`` owns its own ``AttemptRecord``. Nothing is shared between
    concurrent calls except the immutable config, the jitter source and the
    sleep function.

    Cancellation is never intercepted: ``asyncio.CancelledError`` raised while
    awaiting an attempt or a backoff sleep propagates immediately and no
    further attempts are made.
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable
from typing import TypeVar

from orb_billing.core.config import RetryConfig
from orb_billing.core.exceptions import (
    AttemptTimeoutError,
    OrbError,
    RateLimitError,
    RetriesExhaustedError,
    TransportError,
)
from orb_billing.core.request import RequestIntent

from .backoff import jittered_delay
from .definitions import AttemptRecord, RetryDecision, RetryResult, classify_error
from .telemetry import log_attempt_failed, log_give_up, log_recovered, log_retry_scheduled

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


def _has_server_hint(error: OrbError | None) -> bool:
    return isinstance(error, RateLimitError) and error.retry_after is not None


class RetryPolicy:
    """Decides whether a failed attempt is retried and how long to wait."""

    def __init__(self, config: RetryConfig, rng: random.Random | None = None) -> None:
        self.config = config
        self._rng = rng if rng is not None else random.Random()

    def decide(self, record: AttemptRecord, error: OrbError, *, idempotent: bool) -> RetryDecision:
        """Produce the verdict for the attempt that just failed with ``error``.

        Args:
            record: Attempt record; ``record.attempts`` counts the failed attempt
            error: Classified error raised by the attempt
            idempotent: Whether the request is safe to repeat

        Returns:
            A retry decision with a wait in [0, max_delay], or a give-up
            decision carrying the error to surface
        """
        outcome = classify_error(error)
        if not outcome.is_retryable:
            return RetryDecision.give_up(error)
        if not idempotent and not self._safe_without_idempotency(error):
            return RetryDecision.give_up(error)
        if record.attempts >= self.config.max_attempts:
            return RetryDecision.give_up(RetriesExhaustedError(error, record.attempts))
        return RetryDecision.retry_after(self.delay_for(record.attempts, error))

    def delay_for(self, failures: int, error: OrbError) -> float:
        """Wait before the next attempt; a server Retry-After hint wins."""
        if isinstance(error, RateLimitError) and error.retry_after is not None:
            return min(error.retry_after, self.config.max_delay)
        return jittered_delay(failures, self.config.base_delay, self.config.max_delay, self._rng)

    @staticmethod
    def _safe_without_idempotency(error: OrbError) -> bool:
        # The server did not process the request in either case.
        if isinstance(error, RateLimitError):
            return True
        return isinstance(error, TransportError) and not error.request_sent


class RetryEngine:
    """Runs attempt callables under a ``RetryPolicy``.

    Example:
        >>> engine = RetryEngine(RetryConfig(max_attempts=3))
        >>> result = await engine.call(intent, lambda: transport.perform(intent))
        >>> result.value, result.attempts
    """

    def __init__(
        self,
        config: RetryConfig | None = None,
        *,
        rng: random.Random | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        self.config = config or RetryConfig()
        self.policy = RetryPolicy(self.config, rng)
        self._sleep: Sleep = sleep or asyncio.sleep

    async def call(
        self,
        intent: RequestIntent,
        attempt: Callable[[], Awaitable[T]],
        *,
        operation: str | None = None,
    ) -> RetryResult[T]:
        """Execute ``attempt`` until it succeeds or the policy gives up.

        Args:
            intent: Request being attempted; supplies the idempotency flag
            attempt: Zero-argument coroutine factory performing one raw attempt
            operation: Label for log events (defaults to "METHOD path")

        Returns:
            RetryResult with the value and the number of attempts made

        Raises:
            OrbError: The terminal error, with ``attempts`` set. Retryable
                errors surface as ``RetriesExhaustedError`` once the attempt
                budget is spent.
        """
        return await self.run(
            attempt,
            idempotent=bool(intent.idempotent),
            operation=operation or f"{intent.method.value} {intent.path}",
        )

    async def run(
        self,
        attempt: Callable[[], Awaitable[T]],
        *,
        idempotent: bool,
        operation: str,
    ) -> RetryResult[T]:
        """Retry loop for callers that carry the idempotency flag themselves."""
        record = AttemptRecord()
        while True:
            record.attempts += 1
            try:
                value = await self._run_attempt(attempt)
            except OrbError as exc:
                record.last_error = exc
                decision = self.policy.decide(record, exc, idempotent=idempotent)
                log_attempt_failed(
                    operation=operation,
                    attempt=record.attempts,
                    outcome=classify_error(exc).value,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
            else:
                if record.attempts > 1:
                    log_recovered(
                        operation=operation,
                        attempts=record.attempts,
                        total_wait=record.total_wait,
                    )
                return RetryResult(
                    value=value, attempts=record.attempts, total_wait=record.total_wait
                )

            error = decision.error
            if error is not None:
                error.attempts = record.attempts
                log_give_up(
                    operation=operation,
                    attempts=record.attempts,
                    total_wait=record.total_wait,
                    error_type=type(error).__name__,
                    error_message=str(error),
                )
                raise error

            delay = decision.delay or 0.0
            log_retry_scheduled(
                operation=operation,
                attempt=record.attempts,
                delay=delay,
                server_hint=_has_server_hint(record.last_error),
            )
            await self._sleep(delay)
            record.record_wait(delay)

    async def _run_attempt(self, attempt: Callable[[], Awaitable[T]]) -> T:
        timeout = self.config.per_attempt_timeout
        if timeout is None:
            return await attempt()
        try:
            return await asyncio.wait_for(attempt(), timeout)
        except asyncio.TimeoutError as exc:
            raise AttemptTimeoutError(timeout) from exc


async def retrying_call(
    attempt: Callable[[], Awaitable[T]],
    *,
    idempotent: bool = True,
    config: RetryConfig | None = None,
    rng: random.Random | None = None,
    sleep: Sleep | None = None,
    operation: str = "call",
) -> T:
    """Run one attempt callable with retries and return its value.

    Convenience wrapper for callers that have no ``RequestIntent``.
    """
    engine = RetryEngine(config, rng=rng, sleep=sleep)
    result = await engine.run(attempt, idempotent=idempotent, operation=operation)
    return result.value


__all__ = [
    "RetryEngine",
    "RetryPolicy",
    "Sleep",
    "retrying_call",
]
