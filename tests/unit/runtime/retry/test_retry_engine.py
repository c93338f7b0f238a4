"""Unit tests for RetryPolicy and RetryEngine.

Every test injects a recording sleep, so no test waits in real time except
the per-attempt timeout cases, which use a few milliseconds.
"""

from __future__ import annotations

import asyncio
import logging
import random
from unittest.mock import MagicMock

import pytest

from orb_billing.core.config import RetryConfig
from orb_billing.core.exceptions import (
    AttemptTimeoutError,
    ClientError,
    DecodeError,
    RateLimitError,
    RetriesExhaustedError,
    ServerError,
    TransportError,
)
from orb_billing.core.request import RequestIntent
from orb_billing.runtime.retry import (
    AttemptRecord,
    Outcome,
    RetryDecision,
    RetryEngine,
    RetryPolicy,
    classify_error,
    delay_bounds,
    retrying_call,
)

CONFIG = RetryConfig(max_attempts=4, base_delay=0.1, max_delay=5.0, per_attempt_timeout=None)

GET = RequestIntent.build("GET", "/invoices")
POST = RequestIntent.build("POST", "/customers")


def scripted(*outcomes):
    """Attempt factory returning or raising each outcome in turn."""
    remaining = list(outcomes)
    calls = []

    async def attempt():
        calls.append(len(calls) + 1)
        outcome = remaining.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    attempt.calls = calls
    return attempt


def server_error():
    return ServerError("HTTP 500: oops", 500)


class TestClassifyError:
    """Test outcome classification."""

    def test_classes(self):
        assert classify_error(server_error()) is Outcome.RETRYABLE_SERVER_ERROR
        assert classify_error(TransportError("reset")) is Outcome.RETRYABLE_SERVER_ERROR
        assert classify_error(AttemptTimeoutError(1.0)) is Outcome.RETRYABLE_SERVER_ERROR
        assert classify_error(RateLimitError("429")) is Outcome.RATE_LIMITED
        assert classify_error(ClientError("400", 400)) is Outcome.CLIENT_ERROR
        assert classify_error(DecodeError("bad")) is Outcome.MALFORMED

    def test_retryable_outcomes(self):
        assert Outcome.RATE_LIMITED.is_retryable
        assert Outcome.RETRYABLE_SERVER_ERROR.is_retryable
        assert not Outcome.CLIENT_ERROR.is_retryable
        assert not Outcome.MALFORMED.is_retryable


class TestRetryPolicy:
    """Test retry decisions in isolation."""

    def test_retry_delay_within_bounds(self):
        policy = RetryPolicy(CONFIG, random.Random(3))
        for failures in range(1, 4):
            record = AttemptRecord(attempts=failures)
            decision = policy.decide(record, server_error(), idempotent=True)
            low, high = delay_bounds(failures, 0.1, 5.0)
            assert decision.should_retry
            assert low <= decision.delay <= high

    def test_exhausted_at_max_attempts(self):
        policy = RetryPolicy(CONFIG, random.Random(3))
        err = server_error()
        decision = policy.decide(AttemptRecord(attempts=4), err, idempotent=True)
        assert not decision.should_retry
        assert isinstance(decision.error, RetriesExhaustedError)
        assert decision.error.last_error is err

    def test_server_hint_capped_at_max_delay(self):
        policy = RetryPolicy(CONFIG, random.Random(3))
        decision = policy.decide(
            AttemptRecord(attempts=1), RateLimitError("429", retry_after=120.0), idempotent=True
        )
        assert decision.delay == 5.0

    def test_non_idempotent_only_safe_errors(self):
        policy = RetryPolicy(CONFIG, random.Random(3))
        record = AttemptRecord(attempts=1)
        assert not policy.decide(record, server_error(), idempotent=False).should_retry
        assert not policy.decide(record, TransportError("reset"), idempotent=False).should_retry
        assert policy.decide(record, RateLimitError("429"), idempotent=False).should_retry
        refused = TransportError("refused", request_sent=False)
        assert policy.decide(record, refused, idempotent=False).should_retry


class TestRetryEngine:
    """Test the retry loop."""

    @pytest.mark.asyncio
    async def test_success_first_try(self, sleeps, rng):
        engine = RetryEngine(CONFIG, rng=rng, sleep=sleeps)
        result = await engine.call(GET, scripted("ok"))
        assert result.value == "ok"
        assert result.attempts == 1
        assert result.total_wait == 0.0
        assert sleeps.calls == []

    @pytest.mark.asyncio
    async def test_server_error_then_success(self, sleeps, rng):
        """One 500 followed by a success takes two attempts and one bounded wait."""
        engine = RetryEngine(CONFIG, rng=rng, sleep=sleeps)
        result = await engine.call(GET, scripted(server_error(), {"id": "inv_1"}))

        assert result.value == {"id": "inv_1"}
        assert result.attempts == 2
        assert len(sleeps.calls) == 1
        assert 0.1 <= sleeps.calls[0] <= 0.2
        assert result.total_wait == sleeps.calls[0]

    @pytest.mark.asyncio
    async def test_retry_after_hint_used_exactly(self, sleeps, rng):
        engine = RetryEngine(CONFIG, rng=rng, sleep=sleeps)
        attempt = scripted(RateLimitError("HTTP 429", retry_after=2.0), "ok")
        result = await engine.call(GET, attempt)
        assert result.attempts == 2
        assert sleeps.calls == [2.0]

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self, sleeps, rng):
        engine = RetryEngine(CONFIG, rng=rng, sleep=sleeps)
        attempt = scripted(ClientError("HTTP 404: not found", 404), "never")
        with pytest.raises(ClientError) as excinfo:
            await engine.call(GET, attempt)
        assert excinfo.value.attempts == 1
        assert attempt.calls == [1]
        assert sleeps.calls == []

    @pytest.mark.asyncio
    async def test_decode_error_not_retried(self, sleeps, rng):
        engine = RetryEngine(CONFIG, rng=rng, sleep=sleeps)
        with pytest.raises(DecodeError) as excinfo:
            await engine.call(GET, scripted(DecodeError("bad json")))
        assert excinfo.value.attempts == 1

    @pytest.mark.asyncio
    async def test_exhaustion(self, sleeps, rng):
        """Persistent 500s surface as RetriesExhaustedError after max_attempts."""
        engine = RetryEngine(CONFIG, rng=rng, sleep=sleeps)
        errors = [server_error() for _ in range(4)]
        attempt = scripted(*errors)
        with pytest.raises(RetriesExhaustedError) as excinfo:
            await engine.call(GET, attempt)

        err = excinfo.value
        assert err.attempts == 4
        assert err.last_error is errors[-1]
        assert len(attempt.calls) == 4
        assert len(sleeps.calls) == 3
        for failures, delay in enumerate(sleeps.calls, start=1):
            low, high = delay_bounds(failures, 0.1, 5.0)
            assert low <= delay <= high

    @pytest.mark.asyncio
    async def test_single_attempt_budget(self, sleeps, rng):
        engine = RetryEngine(RetryConfig(max_attempts=1), rng=rng, sleep=sleeps)
        with pytest.raises(RetriesExhaustedError) as excinfo:
            await engine.call(GET, scripted(server_error()))
        assert excinfo.value.attempts == 1
        assert sleeps.calls == []

    @pytest.mark.asyncio
    async def test_non_idempotent_server_error_returned_after_one_attempt(self, sleeps, rng):
        engine = RetryEngine(CONFIG, rng=rng, sleep=sleeps)
        with pytest.raises(ServerError) as excinfo:
            await engine.call(POST, scripted(server_error(), "never"))
        assert excinfo.value.attempts == 1
        assert sleeps.calls == []

    @pytest.mark.asyncio
    async def test_non_idempotent_retries_rate_limit(self, sleeps, rng):
        engine = RetryEngine(CONFIG, rng=rng, sleep=sleeps)
        result = await engine.call(POST, scripted(RateLimitError("429", retry_after=1.0), "ok"))
        assert result.attempts == 2
        assert sleeps.calls == [1.0]

    @pytest.mark.asyncio
    async def test_non_idempotent_retries_refused_connection(self, sleeps, rng):
        engine = RetryEngine(CONFIG, rng=rng, sleep=sleeps)
        refused = TransportError("connection refused", request_sent=False)
        result = await engine.call(POST, scripted(refused, "ok"))
        assert result.attempts == 2

    @pytest.mark.asyncio
    async def test_idempotency_key_enables_retries(self, sleeps, rng):
        engine = RetryEngine(CONFIG, rng=rng, sleep=sleeps)
        intent = RequestIntent.build("POST", "/customers", idempotency_key="create-1")
        result = await engine.call(intent, scripted(server_error(), "ok"))
        assert result.attempts == 2

    @pytest.mark.asyncio
    async def test_per_attempt_timeout_is_retried(self, sleeps, rng):
        config = RetryConfig(max_attempts=3, base_delay=0.1, max_delay=5.0, per_attempt_timeout=0.01)
        engine = RetryEngine(config, rng=rng, sleep=sleeps)
        calls = []

        async def attempt():
            calls.append(1)
            if len(calls) == 1:
                await asyncio.sleep(10)
            return "ok"

        result = await engine.call(GET, attempt)
        assert result.value == "ok"
        assert result.attempts == 2
        assert len(sleeps.calls) == 1

    @pytest.mark.asyncio
    async def test_timeouts_exhaust(self, sleeps, rng):
        config = RetryConfig(max_attempts=2, base_delay=0.1, max_delay=5.0, per_attempt_timeout=0.01)
        engine = RetryEngine(config, rng=rng, sleep=sleeps)

        async def attempt():
            await asyncio.sleep(10)

        with pytest.raises(RetriesExhaustedError) as excinfo:
            await engine.call(GET, attempt)
        assert isinstance(excinfo.value.last_error, AttemptTimeoutError)

    @pytest.mark.asyncio
    async def test_cancellation_during_backoff_propagates(self, rng):
        calls = []

        async def cancelled_sleep(delay):
            raise asyncio.CancelledError

        async def attempt():
            calls.append(1)
            raise server_error()

        engine = RetryEngine(CONFIG, rng=rng, sleep=cancelled_sleep)
        with pytest.raises(asyncio.CancelledError):
            await engine.call(GET, attempt)
        assert calls == [1]

    @pytest.mark.asyncio
    async def test_cancellation_during_attempt_propagates(self, sleeps, rng):
        engine = RetryEngine(CONFIG, rng=rng, sleep=sleeps)
        with pytest.raises(asyncio.CancelledError):
            await engine.call(GET, scripted(asyncio.CancelledError(), "never"))
        assert sleeps.calls == []

    @pytest.mark.asyncio
    async def test_programming_errors_propagate(self, sleeps, rng):
        engine = RetryEngine(CONFIG, rng=rng, sleep=sleeps)
        with pytest.raises(KeyError):
            await engine.call(GET, scripted(KeyError("id"), "never"))
        assert sleeps.calls == []

    @pytest.mark.asyncio
    async def test_seeded_rng_reproducible(self, sleeps):
        waits = []
        for _ in range(2):
            recorder = type(sleeps)()
            engine = RetryEngine(CONFIG, rng=random.Random(99), sleep=recorder)
            await engine.call(GET, scripted(server_error(), server_error(), "ok"))
            waits.append(recorder.calls)
        assert waits[0] == waits[1]

    @pytest.mark.asyncio
    async def test_logs_structured_events(self, sleeps, rng, caplog):
        engine = RetryEngine(CONFIG, rng=rng, sleep=sleeps)
        with caplog.at_level(logging.DEBUG, logger="orb_billing.runtime.retry"):
            await engine.call(GET, scripted(server_error(), "ok"), operation="list_invoices")

        messages = [record.getMessage() for record in caplog.records]
        assert "retry_attempt_failed" in messages
        assert "retry_scheduled" in messages
        assert "retry_succeeded_after_retries" in messages
        scheduled = next(r for r in caplog.records if r.getMessage() == "retry_scheduled")
        assert scheduled.operation == "list_invoices"
        assert scheduled.server_hint is False

    @pytest.mark.asyncio
    async def test_follows_policy_decisions(self, sleeps, rng):
        engine = RetryEngine(CONFIG, rng=rng, sleep=sleeps)
        final = ClientError("HTTP 409: conflict", 409)
        engine.policy = MagicMock()
        engine.policy.decide.side_effect = [
            RetryDecision.retry_after(0.0),
            RetryDecision.give_up(final),
        ]

        with pytest.raises(ClientError) as exc_info:
            await engine.call(GET, scripted(server_error(), server_error(), "never"))

        assert exc_info.value is final
        assert final.attempts == 2
        assert sleeps.calls == [0.0]


class TestRetryingCall:
    """Test the convenience wrapper."""

    @pytest.mark.asyncio
    async def test_returns_value(self, sleeps, rng):
        value = await retrying_call(
            scripted(server_error(), 42), config=CONFIG, rng=rng, sleep=sleeps
        )
        assert value == 42
        assert len(sleeps.calls) == 1

    @pytest.mark.asyncio
    async def test_non_idempotent(self, sleeps, rng):
        with pytest.raises(ServerError):
            await retrying_call(
                scripted(server_error()), idempotent=False, config=CONFIG, rng=rng, sleep=sleeps
            )
