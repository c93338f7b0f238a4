"""Retry policy engine.

Architecture:
    - definitions.py: Outcome classes, AttemptRecord, RetryDecision, RetryResult
    - backoff.py: Exponential backoff with injected jitter
    - engine.py: RetryPolicy (decisions) and RetryEngine (the retry loop)
    - telemetry.py: Structured log events
"""

from __future__ import annotations

from .backoff import backoff_delay, delay_bounds, jittered_delay
from .definitions import AttemptRecord, Outcome, RetryDecision, RetryResult, classify_error
from .engine import RetryEngine, RetryPolicy, Sleep, retrying_call

__all__ = [
    "AttemptRecord",
    "Outcome",
    "RetryDecision",
    "RetryEngine",
    "RetryPolicy",
    "RetryResult",
    "Sleep",
    "backoff_delay",
    "classify_error",
    "delay_bounds",
    "jittered_delay",
    "retrying_call",
]
