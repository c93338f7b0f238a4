"""Structured logging for retry loops.

Each helper emits one event name with its context in ``extra`` so log
pipelines can index the fields directly.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def log_attempt_failed(
    *,
    operation: str,
    attempt: int,
    outcome: str,
    error_type: str,
    error_message: str,
) -> None:
    """Log a failed attempt.

    Args:
        operation: Operation label (e.g. "GET /invoices")
        attempt: One-based attempt number
        outcome: Outcome classification value
        error_type: Exception class name
        error_message: Exception message
    """
    logger.warning(
        "retry_attempt_failed",
        extra={
            "operation": operation,
            "attempt": attempt,
            "outcome": outcome,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_retry_scheduled(
    *,
    operation: str,
    attempt: int,
    delay: float,
    server_hint: bool,
) -> None:
    """Log a scheduled retry.

    Args:
        operation: Operation label
        attempt: Attempt that just failed
        delay: Wait before the next attempt, in seconds
        server_hint: Whether the delay came from a Retry-After header
    """
    logger.info(
        "retry_scheduled",
        extra={
            "operation": operation,
            "attempt": attempt,
            "delay_s": delay,
            "server_hint": server_hint,
        },
    )


def log_give_up(
    *,
    operation: str,
    attempts: int,
    total_wait: float,
    error_type: str,
    error_message: str,
) -> None:
    logger.error(
        "retry_give_up",
        extra={
            "operation": operation,
            "attempts": attempts,
            "total_wait_s": total_wait,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_recovered(*, operation: str, attempts: int, total_wait: float) -> None:
    logger.info(
        "retry_succeeded_after_retries",
        extra={
            "operation": operation,
            "attempts": attempts,
            "total_wait_s": total_wait,
        },
    )
