"""Exponential backoff with jitter.

The jitter source is passed in explicitly so retry timing is reproducible
under a seeded ``random.Random``.
"""

from __future__ import annotations

import random

# 2**62 already overflows any sane max_delay; stop growing before that.
_MAX_EXPONENT = 62


def backoff_delay(failures: int, base_delay: float, max_delay: float) -> float:
    """Un-jittered delay after ``failures`` consecutive failures.

    Doubles from ``base_delay`` per failure and is capped at ``max_delay``.

    Examples:
        >>> backoff_delay(1, 0.1, 5.0)
        0.1
        >>> backoff_delay(3, 0.1, 5.0)
        0.4
        >>> backoff_delay(10, 0.1, 5.0)
        5.0
    """
    if failures < 1:
        raise ValueError("failures must be at least 1")
    exponent = min(failures - 1, _MAX_EXPONENT)
    return min(base_delay * (2**exponent), max_delay)


def jittered_delay(
    failures: int,
    base_delay: float,
    max_delay: float,
    rng: random.Random,
) -> float:
    """Backoff delay plus uniform jitter in [0, delay], capped at ``max_delay``."""
    delay = backoff_delay(failures, base_delay, max_delay)
    return min(delay + rng.uniform(0.0, delay), max_delay)


def delay_bounds(failures: int, base_delay: float, max_delay: float) -> tuple[float, float]:
    """Inclusive (low, high) range ``jittered_delay`` can return."""
    delay = backoff_delay(failures, base_delay, max_delay)
    return delay, min(2 * delay, max_delay)
