r"""Interval strategies computing the wait between two attempts.

This package provides fixed, random, callable and no-wait strategies,
the attempt-indexed exponential family, and the ``TimeUnit`` helpers
used to express waits in other units than seconds.
"""

from __future__ import annotations

__all__ = [
    "BaseIntervalStrategy",
    "CallableInterval",
    "ExponentialInterval",
    "FixedInterval",
    "NoInterval",
    "RandomInterval",
    "ScaledInterval",
    "TimeUnit",
    "fixed",
    "none",
    "random",
]

from aretry.interval.base import BaseIntervalStrategy
from aretry.interval.bounded import RandomInterval
from aretry.interval.constant import CallableInterval, FixedInterval, NoInterval
from aretry.interval.exponential import ExponentialInterval
from aretry.interval.scaled import ScaledInterval
from aretry.interval.units import TimeUnit


def fixed(delay: float) -> FixedInterval:
    r"""Return a strategy waiting ``delay`` seconds before every retry.

    Args:
        delay: The wait in seconds.

    Returns:
        The fixed interval strategy.
    """
    return FixedInterval(delay)


def random(low: float, high: float | None = None) -> RandomInterval:
    r"""Return a strategy sampling every wait uniformly.

    With a single argument the wait is sampled in ``[0, low)``.

    Args:
        low: The lower bound, or the upper bound when ``high`` is omitted.
        high: The upper bound (exclusive).

    Returns:
        The random interval strategy.

    Example:
        ```pycon
        >>> from aretry import interval
        >>> strategy = interval.random(4)
        >>> (strategy.low, strategy.high)
        (0.0, 4)

        ```
    """
    if high is None:
        return RandomInterval(low=0.0, high=low)
    return RandomInterval(low=low, high=high)


def none() -> NoInterval:
    r"""Return a strategy that retries immediately."""
    return NoInterval()
