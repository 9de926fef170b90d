r"""Bounded random interval strategy."""

from __future__ import annotations

__all__ = ["RandomInterval"]

import random

from aretry.interval.base import BaseIntervalStrategy


class RandomInterval(BaseIntervalStrategy):
    """Random interval strategy.

    Samples every wait uniformly in ``[low, high)``. When both bounds are
    equal the wait is always ``low``. Each instance owns its random
    source so seeding one strategy does not affect the others.

    Args:
        low: The lower bound in seconds (inclusive).
        high: The upper bound in seconds (exclusive).
        seed: Optional seed for the random source.

    Example:
        ```pycon
        >>> from aretry.interval import RandomInterval
        >>> interval = RandomInterval(low=1.0, high=2.0, seed=42)
        >>> 1.0 <= interval.calculate(0) < 2.0
        True
        >>> RandomInterval(low=3.0, high=3.0).calculate(0)
        3.0

        ```
    """

    def __init__(self, low: float = 0.0, high: float = 1.0, seed: int | None = None) -> None:
        if low < 0:
            msg = f"low must be non-negative, got {low}"
            raise ValueError(msg)
        if high < low:
            msg = f"high must be >= low, got low={low} and high={high}"
            raise ValueError(msg)

        self.low = low
        self.high = high
        self._rng = random.Random(seed)  # noqa: S311

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(low={self.low}, high={self.high})"

    def calculate(self, attempt: int) -> float:  # noqa: ARG002
        if self.high == self.low:
            return self.low
        return self.low + (self.high - self.low) * self._rng.random()
