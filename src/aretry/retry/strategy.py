r"""Retry strategy for calculating the waits between attempts.

This module provides the RetryStrategy class for calculating retry
waits.
"""

from __future__ import annotations

__all__ = ["RetryStrategy"]

from typing import TYPE_CHECKING

from aretry.interval import NoInterval
from aretry.utils.sleep import calculate_sleep_time

if TYPE_CHECKING:
    from aretry.interval import BaseIntervalStrategy


class RetryStrategy:
    """Strategy for calculating retry waits with a cap and jitter.

    Args:
        interval: Interval strategy. Defaults to NoInterval().
        jitter_factor: Factor for adding random jitter to waits.
        max_wait_time: Optional maximum wait in seconds.

    Example:
        ```pycon
        >>> from aretry.interval import ExponentialInterval
        >>> from aretry.retry.strategy import RetryStrategy
        >>> strategy = RetryStrategy(ExponentialInterval(base_delay=0.5), max_wait_time=1.2)
        >>> [strategy.calculate_delay(i) for i in range(3)]
        [0.5, 1.0, 1.2]

        ```
    """

    def __init__(
        self,
        interval: BaseIntervalStrategy | None = None,
        jitter_factor: float = 0.0,
        max_wait_time: float | None = None,
    ) -> None:
        self.interval: BaseIntervalStrategy = interval if interval is not None else NoInterval()
        self.jitter_factor = jitter_factor
        self.max_wait_time = max_wait_time

    def calculate_delay(self, attempt: int) -> float:
        """Calculate the wait before the next attempt.

        Args:
            attempt: Current retry number (0-indexed).

        Returns:
            Sleep time in seconds.
        """
        return calculate_sleep_time(
            attempt=attempt,
            interval=self.interval,
            jitter_factor=self.jitter_factor,
            max_wait_time=self.max_wait_time,
        )
