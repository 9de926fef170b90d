r"""Wait computation and interruptible waiting.

This module provides the function computing the wait before a retry
from an interval strategy, and the wait itself, which can be cut short
by an interruption signal.
"""

from __future__ import annotations

__all__ = ["calculate_sleep_time", "interruptible_sleep"]

import logging
import random
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import threading

    from aretry.interval import BaseIntervalStrategy

logger: logging.Logger = logging.getLogger(__name__)


def calculate_sleep_time(
    attempt: int,
    interval: BaseIntervalStrategy,
    jitter_factor: float = 0.0,
    max_wait_time: float | None = None,
) -> float:
    """Calculate the wait before a retry.

    The wait is calculated as follows:
    1. Ask the interval strategy, keeping the absolute value:
       - sleep_time = abs(interval.calculate(attempt))
    2. Apply max_wait_time cap (if max_wait_time is set):
       - sleep_time = min(sleep_time, max_wait_time)
    3. Apply jitter (if jitter_factor > 0):
       - jitter = random.uniform(0, jitter_factor) * sleep_time
       - total_sleep_time = sleep_time + jitter

    Args:
        attempt: The current retry number (0-indexed).
        interval: The interval strategy.
        jitter_factor: Factor for adding random jitter to the wait.
            Set to 0 to disable jitter.
        max_wait_time: Optional cap in seconds on the wait before jitter.

    Returns:
        The wait in seconds, including any jitter applied.

    Example:
        ```pycon
        >>> from aretry.interval import ExponentialInterval, FixedInterval
        >>> from aretry.utils.sleep import calculate_sleep_time
        >>> calculate_sleep_time(attempt=2, interval=ExponentialInterval())
        1.2
        >>> calculate_sleep_time(attempt=2, interval=ExponentialInterval(), max_wait_time=1.0)
        1.0
        >>> calculate_sleep_time(attempt=0, interval=FixedInterval(0.5))
        0.5

        ```
    """
    sleep_time = abs(interval.calculate(attempt))

    if max_wait_time is not None and sleep_time > max_wait_time:
        logger.debug(
            f"Capping sleep time from {sleep_time:.2f}s to {max_wait_time:.2f}s "
            f"(max_wait_time={max_wait_time:.2f}s)"
        )
        sleep_time = max_wait_time

    if jitter_factor > 0:
        jitter = random.uniform(0, jitter_factor) * sleep_time  # noqa: S311
        total_sleep_time = sleep_time + jitter
        logger.debug(
            f"Waiting {total_sleep_time:.2f}s before retry "
            f"(base={sleep_time:.2f}s, jitter={jitter:.2f}s)"
        )
    else:
        total_sleep_time = sleep_time
        logger.debug(f"Waiting {total_sleep_time:.2f}s before retry")

    return total_sleep_time


def interruptible_sleep(seconds: float, interrupted: threading.Event) -> bool:
    """Wait ``seconds`` unless the ``interrupted`` event is set.

    A zero wait still reports an interruption that was signalled
    beforehand. The event is cleared when the interruption is reported.

    Args:
        seconds: The wait in seconds.
        interrupted: The event signalling an interruption.

    Returns:
        ``True`` if the wait was interrupted, otherwise ``False``.

    Example:
        ```pycon
        >>> import threading
        >>> from aretry.utils.sleep import interruptible_sleep
        >>> event = threading.Event()
        >>> interruptible_sleep(0.01, event)
        False
        >>> event.set()
        >>> interruptible_sleep(60.0, event)
        True
        >>> event.is_set()
        False

        ```
    """
    if interrupted.wait(timeout=seconds):
        interrupted.clear()
        return True
    return False
