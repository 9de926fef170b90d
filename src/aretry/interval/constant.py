r"""Constant interval strategies."""

from __future__ import annotations

__all__ = ["CallableInterval", "FixedInterval", "NoInterval"]

from typing import TYPE_CHECKING

from aretry.interval.base import BaseIntervalStrategy

if TYPE_CHECKING:
    from collections.abc import Callable


class FixedInterval(BaseIntervalStrategy):
    """Fixed interval strategy.

    Returns the same wait before every retry, regardless of the attempt
    number.

    Args:
        delay: The fixed wait in seconds (default: 1.0).

    Example:
        ```pycon
        >>> from aretry.interval import FixedInterval
        >>> interval = FixedInterval(delay=2.5)
        >>> interval.calculate(0)
        2.5
        >>> interval.calculate(10)
        2.5

        ```
    """

    def __init__(self, delay: float = 1.0) -> None:
        if delay < 0:
            msg = f"delay must be non-negative, got {delay}"
            raise ValueError(msg)

        self.delay = delay

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(delay={self.delay})"

    def calculate(self, attempt: int) -> float:  # noqa: ARG002
        return self.delay


class NoInterval(BaseIntervalStrategy):
    """Strategy that retries immediately.

    Example:
        ```pycon
        >>> from aretry.interval import NoInterval
        >>> NoInterval().calculate(3)
        0.0

        ```
    """

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}()"

    def calculate(self, attempt: int) -> float:  # noqa: ARG002
        return 0.0


class CallableInterval(BaseIntervalStrategy):
    """Adapt a zero-argument callable returning a raw number.

    The callable is invoked once per retry. Combine with ``format`` when
    the callable returns something other than seconds.

    Args:
        func: The callable producing the wait.

    Example:
        ```pycon
        >>> from aretry.interval import CallableInterval, TimeUnit
        >>> interval = CallableInterval(lambda: 500).format(TimeUnit.MILLISECONDS)
        >>> interval.calculate(0)
        0.5

        ```
    """

    def __init__(self, func: Callable[[], float]) -> None:
        if not callable(func):
            msg = f"func must be callable, got {func!r}"
            raise TypeError(msg)
        self.func = func

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(func={self.func!r})"

    def calculate(self, attempt: int) -> float:  # noqa: ARG002
        return float(self.func())
