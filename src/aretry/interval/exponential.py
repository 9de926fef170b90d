r"""Exponential interval strategy."""

from __future__ import annotations

__all__ = ["ExponentialInterval"]

from aretry.interval.base import BaseIntervalStrategy

# Larger exponents would overflow a float without changing any capped result
MAX_EXPONENT = 64


class ExponentialInterval(BaseIntervalStrategy):
    """Exponential interval strategy.

    Calculates the wait as: base_delay * (2 ** attempt), with optional
    max_delay cap.

    Args:
        base_delay: The base delay factor in seconds (default: 0.3).
        max_delay: Optional maximum wait in seconds.

    Example:
        ```pycon
        >>> from aretry.interval import ExponentialInterval
        >>> interval = ExponentialInterval(base_delay=0.3)
        >>> interval.calculate(0)
        0.3
        >>> interval.calculate(2)
        1.2
        >>> ExponentialInterval(base_delay=1.0, max_delay=5.0).calculate(10)
        5.0

        ```
    """

    def __init__(self, base_delay: float = 0.3, max_delay: float | None = None) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        if max_delay is not None and max_delay <= 0:
            msg = f"max_delay must be positive if specified, got {max_delay}"
            raise ValueError(msg)

        self.base_delay = base_delay
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(base_delay={self.base_delay}, "
            f"max_delay={self.max_delay})"
        )

    def calculate(self, attempt: int) -> float:
        delay = self.base_delay * (2 ** min(attempt, MAX_EXPONENT))
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
