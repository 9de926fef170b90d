r"""Time units used to express intervals and time windows."""

from __future__ import annotations

__all__ = ["TimeUnit"]

from enum import Enum


class TimeUnit(Enum):
    """Time unit with its length in seconds.

    Example:
        ```pycon
        >>> from aretry.interval import TimeUnit
        >>> TimeUnit.MILLISECONDS.to_seconds(1500)
        1.5
        >>> TimeUnit.MINUTES.to_seconds(2)
        120.0

        ```
    """

    NANOSECONDS = 1e-9
    MICROSECONDS = 1e-6
    MILLISECONDS = 1e-3
    SECONDS = 1.0
    MINUTES = 60.0
    HOURS = 3600.0
    DAYS = 86400.0

    def to_seconds(self, value: float) -> float:
        """Convert a value expressed in this unit to seconds.

        Args:
            value: The value to convert.

        Returns:
            The value in seconds.
        """
        return float(value * self.value)
