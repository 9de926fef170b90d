r"""Abstract base class for interval strategies."""

from __future__ import annotations

__all__ = ["BaseIntervalStrategy"]

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aretry.interval.units import TimeUnit


class BaseIntervalStrategy(ABC):
    """Abstract base class for interval strategies.

    An interval strategy determines how long to wait before the next
    attempt of a failed action. Implementations must not keep any state
    that changes between calls, other than a private random source, so a
    single instance can be shared by policies used on several threads.
    """

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Calculate the wait before a given retry.

        Args:
            attempt: The current retry number (0-indexed). For example,
                attempt=0 is the wait before the second attempt.

        Returns:
            The wait in seconds.
        """

    def format(self, unit: TimeUnit) -> BaseIntervalStrategy:
        """Read the values of this strategy in ``unit``.

        Args:
            unit: The unit the raw values of this strategy are expressed in.

        Returns:
            A strategy returning the same waits converted to seconds.

        Example:
            ```pycon
            >>> from aretry.interval import FixedInterval, TimeUnit
            >>> FixedInterval(250).format(TimeUnit.MILLISECONDS).calculate(0)
            0.25

            ```
        """
        from aretry.interval.scaled import ScaledInterval  # noqa: PLC0415

        return ScaledInterval(self, unit)
