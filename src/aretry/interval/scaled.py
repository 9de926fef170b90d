r"""Interval strategy adapter converting raw values to seconds."""

from __future__ import annotations

__all__ = ["ScaledInterval"]

from typing import TYPE_CHECKING

from aretry.interval.base import BaseIntervalStrategy

if TYPE_CHECKING:
    from aretry.interval.units import TimeUnit


class ScaledInterval(BaseIntervalStrategy):
    """Wrap a strategy whose raw values are expressed in another unit.

    Args:
        strategy: The wrapped strategy.
        unit: The unit of the values returned by ``strategy``.

    Example:
        ```pycon
        >>> from aretry.interval import FixedInterval, ScaledInterval, TimeUnit
        >>> interval = ScaledInterval(FixedInterval(2), TimeUnit.MINUTES)
        >>> interval.calculate(0)
        120.0

        ```
    """

    def __init__(self, strategy: BaseIntervalStrategy, unit: TimeUnit) -> None:
        self.strategy = strategy
        self.unit = unit

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(strategy={self.strategy!r}, unit={self.unit.name})"

    def calculate(self, attempt: int) -> float:
        return self.unit.to_seconds(self.strategy.calculate(attempt))
