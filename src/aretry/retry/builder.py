r"""Chained builder assembling a retry policy.

This module provides the RetryBuilder class returned by ``Retry.of``.
Each option returns the builder, and ``build`` validates the options,
fills in the defaults and returns the ``Retry`` to run.
"""

from __future__ import annotations

__all__ = ["RetryBuilder"]

from numbers import Real
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from aretry.exceptions import ConfigurationError
from aretry.executors import shared_executor
from aretry.interval import BaseIntervalStrategy, CallableInterval, FixedInterval
from aretry.policy import MIN_TIME_WINDOW, UNLIMITED, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Callable
    from concurrent.futures import Executor

    from aretry.callbacks import RetryInfo, SuccessInfo
    from aretry.exceptions import AttemptError
    from aretry.interval import TimeUnit
    from aretry.retry.engine import Retry

R = TypeVar("R")


class RetryBuilder(Generic[R]):
    """Builder of a ``Retry``.

    Options left unset take the defaults of ``RetryPolicy``. The time
    window is raised to ``MIN_TIME_WINDOW`` when a shorter one is given,
    and a negative attempt limit other than ``UNLIMITED`` is raised to 0.

    Args:
        action: The zero-argument callable to run.
        business_context: Optional opaque value passed to the on_success
            hook and the recovery function.

    Example:
        ```pycon
        >>> from aretry import Retry, TimeUnit, interval
        >>> retry = (
        ...     Retry.of(lambda: 1 / 0, business_context="order-42")
        ...     .retry_times(2)
        ...     .interval(interval.fixed(10), TimeUnit.MILLISECONDS)
        ...     .time_window(5, TimeUnit.SECONDS)
        ...     .retry_when(ArithmeticError)
        ...     .failure_hook(lambda error: None)
        ...     .recover_result(lambda context: f"fallback for {context}")
        ...     .build()
        ... )
        >>> retry.result_blocking()
        'fallback for order-42'
        >>> retry.attempts
        2

        ```
    """

    def __init__(self, action: Callable[[], R] | None, business_context: Any = None) -> None:
        self._action = action
        self._options: dict[str, Any] = {}
        if business_context is not None:
            self._options["business_context"] = business_context

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(action={self._action!r}, options={self._options})"

    def retry_when(self, *kinds: type[BaseException] | Callable[[BaseException], bool]) -> RetryBuilder[R]:
        """Retry only on failures matching one of ``kinds``.

        Args:
            *kinds: Exception classes (subclasses match too) or predicates
                over an exception. Defaults to ``Exception``.
        """
        if kinds:
            self._options["retry_on"] = tuple(kinds)
        return self

    def retry_times(self, times: int) -> RetryBuilder[R]:
        """Set the maximum number of attempts.

        Args:
            times: The attempt limit, or ``UNLIMITED``. The initial attempt
                always happens.
        """
        self._options["attempt_limit"] = times if times == UNLIMITED else max(times, 0)
        return self

    def retry_forever(self) -> RetryBuilder[R]:
        """Remove the bound on the number of attempts."""
        return self.retry_times(UNLIMITED)

    def interruptible(self, flag: bool = True) -> RetryBuilder[R]:
        """Abort the run when a wait is interrupted."""
        self._options["interruptible"] = flag
        return self

    def recover_on_interrupt(self, flag: bool = True) -> RetryBuilder[R]:
        """Complete an interrupted run with the recovery value."""
        self._options["recover_on_interrupt"] = flag
        return self

    def asynchronous(self, executor: Executor | None = None) -> RetryBuilder[R]:
        """Run the retry loop on a worker pool.

        Args:
            executor: The executor to use. Defaults to the shared worker pool.
        """
        self._options["executor"] = executor if executor is not None else shared_executor()
        return self

    def executor(self, executor: Executor) -> RetryBuilder[R]:
        """Run the retry loop on ``executor``."""
        if executor is None:
            msg = "executor must not be None"
            raise ConfigurationError(msg)
        self._options["executor"] = executor
        return self

    def interval(
        self,
        interval: BaseIntervalStrategy | Callable[[], float] | float,
        unit: TimeUnit | None = None,
    ) -> RetryBuilder[R]:
        """Set the strategy computing the wait before each retry.

        Args:
            interval: An interval strategy, a zero-argument callable
                returning the wait, or a fixed wait.
            unit: Unit of the values of ``interval``. Defaults to seconds.
        """
        if isinstance(interval, BaseIntervalStrategy):
            strategy = interval
        elif isinstance(interval, Real):
            strategy = FixedInterval(float(interval))
        elif callable(interval):
            strategy = CallableInterval(interval)
        else:
            msg = f"interval must be a strategy, a callable or a number, got {interval!r}"
            raise ConfigurationError(msg)
        self._options["interval"] = strategy.format(unit) if unit is not None else strategy
        return self

    def max_wait_time(self, seconds: float) -> RetryBuilder[R]:
        """Cap every wait to ``seconds``."""
        self._options["max_wait_time"] = seconds
        return self

    def jitter(self, factor: float) -> RetryBuilder[R]:
        """Add up to ``factor`` times the wait as random jitter."""
        self._options["jitter_factor"] = factor
        return self

    def success_hook(self, hook: Callable[[SuccessInfo], None]) -> RetryBuilder[R]:
        """Set the hook called once when an attempt succeeds."""
        self._options["on_success"] = self._require_callable("success hook", hook)
        return self

    def failure_hook(self, hook: Callable[[AttemptError], None]) -> RetryBuilder[R]:
        """Set the hook called after every failed attempt.

        The hook may be called many times during a run.
        """
        self._options["on_failure"] = self._require_callable("failure hook", hook)
        return self

    def retry_hook(self, hook: Callable[[RetryInfo], None]) -> RetryBuilder[R]:
        """Set the hook called before waiting for the next attempt."""
        self._options["on_retry"] = self._require_callable("retry hook", hook)
        return self

    def recover_result(self, recover: Callable[[Any], R]) -> RetryBuilder[R]:
        """Set the function returning the value used when no attempt
        succeeds.

        Args:
            recover: Function receiving the business context.
        """
        self._options["recover"] = self._require_callable("recovery function", recover)
        return self

    def recover_value(self, value: R) -> RetryBuilder[R]:
        """Use ``value`` when no attempt succeeds."""
        return self.recover_result(lambda _: value)

    def time_window(self, value: float, unit: TimeUnit | None = None) -> RetryBuilder[R]:
        """Stop starting new attempts once ``value`` has elapsed.

        Note:
            A caller blocking on the result with a shorter timeout stops
            waiting before the window is over, while the run goes on.

        Args:
            value: The time window.
            unit: Unit of ``value``. Defaults to seconds.
        """
        seconds = unit.to_seconds(value) if unit is not None else float(value)
        self._options["time_window"] = max(seconds, MIN_TIME_WINDOW)
        return self

    def business_context(self, context: Any) -> RetryBuilder[R]:
        """Attach an opaque value passed to the on_success hook and the
        recovery function."""
        self._options["business_context"] = context
        return self

    def build_policy(self) -> RetryPolicy:
        """Validate the options and return the policy.

        Raises:
            ConfigurationError: If an option fails validation.
        """
        return RetryPolicy(**self._options)

    def build(self) -> Retry[R]:
        """Validate the options and return the retry.

        Returns:
            The retry, not triggered yet.

        Raises:
            ConfigurationError: If the action is missing or an option
                fails validation.
        """
        from aretry.retry.engine import Retry  # noqa: PLC0415

        if self._action is None:
            msg = "action is required to build a retry"
            raise ConfigurationError(msg)
        return Retry(self._action, self.build_policy())

    @staticmethod
    def _require_callable(name: str, value: Any) -> Any:
        if not callable(value):
            msg = f"{name} must be callable, got {value!r}"
            raise ConfigurationError(msg)
        return value
