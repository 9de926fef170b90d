r"""Immutable retry policy and its defaults.

This module provides the default constants and the frozen dataclass
consumed by the retry engine. A policy is validated when it is created
and never changes afterwards, so it can be shared by several runs.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_ATTEMPT_LIMIT",
    "MAX_ATTEMPT_INDEX",
    "MIN_TIME_WINDOW",
    "UNLIMITED",
    "RetryPolicy",
]

from dataclasses import dataclass, field, fields, replace
from typing import TYPE_CHECKING, Any

from aretry.callbacks import log_failure, noop_success, recover_none
from aretry.exceptions import ConfigurationError
from aretry.executors import InlineExecutor
from aretry.interval import BaseIntervalStrategy, NoInterval
from aretry.utils.validation import validate_policy_params, validate_retry_on

if TYPE_CHECKING:
    from collections.abc import Callable
    from concurrent.futures import Executor

    from aretry.callbacks import RetryInfo, SuccessInfo
    from aretry.exceptions import AttemptError

# Sentinel attempt limit disabling the bound on the number of attempts
UNLIMITED = -1

# Default maximum number of attempts
DEFAULT_ATTEMPT_LIMIT = 3

# Smallest time window in seconds, shorter windows are raised to it
MIN_TIME_WINDOW = 1.0

# In unlimited mode the attempt counter wraps back to 1 when it reaches
# this value
MAX_ATTEMPT_INDEX = 2**31 - 1


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration governing a retry run.

    Args:
        attempt_limit: Maximum number of attempts. Must be >= 0 or
            ``UNLIMITED``. The initial attempt always happens, so 0 and 1
            behave the same. Defaults to ``DEFAULT_ATTEMPT_LIMIT`` (3),
            which allows two retries. Use ``attempt_limit=0`` for a
            single attempt without retries.
        time_window: Time window in seconds measured from the start of
            the run. No attempt starts once it is exceeded. Must be
            >= ``MIN_TIME_WINDOW``.
        interruptible: Whether an interruption during a wait aborts the run.
        recover_on_interrupt: Whether an aborted run completes its result
            with the recovery value instead of leaving it pending.
        interval: Strategy computing the wait before each retry.
        max_wait_time: Optional cap in seconds on a single wait.
        jitter_factor: Factor for adding random jitter to the waits.
        retry_on: Exception classes or predicates selecting the failures
            that permit another attempt.
        executor: Executor the retry loop is submitted to.
        on_success: Hook called once with a ``SuccessInfo``.
        on_failure: Hook called with an ``AttemptError`` after every
            failed attempt.
        on_retry: Optional hook called with a ``RetryInfo`` before each wait.
        recover: Function receiving the business context and returning
            the value used when no attempt succeeds.
        business_context: Opaque value passed to ``on_success`` and
            ``recover``.

    Raises:
        ConfigurationError: If any parameter fails validation.

    Example:
        ```pycon
        >>> from aretry.policy import RetryPolicy, UNLIMITED
        >>> policy = RetryPolicy(attempt_limit=5)
        >>> policy.can_retry(4)
        True
        >>> policy.can_retry(5)
        False
        >>> policy.merge(attempt_limit=UNLIMITED).can_retry(1000)
        True
        >>> policy.attempt_limit  # Original unchanged
        5

        ```
    """

    attempt_limit: int = DEFAULT_ATTEMPT_LIMIT
    time_window: float = MIN_TIME_WINDOW
    interruptible: bool = False
    recover_on_interrupt: bool = False
    interval: BaseIntervalStrategy = field(default_factory=NoInterval)
    max_wait_time: float | None = None
    jitter_factor: float = 0.0
    retry_on: tuple[type[BaseException] | Callable[[BaseException], bool], ...] = (Exception,)
    executor: Executor = field(default_factory=InlineExecutor)
    on_success: Callable[[SuccessInfo], None] = noop_success
    on_failure: Callable[[AttemptError], None] = log_failure
    on_retry: Callable[[RetryInfo], None] | None = None
    recover: Callable[[Any], Any] = recover_none
    business_context: Any = None

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ConfigurationError: If any parameter fails validation.
        """
        validate_policy_params(
            attempt_limit=self.attempt_limit,
            time_window=self.time_window,
            min_time_window=MIN_TIME_WINDOW,
            unlimited=UNLIMITED,
            jitter_factor=self.jitter_factor,
            max_wait_time=self.max_wait_time,
        )
        validate_retry_on(self.retry_on)
        if not isinstance(self.interval, BaseIntervalStrategy):
            msg = f"interval must be a BaseIntervalStrategy, got {self.interval!r}"
            raise ConfigurationError(msg)
        if not callable(getattr(self.executor, "submit", None)):
            msg = f"executor must provide a submit method, got {self.executor!r}"
            raise ConfigurationError(msg)
        for name in ("on_success", "on_failure", "recover"):
            if not callable(getattr(self, name)):
                msg = f"{name} must be callable, got {getattr(self, name)!r}"
                raise ConfigurationError(msg)
        if self.on_retry is not None and not callable(self.on_retry):
            msg = f"on_retry must be callable, got {self.on_retry!r}"
            raise ConfigurationError(msg)

    @property
    def unlimited(self) -> bool:
        """Indicate whether the number of attempts is unbounded."""
        return self.attempt_limit == UNLIMITED

    def can_retry(self, attempt: int) -> bool:
        """Indicate whether another attempt may start.

        Args:
            attempt: The number of attempts already made.

        Returns:
            ``True`` if the attempt limit allows one more attempt. The
            first attempt is always allowed.
        """
        return attempt == 0 or self.unlimited or attempt < self.attempt_limit

    def merge(self, **overrides: Any) -> RetryPolicy:
        """Create a new policy with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new validated policy.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert the policy to a dictionary.

        Returns:
            Dictionary mapping each field name to its value.
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}
