r"""Parameter validation utilities for retry policies.

This module provides validation functions for the retry parameters to
ensure they meet the required constraints before a policy is used by the
retry engine.
"""

from __future__ import annotations

__all__ = ["validate_policy_params", "validate_retry_on"]

import inspect
from typing import Any

from aretry.exceptions import ConfigurationError


def validate_policy_params(
    attempt_limit: int,
    time_window: float,
    min_time_window: float,
    unlimited: int,
    jitter_factor: float = 0.0,
    max_wait_time: float | None = None,
) -> None:
    """Validate the numeric parameters of a retry policy.

    Args:
        attempt_limit: Maximum number of attempts. Must be >= 0 or equal
            to ``unlimited``. A value of 0 still performs the initial attempt.
        time_window: Time window in seconds, measured from the start of
            the run. Must be >= ``min_time_window``.
        min_time_window: The smallest accepted time window.
        unlimited: The sentinel disabling the attempt limit.
        jitter_factor: Factor for adding random jitter to waits. Must be >= 0.
        max_wait_time: Maximum wait in seconds. Must be > 0 if provided.

    Raises:
        ConfigurationError: If any parameter violates its constraint.

    Example:
        ```pycon
        >>> from aretry.utils.validation import validate_policy_params
        >>> validate_policy_params(3, time_window=5.0, min_time_window=1.0, unlimited=-1)
        >>> validate_policy_params(-1, time_window=5.0, min_time_window=1.0, unlimited=-1)
        >>> validate_policy_params(-2, time_window=5.0, min_time_window=1.0, unlimited=-1)
        Traceback (most recent call last):
            ...
        aretry.exceptions.ConfigurationError: attempt_limit must be >= 0 or UNLIMITED, got -2

        ```
    """
    if attempt_limit < 0 and attempt_limit != unlimited:
        msg = f"attempt_limit must be >= 0 or UNLIMITED, got {attempt_limit}"
        raise ConfigurationError(msg)
    if time_window < min_time_window:
        msg = f"time_window must be >= {min_time_window}, got {time_window}"
        raise ConfigurationError(msg)
    if jitter_factor < 0:
        msg = f"jitter_factor must be >= 0, got {jitter_factor}"
        raise ConfigurationError(msg)
    if max_wait_time is not None and max_wait_time <= 0:
        msg = f"max_wait_time must be > 0, got {max_wait_time}"
        raise ConfigurationError(msg)


def validate_retry_on(retry_on: tuple[Any, ...]) -> None:
    """Validate the matchers of the retryable exception set.

    Args:
        retry_on: Exception classes or predicates over an exception.

    Raises:
        ConfigurationError: If the set is empty or holds anything else
            than an exception class or a callable.
    """
    if not retry_on:
        msg = "retry_on must contain at least one exception class or predicate"
        raise ConfigurationError(msg)
    for matcher in retry_on:
        if inspect.isclass(matcher):
            if not issubclass(matcher, BaseException):
                msg = f"retry_on classes must be exceptions, got {matcher!r}"
                raise ConfigurationError(msg)
        elif not callable(matcher):
            msg = f"retry_on entries must be exception classes or callables, got {matcher!r}"
            raise ConfigurationError(msg)
