r"""Exception classes raised or reported by the retry engine.

Only ``ConfigurationError`` ever reaches the caller as a raised
exception. ``AttemptError`` wraps a failure of the retried action and is
handed to the failure hook instead of being raised.
"""

from __future__ import annotations

__all__ = ["AttemptError", "ConfigurationError", "RetryError"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aretry.policy import RetryPolicy


class RetryError(Exception):
    """Base class for all the exceptions defined by ``aretry``."""


class ConfigurationError(RetryError, ValueError):
    """Exception raised when a retry policy cannot be built.

    Example:
        ```pycon
        >>> from aretry.exceptions import ConfigurationError
        >>> raise ConfigurationError("attempt_limit must be >= 0, got -3")
        Traceback (most recent call last):
            ...
        aretry.exceptions.ConfigurationError: attempt_limit must be >= 0, got -3

        ```
    """


class AttemptError(RetryError):
    """Failure of a single attempt, paired with the active policy.

    The original exception is available as ``cause`` and is also chained
    as ``__cause__`` so tracebacks show both.

    Args:
        cause: The exception raised by the retried action.
        policy: The policy that governed the attempt.
        attempt: The attempt number (1-indexed).

    Example:
        ```pycon
        >>> from aretry.exceptions import AttemptError
        >>> from aretry.policy import RetryPolicy
        >>> error = AttemptError(ValueError("boom"), policy=RetryPolicy(), attempt=2)
        >>> error.attempt
        2
        >>> error.cause
        ValueError('boom')
        >>> str(error)
        'attempt 2 failed with ValueError: boom'

        ```
    """

    def __init__(self, cause: BaseException, policy: RetryPolicy, attempt: int) -> None:
        super().__init__(f"attempt {attempt} failed with {type(cause).__name__}: {cause}")
        self.cause = cause
        self.policy = policy
        self.attempt = attempt
        self.__cause__ = cause

    def describe(self) -> str:
        """Return the error message followed by the policy snapshot.

        Returns:
            A multi-line diagnostic string.
        """
        return f"{self}\n retry policy: {self.policy!r}"
