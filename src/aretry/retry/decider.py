r"""Retry decision logic for failed attempts.

This module provides the RetryDecider class that decides whether the
failure of an attempt permits another one, and explains the decision for
the logs.
"""

from __future__ import annotations

__all__ = ["RetryDecider"]

import logging
from typing import TYPE_CHECKING

from aretry.classifier import is_retryable

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


class RetryDecider:
    """Decides whether a failed attempt should be retried.

    The decider only looks at the kind of the failure. Attempt limits and
    time windows are enforced by the engine loop.

    Args:
        retry_on: Exception classes or predicates selecting the
            retryable failures.

    Example:
        ```pycon
        >>> from aretry.retry.decider import RetryDecider
        >>> decider = RetryDecider(retry_on=(TimeoutError,))
        >>> decider.should_retry(TimeoutError("slow"))
        (True, 'TimeoutError')
        >>> decider.should_retry(KeyError("id"))
        (False, 'non-retryable KeyError')

        ```
    """

    def __init__(
        self,
        retry_on: tuple[type[BaseException] | Callable[[BaseException], bool], ...],
    ) -> None:
        self.retry_on = retry_on

    def should_retry(self, error: BaseException) -> tuple[bool, str]:
        """Determine if the error should trigger another attempt.

        Args:
            error: The exception raised by the attempt.

        Returns:
            Tuple of (should_retry, reason).
        """
        name = type(error).__name__
        if is_retryable(error, self.retry_on):
            return (True, name)
        logger.debug(f"{name} does not match any retryable kind {self.retry_on}")
        return (False, f"non-retryable {name}")
