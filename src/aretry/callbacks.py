r"""Hook payloads and default hooks.

The retry engine exposes three hooks:
- on_success: Called once when an attempt succeeds
- on_failure: Called after every failed attempt
- on_retry: Called before waiting for the next attempt

Example:
    ```pycon
    >>> from aretry import Retry
    >>> from aretry.callbacks import SuccessInfo
    >>> def log_success(info: SuccessInfo) -> None:
    ...     print(f"succeeded on attempt {info.attempt}: {info.result}")
    ...
    >>> Retry.of(lambda: 42).success_hook(log_success).build().result_blocking()
    succeeded on attempt 1: 42
    42

    ```
"""

from __future__ import annotations

__all__ = [
    "RetryInfo",
    "SuccessInfo",
    "log_failure",
    "noop_success",
    "recover_none",
]

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from aretry.exceptions import AttemptError

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuccessInfo:
    """Information passed to the on_success hook.

    Attributes:
        result: The value returned by the successful attempt.
        attempt: The attempt number that succeeded (1-indexed).
        total_time: Time spent on all attempts including waits (seconds).
        business_context: The opaque context attached to the run.
    """

    result: Any
    attempt: int
    total_time: float
    business_context: Any = None


@dataclass(frozen=True)
class RetryInfo:
    """Information passed to the on_retry hook.

    Attributes:
        attempt: The number of the attempt about to be made (1-indexed).
            The first retry is attempt 2.
        attempt_limit: Maximum number of attempts configured.
        wait_time: The wait in seconds before this attempt.
        error: The exception raised by the previous attempt.
    """

    attempt: int
    attempt_limit: int
    wait_time: float
    error: BaseException | None


def noop_success(info: SuccessInfo) -> None:  # noqa: ARG001
    r"""Default success hook, does nothing."""


def log_failure(error: AttemptError) -> None:
    r"""Default failure hook, logs the failed attempt as a warning.

    Args:
        error: The failure of the attempt.
    """
    logger.warning(f"Retry attempt failed: {error.describe()}", exc_info=error)


def recover_none(business_context: Any) -> None:  # noqa: ARG001
    r"""Default recovery function, returns ``None``."""
