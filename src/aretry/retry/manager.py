r"""Callback manager for orchestrating retry lifecycle events.

This module provides the CallbackManager class that handles invocation
of the hooks of a retry policy at the various points of a run.
"""

from __future__ import annotations

__all__ = ["CallbackManager"]

import logging
import time
from typing import TYPE_CHECKING, Any

from aretry.callbacks import RetryInfo, SuccessInfo

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.exceptions import AttemptError
    from aretry.policy import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)


class CallbackManager:
    """Manages hook invocations during the retry lifecycle.

    Hooks run on the thread executing the retry loop. An exception raised
    by a hook is logged and does not change the course of the run.

    Attributes:
        policy: The policy holding the hooks.
    """

    def __init__(self, policy: RetryPolicy) -> None:
        self.policy = policy

    def on_success(self, result: Any, attempt: int, start_time: float) -> None:
        """Invoke the on_success hook.

        Args:
            result: The value returned by the successful attempt.
            attempt: Attempt number that succeeded (1-indexed).
            start_time: Monotonic timestamp of the start of the run.
        """
        self._invoke(
            "on_success",
            self.policy.on_success,
            SuccessInfo(
                result=result,
                attempt=attempt,
                total_time=time.monotonic() - start_time,
                business_context=self.policy.business_context,
            ),
        )

    def on_failure(self, error: AttemptError) -> None:
        """Invoke the on_failure hook.

        Args:
            error: The failure of the attempt, wrapped with the policy.
        """
        self._invoke("on_failure", self.policy.on_failure, error)

    def on_retry(self, attempt: int, wait_time: float, error: BaseException | None) -> None:
        """Invoke the on_retry hook.

        Args:
            attempt: Number of the upcoming attempt (1-indexed).
            wait_time: Wait in seconds before the upcoming attempt.
            error: Exception raised by the previous attempt.
        """
        if self.policy.on_retry is not None:
            self._invoke(
                "on_retry",
                self.policy.on_retry,
                RetryInfo(
                    attempt=attempt,
                    attempt_limit=self.policy.attempt_limit,
                    wait_time=wait_time,
                    error=error,
                ),
            )

    @staticmethod
    def _invoke(name: str, hook: Callable[[Any], None], payload: Any) -> None:
        try:
            hook(payload)
        except Exception:
            logger.exception(f"The {name} hook raised an exception")
