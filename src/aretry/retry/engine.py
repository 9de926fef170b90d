r"""Retry engine driving the attempts of an action.

This module provides the Retry class, the state machine that invokes an
action under a RetryPolicy and completes a ResultFuture exactly once.
"""

from __future__ import annotations

__all__ = ["Retry", "RetryState"]

import contextvars
import functools
import logging
import threading
import time
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from aretry.exceptions import AttemptError, ConfigurationError
from aretry.future import ResultFuture
from aretry.policy import MAX_ATTEMPT_INDEX, RetryPolicy
from aretry.retry.decider import RetryDecider
from aretry.retry.manager import CallbackManager
from aretry.retry.strategy import RetryStrategy
from aretry.utils.sleep import interruptible_sleep
from aretry.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.interval import TimeUnit
    from aretry.retry.builder import RetryBuilder

logger: logging.Logger = logging.getLogger(__name__)

R = TypeVar("R")


class RetryState(Enum):
    """Lifecycle states of a retry run.

    Attributes:
        IDLE: The run has not been triggered yet.
        RUNNING: The retry loop is executing.
        SUCCEEDED: An attempt succeeded and its value completed the result.
        RECOVERED: No attempt succeeded and the recovery value completed
            the result.
        ABORTED: An interruption stopped the run and the result was left
            pending.
        FAILED: An internal error ended the run, for example a raising
            interval strategy or retry predicate, and completed the
            result exceptionally.
    """

    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    RECOVERED = "recovered"
    ABORTED = "aborted"
    FAILED = "failed"


class Retry(Generic[R]):
    """Run an action until it succeeds or the policy gives up.

    The run is triggered by ``execute``, ``result_future`` or
    ``result_blocking`` and is submitted to the executor of the policy.
    Only the first trigger runs the loop, later triggers return the same
    result. Failures of the action never reach the caller: they are
    reported to the on_failure hook and end in either another attempt or
    the recovery value.

    The loop stops when:
    - An attempt succeeds: its value completes the result
    - An attempt fails with a non-retryable exception
    - The attempt limit is reached
    - The time window is exceeded before an attempt starts
    - An interruption hits a wait of an interruptible policy

    In all cases but the first and the last, the result is completed with
    ``policy.recover(policy.business_context)``.

    Note:
        An interrupted run of an interruptible policy leaves the result
        pending, unless ``recover_on_interrupt`` is set. Callers blocking
        on such a run without a timeout wait forever.

    Args:
        action: The zero-argument callable to run.
        policy: The policy governing the run. Defaults to RetryPolicy().

    Raises:
        ConfigurationError: If ``action`` is not callable.

    Example:
        ```pycon
        >>> from aretry import Retry
        >>> calls = []
        >>> def flaky() -> str:
        ...     calls.append(1)
        ...     if len(calls) < 3:
        ...         raise ConnectionError("unreachable")
        ...     return "ok"
        ...
        >>> retry = Retry.of(flaky).retry_times(5).retry_when(ConnectionError).build()
        >>> retry.result_blocking()
        'ok'
        >>> retry.attempts
        3
        >>> retry.state
        <RetryState.SUCCEEDED: 'succeeded'>

        ```
    """

    def __init__(self, action: Callable[[], R], policy: RetryPolicy | None = None) -> None:
        if not callable(action):
            msg = f"action must be callable, got {action!r}"
            raise ConfigurationError(msg)
        self._action = action
        self._policy = policy if policy is not None else RetryPolicy()
        self._strategy = RetryStrategy(
            self._policy.interval,
            self._policy.jitter_factor,
            self._policy.max_wait_time,
        )
        self._decider = RetryDecider(self._policy.retry_on)
        self._callbacks = CallbackManager(self._policy)
        self._future: ResultFuture[R] = ResultFuture()
        self._interrupted = threading.Event()
        self._lock = threading.Lock()
        self._state = RetryState.IDLE
        self._attempts = 0

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(action={self._action!r}, "
            f"state={self._state.name}, attempts={self._attempts})"
        )

    @staticmethod
    def of(action: Callable[[], R], business_context: Any = None) -> RetryBuilder:
        """Start configuring a retry of ``action``.

        Args:
            action: The zero-argument callable to run.
            business_context: Optional opaque value passed to the
                on_success hook and the recovery function.

        Returns:
            The builder of the retry.
        """
        from aretry.retry.builder import RetryBuilder  # noqa: PLC0415

        return RetryBuilder(action, business_context=business_context)

    @property
    def policy(self) -> RetryPolicy:
        """The policy governing the run."""
        return self._policy

    @property
    def future(self) -> ResultFuture[R]:
        """The result of the run, without triggering it."""
        return self._future

    @property
    def state(self) -> RetryState:
        """The current lifecycle state."""
        return self._state

    @property
    def attempts(self) -> int:
        """The number of times the action has been invoked."""
        return self._attempts

    def execute(self) -> None:
        """Trigger the run without observing its result.

        Raises:
            RuntimeError: If the executor refuses the submission, for
                example because it was shut down.
        """
        self._submit()

    def result_future(self) -> ResultFuture[R]:
        """Trigger the run and return its result.

        Returns:
            The future completed by the run.
        """
        self._submit()
        return self._future

    def result_blocking(self, timeout: float | None = None, unit: TimeUnit | None = None) -> R | None:
        """Trigger the run and wait for its result.

        The timeout only bounds how long the caller waits. A run that
        outlasts it keeps going on its executor.

        Args:
            timeout: Maximum time to wait, or ``None`` to wait without limit.
            unit: Unit of ``timeout``. Defaults to seconds.

        Returns:
            The value of the successful attempt or the recovery value, or
            ``None`` if the wait timed out or the run failed internally.
        """
        self._submit()
        if timeout is not None and unit is not None:
            timeout = unit.to_seconds(timeout)
        return self._future.await_blocking(timeout)

    def as_callable(
        self, timeout: float | None = None, unit: TimeUnit | None = None
    ) -> Callable[[], R | None]:
        """Return a deferred ``result_blocking`` call.

        The returned callable can be handed to another task system, for
        example ``concurrent.futures.Executor.submit``.

        Args:
            timeout: Maximum time to wait, or ``None`` to wait without limit.
            unit: Unit of ``timeout``. Defaults to seconds.

        Returns:
            A zero-argument callable returning the result.
        """
        return functools.partial(self.result_blocking, timeout, unit)

    def as_runnable(self) -> Callable[[], None]:
        """Return a deferred ``execute`` call.

        Returns:
            A zero-argument callable triggering the run.
        """
        return self.execute

    def interrupt(self) -> None:
        """Signal an interruption to the waiting phase of the run.

        A wait in progress ends immediately. Otherwise the signal is kept
        until the next wait. Interruptible policies abort the run, the
        others absorb the signal and go on with the next attempt.
        """
        self._interrupted.set()

    def _submit(self) -> None:
        context = contextvars.copy_context()
        self._policy.executor.submit(context.run, self._run)

    def _run(self) -> None:
        with self._lock:
            if self._state is not RetryState.IDLE:
                logger.debug(f"Retry run already triggered (state={self._state.name})")
                return
            self._state = RetryState.RUNNING
        try:
            self._retry_loop()
        except BaseException as exc:
            logger.warning(f"The retry run failed with an internal error: {exc!r}")
            self._state = RetryState.FAILED
            self._future.fail_once(exc)
            raise

    def _retry_loop(self) -> None:
        policy = self._policy
        start_time = time.monotonic()
        attempt = 0
        last_error: BaseException | None = None

        while not self._future.is_completed() and policy.can_retry(attempt):
            if attempt > 0 and self._wait(attempt, last_error):
                if policy.recover_on_interrupt:
                    self._recover()
                else:
                    self._state = RetryState.ABORTED
                return

            if policy.unlimited and attempt >= MAX_ATTEMPT_INDEX:
                attempt = 1
            else:
                attempt += 1

            elapsed_time = time.monotonic() - start_time
            if elapsed_time >= policy.time_window:
                logger.debug(
                    f"Time window of {policy.time_window:.2f}s exceeded after "
                    f"{elapsed_time:.2f}s, no attempt {attempt}"
                )
                break

            self._attempts += 1
            try:
                result = self._action()
            except Exception as exc:
                last_error = exc
                self._callbacks.on_failure(AttemptError(exc, policy, attempt))
                should_retry, reason = self._decider.should_retry(exc)
                if should_retry:
                    log_structured(
                        logger,
                        logging.DEBUG,
                        f"Attempt {attempt} failed, will retry ({reason})",
                        attempt=attempt,
                        elapsed=elapsed_time,
                    )
                    continue
                log_structured(
                    logger,
                    logging.DEBUG,
                    f"Attempt {attempt} failed, giving up ({reason})",
                    attempt=attempt,
                    elapsed=elapsed_time,
                )
                break

            self._callbacks.on_success(result, attempt, start_time)
            self._state = RetryState.SUCCEEDED
            self._future.complete_once(result)
            log_structured(
                logger,
                logging.DEBUG,
                f"Attempt {attempt} succeeded",
                attempt=attempt,
                elapsed=time.monotonic() - start_time,
            )
            return

        self._recover()

    def _wait(self, attempt: int, last_error: BaseException | None) -> bool:
        r"""Wait before the next attempt.

        Args:
            attempt: The number of attempts already made.
            last_error: The exception raised by the previous attempt.

        Returns:
            ``True`` if the run must abort because of an interruption.
        """
        wait_time = self._strategy.calculate_delay(attempt - 1)
        self._callbacks.on_retry(attempt + 1, wait_time, last_error)
        if not interruptible_sleep(wait_time, self._interrupted):
            return False
        if self._policy.interruptible:
            logger.warning(
                f"Interrupted while waiting for attempt {attempt + 1}, "
                f"aborting the run (policy: {self._policy!r})"
            )
            return True
        logger.debug(f"Interrupted while waiting for attempt {attempt + 1}, continuing")
        return False

    def _recover(self) -> None:
        self._state = RetryState.RECOVERED
        if self._future.is_completed():
            return
        policy = self._policy
        try:
            value = policy.recover(policy.business_context)
        except Exception as exc:
            logger.warning("The recovery function raised an exception", exc_info=True)
            self._future.fail_once(exc)
        else:
            self._future.complete_once(value)
