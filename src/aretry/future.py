r"""Single-assignment future carrying the result of a retry run.

``ResultFuture`` is completed at most once, either with the value of
the successful attempt or with the recovery value. Later completions
are ignored. Observers can block (with an optional timeout), register a
done-callback, or ``await`` it from asyncio code.
"""

from __future__ import annotations

__all__ = ["ResultFuture"]

import asyncio
import logging
import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

logger: logging.Logger = logging.getLogger(__name__)

R = TypeVar("R")


class ResultFuture(Generic[R]):
    """Single-assignment container for the result of a retry run.

    Completion is guarded by a lock, so when several threads race to
    complete the future only the first one wins.

    Example:
        ```pycon
        >>> from aretry.future import ResultFuture
        >>> future = ResultFuture()
        >>> future.is_completed()
        False
        >>> future.complete_once("first")
        True
        >>> future.complete_once("second")
        False
        >>> future.await_blocking()
        'first'

        ```
    """

    def __init__(self) -> None:
        self._future: Future[R] = Future()
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        state = "completed" if self.is_completed() else "pending"
        return f"{self.__class__.__qualname__}(state={state})"

    def complete_once(self, value: R) -> bool:
        """Complete the future with ``value`` unless already completed.

        Args:
            value: The value to store.

        Returns:
            ``True`` if this call completed the future, otherwise ``False``.
        """
        with self._lock:
            if self._future.done():
                return False
            self._future.set_result(value)
            return True

    def fail_once(self, error: BaseException) -> bool:
        """Complete the future with an internal error unless already
        completed.

        Blocking observers do not see the error raised, they get ``None``
        and a warning is logged.

        Args:
            error: The exception to store.

        Returns:
            ``True`` if this call completed the future, otherwise ``False``.
        """
        with self._lock:
            if self._future.done():
                return False
            self._future.set_exception(error)
            return True

    def is_completed(self) -> bool:
        """Indicate whether the future has been completed."""
        return self._future.done()

    def await_blocking(self, timeout: float | None = None) -> R | None:
        """Block the calling thread until the future is completed.

        The timeout only bounds how long the caller waits, the run that
        completes the future keeps going.

        Args:
            timeout: Maximum number of seconds to wait, or ``None`` to
                wait without limit.

        Returns:
            The stored value, or ``None`` if the wait timed out or the run
            failed internally.
        """
        try:
            return self._future.result(timeout=timeout)
        except FutureTimeoutError:
            logger.warning(f"Timed out after {timeout}s while waiting for the retry result")
        except Exception:
            logger.warning("The retry run failed while computing its result", exc_info=True)
        return None

    def add_done_callback(self, fn: Callable[[ResultFuture[R]], Any]) -> None:
        """Attach a callable invoked once the future is completed.

        The callable runs on the thread completing the future, or
        immediately on the calling thread if the future is already
        completed.

        Args:
            fn: The callable, which receives this ``ResultFuture``.
        """
        self._future.add_done_callback(lambda _: fn(self))

    def exception(self) -> BaseException | None:
        """Return the internal error of a completed future, if any.

        Returns:
            The stored exception, or ``None`` if the future holds a value
            or is not completed yet.
        """
        if not self._future.done():
            return None
        return self._future.exception()

    def as_concurrent_future(self) -> Future[R]:
        """Return a ``concurrent.futures.Future`` following this future.

        The returned future is a new object completed with the same
        outcome. Cancelling it or setting its result leaves this future
        untouched.

        Returns:
            The chained future.
        """
        chained: Future[R] = Future()

        def _propagate(source: Future[R]) -> None:
            if chained.done():
                return
            error = source.exception()
            if error is not None:
                chained.set_exception(error)
            else:
                chained.set_result(source.result())

        self._future.add_done_callback(_propagate)
        return chained

    def __await__(self) -> Generator[Any, None, R]:
        # A cancelled awaiter must not cancel the shared result
        return asyncio.shield(asyncio.wrap_future(self._future)).__await__()
