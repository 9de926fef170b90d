r"""Executors the retry loop can be submitted to.

The engine only relies on the ``concurrent.futures.Executor`` interface.
``InlineExecutor`` runs the loop on the triggering thread (synchronous
mode) and ``shared_executor`` returns the worker pool used by default in
asynchronous mode.
"""

from __future__ import annotations

__all__ = ["InlineExecutor", "shared_executor", "shutdown_shared_executor"]

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)

T = TypeVar("T")

_shared_executor: ThreadPoolExecutor | None = None
_shared_lock = threading.Lock()


class InlineExecutor(Executor):
    """Executor running every submitted callable on the calling thread.

    The returned future is already done when ``submit`` returns. An
    exception raised by the callable is stored in the future, as a pool
    executor would do, while ``KeyboardInterrupt`` and ``SystemExit``
    propagate to the caller.

    Example:
        ```pycon
        >>> from aretry.executors import InlineExecutor
        >>> future = InlineExecutor().submit(sum, [1, 2, 3])
        >>> future.done()
        True
        >>> future.result()
        6

        ```
    """

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}()"

    def submit(self, fn: Callable[..., T], /, *args: Any, **kwargs: Any) -> Future[T]:
        future: Future[T] = Future()
        if not future.set_running_or_notify_cancel():  # pragma: no cover
            return future
        try:
            result = fn(*args, **kwargs)
        except Exception as exc:  # noqa: BLE001
            future.set_exception(exc)
        else:
            future.set_result(result)
        return future


def shared_executor() -> ThreadPoolExecutor:
    """Return the process-wide worker pool used for asynchronous runs.

    The pool is created on first use.

    Returns:
        The shared thread pool executor.
    """
    global _shared_executor  # noqa: PLW0603
    with _shared_lock:
        if _shared_executor is None:
            logger.debug("Creating the shared retry worker pool")
            _shared_executor = ThreadPoolExecutor(thread_name_prefix="aretry")
        return _shared_executor


def shutdown_shared_executor(wait: bool = True) -> None:
    """Shut down the shared worker pool if it was created.

    A later call to ``shared_executor`` creates a new pool.

    Args:
        wait: Whether to wait for the running loops to finish.
    """
    global _shared_executor  # noqa: PLW0603
    with _shared_lock:
        executor, _shared_executor = _shared_executor, None
    if executor is not None:
        executor.shutdown(wait=wait)
