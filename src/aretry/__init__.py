r"""aretry - Retry engine with policies, interval strategies and futures.

This package runs a fallible zero-argument callable again and again
under a policy until it succeeds, fails with a non-retryable exception,
runs out of attempts or exceeds its time window. The outcome is
delivered exactly once through a single-assignment future that can be
waited on, observed with callbacks or awaited.

Key Features:
    - Attempt limit, or unlimited attempts
    - Fixed, random, callable and exponential waits, in any time unit
    - Time window bounding the whole run
    - Retryable exception classes (subclasses match) or custom predicates
    - Success, failure and retry hooks, and a recovery value
    - Inline or worker pool execution, interruptible waits
    - Blocking retrieval with timeout, done-callbacks and ``await``

Example:
    ```pycon
    >>> from aretry import Retry, TimeUnit, interval
    >>> retry = (
    ...     Retry.of(lambda: "payload")
    ...     .retry_times(4)
    ...     .interval(interval.random(10, 50), TimeUnit.MILLISECONDS)
    ...     .time_window(10, TimeUnit.SECONDS)
    ...     .retry_when(ConnectionError, TimeoutError)
    ...     .recover_value("fallback")
    ...     .build()
    ... )
    >>> retry.result_blocking()
    'payload'

    ```
"""

from __future__ import annotations

__all__ = [
    "UNLIMITED",
    "AttemptError",
    "ConfigurationError",
    "InlineExecutor",
    "ResultFuture",
    "Retry",
    "RetryBuilder",
    "RetryError",
    "RetryInfo",
    "RetryPolicy",
    "RetryState",
    "SuccessInfo",
    "TimeUnit",
    "__version__",
    "interval",
    "is_retryable",
    "shared_executor",
]

from importlib.metadata import PackageNotFoundError, version

from aretry import interval
from aretry.callbacks import RetryInfo, SuccessInfo
from aretry.classifier import is_retryable
from aretry.exceptions import AttemptError, ConfigurationError, RetryError
from aretry.executors import InlineExecutor, shared_executor
from aretry.future import ResultFuture
from aretry.interval import TimeUnit
from aretry.policy import UNLIMITED, RetryPolicy
from aretry.retry import Retry, RetryBuilder, RetryState

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
