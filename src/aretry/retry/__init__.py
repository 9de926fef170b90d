r"""Retry package implementing the retry state machine.

This package provides the retry engine together with the composed
objects it delegates to.

Public API:
    - Retry: The retry engine
    - RetryBuilder: Chained builder of a Retry
    - RetryState: Lifecycle states of a run
    - RetryStrategy: Strategy for calculating retry waits
    - RetryDecider: Logic for deciding whether to retry
    - CallbackManager: Manager for hook invocations
"""

from __future__ import annotations

__all__ = [
    "CallbackManager",
    "Retry",
    "RetryBuilder",
    "RetryDecider",
    "RetryState",
    "RetryStrategy",
]

from aretry.retry.builder import RetryBuilder
from aretry.retry.decider import RetryDecider
from aretry.retry.engine import Retry, RetryState
from aretry.retry.manager import CallbackManager
from aretry.retry.strategy import RetryStrategy
