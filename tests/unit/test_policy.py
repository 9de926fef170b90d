r"""Unit tests for RetryPolicy."""

from __future__ import annotations

import dataclasses
from unittest.mock import Mock

import pytest
from coola.equality import objects_are_equal

from aretry import UNLIMITED, ConfigurationError, InlineExecutor, RetryPolicy
from aretry.callbacks import log_failure, noop_success, recover_none
from aretry.config import DEFAULT_ATTEMPT_LIMIT, MAX_ATTEMPT_INDEX, MIN_TIME_WINDOW
from aretry.interval import FixedInterval, NoInterval


def test_constants() -> None:
    assert UNLIMITED == -1
    assert DEFAULT_ATTEMPT_LIMIT == 3
    assert MIN_TIME_WINDOW == 1.0
    assert MAX_ATTEMPT_INDEX == 2**31 - 1


def test_retry_policy_defaults() -> None:
    policy = RetryPolicy()
    assert policy.attempt_limit == 3
    assert policy.time_window == 1.0
    assert not policy.interruptible
    assert not policy.recover_on_interrupt
    assert isinstance(policy.interval, NoInterval)
    assert policy.max_wait_time is None
    assert policy.jitter_factor == 0.0
    assert policy.retry_on == (Exception,)
    assert isinstance(policy.executor, InlineExecutor)
    assert policy.on_success is noop_success
    assert policy.on_failure is log_failure
    assert policy.on_retry is None
    assert policy.recover is recover_none
    assert policy.business_context is None


def test_retry_policy_is_frozen() -> None:
    policy = RetryPolicy()
    with pytest.raises(dataclasses.FrozenInstanceError):
        policy.attempt_limit = 10


@pytest.mark.parametrize("attempt_limit", [0, 1, 5, UNLIMITED])
def test_retry_policy_valid_attempt_limit(attempt_limit: int) -> None:
    assert RetryPolicy(attempt_limit=attempt_limit).attempt_limit == attempt_limit


def test_retry_policy_invalid_attempt_limit() -> None:
    with pytest.raises(ConfigurationError, match=r"attempt_limit must be >= 0 or UNLIMITED"):
        RetryPolicy(attempt_limit=-2)


def test_retry_policy_time_window_below_minimum() -> None:
    with pytest.raises(ConfigurationError, match=r"time_window must be >= 1.0"):
        RetryPolicy(time_window=0.5)


def test_retry_policy_invalid_jitter_factor() -> None:
    with pytest.raises(ConfigurationError, match=r"jitter_factor must be >= 0"):
        RetryPolicy(jitter_factor=-0.1)


def test_retry_policy_invalid_max_wait_time() -> None:
    with pytest.raises(ConfigurationError, match=r"max_wait_time must be > 0"):
        RetryPolicy(max_wait_time=0)


def test_retry_policy_empty_retry_on() -> None:
    with pytest.raises(ConfigurationError, match=r"retry_on must contain at least one"):
        RetryPolicy(retry_on=())


def test_retry_policy_retry_on_not_exception_class() -> None:
    with pytest.raises(ConfigurationError, match=r"retry_on classes must be exceptions"):
        RetryPolicy(retry_on=(int,))


def test_retry_policy_invalid_interval() -> None:
    with pytest.raises(ConfigurationError, match=r"interval must be a BaseIntervalStrategy"):
        RetryPolicy(interval=1.0)


def test_retry_policy_invalid_executor() -> None:
    with pytest.raises(ConfigurationError, match=r"executor must provide a submit method"):
        RetryPolicy(executor=object())


@pytest.mark.parametrize("name", ["on_success", "on_failure", "on_retry", "recover"])
def test_retry_policy_hook_not_callable(name: str) -> None:
    with pytest.raises(ConfigurationError, match=rf"{name} must be callable"):
        RetryPolicy(**{name: "not callable"})


@pytest.mark.parametrize(
    ("attempt_limit", "attempt", "expected"),
    [
        (3, 0, True),
        (3, 2, True),
        (3, 3, False),
        (1, 0, True),
        (1, 1, False),
        (0, 0, True),
        (0, 1, False),
        (UNLIMITED, 0, True),
        (UNLIMITED, 10**6, True),
    ],
)
def test_retry_policy_can_retry(attempt_limit: int, attempt: int, expected: bool) -> None:
    assert RetryPolicy(attempt_limit=attempt_limit).can_retry(attempt) is expected


def test_retry_policy_unlimited() -> None:
    assert RetryPolicy(attempt_limit=UNLIMITED).unlimited
    assert not RetryPolicy().unlimited


def test_retry_policy_merge() -> None:
    policy = RetryPolicy(attempt_limit=5)
    merged = policy.merge(time_window=10.0, interval=FixedInterval(0.5), jitter_factor=None)
    assert merged is not policy
    assert merged.attempt_limit == 5
    assert merged.time_window == 10.0
    assert merged.jitter_factor == 0.0
    assert policy.time_window == 1.0


def test_retry_policy_merge_validates() -> None:
    with pytest.raises(ConfigurationError, match=r"time_window must be >= 1.0"):
        RetryPolicy().merge(time_window=0.1)


def test_retry_policy_to_dict() -> None:
    recover = Mock()
    policy = RetryPolicy(attempt_limit=2, retry_on=(OSError,), recover=recover)
    data = policy.to_dict()
    assert objects_are_equal(
        {k: data[k] for k in ("attempt_limit", "time_window", "retry_on", "recover")},
        {"attempt_limit": 2, "time_window": 1.0, "retry_on": (OSError,), "recover": recover},
    )
    assert set(data) == {f.name for f in dataclasses.fields(RetryPolicy)}
