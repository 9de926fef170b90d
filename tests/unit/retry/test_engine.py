r"""Unit tests for the retry engine running on the calling thread."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from aretry import (
    AttemptError,
    ConfigurationError,
    ResultFuture,
    Retry,
    RetryInfo,
    RetryPolicy,
    RetryState,
    SuccessInfo,
    TimeUnit,
    interval,
)

if TYPE_CHECKING:
    from _pytest.logging import LogCaptureFixture


class KindX(Exception):
    pass


class KindY(Exception):
    pass


def flaky(failures: int, exc: type[Exception] = ConnectionError, value: str = "ok") -> Mock:
    """Create an action failing ``failures`` times before returning
    ``value``."""
    return Mock(side_effect=[exc(f"failure {i}") for i in range(failures)] + [value])


def always_fail(exc: type[Exception] = ConnectionError) -> Mock:
    return Mock(side_effect=exc("always"))


##########################
#     Tests for Retry    #
##########################


def test_retry_requires_callable() -> None:
    with pytest.raises(ConfigurationError, match=r"action must be callable"):
        Retry("not callable")


def test_retry_default_policy() -> None:
    retry = Retry(Mock(return_value=1))
    assert isinstance(retry.policy, RetryPolicy)
    assert retry.policy.attempt_limit == 3


def test_default_attempt_limit_makes_three_attempts() -> None:
    action = always_fail()
    retry = Retry(action, RetryPolicy(on_failure=Mock()))

    assert retry.result_blocking() is None
    assert action.call_count == 3


def test_zero_attempt_limit_makes_single_attempt() -> None:
    action = always_fail()
    retry = Retry(action, RetryPolicy(attempt_limit=0, on_failure=Mock()))

    assert retry.result_blocking() is None
    action.assert_called_once()


def test_retry_initial_state() -> None:
    action = Mock(return_value=1)
    retry = Retry(action)
    assert retry.state is RetryState.IDLE
    assert retry.attempts == 0
    assert isinstance(retry.future, ResultFuture)
    assert not retry.future.is_completed()
    action.assert_not_called()


def test_retry_repr() -> None:
    assert "state=IDLE, attempts=0" in repr(Retry(Mock(return_value=1)))


#################################
#     Tests for the scenarios   #
#################################


def test_scenario_a_first_attempt_succeeds() -> None:
    action = Mock(return_value="value")
    on_success, on_failure = Mock(), Mock()
    retry = (
        Retry.of(action)
        .retry_times(4)
        .success_hook(on_success)
        .failure_hook(on_failure)
        .recover_value("fallback")
        .build()
    )

    assert retry.result_blocking() == "value"
    assert action.call_count == 1
    on_success.assert_called_once()
    on_failure.assert_not_called()
    assert retry.state is RetryState.SUCCEEDED


def test_scenario_b_attempts_exhausted() -> None:
    action = always_fail(KindX)
    on_failure = Mock()
    retry = (
        Retry.of(action)
        .retry_times(4)
        .retry_when(KindX)
        .time_window(60)
        .failure_hook(on_failure)
        .recover_value("fallback")
        .build()
    )

    assert retry.result_blocking() == "fallback"
    assert action.call_count == 4
    assert on_failure.call_count == 4
    assert retry.attempts == 4
    assert retry.state is RetryState.RECOVERED


def test_scenario_c_deadline_stops_early() -> None:
    action = always_fail(KindX)
    retry = (
        Retry.of(action)
        .retry_times(4)
        .retry_when(KindX)
        .time_window(10, TimeUnit.MILLISECONDS)
        .interval(interval.fixed(1000), TimeUnit.MILLISECONDS)
        .failure_hook(Mock())
        .recover_value("fallback")
        .build()
    )

    assert retry.result_blocking() == "fallback"
    assert action.call_count < 4
    assert retry.state is RetryState.RECOVERED


def test_scenario_d_zero_attempt_limit_makes_one_attempt() -> None:
    action = always_fail(KindX)
    retry = (
        Retry.of(action)
        .retry_times(0)
        .retry_when(KindX)
        .failure_hook(Mock())
        .recover_value("fallback")
        .build()
    )

    assert retry.result_blocking() == "fallback"
    assert action.call_count == 1


def test_scenario_e_non_retryable_kind() -> None:
    action = always_fail(KindY)
    on_failure = Mock()
    retry = (
        Retry.of(action)
        .retry_times(4)
        .retry_when(KindX)
        .failure_hook(on_failure)
        .recover_value("fallback")
        .build()
    )

    assert retry.result_blocking() == "fallback"
    assert action.call_count == 1
    on_failure.assert_called_once()


###########################################
#     Tests for attempts and the hooks    #
###########################################


def test_retry_succeeds_after_failures() -> None:
    action = flaky(2)
    on_success = Mock()
    retry = Retry.of(action).retry_times(5).success_hook(on_success).failure_hook(Mock()).build()

    assert retry.result_blocking() == "ok"
    assert retry.attempts == 3
    info = on_success.call_args.args[0]
    assert isinstance(info, SuccessInfo)
    assert info.result == "ok"
    assert info.attempt == 3
    assert info.total_time >= 0.0


def test_retry_unlimited_until_success() -> None:
    action = flaky(25)
    retry = Retry.of(action).retry_forever().failure_hook(Mock()).build()

    assert retry.result_blocking() == "ok"
    assert action.call_count == 26


def test_retry_unlimited_attempt_index_wraps() -> None:
    action = flaky(7)
    on_failure, on_success = Mock(), Mock()
    retry = (
        Retry.of(action)
        .retry_forever()
        .failure_hook(on_failure)
        .success_hook(on_success)
        .build()
    )

    with patch("aretry.retry.engine.MAX_ATTEMPT_INDEX", 3):
        assert retry.result_blocking() == "ok"

    assert [call.args[0].attempt for call in on_failure.call_args_list] == [1, 2, 3, 1, 2, 3, 1]
    assert on_success.call_args.args[0].attempt == 2
    assert retry.attempts == 8


def test_failure_hook_receives_attempt_error() -> None:
    action = flaky(1, exc=KindX)
    on_failure = Mock()
    retry = Retry.of(action).retry_when(KindX).failure_hook(on_failure).build()

    retry.result_blocking()

    error = on_failure.call_args.args[0]
    assert isinstance(error, AttemptError)
    assert isinstance(error.cause, KindX)
    assert error.attempt == 1
    assert error.policy is retry.policy


def test_failure_hook_called_for_non_retryable_failure() -> None:
    on_failure = Mock()
    retry = Retry.of(always_fail(KindY)).retry_when(KindX).failure_hook(on_failure).build()

    retry.result_blocking()

    assert isinstance(on_failure.call_args.args[0].cause, KindY)


def test_retry_hook_called_before_each_wait() -> None:
    action = flaky(2)
    on_retry = Mock()
    retry = (
        Retry.of(action)
        .retry_times(3)
        .interval(interval.fixed(0.01))
        .retry_hook(on_retry)
        .failure_hook(Mock())
        .build()
    )

    retry.result_blocking()

    assert on_retry.call_count == 2
    infos = [call.args[0] for call in on_retry.call_args_list]
    assert all(isinstance(info, RetryInfo) for info in infos)
    assert [info.attempt for info in infos] == [2, 3]
    assert [info.wait_time for info in infos] == [0.01, 0.01]
    assert all(info.attempt_limit == 3 for info in infos)
    assert all(isinstance(info.error, ConnectionError) for info in infos)


def test_retry_waits_follow_interval() -> None:
    action = always_fail()
    on_retry = Mock()
    retry = (
        Retry.of(action)
        .retry_times(4)
        .interval(interval.ExponentialInterval(base_delay=1), TimeUnit.MILLISECONDS)
        .retry_hook(on_retry)
        .failure_hook(Mock())
        .build()
    )

    retry.result_blocking()

    assert [call.args[0].wait_time for call in on_retry.call_args_list] == pytest.approx(
        [0.001, 0.002, 0.004]
    )


def test_hook_exceptions_do_not_change_the_run(caplog: LogCaptureFixture) -> None:
    action = always_fail()
    retry = (
        Retry.of(action)
        .retry_times(3)
        .failure_hook(Mock(side_effect=RuntimeError("failure hook")))
        .retry_hook(Mock(side_effect=RuntimeError("retry hook")))
        .recover_value("fallback")
        .build()
    )

    with caplog.at_level(logging.ERROR, logger="aretry.retry.manager"):
        assert retry.result_blocking() == "fallback"

    assert action.call_count == 3
    assert "The on_failure hook raised an exception" in caplog.text
    assert "The on_retry hook raised an exception" in caplog.text


def test_success_hook_exception_keeps_value() -> None:
    retry = Retry.of(Mock(return_value=5)).success_hook(Mock(side_effect=RuntimeError())).build()
    assert retry.result_blocking() == 5
    assert retry.state is RetryState.SUCCEEDED


def test_success_hook_runs_before_completion() -> None:
    seen = []
    retry: Retry[int]

    def on_success(info: SuccessInfo) -> None:
        seen.append(retry.future.is_completed())

    retry = Retry.of(Mock(return_value=1)).success_hook(on_success).build()

    retry.result_blocking()

    assert seen == [False]


def test_default_failure_hook_logs_warning(caplog: LogCaptureFixture) -> None:
    retry = Retry.of(always_fail()).retry_times(2).build()

    with caplog.at_level(logging.WARNING, logger="aretry.callbacks"):
        retry.result_blocking()

    assert caplog.text.count("Retry attempt failed") == 2


##################################
#     Tests for the recovery     #
##################################


def test_default_recovery_value_is_none() -> None:
    retry = Retry.of(always_fail()).failure_hook(Mock()).build()
    assert retry.result_blocking() is None
    assert retry.state is RetryState.RECOVERED
    assert retry.future.is_completed()


def test_recovery_receives_business_context() -> None:
    recover = Mock(return_value="fallback")
    on_success = Mock()
    retry = (
        Retry.of(always_fail(), business_context={"order": 42})
        .failure_hook(Mock())
        .success_hook(on_success)
        .recover_result(recover)
        .build()
    )

    assert retry.result_blocking() == "fallback"
    recover.assert_called_once_with({"order": 42})
    on_success.assert_not_called()


def test_success_receives_business_context() -> None:
    on_success = Mock()
    retry = Retry.of(Mock(return_value=1)).business_context("ctx").success_hook(on_success).build()
    retry.result_blocking()
    assert on_success.call_args.args[0].business_context == "ctx"


def test_recovery_not_called_on_success() -> None:
    recover = Mock()
    Retry.of(flaky(1)).failure_hook(Mock()).recover_result(recover).build().result_blocking()
    recover.assert_not_called()


def test_raising_recovery_returns_none(caplog: LogCaptureFixture) -> None:
    retry = (
        Retry.of(always_fail())
        .failure_hook(Mock())
        .recover_result(Mock(side_effect=RuntimeError("recovery failed")))
        .build()
    )

    with caplog.at_level(logging.WARNING):
        assert retry.result_blocking() is None

    assert isinstance(retry.future.exception(), RuntimeError)
    assert "The recovery function raised an exception" in caplog.text
    assert retry.state is RetryState.RECOVERED


###################################
#     Tests for the triggers      #
###################################


def test_two_triggers_run_the_action_once() -> None:
    action = flaky(1)
    retry = Retry.of(action).failure_hook(Mock()).build()

    assert retry.result_blocking() == "ok"
    assert retry.result_blocking() == "ok"
    retry.execute()
    assert retry.result_future().await_blocking() == "ok"

    assert action.call_count == 2
    assert retry.attempts == 2


def test_execute() -> None:
    action = Mock(return_value="ok")
    retry = Retry.of(action).build()

    assert retry.execute() is None
    action.assert_called_once()
    assert retry.future.await_blocking() == "ok"


def test_result_future() -> None:
    retry = Retry.of(Mock(return_value="ok")).build()
    future = retry.result_future()
    assert future is retry.future
    assert future.is_completed()


def test_result_blocking_with_unit() -> None:
    retry = Retry.of(Mock(return_value="ok")).build()
    assert retry.result_blocking(100, TimeUnit.MILLISECONDS) == "ok"


def test_as_callable_is_deferred() -> None:
    action = Mock(return_value="ok")
    call = Retry.of(action).build().as_callable()
    action.assert_not_called()
    assert call() == "ok"
    action.assert_called_once()


def test_as_runnable_is_deferred() -> None:
    action = Mock(return_value="ok")
    retry = Retry.of(action).build()
    run = retry.as_runnable()
    action.assert_not_called()
    assert run() is None
    assert retry.future.await_blocking() == "ok"


def test_state_transitions() -> None:
    states = []
    retry: Retry[str]

    def action() -> str:
        states.append(retry.state)
        return "ok"

    retry = Retry.of(action).build()
    assert retry.state is RetryState.IDLE
    retry.execute()
    assert states == [RetryState.RUNNING]
    assert retry.state is RetryState.SUCCEEDED


def test_base_exception_fails_the_future() -> None:
    retry = Retry.of(Mock(side_effect=KeyboardInterrupt)).build()

    with pytest.raises(KeyboardInterrupt):
        retry.execute()

    assert isinstance(retry.future.exception(), KeyboardInterrupt)
    assert retry.state is RetryState.FAILED


def test_raising_interval_fails_the_run(caplog: LogCaptureFixture) -> None:
    action = Mock(side_effect=ConnectionError("down"))
    retry = (
        Retry.of(action)
        .interval(Mock(side_effect=RuntimeError("interval")))
        .failure_hook(Mock())
        .recover_value("fallback")
        .build()
    )

    with caplog.at_level(logging.WARNING):
        assert retry.result_blocking() is None

    assert retry.state is RetryState.FAILED
    assert isinstance(retry.future.exception(), RuntimeError)
    assert "internal error" in caplog.text
    action.assert_called_once()


def test_raising_retry_predicate_fails_the_run() -> None:
    def predicate(error: BaseException) -> bool:
        msg = "predicate"
        raise LookupError(msg)

    retry = Retry.of(always_fail()).retry_when(predicate).failure_hook(Mock()).build()

    assert retry.result_blocking() is None
    assert retry.state is RetryState.FAILED
    assert isinstance(retry.future.exception(), LookupError)
