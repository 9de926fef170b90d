r"""Utility functions for retry policies and logging."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "calculate_sleep_time",
    "clear_correlation_id",
    "get_correlation_id",
    "interruptible_sleep",
    "log_structured",
    "set_correlation_id",
    "validate_policy_params",
    "validate_retry_on",
]

from aretry.utils.sleep import calculate_sleep_time, interruptible_sleep
from aretry.utils.structured_logging import (
    StructuredFormatter,
    clear_correlation_id,
    get_correlation_id,
    log_structured,
    set_correlation_id,
)
from aretry.utils.validation import validate_policy_params, validate_retry_on
