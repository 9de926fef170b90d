from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING
from unittest.mock import Mock

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable, Generator


@pytest.fixture
def pool() -> Generator[ThreadPoolExecutor, None, None]:
    """Create a worker pool shut down at the end of the test."""
    executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="test-aretry")
    yield executor
    executor.shutdown(wait=True)


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock hook for testing callbacks."""
    return Mock()


@pytest.fixture
def wait_until() -> Callable[[Callable[[], bool], float], bool]:
    """Return a function polling a predicate until it holds or times
    out."""

    def _wait_until(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.01)
        return predicate()

    return _wait_until
