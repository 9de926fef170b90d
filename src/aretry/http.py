r"""HTTP requests retried by the retry engine.

This module runs ``httpx`` requests through ``Retry``. Transport errors
and responses with a retryable status code are retried, other responses
are returned as they are.

Example:
    ```pycon
    >>> import httpx
    >>> from aretry.http import get
    >>> from aretry.policy import RetryPolicy
    >>> response = get(
    ...     "https://api.example.com/data",
    ...     policy=RetryPolicy(attempt_limit=4, time_window=30.0),
    ... )  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = ["RETRY_STATUS_CODES", "RetryableStatusError", "get", "post", "request"]

import logging
from typing import Any

import httpx

from aretry.interval import ExponentialInterval
from aretry.policy import RetryPolicy
from aretry.retry.engine import Retry

logger: logging.Logger = logging.getLogger(__name__)

# HTTP status codes that should trigger automatic retry
# 429: Too Many Requests - Rate limiting
# 500: Internal Server Error - Temporary server issue
# 502: Bad Gateway - Upstream server error
# 503: Service Unavailable - Server overloaded or down
# 504: Gateway Timeout - Upstream server timeout
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)


class RetryableStatusError(Exception):
    """Exception raised for a response whose status code can be retried.

    Args:
        response: The response with the retryable status code.

    Example:
        ```pycon
        >>> import httpx
        >>> from aretry.http import RetryableStatusError
        >>> error = RetryableStatusError(httpx.Response(503))
        >>> error.status_code
        503

        ```
    """

    def __init__(self, response: httpx.Response) -> None:
        super().__init__(f"retryable status {response.status_code}")
        self.response = response
        self.status_code = response.status_code


def default_policy() -> RetryPolicy:
    r"""Return the policy used when ``request`` is called without one.

    Returns:
        A policy retrying transport errors and retryable status codes
        up to 4 attempts with exponential waits, within 30 seconds.
    """
    return RetryPolicy(
        attempt_limit=4,
        time_window=30.0,
        interval=ExponentialInterval(base_delay=0.3),
        retry_on=(httpx.TransportError, RetryableStatusError),
    )


def request(
    method: str,
    url: str,
    *,
    client: httpx.Client | None = None,
    policy: RetryPolicy | None = None,
    status_forcelist: tuple[int, ...] = RETRY_STATUS_CODES,
    **kwargs: Any,
) -> httpx.Response | Any:
    """Send an HTTP request, retrying it according to ``policy``.

    Args:
        method: The HTTP method (e.g., "GET", "POST").
        url: The URL to request.
        client: Optional client to send the request with. A temporary
            client is created and closed otherwise.
        policy: The retry policy. Defaults to ``default_policy()``. Its
            ``retry_on`` should include ``RetryableStatusError`` for the
            status codes to be retried.
        status_forcelist: Status codes that trigger a retry.
        **kwargs: Additional keyword arguments passed to
            ``httpx.Client.request``.

    Returns:
        The response of the last attempt that completed, or the recovery
        value of the policy (``None`` by default) when every attempt
        failed.
    """
    policy = policy if policy is not None else default_policy()
    owns_client = client is None
    http_client = client if client is not None else httpx.Client()

    def send() -> httpx.Response:
        response = http_client.request(method, url, **kwargs)
        if response.status_code in status_forcelist:
            logger.debug(f"{method} request to {url} returned retryable status {response.status_code}")
            raise RetryableStatusError(response)
        return response

    try:
        return Retry(send, policy).result_blocking()
    finally:
        if owns_client:
            http_client.close()


def get(url: str, **kwargs: Any) -> httpx.Response | Any:
    r"""Send a GET request with automatic retry, see ``request``."""
    return request("GET", url, **kwargs)


def post(url: str, **kwargs: Any) -> httpx.Response | Any:
    r"""Send a POST request with automatic retry, see ``request``."""
    return request("POST", url, **kwargs)
