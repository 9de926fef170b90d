r"""Classification of attempt failures as retryable or not."""

from __future__ import annotations

__all__ = ["is_retryable"]

import inspect
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


def is_retryable(
    error: BaseException,
    retry_on: Iterable[type[BaseException] | Callable[[BaseException], bool]],
) -> bool:
    """Indicate whether ``error`` matches one of the retryable kinds.

    An exception class matches its instances and the instances of its
    subclasses. Any other matcher is a predicate called with the error,
    which lets callers declare their own failure kinds (for example by
    looking at an error code attribute).

    Args:
        error: The exception raised by an attempt.
        retry_on: Exception classes or predicates over an exception.

    Returns:
        ``True`` if at least one matcher accepts the error.

    Example:
        ```pycon
        >>> from aretry.classifier import is_retryable
        >>> is_retryable(ConnectionResetError(), [OSError])
        True
        >>> is_retryable(KeyError("id"), [OSError, ValueError])
        False
        >>> is_retryable(KeyError("id"), [lambda exc: isinstance(exc, LookupError)])
        True

        ```
    """
    for matcher in retry_on:
        if inspect.isclass(matcher):
            if isinstance(error, matcher):
                return True
        elif matcher(error):
            return True
    return False
