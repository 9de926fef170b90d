r"""Default configuration constants of the retry engine.

This module re-exports the defaults defined in ``aretry.policy``.
"""

from __future__ import annotations

__all__ = ["DEFAULT_ATTEMPT_LIMIT", "MAX_ATTEMPT_INDEX", "MIN_TIME_WINDOW", "UNLIMITED"]

from aretry.policy import DEFAULT_ATTEMPT_LIMIT, MAX_ATTEMPT_INDEX, MIN_TIME_WINDOW, UNLIMITED
