"""Monotonic sync version policy."""

from __future__ import annotations

import math
from typing import Any


def _finite_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def coerce_version(value: Any) -> int:
    """Read a persisted version field; missing or non-numeric counts as 0."""
    number = _finite_number(value)
    if number is None:
        return 0
    return math.floor(number)


def next_version(previous_version: Any, client_version: Any = None) -> int:
    """Compute the version stamped on an accepted write.

    The result is strictly greater than both the server's last version and
    the version the client declares, so a client never observes a version
    equal to or behind one it has already fetched.

    Args:
        previous_version: Last version the server holds (0 when none)
        client_version: Version the client believes it has; ``None`` or a
            non-finite value counts as 0

    Returns:
        ``max(previous + 1, floor(client) + 1)``
    """
    previous = coerce_version(previous_version)
    client = _finite_number(client_version)
    candidate = math.floor(client) if client is not None else 0
    return max(previous + 1, candidate + 1)
