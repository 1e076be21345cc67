"""Injectable time and randomness collaborators."""

import secrets
import time
from collections.abc import Callable

Clock = Callable[[], int]
"""Returns the current unix time in whole seconds."""

RandomSource = Callable[[int], bytes]
"""Returns *n* cryptographically secure random bytes."""


def system_clock() -> int:
    """Wall-clock unix time, truncated to seconds."""
    return int(time.time())


def system_random(size: int) -> bytes:
    """OS CSPRNG bytes; safe to call from any thread."""
    return secrets.token_bytes(size)
