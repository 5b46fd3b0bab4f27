"""Time sources shared by the engine.

Services take a `clock` callable instead of reading the wall clock directly
so tests can move time forward deterministically.
"""

import time
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]
Sleeper = Callable[[float], None]


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def real_sleep(seconds: float) -> None:
    """Block the calling thread for `seconds` (no-op for non-positive values)."""
    if seconds > 0:
        time.sleep(seconds)
