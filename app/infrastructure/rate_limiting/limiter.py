"""Fixed-window rate limiter.

Counters live in process memory and are keyed `{identity}:{endpoint}`. A
window opens on the first request after the previous one expired and lasts
`window_seconds`; the counter resets only when a new window opens.
"""

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import structlog

from infrastructure.notifications.errors import AdmissionRejected
from infrastructure.rate_limiting.policies import RateLimitPolicy

logger = structlog.get_logger()


@dataclass
class RateLimitRecord:
    key: str
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    """Admitted request state, used for the X-RateLimit-* headers."""

    key: str
    limit: int
    remaining: int
    reset_at: float


class FixedWindowRateLimiter:
    """Thread-safe fixed-window counter map.

    Args:
        clock: Seconds since the epoch, injectable for tests.

    Example:
        limiter = FixedWindowRateLimiter()
        decision = limiter.check("user:42", policy)  # raises AdmissionRejected
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._records: Dict[str, RateLimitRecord] = {}
        self._lock = threading.Lock()

    @staticmethod
    def key_for(identity: str, endpoint: str) -> str:
        return f"{identity}:{endpoint}"

    def check(self, identity: str, policy: RateLimitPolicy) -> RateLimitDecision:
        """Count one request against `policy`.

        Raises:
            AdmissionRejected: When the window's budget is spent.
        """
        key = self.key_for(identity, policy.endpoint)
        now = self._clock()
        with self._lock:
            record = self._records.get(key)
            if record is None or record.reset_at <= now:
                record = RateLimitRecord(
                    key=key, count=0, reset_at=now + policy.window_seconds
                )
                self._records[key] = record
            record.count += 1
            count = record.count
            reset_at = record.reset_at

        if count > policy.limit:
            retry_after = max(1, math.ceil(reset_at - now))
            logger.warning(
                "rate_limit_exceeded",
                key=key,
                limit=policy.limit,
                window_seconds=policy.window_seconds,
                retry_after=retry_after,
            )
            raise AdmissionRejected(
                retry_after=retry_after, limit=policy.limit, reset_at=reset_at
            )

        return RateLimitDecision(
            key=key,
            limit=policy.limit,
            remaining=max(0, policy.limit - count),
            reset_at=reset_at,
        )

    def refund(self, key: str, reset_at: Optional[float] = None) -> None:
        """Give back one request, for policies that skip successful requests.

        Pass the `reset_at` of the decision being refunded; a request counted
        in an earlier window is not taken off the current one.
        """
        with self._lock:
            record = self._records.get(key)
            if record is None or record.count <= 0:
                return
            if reset_at is not None and record.reset_at != reset_at:
                return
            record.count -= 1

    def sweep(self) -> int:
        """Drop records whose window has elapsed; returns how many."""
        now = self._clock()
        with self._lock:
            expired = [k for k, r in self._records.items() if r.reset_at <= now]
            for key in expired:
                del self._records[key]
        if expired:
            logger.debug("rate_limit_records_swept", removed=len(expired))
        return len(expired)

    def get(self, key: str) -> RateLimitRecord | None:
        with self._lock:
            record = self._records.get(key)
            return RateLimitRecord(record.key, record.count, record.reset_at) if record else None

    def reset(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
