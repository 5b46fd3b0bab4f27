"""Admission control: per-identity, per-endpoint fixed-window limits."""

from infrastructure.rate_limiting.limiter import (
    FixedWindowRateLimiter,
    RateLimitDecision,
    RateLimitRecord,
)
from infrastructure.rate_limiting.policies import (
    DEVICES,
    PREFERENCES,
    READ,
    SEND,
    SEND_BULK,
    RateLimitPolicy,
    build_policies,
)

__all__ = [
    "FixedWindowRateLimiter",
    "RateLimitDecision",
    "RateLimitRecord",
    "RateLimitPolicy",
    "build_policies",
    "DEVICES",
    "PREFERENCES",
    "READ",
    "SEND",
    "SEND_BULK",
]
