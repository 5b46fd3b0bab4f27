"""Resilience infrastructure: deferred retries for failed sends."""

from infrastructure.resilience.retry import (
    RetryItem,
    RetryPolicies,
    RetryPolicy,
    RetryProcessor,
    RetryQueue,
    RetryResult,
    RetryWorker,
)

__all__ = [
    "RetryItem",
    "RetryPolicies",
    "RetryPolicy",
    "RetryProcessor",
    "RetryQueue",
    "RetryResult",
    "RetryWorker",
]
