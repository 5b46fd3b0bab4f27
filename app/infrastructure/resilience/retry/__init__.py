"""Deferred retry queue for notification sends.

Architecture:
- RetryPolicy / RetryPolicies: per-type retry budgets and backoff
- RetryItem: one pending deferred attempt
- RetryQueue: thread-safe in-process queue
- RetryWorker: drains due items through a RetryProcessor

Usage:
    from infrastructure.resilience.retry import RetryQueue, RetryWorker

    queue = RetryQueue()
    worker = RetryWorker(queue, processor)

    # On every scheduler tick
    worker.process_due()
"""

from infrastructure.resilience.retry.config import (
    DEFAULT_POLICY,
    TYPE_POLICY_OVERRIDES,
    RetryPolicies,
    RetryPolicy,
)
from infrastructure.resilience.retry.models import RetryItem, RetryResult
from infrastructure.resilience.retry.store import RetryQueue
from infrastructure.resilience.retry.worker import RetryProcessor, RetryWorker

__all__ = [
    # Configuration
    "DEFAULT_POLICY",
    "TYPE_POLICY_OVERRIDES",
    "RetryPolicies",
    "RetryPolicy",
    # Models
    "RetryItem",
    "RetryResult",
    # Queue
    "RetryQueue",
    # Worker
    "RetryWorker",
    "RetryProcessor",
]
