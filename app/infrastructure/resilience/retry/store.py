"""In-process deferred retry queue.

The queue is volatile: pending items are lost on restart. All map access
happens under one lock; resends happen outside it (see `RetryWorker`).
"""

import threading
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import structlog

from infrastructure.clock import Clock, utc_now
from infrastructure.notifications.models import NotificationChannel, NotificationPayload
from infrastructure.resilience.retry.config import RetryPolicies
from infrastructure.resilience.retry.models import RetryItem

logger = structlog.get_logger()


class RetryQueue:
    """Thread-safe map of retry items keyed by `RetryItem.id`.

    Attributes:
        policies: Per-type retry policies

    Example:
        queue = RetryQueue(RetryPolicies())
        queue.enqueue(payload, NotificationChannel.PUSH, delivery_id, "timeout")
        due = queue.take_due()
    """

    def __init__(self, policies: Optional[RetryPolicies] = None, clock: Clock = utc_now):
        self.policies = policies or RetryPolicies()
        self._clock = clock
        self._items: Dict[str, RetryItem] = {}
        self._lock = threading.Lock()
        self._counters = {
            "enqueued": 0,
            "delivered": 0,
            "rescheduled": 0,
            "exhausted": 0,
            "dropped": 0,
        }

    def enqueue(
        self,
        payload: NotificationPayload,
        channel: NotificationChannel,
        delivery_id: str,
        error: Optional[str] = None,
    ) -> Optional[RetryItem]:
        """Queue the first deferred attempt for a failed send.

        Returns:
            The queued item, or None when the type's policy allows no retries.
        """
        policy = self.policies.policy_for(payload.type)
        if policy.max_retries < 1:
            return None

        item = RetryItem(
            delivery_id=delivery_id,
            user_id=payload.recipient_id,
            notification_type=payload.type,
            channel=channel,
            attempt=1,
            next_retry_at=self._clock() + timedelta(seconds=policy.delay_for(0)),
            payload=payload,
            last_error=error,
        )
        with self._lock:
            self._items[item.id] = item
            self._counters["enqueued"] += 1

        logger.info(
            "retry_item_enqueued",
            retry_id=item.id,
            user_id=item.user_id,
            notification_type=item.notification_type.value,
            channel=channel.value,
            next_retry_at=item.next_retry_at.isoformat(),
        )
        return item

    def take_due(self, now: Optional[datetime] = None) -> List[RetryItem]:
        """Atomically remove and return every item with next_retry_at <= now."""
        now = now or self._clock()
        with self._lock:
            due = [item for item in self._items.values() if item.next_retry_at <= now]
            for item in due:
                del self._items[item.id]
        due.sort(key=lambda item: item.next_retry_at)
        return due

    def reschedule(self, item: RetryItem, now: Optional[datetime] = None) -> Optional[RetryItem]:
        """Re-insert a failed item as its next attempt.

        Returns:
            The new item, or None when the policy budget is spent.
        """
        policy = self.policies.policy_for(item.notification_type)
        if item.attempt >= policy.max_retries:
            with self._lock:
                self._counters["exhausted"] += 1
            logger.warning(
                "retry_exhausted",
                retry_id=item.id,
                user_id=item.user_id,
                notification_type=item.notification_type.value,
                channel=item.channel.value,
                max_retries=policy.max_retries,
                last_error=item.last_error,
            )
            return None

        now = now or self._clock()
        delay = policy.delay_for(item.attempt)
        next_item = RetryItem(
            delivery_id=item.delivery_id,
            user_id=item.user_id,
            notification_type=item.notification_type,
            channel=item.channel,
            attempt=item.attempt + 1,
            next_retry_at=now + timedelta(seconds=delay),
            payload=item.payload,
            last_error=item.last_error,
        )
        with self._lock:
            self._items[next_item.id] = next_item
            self._counters["rescheduled"] += 1

        logger.info(
            "retry_scheduled",
            retry_id=next_item.id,
            attempt=next_item.attempt,
            max_retries=policy.max_retries,
            next_retry_in_seconds=delay,
        )
        return next_item

    def record_delivered(self) -> None:
        with self._lock:
            self._counters["delivered"] += 1

    def record_dropped(self) -> None:
        with self._lock:
            self._counters["dropped"] += 1

    def get(self, retry_id: str) -> Optional[RetryItem]:
        with self._lock:
            return self._items.get(retry_id)

    def get_queue_status(self) -> Dict[str, Any]:
        """Queue size and the earliest scheduled retry (None when empty)."""
        with self._lock:
            next_retry_at = min(
                (item.next_retry_at for item in self._items.values()), default=None
            )
            return {"queue_size": len(self._items), "next_retry_at": next_retry_at}

    def get_stats(self) -> Dict[str, Any]:
        """Lifetime counters plus the current size."""
        with self._lock:
            return {"queue_size": len(self._items), **self._counters}

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
