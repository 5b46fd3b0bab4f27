"""Deferred retry worker and processor protocol.

The worker owns the queue mechanics: take due items, hand each one to a
`RetryProcessor`, then reschedule or forget it based on the result. The
processor owns the domain side (preference re-check, resend, delivery log).
"""

from datetime import datetime
from typing import Optional, Protocol

import structlog

from infrastructure.clock import Clock, utc_now
from infrastructure.resilience.retry.models import RetryItem, RetryResult
from infrastructure.resilience.retry.store import RetryQueue

logger = structlog.get_logger()


class RetryProcessor(Protocol):
    """Performs one deferred attempt.

    Implementations set `item.last_error` when they return RETRY.
    """

    def process_item(self, item: RetryItem) -> RetryResult: ...


class RetryWorker:
    """Drains due items from a RetryQueue.

    Attributes:
        queue: RetryQueue holding pending items
        processor: RetryProcessor performing the resend
    """

    def __init__(
        self,
        queue: RetryQueue,
        processor: RetryProcessor,
        clock: Clock = utc_now,
    ) -> None:
        self.queue = queue
        self.processor = processor
        self._clock = clock
        self.log = logger.bind(component="retry_worker")

    def process_due(self, now: Optional[datetime] = None) -> dict:
        """Process every item due at `now` (defaults to the current time).

        Returns:
            Dictionary with processing statistics:
                - processed: Items taken from the queue
                - delivered: Resends that succeeded
                - rescheduled: Failed items queued for another attempt
                - exhausted: Failed items whose budget is spent
                - dropped: Items no longer applicable
        """
        now = now or self._clock()
        items = self.queue.take_due(now)
        stats = {
            "processed": len(items),
            "delivered": 0,
            "rescheduled": 0,
            "exhausted": 0,
            "dropped": 0,
        }
        if not items:
            self.log.debug("retry_tick_no_items")
            return stats

        self.log.info("retry_tick_start", item_count=len(items))

        for item in items:
            try:
                result = self.processor.process_item(item)
            except Exception as e:  # noqa: BLE001
                self.log.error(
                    "retry_processor_exception",
                    retry_id=item.id,
                    error=str(e),
                    exc_info=True,
                )
                item.last_error = f"Processor exception: {e}"
                result = RetryResult.RETRY

            if result == RetryResult.DELIVERED:
                self.queue.record_delivered()
                stats["delivered"] += 1
            elif result == RetryResult.DROPPED:
                self.queue.record_dropped()
                stats["dropped"] += 1
            elif self.queue.reschedule(item, now) is not None:
                stats["rescheduled"] += 1
            else:
                stats["exhausted"] += 1

        self.log.info("retry_tick_complete", **stats)
        return stats
