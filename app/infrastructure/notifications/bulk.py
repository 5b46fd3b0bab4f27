"""Bulk dispatch: many payloads in paced, bounded-concurrency chunks."""

import contextvars
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

import structlog

from infrastructure.clock import Sleeper, real_sleep
from infrastructure.notifications.dispatcher import (
    NotificationDispatcher,
    PayloadInput,
    coerce_payload,
)
from infrastructure.notifications.errors import (
    BulkLimitExceeded,
    NotificationValidationError,
)
from infrastructure.notifications.models import BulkDispatchResult, NotificationPayload

logger = structlog.get_logger()


class BulkDispatcher:
    """Validates a whole batch, then dispatches it chunk by chunk.

    A single invalid payload rejects the batch before anything is sent. Once
    dispatching starts, a payload that errors does not affect its neighbours.

    The bulk pool is separate from the dispatcher's channel pool, so a chunk
    waiting on its dispatches can never starve the channel sends it waits on.
    """

    def __init__(
        self,
        dispatcher: NotificationDispatcher,
        max_size: int = 1000,
        chunk_size: int = 100,
        concurrency: int = 10,
        pause_seconds: float = 1.0,
        sleep: Sleeper = real_sleep,
    ):
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")
        self.dispatcher = dispatcher
        self.max_size = max_size
        self.chunk_size = chunk_size
        self.pause_seconds = pause_seconds
        self._sleep = sleep
        self._executor = ThreadPoolExecutor(
            max_workers=concurrency, thread_name_prefix="notify-bulk"
        )

    def validate(self, payloads: Sequence[PayloadInput]) -> List[NotificationPayload]:
        """Validate the whole batch.

        Raises:
            NotificationValidationError: Empty batch or any invalid payload
            BulkLimitExceeded: More than `max_size` payloads
        """
        if not payloads:
            raise NotificationValidationError("No notifications provided")
        if len(payloads) > self.max_size:
            raise BulkLimitExceeded(len(payloads), self.max_size)

        validated = []
        for index, payload in enumerate(payloads):
            try:
                validated.append(coerce_payload(payload))
            except NotificationValidationError as e:
                raise NotificationValidationError(
                    f"Invalid notification at index {index}", errors=e.errors
                ) from e
        return validated

    def send_bulk_notifications(
        self, payloads: Sequence[PayloadInput]
    ) -> BulkDispatchResult:
        notifications = self.validate(payloads)
        chunks = [
            notifications[i : i + self.chunk_size]
            for i in range(0, len(notifications), self.chunk_size)
        ]

        dispatched = 0
        errored = 0
        for index, chunk in enumerate(chunks):
            futures = [
                self._executor.submit(
                    contextvars.copy_context().run,
                    self.dispatcher.send_notification,
                    notification,
                )
                for notification in chunk
            ]
            for notification, future in zip(chunk, futures):
                try:
                    future.result()
                    dispatched += 1
                except Exception as e:  # noqa: BLE001
                    errored += 1
                    logger.error(
                        "bulk_notification_failed",
                        recipient_id=notification.recipient_id,
                        notification_type=notification.type.value,
                        error=str(e),
                        exc_info=True,
                    )

            logger.info(
                "bulk_chunk_dispatched",
                chunk=index + 1,
                chunks=len(chunks),
                size=len(chunk),
            )
            if index < len(chunks) - 1:
                self._sleep(self.pause_seconds)

        result = BulkDispatchResult(
            total=len(notifications),
            chunks=len(chunks),
            dispatched=dispatched,
            errored=errored,
        )
        logger.info("bulk_dispatch_complete", **result.model_dump())
        return result

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
