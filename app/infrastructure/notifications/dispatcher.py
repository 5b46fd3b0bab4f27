"""Notification dispatcher: preference-gated multi-channel fan-out.

Flow for one notification:

1. Validate the payload (before any side effect).
2. Read the recipient's preferences.
3. Run every enabled channel concurrently. Each channel resolves the
   recipient address, then tries up to `inline_max_attempts` times with
   exponential backoff (1s, 2s with defaults).
4. Log the final outcome per channel; hand exhausted channels to the
   deferred retry queue.

Per-channel failures never raise unless the caller asks for `strict=True`.

Usage Example:
    dispatcher = NotificationDispatcher(
        channels={NotificationChannel.PUSH: push, NotificationChannel.IN_APP: in_app},
        preferences=gate,
        delivery_log=log,
        retry_queue=queue,
    )

    result = dispatcher.send_notification(
        {"recipientId": "user-1", "type": "TicketAssigned", "title": "Ticket Assigned"}
    )
    if not result.is_success:
        logger.warning("delivery_incomplete", failed=result.failed_channels)
"""

import contextvars
import uuid
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Mapping, Optional, Union

import structlog
from pydantic import ValidationError

from infrastructure.clock import Sleeper, real_sleep
from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.delivery_log import DeliveryLog
from infrastructure.notifications.errors import (
    ChannelSendError,
    NotificationValidationError,
    PersistentChannelFailure,
)
from infrastructure.notifications.models import (
    ChannelOutcome,
    DeliveryStatus,
    DispatchResult,
    NotificationChannel,
    NotificationPayload,
    OutcomeStatus,
)
from infrastructure.notifications.preferences import PreferenceGate
from infrastructure.resilience.retry.store import RetryQueue

logger = structlog.get_logger()

PayloadInput = Union[NotificationPayload, Mapping[str, Any]]


def coerce_payload(payload: PayloadInput) -> NotificationPayload:
    """Validate a payload or raw mapping.

    Raises:
        NotificationValidationError: Missing/blank recipient, type or title,
            unknown type, or a value that is not a payload at all.
    """
    if isinstance(payload, NotificationPayload):
        if not payload.recipient_id.strip() or not payload.title.strip():
            raise NotificationValidationError("Invalid notification payload")
        return payload
    if not isinstance(payload, Mapping):
        raise NotificationValidationError("Invalid notification payload")
    try:
        return NotificationPayload.model_validate(dict(payload))
    except ValidationError as e:
        raise NotificationValidationError(
            "Invalid notification payload",
            errors=[
                {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ],
        ) from e


def inline_backoff_delay(attempt: int, base_delay: float) -> float:
    """Delay before attempt `attempt + 1`: base_delay * 2 ^ (attempt - 1)."""
    return base_delay * (2 ** (attempt - 1))


class NotificationDispatcher:
    """Multi-channel notification dispatcher.

    Attributes:
        channels: Channel senders keyed by NotificationChannel
        preferences: PreferenceGate deciding which channels run
        delivery_log: DeliveryLog receiving one entry per attempted channel
        retry_queue: Optional RetryQueue for exhausted sends
        max_attempts: Inline attempts per channel (default: 3)
        base_delay_seconds: First inline backoff delay (default: 1.0)
        deferred_retry_enabled: Whether exhausted sends are queued
    """

    def __init__(
        self,
        channels: Mapping[NotificationChannel, ChannelSender],
        preferences: PreferenceGate,
        delivery_log: DeliveryLog,
        retry_queue: Optional[RetryQueue] = None,
        max_attempts: int = 3,
        base_delay_seconds: float = 1.0,
        deferred_retry_enabled: bool = True,
        max_workers: int = 16,
        sleep: Sleeper = real_sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.channels: Dict[NotificationChannel, ChannelSender] = dict(channels)
        self.preferences = preferences
        self.delivery_log = delivery_log
        self.retry_queue = retry_queue
        self.max_attempts = max_attempts
        self.base_delay_seconds = base_delay_seconds
        self.deferred_retry_enabled = deferred_retry_enabled
        self._sleep = sleep
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="notify-channel"
        )

        logger.info(
            "initialized_notification_dispatcher",
            channels=[c.value for c in self.channels],
            max_attempts=max_attempts,
            deferred_retry_enabled=deferred_retry_enabled and retry_queue is not None,
        )

    def send_notification(
        self, payload: PayloadInput, strict: bool = False
    ) -> DispatchResult:
        """Deliver `payload` on every channel the recipient has enabled.

        Args:
            payload: NotificationPayload or a raw camelCase/snake_case mapping
            strict: Raise PersistentChannelFailure when any channel failed

        Returns:
            DispatchResult with one outcome per enabled channel

        Raises:
            NotificationValidationError: Invalid payload (nothing was sent)
            PersistentChannelFailure: Only with strict=True
        """
        notification = coerce_payload(payload)
        delivery_id = str(uuid.uuid4())

        prefs = self.preferences.get_preferences(notification.recipient_id)
        enabled = [c for c in prefs.enabled_channels() if c in self.channels]

        futures = [
            self._executor.submit(
                contextvars.copy_context().run,
                self.send_with_retry,
                notification,
                channel,
                delivery_id,
            )
            for channel in enabled
        ]
        result = DispatchResult(
            payload=notification,
            delivery_id=delivery_id,
            outcomes=[future.result() for future in futures],
        )

        logger.info(
            "notification_dispatched",
            delivery_id=delivery_id,
            recipient_id=notification.recipient_id,
            notification_type=notification.type.value,
            channels=[c.value for c in enabled],
            failed_channels=[c.value for c in result.failed_channels],
        )

        if strict and not result.is_success:
            raise PersistentChannelFailure(result)
        return result

    def send_with_retry(
        self,
        payload: NotificationPayload,
        channel: NotificationChannel,
        delivery_id: str,
    ) -> ChannelOutcome:
        """Send on one channel with inline retries. Never raises."""
        sender = self.channels[channel]
        log = logger.bind(
            delivery_id=delivery_id,
            channel=channel.value,
            recipient_id=payload.recipient_id,
        )

        try:
            address = sender.resolve_recipient(payload.recipient_id)
        except Exception as e:  # noqa: BLE001
            log.warning("recipient_resolution_failed", error=str(e))
            address = None
        if not address:
            log.info("channel_skipped_no_recipient")
            return ChannelOutcome(channel=channel, status=OutcomeStatus.SKIPPED)

        last_error = ""
        for attempt in range(1, self.max_attempts + 1):
            try:
                sender.send(address, payload)
            except ChannelSendError as e:
                last_error = e.message
            except Exception as e:  # noqa: BLE001
                last_error = str(e) or type(e).__name__
            else:
                self.delivery_log.record(
                    delivery_id=delivery_id,
                    user_id=payload.recipient_id,
                    notification_type=payload.type,
                    channel=channel,
                    status=DeliveryStatus.DELIVERED,
                )
                log.debug("channel_delivered", attempts=attempt)
                return ChannelOutcome(
                    channel=channel, status=OutcomeStatus.DELIVERED, attempts=attempt
                )

            log.warning(
                "channel_send_attempt_failed",
                attempt=attempt,
                max_attempts=self.max_attempts,
                error=last_error,
            )
            if attempt < self.max_attempts:
                self._sleep(inline_backoff_delay(attempt, self.base_delay_seconds))

        self.delivery_log.record(
            delivery_id=delivery_id,
            user_id=payload.recipient_id,
            notification_type=payload.type,
            channel=channel,
            status=DeliveryStatus.FAILED,
            error_message=last_error,
        )

        retry_queued = False
        if self.deferred_retry_enabled and self.retry_queue is not None:
            retry_queued = (
                self.retry_queue.enqueue(payload, channel, delivery_id, last_error)
                is not None
            )

        log.error(
            "channel_delivery_failed",
            attempts=self.max_attempts,
            error=last_error,
            retry_queued=retry_queued,
        )
        return ChannelOutcome(
            channel=channel,
            status=OutcomeStatus.FAILED,
            attempts=self.max_attempts,
            error=last_error,
            retry_queued=retry_queued,
        )

    def get_available_channels(self):
        return list(self.channels.keys())

    def health_check(self) -> Dict[str, bool]:
        """Configuration health of every registered channel."""
        health_status = {}
        for channel, sender in self.channels.items():
            try:
                health_status[channel.value] = sender.health_check()
            except Exception as e:  # noqa: BLE001
                logger.error(
                    "channel_health_check_failed",
                    channel=channel.value,
                    error=str(e),
                    exc_info=True,
                )
                health_status[channel.value] = False
        return health_status

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
