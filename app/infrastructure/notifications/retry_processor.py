"""Resends deferred retry items on their single channel."""

from typing import Mapping

import structlog

from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.delivery_log import DeliveryLog
from infrastructure.notifications.errors import ChannelSendError
from infrastructure.notifications.models import DeliveryStatus, NotificationChannel
from infrastructure.notifications.preferences import PreferenceGate
from infrastructure.resilience.retry.models import RetryItem, RetryResult

logger = structlog.get_logger()


class NotificationRetryProcessor:
    """RetryProcessor for notification sends.

    Re-checks the recipient's preferences first: a channel switched off since
    the original failure is dropped without another attempt.
    """

    def __init__(
        self,
        channels: Mapping[NotificationChannel, ChannelSender],
        preferences: PreferenceGate,
        delivery_log: DeliveryLog,
    ):
        self.channels = dict(channels)
        self.preferences = preferences
        self.delivery_log = delivery_log

    def process_item(self, item: RetryItem) -> RetryResult:
        log = logger.bind(
            retry_id=item.id,
            channel=item.channel.value,
            user_id=item.user_id,
            attempt=item.attempt,
        )

        if not self.preferences.is_channel_enabled(item.user_id, item.channel):
            log.info("retry_dropped_channel_disabled")
            return RetryResult.DROPPED

        sender = self.channels.get(item.channel)
        if sender is None:
            log.warning("retry_dropped_channel_unavailable")
            return RetryResult.DROPPED

        try:
            address = sender.resolve_recipient(item.user_id)
        except Exception as e:  # noqa: BLE001
            item.last_error = f"Recipient lookup failed: {str(e) or type(e).__name__}"
            return self._record_failure(item, log)
        if not address:
            log.info("retry_dropped_no_recipient")
            return RetryResult.DROPPED

        try:
            sender.send(address, item.payload)
        except ChannelSendError as e:
            item.last_error = e.message
        except Exception as e:  # noqa: BLE001
            item.last_error = str(e) or type(e).__name__
        else:
            self.delivery_log.record(
                delivery_id=item.delivery_id,
                user_id=item.user_id,
                notification_type=item.notification_type,
                channel=item.channel,
                status=DeliveryStatus.DELIVERED,
                error_message=f"Retried successfully on attempt {item.attempt}",
                attempt=item.attempt,
            )
            log.info("retry_delivered")
            return RetryResult.DELIVERED

        return self._record_failure(item, log)

    def _record_failure(self, item: RetryItem, log) -> RetryResult:
        self.delivery_log.record(
            delivery_id=item.delivery_id,
            user_id=item.user_id,
            notification_type=item.notification_type,
            channel=item.channel,
            status=DeliveryStatus.FAILED,
            error_message=f"Retry attempt {item.attempt} failed: {item.last_error}",
            attempt=item.attempt,
        )
        log.warning("retry_attempt_failed", error=item.last_error)
        return RetryResult.RETRY
