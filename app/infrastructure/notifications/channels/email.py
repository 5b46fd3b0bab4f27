"""Email channel implementation using GC Notify."""

from typing import TYPE_CHECKING, Optional

import requests
import structlog

from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.directory import RecipientDirectory
from infrastructure.notifications.errors import ChannelSendError
from infrastructure.notifications.models import NotificationChannel, NotificationPayload
from integrations.notify import send_email

if TYPE_CHECKING:
    from infrastructure.configuration.integrations.notify import NotifySettings

logger = structlog.get_logger()


class EmailSender(ChannelSender):
    """Email notification channel using the GC Notify REST API.

    Every notification type goes through one generic template whose
    personalisation carries the subject, body and the payload data.
    """

    channel = NotificationChannel.EMAIL

    def __init__(self, settings: "NotifySettings", directory: RecipientDirectory):
        self._settings = settings
        self._directory = directory
        logger.info("initialized_email_channel", backend="gc_notify")

    def resolve_recipient(self, user_id: str) -> Optional[str]:
        return self._directory.email_for(user_id)

    def send(self, address: str, payload: NotificationPayload) -> None:
        personalisation = {
            "subject": payload.title,
            "body": payload.message,
            "notification_type": payload.type.value,
            **{str(k): v for k, v in payload.data.items()},
        }
        try:
            response = send_email(
                api_url=self._settings.NOTIFY_API_URL,
                service_id=self._settings.NOTIFY_SERVICE_ID,
                secret=self._settings.NOTIFY_API_SECRET,
                email_address=address,
                template_id=self._settings.NOTIFY_EMAIL_TEMPLATE_ID,
                personalisation=personalisation,
                reference=payload.ticket_id,
                timeout=self._settings.NOTIFY_TIMEOUT_SECONDS,
            )
        except (requests.RequestException, ValueError) as e:
            raise ChannelSendError(self.channel.value, str(e)) from e

        # A successful response has a status code of 201
        if response.status_code != 201:
            raise ChannelSendError(
                self.channel.value,
                f"GC Notify returned {response.status_code}",
                status_code=response.status_code,
            )
        logger.debug("notify_email_sent", user_id=payload.recipient_id)

    def health_check(self) -> bool:
        return bool(
            self._settings.NOTIFY_API_URL
            and self._settings.NOTIFY_SERVICE_ID
            and self._settings.NOTIFY_API_SECRET
            and self._settings.NOTIFY_EMAIL_TEMPLATE_ID
        )
