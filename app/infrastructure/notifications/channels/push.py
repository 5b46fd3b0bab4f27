"""Push channel implementation using Firebase Cloud Messaging."""

from typing import TYPE_CHECKING, Optional

import requests
import structlog

from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.directory import RecipientDirectory
from infrastructure.notifications.errors import ChannelSendError
from infrastructure.notifications.models import NotificationChannel, NotificationPayload
from integrations.fcm import STALE_TOKEN_ERRORS, build_message, error_code, send_message

if TYPE_CHECKING:
    from infrastructure.configuration.integrations.fcm import FcmSettings

logger = structlog.get_logger()


class PushSender(ChannelSender):
    """Sends to the user's registered device through the FCM v1 API.

    Tokens that FCM reports as unregistered or invalid are removed from the
    directory so later sends skip the channel instead of failing forever.
    """

    channel = NotificationChannel.PUSH

    def __init__(self, settings: "FcmSettings", directory: RecipientDirectory):
        self._settings = settings
        self._directory = directory
        logger.info(
            "initialized_push_channel",
            backend="fcm",
            project_id=settings.FCM_PROJECT_ID,
        )

    def resolve_recipient(self, user_id: str) -> Optional[str]:
        token = self._directory.device_token(user_id)
        if token is None:
            logger.debug("push_recipient_unresolved", user_id=user_id)
        return token

    def send(self, address: str, payload: NotificationPayload) -> None:
        data = dict(payload.data)
        data["type"] = payload.type.value
        if payload.ticket_id:
            data["ticketId"] = payload.ticket_id

        message = build_message(address, payload.title, payload.message, data)
        try:
            response = send_message(
                api_url=self._settings.FCM_API_URL,
                project_id=self._settings.FCM_PROJECT_ID,
                access_token=self._settings.FCM_ACCESS_TOKEN,
                message=message,
                timeout=self._settings.FCM_TIMEOUT_SECONDS,
            )
        except (requests.RequestException, ValueError) as e:
            raise ChannelSendError(self.channel.value, str(e)) from e

        if response.ok:
            logger.debug("fcm_sent", user_id=payload.recipient_id)
            return

        code = error_code(response)
        if code in STALE_TOKEN_ERRORS:
            self._directory.remove_token(payload.recipient_id, address)
        raise ChannelSendError(
            self.channel.value,
            f"FCM rejected message ({response.status_code} {code or 'UNKNOWN'})",
            status_code=response.status_code,
        )

    def health_check(self) -> bool:
        return bool(self._settings.FCM_PROJECT_ID and self._settings.FCM_ACCESS_TOKEN)
