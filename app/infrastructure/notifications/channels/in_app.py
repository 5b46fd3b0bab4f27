"""In-app channel: stores the notification in the user's inbox."""

from typing import Optional

from infrastructure.clock import Clock, utc_now
from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.errors import ChannelSendError
from infrastructure.notifications.models import (
    InAppNotification,
    NotificationChannel,
    NotificationPayload,
)
from infrastructure.persistence.stores import InAppStore


class InAppSender(ChannelSender):
    channel = NotificationChannel.IN_APP

    def __init__(self, store: InAppStore, clock: Clock = utc_now):
        self._store = store
        self._clock = clock

    def resolve_recipient(self, user_id: str) -> Optional[str]:
        # Every user has an inbox
        return user_id

    def send(self, address: str, payload: NotificationPayload) -> None:
        data = dict(payload.data)
        if payload.ticket_id:
            data.setdefault("ticketId", payload.ticket_id)
        try:
            self._store.add(
                InAppNotification(
                    user_id=address,
                    type=payload.type,
                    title=payload.title,
                    message=payload.message,
                    data=data,
                    created_at=self._clock(),
                )
            )
        except Exception as e:  # noqa: BLE001
            raise ChannelSendError(self.channel.value, str(e)) from e
