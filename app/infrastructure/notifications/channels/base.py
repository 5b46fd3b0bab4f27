"""Channel sender abstract base class.

Push, Email and InApp implement this interface. The dispatcher and the retry
queue only ever talk to channels through it.
"""

from abc import ABC, abstractmethod
from typing import Optional

from infrastructure.notifications.models import NotificationChannel, NotificationPayload


class ChannelSender(ABC):
    """Delivers a payload on one channel.

    Sending is a two-step contract:

    1. `resolve_recipient(user_id)` returns the channel address (device token,
       email, inbox owner) or None when the user cannot be reached there. An
       unreachable user is skipped: no attempt, no log entry, no retry.
    2. `send(address, payload)` performs one delivery attempt and raises
       `ChannelSendError` on failure. Retries are the caller's business.
    """

    channel: NotificationChannel

    @abstractmethod
    def resolve_recipient(self, user_id: str) -> Optional[str]:
        """Channel address for `user_id`, or None when unreachable."""
        pass

    @abstractmethod
    def send(self, address: str, payload: NotificationPayload) -> None:
        """One delivery attempt.

        Raises:
            ChannelSendError: On any delivery failure.
        """
        pass

    def health_check(self) -> bool:
        """Whether the channel is configured well enough to send."""
        return True
