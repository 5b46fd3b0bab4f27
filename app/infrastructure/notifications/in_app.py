"""In-app inbox reads and read-state updates."""

from typing import Any, Dict, List

import structlog

from infrastructure.notifications.models import InAppNotification
from infrastructure.persistence.stores import InAppStore

logger = structlog.get_logger()


class InAppInbox:
    """User-facing view over the in-app store.

    The in-app channel writes; this class serves the inbox endpoints.
    """

    def __init__(self, store: InAppStore):
        self.store = store

    def list_notifications(
        self,
        user_id: str,
        unread_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> List[InAppNotification]:
        return self.store.list_for_user(
            user_id, unread_only=unread_only, limit=limit, offset=offset
        )

    def get_inbox(
        self, user_id: str, unread_only: bool = False, limit: int = 20, offset: int = 0
    ) -> Dict[str, Any]:
        """Notifications page plus the unread counter."""
        return {
            "notifications": self.list_notifications(user_id, unread_only, limit, offset),
            "unread_count": self.store.count_unread(user_id),
        }

    def mark_as_read(self, user_id: str, notification_id: str) -> bool:
        found = self.store.mark_read(user_id, notification_id)
        if not found:
            logger.info(
                "in_app_notification_not_found",
                user_id=user_id,
                notification_id=notification_id,
            )
        return found

    def mark_all_as_read(self, user_id: str) -> int:
        updated = self.store.mark_all_read(user_id)
        logger.info("in_app_notifications_marked_read", user_id=user_id, count=updated)
        return updated
