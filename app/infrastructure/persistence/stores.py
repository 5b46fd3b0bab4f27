"""Storage protocols used by the notification engine.

Any backend (relational, DynamoDB, document store) can be plugged in by
implementing these protocols; the in-memory implementations in
`infrastructure.persistence.memory` are what the engine runs with by default.
"""

from datetime import datetime
from typing import List, Optional, Protocol

from infrastructure.notifications.models import (
    DeliveryLogEntry,
    InAppNotification,
    NotificationPreferences,
)


class PreferenceStore(Protocol):
    def get(self, user_id: str) -> Optional[NotificationPreferences]:
        """Stored preferences or None when the user has no row."""
        ...

    def save(self, preferences: NotificationPreferences) -> NotificationPreferences:
        """Insert or replace the row for `preferences.user_id`."""
        ...


class DeliveryLogStore(Protocol):
    def append(self, entry: DeliveryLogEntry) -> None: ...

    def list_entries(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        user_id: Optional[str] = None,
    ) -> List[DeliveryLogEntry]:
        """Entries with start <= created_at <= end, oldest first."""
        ...

    def delete_before(self, cutoff: datetime) -> int:
        """Delete entries created strictly before `cutoff`; return the count."""
        ...


class InAppStore(Protocol):
    def add(self, notification: InAppNotification) -> InAppNotification: ...

    def list_for_user(
        self,
        user_id: str,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> List[InAppNotification]:
        """Newest first."""
        ...

    def count_unread(self, user_id: str) -> int: ...

    def mark_read(self, user_id: str, notification_id: str) -> bool:
        """False when no such notification belongs to `user_id`."""
        ...

    def mark_all_read(self, user_id: str) -> int: ...
