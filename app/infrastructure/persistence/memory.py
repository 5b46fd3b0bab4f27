"""Thread-safe in-memory stores.

State lives for the lifetime of the process. Every method takes the store
lock, so the dispatcher's worker threads and the scheduler thread can share
one instance.
"""

import threading
from datetime import datetime
from typing import Dict, List, Optional

from infrastructure.notifications.models import (
    DeliveryLogEntry,
    InAppNotification,
    NotificationPreferences,
)


class InMemoryPreferenceStore:
    def __init__(self):
        self._rows: Dict[str, NotificationPreferences] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> Optional[NotificationPreferences]:
        with self._lock:
            row = self._rows.get(user_id)
            return row.model_copy() if row else None

    def save(self, preferences: NotificationPreferences) -> NotificationPreferences:
        with self._lock:
            self._rows[preferences.user_id] = preferences.model_copy()
        return preferences


class InMemoryDeliveryLogStore:
    def __init__(self):
        self._entries: List[DeliveryLogEntry] = []
        self._lock = threading.Lock()

    def append(self, entry: DeliveryLogEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def list_entries(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        user_id: Optional[str] = None,
    ) -> List[DeliveryLogEntry]:
        with self._lock:
            entries = list(self._entries)
        return [
            e
            for e in entries
            if (start is None or e.created_at >= start)
            and (end is None or e.created_at <= end)
            and (user_id is None or e.user_id == user_id)
        ]

    def delete_before(self, cutoff: datetime) -> int:
        with self._lock:
            kept = [e for e in self._entries if e.created_at >= cutoff]
            removed = len(self._entries) - len(kept)
            self._entries = kept
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class InMemoryInAppStore:
    def __init__(self):
        self._by_user: Dict[str, List[InAppNotification]] = {}
        self._lock = threading.Lock()

    def add(self, notification: InAppNotification) -> InAppNotification:
        with self._lock:
            self._by_user.setdefault(notification.user_id, []).append(notification)
        return notification

    def list_for_user(
        self,
        user_id: str,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> List[InAppNotification]:
        with self._lock:
            items = list(self._by_user.get(user_id, []))
        if unread_only:
            items = [n for n in items if not n.is_read]
        items.sort(key=lambda n: n.created_at, reverse=True)
        return [n.model_copy() for n in items[offset : offset + limit]]

    def count_unread(self, user_id: str) -> int:
        with self._lock:
            return sum(1 for n in self._by_user.get(user_id, []) if not n.is_read)

    def mark_read(self, user_id: str, notification_id: str) -> bool:
        with self._lock:
            for n in self._by_user.get(user_id, []):
                if n.id == notification_id:
                    n.is_read = True
                    return True
        return False

    def mark_all_read(self, user_id: str) -> int:
        count = 0
        with self._lock:
            for n in self._by_user.get(user_id, []):
                if not n.is_read:
                    n.is_read = True
                    count += 1
        return count
