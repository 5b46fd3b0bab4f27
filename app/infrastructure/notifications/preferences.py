"""Per-user channel preferences with a read-through cache.

Read path: cache, then store, then a freshly created all-enabled row. The
gate never fails a dispatch: if the store cannot be read the caller gets an
all-enabled default and the error is logged.
"""

from typing import Any, Dict, Optional

import structlog

from infrastructure.cache.base import Cache
from infrastructure.clock import Clock, utc_now
from infrastructure.notifications.errors import PreferenceLookupFailure
from infrastructure.notifications.models import (
    NotificationChannel,
    NotificationPreferences,
)
from infrastructure.persistence.stores import PreferenceStore

logger = structlog.get_logger()

_CHANNEL_FIELDS = {
    NotificationChannel.PUSH: "push_enabled",
    NotificationChannel.EMAIL: "email_enabled",
    NotificationChannel.IN_APP: "in_app_enabled",
}


def preferences_cache_key(user_id: str) -> str:
    return f"user:{user_id}:preferences"


class PreferenceGate:
    """Reads and updates notification preferences.

    Attributes:
        store: Authoritative preference storage
        cache: Optional cache; None disables caching
        ttl_seconds: Cache entry lifetime

    Example:
        gate = PreferenceGate(store=InMemoryPreferenceStore(), cache=InMemoryCache())
        prefs = gate.get_preferences("user-1")
        if prefs.is_enabled(NotificationChannel.PUSH):
            ...
    """

    def __init__(
        self,
        store: PreferenceStore,
        cache: Optional[Cache] = None,
        ttl_seconds: int = 1800,
        clock: Clock = utc_now,
    ):
        self.store = store
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def get_preferences(self, user_id: str) -> NotificationPreferences:
        """Effective preferences for `user_id`. Never raises."""
        cached = self._cache_get(user_id)
        if cached is not None:
            return cached

        try:
            preferences = self._load_or_create(user_id)
        except PreferenceLookupFailure as e:
            logger.error(
                "preference_lookup_failed",
                user_id=user_id,
                error=str(e),
                exc_info=True,
            )
            now = self._clock()
            return NotificationPreferences(user_id=user_id, created_at=now, updated_at=now)

        self._cache_set(preferences)
        return preferences

    def is_channel_enabled(self, user_id: str, channel: NotificationChannel) -> bool:
        return self.get_preferences(user_id).is_enabled(channel)

    def update_preferences(
        self,
        user_id: str,
        push: Optional[bool] = None,
        email: Optional[bool] = None,
        in_app: Optional[bool] = None,
    ) -> NotificationPreferences:
        """Apply the given switches, leaving omitted ones untouched.

        Writes through to the store (creating the row if needed), evicts the
        cache entry and returns a fresh read.
        """
        changes: Dict[str, Any] = {}
        if push is not None:
            changes["push_enabled"] = push
        if email is not None:
            changes["email_enabled"] = email
        if in_app is not None:
            changes["in_app_enabled"] = in_app
        return self._write(user_id, changes)

    def enable_channel(
        self, user_id: str, channel: NotificationChannel
    ) -> NotificationPreferences:
        return self._write(user_id, {_CHANNEL_FIELDS[channel]: True})

    def disable_channel(
        self, user_id: str, channel: NotificationChannel
    ) -> NotificationPreferences:
        return self._write(user_id, {_CHANNEL_FIELDS[channel]: False})

    def reset_to_defaults(self, user_id: str) -> NotificationPreferences:
        """Switch every channel back on."""
        return self._write(user_id, {field: True for field in _CHANNEL_FIELDS.values()})

    def health_check(self) -> Dict[str, bool]:
        """Reachability of the store and, when configured, the cache."""
        health = {"store": True, "cache": self.cache is not None}
        try:
            self.store.get("__health_check__")
        except Exception as e:  # noqa: BLE001
            logger.warning("preference_store_unhealthy", error=str(e))
            health["store"] = False
        ping = getattr(self.cache, "ping", None)
        if ping is not None:
            health["cache"] = bool(ping())
        return health

    def _write(self, user_id: str, changes: Dict[str, Any]) -> NotificationPreferences:
        current = self._load_or_create(user_id)
        updated = current.model_copy(update={**changes, "updated_at": self._clock()})
        self.store.save(updated)
        self._cache_delete(user_id)
        logger.info(
            "notification_preferences_updated",
            user_id=user_id,
            changes=sorted(changes),
        )
        return self.get_preferences(user_id)

    def _load_or_create(self, user_id: str) -> NotificationPreferences:
        try:
            existing = self.store.get(user_id)
            if existing is not None:
                return existing
            now = self._clock()
            created = NotificationPreferences(
                user_id=user_id, created_at=now, updated_at=now
            )
            self.store.save(created)
        except Exception as e:  # noqa: BLE001
            raise PreferenceLookupFailure(str(e)) from e

        logger.info("notification_preferences_created", user_id=user_id)
        return created

    def _cache_get(self, user_id: str) -> Optional[NotificationPreferences]:
        if self.cache is None:
            return None
        raw = self.cache.get(preferences_cache_key(user_id))
        if raw is None:
            return None
        try:
            return NotificationPreferences.model_validate(raw)
        except ValueError:
            logger.warning("preference_cache_entry_invalid", user_id=user_id)
            self.cache.delete(preferences_cache_key(user_id))
            return None

    def _cache_set(self, preferences: NotificationPreferences) -> None:
        if self.cache is not None:
            self.cache.set(
                preferences_cache_key(preferences.user_id),
                preferences.model_dump(mode="json"),
                self.ttl_seconds,
            )

    def _cache_delete(self, user_id: str) -> None:
        if self.cache is not None:
            self.cache.delete(preferences_cache_key(user_id))
