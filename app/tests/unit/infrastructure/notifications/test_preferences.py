"""Unit tests for PreferenceGate."""

import pytest

from infrastructure.cache.memory import InMemoryCache
from infrastructure.notifications.errors import PreferenceLookupFailure
from infrastructure.notifications.models import NotificationChannel
from infrastructure.notifications.preferences import (
    PreferenceGate,
    preferences_cache_key,
)
from infrastructure.persistence import InMemoryPreferenceStore


class BrokenPreferenceStore:
    """Store whose every call fails."""

    def get(self, user_id):
        raise ConnectionError("database unavailable")

    def save(self, preferences):
        raise ConnectionError("database unavailable")


class CountingStore(InMemoryPreferenceStore):
    def __init__(self):
        super().__init__()
        self.reads = 0

    def get(self, user_id):
        self.reads += 1
        return super().get(user_id)


@pytest.fixture
def cache():
    return InMemoryCache(monotonic=lambda: 0.0)


@pytest.mark.unit
class TestGetPreferences:
    """Read path."""

    def test_missing_row_created_all_enabled(self, preference_gate, preference_store):
        prefs = preference_gate.get_preferences("user-1")

        assert prefs.enabled_channels() == list(NotificationChannel)
        assert preference_store.get("user-1") is not None

    def test_existing_row_returned(self, preference_gate):
        preference_gate.disable_channel("user-1", NotificationChannel.EMAIL)

        prefs = preference_gate.get_preferences("user-1")

        assert prefs.email_enabled is False
        assert prefs.push_enabled is True

    def test_store_failure_falls_back_to_defaults(self, clock):
        """A broken store never blocks delivery."""
        gate = PreferenceGate(store=BrokenPreferenceStore(), clock=clock)

        prefs = gate.get_preferences("user-1")

        assert prefs.user_id == "user-1"
        assert prefs.enabled_channels() == list(NotificationChannel)

    def test_is_channel_enabled(self, preference_gate):
        preference_gate.disable_channel("user-1", NotificationChannel.PUSH)

        assert not preference_gate.is_channel_enabled("user-1", NotificationChannel.PUSH)
        assert preference_gate.is_channel_enabled("user-1", NotificationChannel.IN_APP)


@pytest.mark.unit
class TestPreferenceCache:
    """Read-through caching."""

    def test_second_read_served_from_cache(self, cache, clock):
        store = CountingStore()
        gate = PreferenceGate(store=store, cache=cache, clock=clock)

        gate.get_preferences("user-1")
        reads_after_first = store.reads
        gate.get_preferences("user-1")

        assert store.reads == reads_after_first
        assert cache.get_stats()["hits"] == 1

    def test_cache_key_format(self):
        assert preferences_cache_key("user-1") == "user:user-1:preferences"

    def test_update_evicts_cache(self, cache, clock):
        """A write is visible on the next read."""
        gate = PreferenceGate(store=InMemoryPreferenceStore(), cache=cache, clock=clock)
        gate.get_preferences("user-1")

        gate.update_preferences("user-1", push=False)

        assert gate.get_preferences("user-1").push_enabled is False

    def test_invalid_cache_entry_is_discarded(self, cache, clock):
        gate = PreferenceGate(store=InMemoryPreferenceStore(), cache=cache, clock=clock)
        cache.set(preferences_cache_key("user-1"), {"push_enabled": "maybe"}, 60)

        prefs = gate.get_preferences("user-1")

        assert prefs.user_id == "user-1"
        cached = cache.get(preferences_cache_key("user-1"))
        assert cached["user_id"] == "user-1"


@pytest.mark.unit
class TestUpdatePreferences:
    """Write path."""

    def test_partial_update_leaves_other_flags(self, preference_gate):
        prefs = preference_gate.update_preferences("user-1", email=False)

        assert prefs.email_enabled is False
        assert prefs.push_enabled is True
        assert prefs.in_app_enabled is True

    def test_update_touches_updated_at(self, preference_gate, clock):
        created = preference_gate.get_preferences("user-1")
        clock.advance(60)

        updated = preference_gate.update_preferences("user-1", in_app=False)

        assert updated.updated_at > created.updated_at
        assert updated.created_at == created.created_at

    def test_disable_then_enable_restores_flags(self, preference_gate):
        before = preference_gate.get_preferences("user-1")

        preference_gate.disable_channel("user-1", NotificationChannel.PUSH)
        after = preference_gate.enable_channel("user-1", NotificationChannel.PUSH)

        assert after.enabled_channels() == before.enabled_channels()

    def test_reset_to_defaults(self, preference_gate):
        preference_gate.update_preferences("user-1", push=False, email=False, in_app=False)

        prefs = preference_gate.reset_to_defaults("user-1")

        assert prefs.enabled_channels() == list(NotificationChannel)

    def test_write_to_broken_store_raises(self, clock):
        gate = PreferenceGate(store=BrokenPreferenceStore(), clock=clock)

        with pytest.raises(PreferenceLookupFailure):
            gate.update_preferences("user-1", push=False)


@pytest.mark.unit
class TestPreferenceHealth:
    def test_healthy_without_cache(self, preference_gate):
        assert preference_gate.health_check() == {"store": True, "cache": False}

    def test_broken_store_reported(self, clock):
        gate = PreferenceGate(store=BrokenPreferenceStore(), clock=clock)

        assert gate.health_check()["store"] is False

    def test_memory_cache_reported(self, preference_store, cache, clock):
        gate = PreferenceGate(store=preference_store, cache=cache, clock=clock)

        assert gate.health_check() == {"store": True, "cache": True}
