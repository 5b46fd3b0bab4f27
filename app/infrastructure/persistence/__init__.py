"""Persistence layer for preferences, the delivery log and in-app inboxes."""

from infrastructure.persistence.memory import (
    InMemoryDeliveryLogStore,
    InMemoryInAppStore,
    InMemoryPreferenceStore,
)
from infrastructure.persistence.stores import (
    DeliveryLogStore,
    InAppStore,
    PreferenceStore,
)

__all__ = [
    "DeliveryLogStore",
    "InAppStore",
    "PreferenceStore",
    "InMemoryDeliveryLogStore",
    "InMemoryInAppStore",
    "InMemoryPreferenceStore",
]
