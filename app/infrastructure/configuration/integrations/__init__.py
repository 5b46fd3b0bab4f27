"""Integration settings __init__ - exports downstream provider settings."""

from infrastructure.configuration.integrations.fcm import FcmSettings
from infrastructure.configuration.integrations.notify import NotifySettings

__all__ = [
    "FcmSettings",
    "NotifySettings",
]
