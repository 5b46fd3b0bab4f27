"""Notification channel implementations."""

from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.channels.email import EmailSender
from infrastructure.notifications.channels.in_app import InAppSender
from infrastructure.notifications.channels.push import PushSender

__all__ = [
    "ChannelSender",
    "EmailSender",
    "InAppSender",
    "PushSender",
]
