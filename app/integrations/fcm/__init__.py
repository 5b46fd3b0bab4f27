"""Firebase Cloud Messaging client used by the push channel."""

from .client import STALE_TOKEN_ERRORS, build_message, error_code, send_message

__all__ = [
    "STALE_TOKEN_ERRORS",
    "build_message",
    "error_code",
    "send_message",
]
