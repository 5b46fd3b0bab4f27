"""Firebase Cloud Messaging HTTP v1 client."""

import json
from typing import Any, Dict, Optional

import requests
import structlog

logger = structlog.get_logger()

# FCM error codes meaning the registration token will never work again
STALE_TOKEN_ERRORS = frozenset({"UNREGISTERED", "INVALID_ARGUMENT"})


def build_message(
    token: str,
    title: str,
    body: str,
    data: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Build a v1 `message` with high priority hints for Android and APNs.

    FCM data values must be strings, so they are stringified here.
    """
    return {
        "message": {
            "token": token,
            "notification": {"title": title, "body": body},
            "data": {str(k): str(v) for k, v in (data or {}).items()},
            "android": {"priority": "high", "notification": {"default_sound": True}},
            "apns": {
                "headers": {"apns-priority": "10"},
                "payload": {"aps": {"content-available": 1}},
            },
        }
    }


def send_message(
    api_url: str,
    project_id: str,
    access_token: Optional[str],
    message: Dict[str, Any],
    timeout: int = 10,
) -> requests.Response:
    """POST a message to `projects/{project_id}/messages:send`."""
    if not project_id:
        raise ValueError("FCM_PROJECT_ID is missing")
    if not access_token:
        raise ValueError("FCM_ACCESS_TOKEN is missing")

    url = f"{api_url.rstrip('/')}/v1/projects/{project_id}/messages:send"
    return requests.post(
        url,
        data=json.dumps(message),
        headers={
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        },
        timeout=timeout,
    )


def error_code(response: requests.Response) -> Optional[str]:
    """Extract the FCM error code (`UNREGISTERED`, ...) from an error response."""
    try:
        error = response.json().get("error", {})
    except ValueError:
        return None
    for detail in error.get("details", []):
        if detail.get("errorCode"):
            return detail["errorCode"]
    return error.get("status")
