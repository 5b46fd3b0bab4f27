"""Firebase Cloud Messaging integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class FcmSettings(IntegrationSettings):
    """FCM HTTP v1 API configuration used by the push channel.

    Environment Variables:
        FCM_PROJECT_ID: Firebase project id
        FCM_ACCESS_TOKEN: OAuth2 bearer token for the FCM v1 API
        FCM_API_URL: FCM API base URL (default: https://fcm.googleapis.com)
        FCM_TIMEOUT_SECONDS: HTTP timeout for a single send (default: 10)
    """

    FCM_PROJECT_ID: str = Field(default="", alias="FCM_PROJECT_ID")
    FCM_ACCESS_TOKEN: str | None = Field(default=None, alias="FCM_ACCESS_TOKEN")
    FCM_API_URL: str = Field(
        default="https://fcm.googleapis.com", alias="FCM_API_URL"
    )
    FCM_TIMEOUT_SECONDS: int = Field(default=10, alias="FCM_TIMEOUT_SECONDS")
