"""GC Notify integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class NotifySettings(IntegrationSettings):
    """GC Notify API configuration used by the email channel.

    Environment Variables:
        NOTIFY_API_URL: GC Notify API endpoint URL
        NOTIFY_SERVICE_ID: GC Notify service id (JWT issuer)
        NOTIFY_API_SECRET: GC Notify API signing secret
        NOTIFY_EMAIL_TEMPLATE_ID: Generic email template id
        NOTIFY_TIMEOUT_SECONDS: HTTP timeout for a single send (default: 10)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        api_url = settings.notify.NOTIFY_API_URL
        ```
    """

    NOTIFY_API_URL: str = Field(default="", alias="NOTIFY_API_URL")
    NOTIFY_SERVICE_ID: str | None = Field(default=None, alias="NOTIFY_SERVICE_ID")
    NOTIFY_API_SECRET: str | None = Field(default=None, alias="NOTIFY_API_SECRET")
    NOTIFY_EMAIL_TEMPLATE_ID: str = Field(default="", alias="NOTIFY_EMAIL_TEMPLATE_ID")
    NOTIFY_TIMEOUT_SECONDS: int = Field(default=10, alias="NOTIFY_TIMEOUT_SECONDS")
