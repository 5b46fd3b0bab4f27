"""HTTP server and caller authentication settings."""

from typing import List

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class ServerSettings(InfrastructureSettings):
    """HTTP surface configuration.

    Callers authenticate with a bearer JWT signed by the identity service.
    The `sub` claim identifies the user and the `role` claim drives access
    predicates (`admin`, `manager`, `user`).

    Environment Variables:
        JWT_SECRET: Shared signing secret for caller tokens
        JWT_ALGORITHM: Signing algorithm (default: HS256)
        JWT_AUDIENCE: Expected audience claim (optional)
        CORS_ALLOW_ORIGINS: Allowed browser origins (default: ["*"])

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        secret = settings.server.JWT_SECRET
        ```
    """

    JWT_SECRET: str | None = Field(default=None, alias="JWT_SECRET")
    JWT_ALGORITHM: str = Field(default="HS256", alias="JWT_ALGORITHM")
    JWT_AUDIENCE: str | None = Field(default=None, alias="JWT_AUDIENCE")
    CORS_ALLOW_ORIGINS: List[str] = Field(default=["*"], alias="CORS_ALLOW_ORIGINS")
