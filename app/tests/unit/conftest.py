"""Fixtures for API and server tests.

The app is exercised through TestClient without entering the lifespan, so
the scheduler never starts. Services are swapped for the in-memory fixtures
through `app.dependency_overrides`.
"""

from unittest.mock import MagicMock

import jwt
import pytest
from fastapi.testclient import TestClient

from api.dependencies.rate_limits import get_limiter
from infrastructure.configuration import RateLimitSettings, Settings
from infrastructure.configuration.infrastructure import ServerSettings
from infrastructure.notifications.bulk import BulkDispatcher
from infrastructure.notifications.directory import RecipientDirectory
from infrastructure.notifications.in_app import InAppInbox
from infrastructure.rate_limiting import FixedWindowRateLimiter
from infrastructure.services import (
    get_bulk_dispatcher,
    get_delivery_log,
    get_dispatcher,
    get_in_app_inbox,
    get_preference_gate,
    get_rate_limiter,
    get_recipient_directory,
    get_retry_queue,
    get_settings,
)
from server.server import create_app
from tests.fakes import SleepRecorder

JWT_SECRET = "test-secret"


def make_token(user_id: str, role: str = "user", **claims) -> str:
    return jwt.encode(
        {"sub": user_id, "role": role, **claims}, JWT_SECRET, algorithm="HS256"
    )


@pytest.fixture
def auth():
    """Build bearer headers for a user and role."""

    def _auth(user_id: str, role: str = "user", **claims) -> dict:
        return {"Authorization": f"Bearer {make_token(user_id, role, **claims)}"}

    return _auth


@pytest.fixture
def rate_limit_settings():
    return RateLimitSettings()


@pytest.fixture
def api_settings(rate_limit_settings):
    return Settings(
        server=ServerSettings(JWT_SECRET=JWT_SECRET),
        rate_limits=rate_limit_settings,
        GIT_SHA="abc123",
    )


@pytest.fixture
def mock_dispatcher():
    dispatcher = MagicMock()
    dispatcher.health_check.return_value = {"Push": True, "Email": True, "InApp": True}
    return dispatcher


@pytest.fixture
def directory(clock):
    return RecipientDirectory(clock=clock)


@pytest.fixture
def inbox(in_app_store):
    return InAppInbox(in_app_store)


@pytest.fixture
def rate_limiter():
    return FixedWindowRateLimiter()


@pytest.fixture
def app(
    api_settings,
    mock_dispatcher,
    preference_gate,
    delivery_log,
    inbox,
    directory,
    retry_queue,
    rate_limiter,
):
    bulk = BulkDispatcher(mock_dispatcher, sleep=SleepRecorder())
    app = create_app()
    app.dependency_overrides.update(
        {
            get_settings: lambda: api_settings,
            get_dispatcher: lambda: mock_dispatcher,
            get_bulk_dispatcher: lambda: bulk,
            get_preference_gate: lambda: preference_gate,
            get_delivery_log: lambda: delivery_log,
            get_in_app_inbox: lambda: inbox,
            get_recipient_directory: lambda: directory,
            get_retry_queue: lambda: retry_queue,
            get_rate_limiter: lambda: rate_limiter,
        }
    )
    get_limiter().reset()
    yield app
    bulk.shutdown()


@pytest.fixture
def client(app):
    return TestClient(app)
