"""Tests for caller identity and access predicates."""

from unittest.mock import MagicMock

import jwt
import pytest
from fastapi.security import HTTPAuthorizationCredentials

from api.dependencies.access import (
    Principal,
    get_optional_principal,
    require_ownership,
    require_role,
    resolve_target_user,
)
from infrastructure.configuration import Settings
from infrastructure.configuration.infrastructure import ServerSettings


def credentials(claims, secret="test-secret"):
    token = jwt.encode(claims, secret, algorithm="HS256")
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.fixture
def settings():
    return Settings(server=ServerSettings(JWT_SECRET="test-secret"))


def request_with(path_params=None, query_params=None):
    request = MagicMock()
    request.path_params = path_params or {}
    request.query_params = query_params or {}
    return request


@pytest.mark.unit
class TestGetOptionalPrincipal:
    def test_anonymous(self, settings):
        assert get_optional_principal(settings, None) is None

    def test_valid_token(self, settings):
        principal = get_optional_principal(
            settings,
            credentials({"sub": "user-1", "role": "manager", "email": "m@example.com"}),
        )

        assert principal == Principal(
            user_id="user-1", role="manager", email="m@example.com"
        )

    def test_subject_path_is_reduced_to_user_id(self, settings):
        principal = get_optional_principal(settings, credentials({"sub": "users/user-1"}))

        assert principal.user_id == "user-1"
        assert principal.role == "user"

    def test_wrong_signature(self, settings):
        creds = credentials({"sub": "user-1"}, secret="other-secret")

        assert get_optional_principal(settings, creds) is None

    def test_missing_subject(self, settings):
        assert get_optional_principal(settings, credentials({"role": "admin"})) is None

    def test_unconfigured_secret(self):
        settings = Settings(server=ServerSettings(JWT_SECRET=None))

        assert get_optional_principal(settings, credentials({"sub": "user-1"})) is None

    def test_audience_is_checked_when_configured(self):
        settings = Settings(
            server=ServerSettings(JWT_SECRET="test-secret", JWT_AUDIENCE="notifications")
        )

        assert get_optional_principal(settings, credentials({"sub": "user-1"})) is None
        principal = get_optional_principal(
            settings, credentials({"sub": "user-1", "aud": "notifications"})
        )
        assert principal.user_id == "user-1"


@pytest.mark.unit
class TestPredicates:
    def test_require_role(self):
        predicate = require_role("admin", "manager")

        assert predicate(request_with(), Principal("u", role="manager"))
        assert not predicate(request_with(), Principal("u", role="user"))

    def test_ownership_by_path(self):
        predicate = require_ownership()

        assert predicate(request_with({"user_id": "user-1"}), Principal("user-1"))
        assert not predicate(request_with({"user_id": "user-2"}), Principal("user-1"))

    def test_ownership_by_query(self):
        predicate = require_ownership()

        assert not predicate(request_with(query_params={"userId": "user-2"}), Principal("user-1"))

    def test_admin_owns_everything(self):
        predicate = require_ownership()

        assert predicate(request_with({"user_id": "user-2"}), Principal("admin-1", role="admin"))

    def test_no_target_defaults_to_caller(self):
        assert require_ownership()(request_with(), Principal("user-1"))


@pytest.mark.unit
@pytest.mark.parametrize(
    "principal,requested,expected",
    [
        (Principal("admin-1", role="admin"), "user-2", "user-2"),
        (Principal("admin-1", role="admin"), None, "admin-1"),
        (Principal("user-1"), "user-2", "user-1"),
        (Principal("user-1"), None, "user-1"),
    ],
)
def test_resolve_target_user(principal, requested, expected):
    assert resolve_target_user(principal, requested) == expected
