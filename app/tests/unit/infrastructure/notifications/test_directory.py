"""Unit tests for RecipientDirectory."""

import pytest

from infrastructure.notifications.directory import RecipientDirectory


@pytest.fixture
def directory(clock):
    return RecipientDirectory(clock=clock)


@pytest.mark.unit
class TestDevices:
    def test_register_device(self, directory, clock):
        registration = directory.register_device("user-1", "token-1", "ios")

        assert registration.registered_at == clock()
        assert directory.device_token("user-1") == "token-1"

    def test_latest_registration_wins(self, directory):
        directory.register_device("user-1", "token-1", "ios")
        directory.register_device("user-1", "token-2", "android")

        assert directory.device_token("user-1") == "token-2"

    @pytest.mark.parametrize(
        "token,device_type",
        [("token-1", "windows"), ("", "ios"), ("   ", "android")],
    )
    def test_invalid_registration(self, directory, token, device_type):
        with pytest.raises(ValueError):
            directory.register_device("user-1", token, device_type)

    def test_unregister(self, directory):
        directory.register_device("user-1", "token-1", "ios")

        assert directory.unregister_device("user-1") is True
        assert directory.unregister_device("user-1") is False
        assert directory.device_token("user-1") is None

    def test_remove_stale_token(self, directory):
        directory.register_device("user-1", "token-1", "ios")

        directory.remove_token("user-1", "token-1")

        assert directory.device_token("user-1") is None

    def test_remove_token_ignores_newer_registration(self, directory):
        """A stale token does not evict a device registered since."""
        directory.register_device("user-1", "token-2", "ios")

        directory.remove_token("user-1", "token-1")

        assert directory.device_token("user-1") == "token-2"


@pytest.mark.unit
def test_email_addresses(directory):
    assert directory.email_for("user-1") is None

    directory.set_email("user-1", "tenant@example.com")

    assert directory.email_for("user-1") == "tenant@example.com"


@pytest.mark.unit
def test_set_email_reports_changes(directory):
    assert directory.set_email("user-1", "tenant@example.com") is True
    assert directory.set_email("user-1", "tenant@example.com") is False


@pytest.mark.unit
def test_default_email_never_replaces_registered_address(directory):
    assert directory.set_default_email("user-1", "token@example.com") is True
    directory.set_email("user-1", "chosen@example.com")

    assert directory.set_default_email("user-1", "token@example.com") is False
    assert directory.email_for("user-1") == "chosen@example.com"
