"""
Tests for legacy database credential management.
"""

import pytest
from unittest.mock import MagicMock, patch

from keyring.errors import KeyringError, PasswordDeleteError

from curator.utils.credential_manager import (
    DB_SERVICE_NAME,
    CredentialStorageError,
    db_credentials_exist,
    delete_db_credentials,
    load_db_credentials,
    save_db_credentials,
)


@pytest.fixture
def mock_keyring():
    """Mock keyring module with in-memory password storage."""
    with patch('curator.utils.credential_manager.keyring') as mock:
        passwords = {}

        def set_password(service, username, password):
            passwords[(service, username)] = password

        def get_password(service, username):
            return passwords.get((service, username))

        def delete_password(service, username):
            if (service, username) not in passwords:
                raise PasswordDeleteError("Password not found")
            del passwords[(service, username)]

        mock.set_password.side_effect = set_password
        mock.get_password.side_effect = get_password
        mock.delete_password.side_effect = delete_password
        mock.passwords = passwords
        yield mock


@pytest.fixture
def mock_settings():
    """Mock QSettings store backed by a dict."""
    values = {}
    settings = MagicMock()
    settings.setValue.side_effect = lambda key, value: values.__setitem__(key, value)
    settings.value.side_effect = lambda key, default=None, type=None: values.get(key, default)
    settings.values = values

    with patch('curator.utils.credential_manager.get_settings', return_value=settings):
        yield settings


class TestSaveDBCredentials:
    """Tests for save_db_credentials function."""

    def test_save_valid_credentials(self, mock_keyring, mock_settings):
        """Test saving valid database credentials."""
        save_db_credentials("db.example.org", "metaworks", "test_user", "test_password")

        args = mock_keyring.set_password.call_args[0]
        assert args[0] == DB_SERVICE_NAME
        assert args[1] == "db.example.org|metaworks|test_user"
        assert args[2] == "test_password"

        assert mock_settings.values["legacy_db/host"] == "db.example.org"
        assert mock_settings.values["legacy_db/database"] == "metaworks"
        assert mock_settings.values["legacy_db/username"] == "test_user"
        assert mock_settings.values["legacy_db/configured"] is True

    @pytest.mark.parametrize("params", [
        ("", "database", "user", "password"),
        ("host", "", "user", "password"),
        ("host", "database", "", "password"),
        ("host", "database", "user", ""),
    ])
    def test_save_empty_parameter_raises_error(self, mock_keyring, mock_settings, params):
        """Test that any empty parameter raises ValueError."""
        with pytest.raises(ValueError, match="are required"):
            save_db_credentials(*params)

    def test_save_keyring_failure_raises_error(self, mock_keyring, mock_settings):
        """Test that keyring failure raises CredentialStorageError."""
        mock_keyring.set_password.side_effect = KeyringError("Keyring locked")

        with pytest.raises(CredentialStorageError, match="Could not store legacy database password"):
            save_db_credentials("host", "database", "user", "password")

        assert "legacy_db/configured" not in mock_settings.values


class TestLoadDBCredentials:
    """Tests for load_db_credentials function."""

    def test_round_trip(self, mock_keyring, mock_settings):
        """Test loading previously saved credentials."""
        save_db_credentials("db.example.org", "metaworks", "test_user", "secret")

        assert load_db_credentials() == {
            'host': "db.example.org",
            'database': "metaworks",
            'username': "test_user",
            'password': "secret",
        }

    def test_not_configured(self, mock_keyring, mock_settings):
        """Test that unconfigured credentials yield None."""
        assert load_db_credentials() is None
        mock_keyring.get_password.assert_not_called()

    def test_incomplete_metadata(self, mock_keyring, mock_settings):
        """Test that missing metadata yields None."""
        mock_settings.values.update({"legacy_db/configured": True, "legacy_db/host": "h"})

        assert load_db_credentials() is None

    def test_password_missing_in_keyring(self, mock_keyring, mock_settings):
        """Test that a missing password yields None."""
        mock_settings.values.update({
            "legacy_db/configured": True,
            "legacy_db/host": "h",
            "legacy_db/database": "d",
            "legacy_db/username": "u",
        })

        assert load_db_credentials() is None

    def test_keyring_failure(self, mock_keyring, mock_settings):
        """Test that keyring errors raise CredentialStorageError."""
        save_db_credentials("h", "d", "u", "p")
        mock_keyring.get_password.side_effect = KeyringError("No backend")

        with pytest.raises(CredentialStorageError, match="Could not read legacy database password"):
            load_db_credentials()


class TestDeleteDBCredentials:
    """Tests for delete_db_credentials and db_credentials_exist."""

    def test_delete_existing(self, mock_keyring, mock_settings):
        """Test deleting stored credentials."""
        save_db_credentials("h", "d", "u", "p")
        assert db_credentials_exist() is True

        assert delete_db_credentials("h", "d", "u") is True
        assert db_credentials_exist() is False
        assert mock_keyring.passwords == {}

    def test_delete_missing(self, mock_keyring, mock_settings):
        """Test deleting credentials that do not exist."""
        assert delete_db_credentials("h", "d", "u") is False

    def test_delete_keyring_failure(self, mock_keyring, mock_settings):
        """Test that other keyring errors raise CredentialStorageError."""
        mock_keyring.delete_password.side_effect = KeyringError("Backend failure")

        with pytest.raises(CredentialStorageError, match="Could not remove legacy database password"):
            delete_db_credentials("h", "d", "u")
