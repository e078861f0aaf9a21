"""
Credential storage for the legacy metadata database.

Host, schema and user name are kept in the ``legacy_db`` group of the
QSettings store. The password goes to the operating system keyring under
the service ``Curator_LegacyDB``, keyed by ``host|database|username``.
"""

import logging
from typing import Dict, Optional, Tuple

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from curator.utils.settings import get_settings


logger = logging.getLogger(__name__)


DB_SERVICE_NAME = "Curator_LegacyDB"

SETTINGS_GROUP = "legacy_db"
CONNECTION_KEYS = ('host', 'database', 'username')


class CredentialStorageError(Exception):
    """Raised when the keyring cannot store, read or remove a password."""
    pass


def _keyring_user(host: str, database: str, username: str) -> str:
    return f"{host}|{database}|{username}"


def _key(name: str) -> str:
    return f"{SETTINGS_GROUP}/{name}"


def _stored_connection() -> Optional[Tuple[str, str, str]]:
    """Host, database and username from QSettings, None if incomplete."""
    settings = get_settings()
    if not settings.value(_key('configured'), False, type=bool):
        return None

    values = tuple(settings.value(_key(name), "") or "" for name in CONNECTION_KEYS)
    if not all(values):
        logger.warning(f"Legacy database settings are incomplete: {dict(zip(CONNECTION_KEYS, values))}")
        return None
    return values


def save_db_credentials(host: str, database: str, username: str, password: str) -> None:
    """
    Store the legacy database login.

    The keyring write happens first; QSettings is only marked as configured
    once the password is safely stored.

    Raises:
        ValueError: If any of the four values is empty
        CredentialStorageError: If the keyring rejects the password
    """
    if not (host and database and username and password):
        raise ValueError("Host, database, username and password are required")

    user = _keyring_user(host, database, username)
    try:
        keyring.set_password(DB_SERVICE_NAME, user, password)
    except KeyringError as e:
        logger.error(f"Keyring rejected password for {user}: {e}")
        raise CredentialStorageError(f"Could not store legacy database password: {e}") from e

    settings = get_settings()
    for name, value in zip(CONNECTION_KEYS, (host, database, username)):
        settings.setValue(_key(name), value)
    settings.setValue(_key('configured'), True)

    logger.info(f"Stored legacy database login for {user}")


def load_db_credentials() -> Optional[Dict[str, str]]:
    """
    Return the stored legacy database login.

    Returns:
        {"host", "database", "username", "password"}, or None when nothing
        is configured or the keyring has no password for the stored login

    Raises:
        CredentialStorageError: If the keyring cannot be read
    """
    connection = _stored_connection()
    if connection is None:
        return None

    user = _keyring_user(*connection)
    try:
        password = keyring.get_password(DB_SERVICE_NAME, user)
    except KeyringError as e:
        logger.error(f"Keyring lookup failed for {user}: {e}")
        raise CredentialStorageError(f"Could not read legacy database password: {e}") from e

    if password is None:
        logger.warning(f"No keyring password for {user}")
        return None

    credentials = dict(zip(CONNECTION_KEYS, connection))
    credentials['password'] = password
    return credentials


def delete_db_credentials(host: str, database: str, username: str) -> bool:
    """Remove a stored login; False if the keyring had no such entry."""
    user = _keyring_user(host, database, username)
    try:
        keyring.delete_password(DB_SERVICE_NAME, user)
    except PasswordDeleteError:
        logger.warning(f"No keyring entry to delete for {user}")
        return False
    except KeyringError as e:
        logger.error(f"Keyring delete failed for {user}: {e}")
        raise CredentialStorageError(f"Could not remove legacy database password: {e}") from e

    get_settings().setValue(_key('configured'), False)
    logger.info(f"Removed legacy database login for {user}")
    return True


def db_credentials_exist() -> bool:
    return get_settings().value(_key('configured'), False, type=bool)
