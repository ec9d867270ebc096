"""
Stores the learning-management-system login on disk. The password can be kept
in the system keyring instead of the credentials file.
"""

import os
import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from .config import APP_NAME, get_app_dir
from .data_structures import Credentials
from .file_operations import (decode_from_file, DecodeError, encode_to_file, ensure_dir, exists, MissingFileError,
                              StoreError)

CREDENTIALS_FILE_NAME: str = "credentials.dat"

logger: logging.Logger = logging.getLogger(APP_NAME)


class KeyringUnavailableError(StoreError):
    """Raised when the system keyring cannot store, fetch or remove a password."""


def get_credentials_path() -> str:
    return os.path.join(get_app_dir(), CREDENTIALS_FILE_NAME)


def _read_saved(path: str) -> Optional[Credentials]:
    """Returns the record currently at ``path``, or None if there is none or it is unreadable."""
    if not exists(path):
        return None
    try:
        return decode_from_file(path, Credentials())
    except DecodeError as e:
        logger.warning(f"Ignoring unreadable credentials file '{path}': {e}")
        return None


def _forget_keyring_password(username: str) -> None:
    try:
        keyring.delete_password(APP_NAME, username)
    except PasswordDeleteError:
        logger.warning(f"Keyring entry for '{username}' was already gone")


def save_credentials(path: str, credentials: Credentials, use_keyring: bool = False) -> None:
    """
    Persists the credentials to ``path``.

    A keyring password left by an earlier save is removed when the new save
    does not use the keyring or is for a different username.

    Args:
        path (str): The credentials file.
        credentials (Credentials): The login to save.
        use_keyring (bool): Store the password in the system keyring under the
                            username and leave it out of the file.

    Raises:
        KeyringUnavailableError: If the keyring backend fails.
        OSError: If the file could not be written.
    """
    previous: Optional[Credentials] = _read_saved(path)
    record = Credentials(username=credentials.username, password=credentials.password)
    try:
        if previous is not None and previous.password_in_keyring and (
                not use_keyring or previous.username != credentials.username):
            _forget_keyring_password(previous.username)
        if use_keyring:
            keyring.set_password(APP_NAME, credentials.username, credentials.password)
            record.password = ""
            record.password_in_keyring = True
    except KeyringError as e:
        logger.error(f"Keyring unavailable while saving credentials for '{credentials.username}': {e}")
        raise KeyringUnavailableError(f"Could not access the system keyring: {e}") from e

    try:
        ensure_dir(os.path.dirname(path) or os.curdir)
        encode_to_file(path, record)
    except OSError as e:
        logger.error(f"Could not save credentials to '{path}': {e}")
        raise
    logger.info(f"Credentials for '{credentials.username}' saved to '{path}'")


def load_credentials(path: str) -> Credentials:
    """
    Loads the credentials saved at ``path``, fetching the password from the
    keyring when it was stored there.

    Raises:
        MissingFileError: If no credentials have been saved at ``path``.
        KeyringUnavailableError: If the keyring backend fails.
    """
    if not exists(path):
        raise MissingFileError(path)

    credentials: Credentials = decode_from_file(path, Credentials())
    if credentials.password_in_keyring:
        try:
            password: Optional[str] = keyring.get_password(APP_NAME, credentials.username)
        except KeyringError as e:
            logger.error(f"Keyring unavailable while loading credentials for '{credentials.username}': {e}")
            raise KeyringUnavailableError(f"Could not access the system keyring: {e}") from e
        if password is None:
            logger.warning(f"No keyring password found for '{credentials.username}'")
        credentials.password = password or ""
    return credentials


def delete_credentials(path: str) -> None:
    """Removes the credentials file and any keyring entry it refers to."""
    if not exists(path):
        return

    credentials: Credentials = decode_from_file(path, Credentials())
    if credentials.password_in_keyring:
        try:
            _forget_keyring_password(credentials.username)
        except KeyringError as e:
            logger.error(f"Keyring unavailable while removing '{credentials.username}': {e}")
            raise KeyringUnavailableError(f"Could not access the system keyring: {e}") from e
    os.remove(path)
    logger.info(f"Credentials removed from '{path}'")
