"""
This module manages the user's sync preferences: the root directory synced
files are written to and the number of hours between automatic syncs. The
scheduler reads the same file, so this is the on-disk contract between the two.
"""

import os
import logging
from typing import Optional, Tuple, Union

from .config import APP_NAME, get_app_dir
from .data_structures import Frequency, Preferences
from .file_operations import decode_from_file, encode_to_file, ensure_dir, exists, MissingFileError

PREFERENCES_FILE_NAME: str = "preferences.dat"

NO_DIRECTORY_MESSAGE: str = "Please set the directory to store your files"
SYNC_DISABLED_MESSAGE: str = "Sync is currently disabled. Please choose a sync frequency to sync now."

logger: logging.Logger = logging.getLogger(APP_NAME)


def get_preferences_path() -> str:
    return os.path.join(get_app_dir(), PREFERENCES_FILE_NAME)


def save_preferences(path: str, preferences: Preferences) -> None:
    """
    Persists the preferences to ``path``, creating its directory if needed.

    Raises:
        OSError: If the file could not be written.
    """
    try:
        ensure_dir(os.path.dirname(path) or os.curdir)
        encode_to_file(path, preferences)
    except OSError as e:
        logger.error(f"Could not save preferences to '{path}': {e}")
        raise


def load_preferences(path: str) -> Preferences:
    """
    Loads the preferences saved at ``path``.

    Raises:
        MissingFileError: If no preferences have been saved at ``path``.
        DecodeError: If the file is corrupt.
    """
    if not exists(path):
        raise MissingFileError(path)
    return decode_from_file(path, Preferences())


def get_preferences(path: Optional[str] = None) -> Preferences:
    """Returns the saved preferences, or the defaults if none have been saved yet."""
    path = path or get_preferences_path()
    try:
        return load_preferences(path)
    except MissingFileError:
        return Preferences()


def set_directory(directory: str, path: Optional[str] = None) -> Preferences:
    """
    Sets the root directory for synced files and saves the preferences.

    Args:
        directory (str): The new root directory.
        path (Optional[str]): The preferences file. Defaults to the well-known path.

    Returns:
        Preferences: The updated preferences.
    """
    path = path or get_preferences_path()
    preferences = get_preferences(path)
    preferences.directory = directory
    save_preferences(path, preferences)
    logger.info(f"Sync directory set to '{directory}'")
    return preferences


def set_frequency(frequency: Union[str, int], path: Optional[str] = None) -> Preferences:
    """
    Sets the hours between syncs and saves the preferences.

    Args:
        frequency (Union[str, int]): A display label such as "4 hour", or an hour
                                     count (-1 disables sync).
        path (Optional[str]): The preferences file. Defaults to the well-known path.

    Returns:
        Preferences: The updated preferences.

    Raises:
        ValueError: If an hour count is not one of the offered frequencies.
    """
    path = path or get_preferences_path()
    if isinstance(frequency, str):
        chosen = Frequency.from_label(frequency)
    else:
        chosen = Frequency.from_hours(frequency)

    preferences = get_preferences(path)
    preferences.frequency = int(chosen)
    save_preferences(path, preferences)
    logger.info(f"Sync frequency set to '{chosen.label}'")
    return preferences


def check_sync_ready(preferences: Preferences) -> Tuple[bool, str]:
    """Whether a manual sync may start, with the message to show the user if not."""
    if not preferences.directory:
        return False, NO_DIRECTORY_MESSAGE
    if preferences.frequency == Frequency.DISABLED:
        return False, SYNC_DISABLED_MESSAGE
    return True, ""
