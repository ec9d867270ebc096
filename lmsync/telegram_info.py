"""
Stores the Telegram integration settings used to notify the user of new grades.
"""

import os
import logging

from .config import APP_NAME, get_app_dir
from .data_structures import TelegramInfo
from .file_operations import decode_from_file, encode_to_file, ensure_dir, exists, MissingFileError

TELEGRAM_INFO_FILE_NAME: str = "telegram.dat"

WELCOME_MESSAGE: str = (
    f"Thank you for using {APP_NAME}! You have successfully integrated Telegram with {APP_NAME}!\n\n"
    f"By integrating Telegram with {APP_NAME}, you will be notified of the following whenever "
    f"{APP_NAME} polls for new updates based on the intervals set:\n"
    "\U0001F4A5 new grades releases\n"
    "\U0001F4A5 new announcements (TBC)"
)

logger: logging.Logger = logging.getLogger(APP_NAME)


def get_telegram_info_path() -> str:
    return os.path.join(get_app_dir(), TELEGRAM_INFO_FILE_NAME)


def save_telegram_info(path: str, info: TelegramInfo) -> None:
    try:
        ensure_dir(os.path.dirname(path) or os.curdir)
        encode_to_file(path, info)
    except OSError as e:
        logger.error(f"Could not save Telegram info to '{path}': {e}")
        raise
    logger.info(f"Telegram info saved to '{path}'")


def load_telegram_info(path: str) -> TelegramInfo:
    """
    Loads the Telegram settings saved at ``path``.

    Raises:
        MissingFileError: If the integration has not been set up.
    """
    if not exists(path):
        raise MissingFileError(path)
    return decode_from_file(path, TelegramInfo())
