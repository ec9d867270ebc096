import os
import sys
import getpass
import logging
import argparse
from typing import List, Optional

from .config import APP_NAME, APP_VERSION
from .data_structures import Credentials, Frequency, TelegramInfo
from .file_operations import ensure_dir, setup_logging, MissingFileError, StoreError
from .credentials import get_credentials_path, load_credentials, save_credentials
from .preferences import check_sync_ready, get_preferences, get_preferences_path, set_directory, set_frequency
from .telegram_info import get_telegram_info_path, load_telegram_info, save_telegram_info


def _show(args: argparse.Namespace) -> int:
    preferences = get_preferences(get_preferences_path())
    print(f"Directory: {preferences.directory or 'Not set'}")
    try:
        frequency_label = Frequency.from_hours(preferences.frequency).label
    except ValueError:
        frequency_label = f"{preferences.frequency} hour"
    print(f"Sync Frequency: {frequency_label}")

    credentials_path = get_credentials_path()
    try:
        credentials = load_credentials(credentials_path)
        print(f"Credentials: saved for '{credentials.username}'")
    except MissingFileError:
        print("Credentials: not saved")

    try:
        telegram_info = load_telegram_info(get_telegram_info_path())
        print(f"Telegram: linked to user {telegram_info.user_id}")
    except MissingFileError:
        print("Telegram: not linked")
    return 0


def _set_dir(args: argparse.Namespace) -> int:
    directory: str = os.path.abspath(args.directory)
    ensure_dir(directory)
    preferences = set_directory(directory, get_preferences_path())
    print(f"Files will be synced to: {preferences.directory}")
    return 0


def _set_frequency(args: argparse.Namespace) -> int:
    set_frequency(args.frequency, get_preferences_path())
    print(f"Sync Frequency: {args.frequency}")
    return 0


def _save_credentials(args: argparse.Namespace) -> int:
    password: str = getpass.getpass("Enter Password: ")
    credentials = Credentials(username=args.username, password=password)
    if not credentials.is_complete():
        print("Error: Both username and password are required.")
        return 1
    save_credentials(get_credentials_path(), credentials, use_keyring=args.keyring)
    print("Credentials saved.")
    return 0


def _save_telegram(args: argparse.Namespace) -> int:
    info = TelegramInfo(bot_api=args.bot_api, user_id=args.user_id)
    if not info.is_complete():
        print("Error: Both Bot API token and User ID are required.")
        return 1
    save_telegram_info(get_telegram_info_path(), info)
    print("Telegram info saved successfully.")
    return 0


def _check_sync(args: argparse.Namespace) -> int:
    ready, message = check_sync_ready(get_preferences(get_preferences_path()))
    if not ready:
        print(message)
        return 1
    print("Ready to sync.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lmsync", description=f'{APP_NAME} local settings')
    parser.add_argument('--version', action='version', version=f'{APP_NAME} v{APP_VERSION}')
    parser.add_argument('--verbose', action='store_true', help='Log debug messages')
    subparsers = parser.add_subparsers(dest='command', required=True)

    show = subparsers.add_parser('show', help='Show the saved settings')
    show.set_defaults(handler=_show)

    set_dir = subparsers.add_parser('set-dir', help='Set the root directory for synced files')
    set_dir.add_argument('directory', help='Directory path')
    set_dir.set_defaults(handler=_set_dir)

    frequency = subparsers.add_parser('set-frequency', help='Set the hours between syncs')
    frequency.add_argument('frequency', choices=Frequency.labels(), help='Sync frequency')
    frequency.set_defaults(handler=_set_frequency)

    credentials = subparsers.add_parser('save-credentials', help='Save login credentials')
    credentials.add_argument('username', help='Username')
    credentials.add_argument('--keyring', action='store_true', help='Keep the password in the system keyring')
    credentials.set_defaults(handler=_save_credentials)

    telegram = subparsers.add_parser('save-telegram', help='Save Telegram integration info')
    telegram.add_argument('bot_api', help="Your bot's API token")
    telegram.add_argument('user_id', help="Your account's ID")
    telegram.set_defaults(handler=_save_telegram)

    check = subparsers.add_parser('check-sync', help='Check whether a sync can start')
    check.set_defaults(handler=_check_sync)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Command line entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)
    logger: logging.Logger
    logger, _ = setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        return args.handler(args)
    except (StoreError, OSError) as e:
        print(f"Error: {e}")
        logger.exception(f"Command '{args.command}' failed")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
