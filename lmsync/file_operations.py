"""
This module provides the file and folder primitives every other part of LMSync
builds on. It includes functions for persisting structured values to disk and
loading them back, checking for and creating paths, renaming files without
overwriting older versions, and sanitizing names so they are safe to use on the
filesystem. It also sets up application logging.

The primitives here never log, retry or mask errors: failures are raised to the
caller, which decides how to report them.
"""

import os
import re
import pickle
import logging
import dataclasses
from typing import Any, Tuple
from urllib.parse import unquote_to_bytes

from .config import APP_NAME, get_log_dir


# --- Errors ---
class StoreError(Exception):
    """Base class for errors raised by the persistence helpers."""


class EncodeError(StoreError, IOError):
    """Raised when a value cannot be serialized to a file."""


class DecodeError(StoreError, ValueError):
    """Raised when a file's content is malformed or does not match the destination."""


class MissingFileError(StoreError, FileNotFoundError):
    """
    Raised by callers that want a user-facing "file not found" message distinct
    from generic I/O failures. ``decode_from_file`` never raises it itself.
    """

    def __init__(self, file_name: str) -> None:
        super().__init__(file_name)
        self.file_name: str = file_name

    def __str__(self) -> str:
        return f"FileNotFoundError: {self.file_name} cannot be found."


# --- Logging Configuration ---
def setup_logging(level: int = logging.INFO) -> Tuple[logging.Logger, str]:
    """
    Sets up the logging configuration for the application.

    This function configures a logger that writes to both a file and the console.
    The log file lives in the application's log directory; if that directory
    cannot be created, the log is written to the current directory instead.

    Args:
        level (int): The logging level for the root configuration.

    Returns:
        Tuple[logging.Logger, str]: The configured application logger and the
                                    path to the log file.
    """
    log_dir: str = get_log_dir()
    try:
        os.makedirs(log_dir, exist_ok=True)
        log_file_path: str = os.path.join(log_dir, "lmsync.log")
    except OSError as e:
        print(f"WARNING: Could not create log directory '{log_dir}': {e}. Logging to current directory instead.")
        log_file_path = "lmsync.log"

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.FileHandler(log_file_path, encoding='utf-8'), logging.StreamHandler()]
    )
    logger: logging.Logger = logging.getLogger(APP_NAME)
    logger.info(f"Logging initialized. Main log: {log_file_path}")

    return logger, log_file_path


# --- Structured Persistence ---
_DECODE_ERRORS = (pickle.UnpicklingError, EOFError, AttributeError, ImportError, IndexError, KeyError,
                  TypeError, ValueError, OverflowError, MemoryError, RecursionError)


def encode_to_file(file_name: str, data: Any) -> None:
    """
    Encodes any picklable value into the file specified by file_name.

    If the file already exists, it is truncated. If it does not exist, it is
    created with mode 0o666 (before umask). Relative paths resolve against the
    current working directory. The write is not atomic.

    Args:
        file_name (str): Path of the file to write.
        data (Any): The value to persist.

    Raises:
        EncodeError: If the value cannot be serialized (e.g. it holds a lambda,
                     a lock or a generator). An existing file is left untouched.
        OSError: If the file cannot be created or written.
    """
    try:
        payload: bytes = pickle.dumps(data, protocol=pickle.HIGHEST_PROTOCOL)
    except (pickle.PicklingError, TypeError, AttributeError) as e:
        raise EncodeError(f"Could not encode {type(data).__name__} to '{file_name}': {e}") from e

    with open(file_name, 'wb') as f:
        f.write(payload)


def decode_from_file(file_name: str, data: Any) -> Any:
    """
    Decodes a value written by ``encode_to_file`` back into its original type.

    ``data`` is the destination. Pass a mutable instance of the stored type (a
    record, dict, list, set or bytearray) to have it populated in place, or pass
    the type itself for immutable values such as ints, strings, tuples and
    datetimes. The destination is only modified once the whole file decoded
    successfully.

    Decoding a pickle can execute code embedded in the file. Only use this on
    files LMSync wrote into the user's own data directory, never on downloaded
    or otherwise untrusted content.

    Args:
        file_name (str): Path of the file to read.
        data (Any): A mutable instance, or a type, describing the expected shape.

    Returns:
        Any: The populated destination, or the decoded value when a type was given.

    Raises:
        OSError: If the file does not exist or cannot be opened.
        DecodeError: If the content is malformed, truncated, or not of the
                     destination's type.
        TypeError: If ``data`` is an immutable instance that cannot be populated.
    """
    with open(file_name, 'rb') as f:
        payload: bytes = f.read()

    try:
        decoded = pickle.loads(payload)
    except _DECODE_ERRORS as e:
        raise DecodeError(f"Could not decode '{file_name}': {e}") from e

    if isinstance(data, type):
        if not isinstance(decoded, data):
            raise DecodeError(
                f"'{file_name}' holds {type(decoded).__name__}, expected {data.__name__}")
        return decoded

    if type(decoded) is not type(data):
        raise DecodeError(
            f"'{file_name}' holds {type(decoded).__name__}, expected {type(data).__name__}")
    _populate(data, decoded)
    return data


def _populate(destination: Any, source: Any) -> None:
    """Copies the state of ``source`` into ``destination`` of the same type."""
    if isinstance(destination, dict):
        destination.clear()
        destination.update(source)
    elif isinstance(destination, (list, bytearray)):
        destination[:] = source
    elif isinstance(destination, set):
        destination.clear()
        destination.update(source)
    elif dataclasses.is_dataclass(destination):
        for f in dataclasses.fields(destination):
            setattr(destination, f.name, getattr(source, f.name))
    elif hasattr(destination, '__dict__'):
        vars(destination).clear()
        vars(destination).update(vars(source))
    else:
        raise TypeError(f"Cannot decode into an immutable {type(destination).__name__}; pass the type instead")


# --- Path Helpers ---
def exists(name: str) -> bool:
    """Checks if the given path exists. Any stat error counts as non-existence."""
    try:
        os.stat(name)
    except (OSError, ValueError):
        return False
    return True


def ensure_dir(directory: str) -> None:
    """
    Ensures that the directory exists by creating it, and any missing parents,
    if it does not already exist.

    Raises:
        OSError: If the directory could not be created, including when a
                 non-directory file already occupies the path.
    """
    os.makedirs(directory, exist_ok=True)


AUTO_RENAME_FORMAT: str = "[v{version}]{name}"


def auto_rename(file_path: str) -> str:
    """
    Renames a file by prepending "[vX]" to its file name, where X is the
    smallest positive integer for which the new name does not exist in the
    directory yet.

    The existence check and the rename are not atomic: two concurrent callers
    can pick the same free name.

    Args:
        file_path (str): Path of the file to rename.

    Returns:
        str: The new path of the file.

    Raises:
        OSError: If the source file does not exist or the rename fails.
    """
    directory, file_name = os.path.split(file_path)

    version: int = 1
    new_path: str = os.path.join(directory, AUTO_RENAME_FORMAT.format(version=version, name=file_name))
    while exists(new_path):
        version += 1
        new_path = os.path.join(directory, AUTO_RENAME_FORMAT.format(version=version, name=file_name))

    os.rename(file_path, new_path)
    return new_path


# --- Name Sanitization ---
_PROHIBITED_RUN = re.compile(r'(?:\s*[<>:"/\\|?*])+\s*')
_PERCENT_ESCAPE = re.compile(r'%[0-9A-Fa-f]{2}')


def _percent_decode_once(name: str) -> str:
    """
    Reverses one level of %XX escaping. Returns the name unchanged if it holds
    a '%' that is not a valid escape, or if the escapes do not decode to UTF-8.
    """
    if '%' not in name or name.count('%') != len(_PERCENT_ESCAPE.findall(name)):
        return name
    try:
        return unquote_to_bytes(name).decode('utf-8')
    except UnicodeDecodeError:
        return name


def cleanse_folder_file_name(name: str) -> str:
    """
    Ensures folder and file names are valid by removing prohibited characters.

    Percent-encoded names (e.g. "50%25off") are decoded first, repeatedly, until
    nothing valid is left to decode. Each run of the characters / \\ < > : " | ? *
    together with the whitespace around it then becomes a single space, and
    surrounding whitespace is trimmed. Applying it twice gives the same result
    as applying it once.

    Some unsafe names are still not caught, for unlikeliness and simplicity:
    the Windows reserved names CON, PRN, AUX, NUL, COM1-COM9 and LPT1-LPT9,
    and the non-printable characters ASCII 0-31.

    Args:
        name (str): The original name, e.g. a course or file title.

    Returns:
        str: The sanitized name.
    """
    decoded: str = _percent_decode_once(name)
    while decoded != name:
        name = decoded
        decoded = _percent_decode_once(name)

    name = _PROHIBITED_RUN.sub(' ', name)
    return name.strip()
