"""
Application-level constants and the per-user locations where LMSync keeps its
data files and logs.
"""

import os

from . import __version__

APP_NAME: str = "LMSync"
APP_VERSION: str = __version__

HOME_ENV_VAR: str = "LMSYNC_HOME"


def get_app_dir() -> str:
    """
    Returns the directory holding the credentials, preferences and
    integration files.

    ``LMSYNC_HOME`` overrides the default, which is ``%LOCALAPPDATA%/LMSync``
    on Windows and ``~/.lmsync`` elsewhere. The directory is not created here.
    """
    override = os.getenv(HOME_ENV_VAR)
    if override:
        return override
    local_app_data = os.getenv('LOCALAPPDATA')
    if local_app_data:
        return os.path.join(local_app_data, APP_NAME)
    return os.path.join(os.path.expanduser("~"), f".{APP_NAME.lower()}")


def get_log_dir() -> str:
    """Returns the directory for the application log file."""
    return os.path.join(get_app_dir(), 'logs')
