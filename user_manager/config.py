"""
Runtime configuration for user-manager.

The data file location is resolved once at startup:

  1. ``--data PATH`` on the command line (handled by the CLI)
  2. ``$USER_MANAGER_HOME/storage.json``
  3. ``~/.user-manager/storage.json``
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

__all__ = [
    "AppConfig",
    "default_data_path",
    "STORAGE_KEY",
    "EXPORT_FILENAME",
    "MESSAGE_TIMEOUT_MS",
]

# Key under which the full user list is persisted
STORAGE_KEY = "users"

# Default file name offered by the export action
EXPORT_FILENAME = "users-data.json"

# Banner messages disappear after this many milliseconds
MESSAGE_TIMEOUT_MS = 3000

_HOME_ENV = "USER_MANAGER_HOME"
_DATA_FILENAME = "storage.json"


def default_data_path() -> Path:
    """Return the storage file path, honouring $USER_MANAGER_HOME if set."""
    home = os.environ.get(_HOME_ENV)
    base = Path(home).expanduser() if home else Path.home() / ".user-manager"
    return base / _DATA_FILENAME


@dataclass
class AppConfig:
    """Settings shared by the CLI and the GUI."""
    data_path:          Path = field(default_factory=default_data_path)
    storage_key:        str  = STORAGE_KEY
    export_filename:    str  = EXPORT_FILENAME
    message_timeout_ms: int  = MESSAGE_TIMEOUT_MS   # banner auto-dismiss

    def __post_init__(self) -> None:
        self.data_path = Path(self.data_path).expanduser()
