"""Platform-specific locations for DevTrack's config, data and log files."""

from __future__ import annotations

import os
import sys
from pathlib import Path

__all__ = [
    "APP_NAME",
    "DB_FILENAME",
    "CONFIG_FILENAME",
    "CONFIG_DIR_ENV",
    "get_config_directory",
    "get_data_directory",
    "get_log_directory",
    "default_db_path",
]

APP_NAME = "DevTrack"
DB_FILENAME = "devtrack_data.db"
CONFIG_FILENAME = "config.json"
CONFIG_DIR_ENV = "DEVTRACK_CONFIG_DIR"


def get_config_directory(app_name: str = APP_NAME) -> Path:
    """
    Directory holding ``config.json``.

    - ``$DEVTRACK_CONFIG_DIR`` when set
    - Windows: %APPDATA%\\AppName
    - macOS: ~/Library/Application Support/AppName
    - Linux: ~/.config/AppName (XDG_CONFIG_HOME)
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)

    home = Path.home()
    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", home / "AppData" / "Roaming"))
        return base / app_name
    elif sys.platform == "darwin":
        return home / "Library" / "Application Support" / app_name
    else:
        xdg_config_home = os.environ.get("XDG_CONFIG_HOME", home / ".config")
        return Path(xdg_config_home) / app_name


def get_data_directory(app_name: str = APP_NAME) -> Path:
    """
    Directory for the default database when not running as a frozen executable.

    - Windows: %LOCALAPPDATA%\\AppName
    - macOS: ~/Library/Application Support/AppName
    - Linux: ~/.local/share/AppName
    """
    home = Path.home()
    if sys.platform == "win32":
        base = Path(os.environ.get("LOCALAPPDATA", home / "AppData" / "Local"))
        return base / app_name
    elif sys.platform == "darwin":
        return home / "Library" / "Application Support" / app_name
    else:
        xdg_data_home = os.environ.get("XDG_DATA_HOME", home / ".local" / "share")
        return Path(xdg_data_home) / app_name


def get_log_directory(app_name: str = APP_NAME) -> Path:
    """
    Directory for rotating log files.

    - Windows: %LOCALAPPDATA%\\AppName\\logs
    - macOS: ~/Library/Logs/AppName
    - Linux: ~/.local/share/AppName/logs
    """
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Logs" / app_name
    return get_data_directory(app_name) / "logs"


def default_db_path(app_name: str = APP_NAME) -> Path:
    """Beside the executable for frozen builds, otherwise in the user data directory."""

    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent / DB_FILENAME
    return get_data_directory(app_name) / DB_FILENAME
