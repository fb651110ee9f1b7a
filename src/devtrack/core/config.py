# DevTrack
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""
Persisted application settings and database location.

``config.json`` carries a single optional field, ``db_path``. Loading never
fails: a missing or unreadable file yields defaults. Saving and relocating do
fail loudly with :class:`ConfigError`.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from devtrack.core.paths import CONFIG_FILENAME, DB_FILENAME, default_db_path, get_config_directory
from devtrack.storage.errors import DevTrackError

log = logging.getLogger(__name__)

__all__ = [
    "AppConfig",
    "ConfigError",
    "config_file_path",
    "load_config",
    "save_config",
    "resolve_db_path",
    "relocate_db",
]


class ConfigError(DevTrackError):
    """Raised when the configuration cannot be written or the database cannot be relocated."""


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    db_path: str | None = None


def config_file_path(config_dir: str | os.PathLike[str] | None = None) -> Path:
    base = Path(config_dir) if config_dir is not None else get_config_directory()
    return base / CONFIG_FILENAME


def load_config(config_dir: str | os.PathLike[str] | None = None) -> AppConfig:
    """Read ``config.json``; any problem falls back to the default config."""

    path = config_file_path(config_dir)
    if not path.exists():
        return AppConfig()
    try:
        return AppConfig.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValidationError) as exc:
        log.warning("Ignoring unreadable config %s: %s", path, exc)
        return AppConfig()


def save_config(config: AppConfig, config_dir: str | os.PathLike[str] | None = None) -> Path:
    """Write ``config`` as indented JSON, creating the directory if needed."""

    path = config_file_path(config_dir)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(config.model_dump_json(indent=2), encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot write config {path}: {exc}") from exc
    log.info("Saved config to %s", path)
    return path


def resolve_db_path(config_dir: str | os.PathLike[str] | None = None) -> Path:
    """Configured database path, or the platform default when none is set."""

    config = load_config(config_dir)
    if config.db_path:
        return Path(config.db_path)
    return default_db_path()


def relocate_db(new_path: str | os.PathLike[str], config_dir: str | os.PathLike[str] | None = None) -> Path:
    """
    Point the application at ``new_path`` for the next start.

    If a database already exists at the current location it is copied (not
    moved) to the new place; a directory target receives ``devtrack_data.db``.
    Otherwise ``new_path`` is recorded as given. Returns the recorded path.
    """
    config = load_config(config_dir)
    old_path = resolve_db_path(config_dir)
    requested = str(new_path)

    if old_path.exists() and str(old_path) != requested:
        target = Path(requested)
        if target.is_dir():
            target = target / DB_FILENAME
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy(old_path, target)
        except (OSError, shutil.Error) as exc:
            raise ConfigError(f"Cannot copy database to {target}: {exc}") from exc
        log.info("Copied database %s -> %s", old_path, target)
        config.db_path = str(target)
    else:
        config.db_path = requested

    save_config(config, config_dir)
    return Path(config.db_path)
