# DevTrack
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Public package interface for the DevTrack record store."""

from devtrack.app.commands import CommandResult, Commands
from devtrack.app.runtime import Runtime, start_runtime
from devtrack.core.config import AppConfig, ConfigError, relocate_db, resolve_db_path
from devtrack.storage.errors import (
    DevTrackError,
    RecordShapeError,
    StoreError,
    UnknownIdentifierError,
)
from devtrack.storage.record_store import Record, RecordStore, open_store

__version__ = "1.0.0"

__all__ = [
    "AppConfig",
    "CommandResult",
    "Commands",
    "ConfigError",
    "DevTrackError",
    "Record",
    "RecordShapeError",
    "RecordStore",
    "Runtime",
    "StoreError",
    "UnknownIdentifierError",
    "open_store",
    "relocate_db",
    "resolve_db_path",
    "start_runtime",
]
