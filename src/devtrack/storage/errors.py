"""DevTrack exception hierarchy."""

from __future__ import annotations

__all__ = [
    "DevTrackError",
    "StoreError",
    "RecordShapeError",
    "UnknownIdentifierError",
]


class DevTrackError(Exception):
    """Base exception for all DevTrack errors."""


class StoreError(DevTrackError):
    """Raised when the record store or the SQLite engine rejects an operation."""


class RecordShapeError(StoreError):
    """Raised when a record handed to a write operation is not a non-empty mapping."""


class UnknownIdentifierError(StoreError):
    """Raised when a table or column name is not part of the fixed schema."""
