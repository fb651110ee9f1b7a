"""
SQLite-backed record store for DevTrack.

The store owns the one connection to the database file and serialises every
operation on it with a single lock. Records are plain mappings; the table
layout lives in :mod:`devtrack.storage.sqlite.schema` and the SQL text in
:mod:`devtrack.storage.sqlite.statements`.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from devtrack.storage.errors import StoreError
from devtrack.storage.sqlite import statements as _statements
from devtrack.storage.sqlite.codec import SQLValue, decode_row
from devtrack.storage.sqlite.schema import TABLE_COLUMNS, ColumnMap, bootstrap
from devtrack.storage.sqlite.utils import transaction

log = logging.getLogger(__name__)

__all__ = ["Record", "RecordStore", "open_store"]

Record = dict[str, SQLValue]


class RecordStore:
    """Whole-table get/put/delete over one shared SQLite connection."""

    def __init__(
        self,
        path: str | os.PathLike[str],
        conn: sqlite3.Connection,
        *,
        is_new: bool = False,
        columns: ColumnMap | None = None,
    ):
        self.path = Path(path)
        self.conn = conn
        self.is_new = is_new
        self.columns = TABLE_COLUMNS if columns is None else columns
        self._lock = threading.RLock()
        self._closed = False

    # ------------------------------------------------------------------ #
    # Public API                                                         #
    # ------------------------------------------------------------------ #
    def get_all(self, table: str) -> list[Record]:
        """Return every row of ``table`` as a record, in engine order."""

        stmt = _statements.build_select_all(table, self.columns)
        with self._locked():
            cur = self.conn.execute(stmt.sql, stmt.params)
            try:
                columns = [desc[0] for desc in cur.description]
                rows = cur.fetchall()
            finally:
                cur.close()
        return [decode_row(columns, row) for row in rows]

    def count(self, table: str) -> int:
        stmt = _statements.build_count(table, self.columns)
        with self._locked():
            row = self.conn.execute(stmt.sql, stmt.params).fetchone()
        return int(row[0]) if row else 0

    def put(self, table: str, record: Mapping[str, Any]) -> None:
        """Insert or replace a single record; commits immediately."""

        stmt = _statements.build_upsert(table, record, self.columns)
        with self._locked():
            self.conn.execute(stmt.sql, stmt.params)
        log.debug("put %s id=%s", table, record.get("id"))

    def bulk_put(self, table: str, records: Iterable[Mapping[str, Any]]) -> None:
        """
        Insert or replace many records in one transaction.

        Either every record is written or none is: the first failing record
        rolls the whole batch back and its error propagates.
        """
        items = list(records)
        if not items:
            return

        with self._locked(), transaction(self.conn):
            for index, record in enumerate(items):
                try:
                    stmt = _statements.build_upsert(table, record, self.columns)
                except StoreError as exc:
                    raise type(exc)(f"record {index}: {exc}") from exc
                self.conn.execute(stmt.sql, stmt.params)
        log.debug("bulk_put %s: %d records", table, len(items))

    def delete(self, table: str, record_id: Any) -> None:
        """Delete the row with ``record_id``; a missing id is not an error."""

        stmt = _statements.build_delete(table, record_id, self.columns)
        with self._locked():
            cur = self.conn.execute(stmt.sql, stmt.params)
        log.debug("delete %s id=%s (%d rows)", table, record_id, cur.rowcount)

    def clear_all(self) -> None:
        """Empty every known table in a single transaction."""

        with self._locked(), transaction(self.conn):
            for stmt in _statements.build_clear():
                self.conn.execute(stmt.sql, stmt.params)
        log.info("Cleared all tables in %s", self.path)

    @contextmanager
    def exclusive(self) -> Iterator[sqlite3.Connection]:
        """
        Block every other store operation while the body runs.

        Used to copy the database file: no write can be half-applied to the
        file while the lock is held.
        """
        with self._locked() as conn:
            yield conn

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self.conn.close()

    # ------------------------------------------------------------------ #
    # Internals                                                          #
    # ------------------------------------------------------------------ #
    @contextmanager
    def _locked(self) -> Iterator[sqlite3.Connection]:
        """Hold the store lock and surface engine failures as :class:`StoreError`."""

        with self._lock:
            if self._closed:
                raise StoreError("Record store is closed")
            try:
                yield self.conn
            except sqlite3.Error as exc:
                raise StoreError(str(exc)) from exc

    # ------------------------------------------------------------------ #
    # Context manager helpers                                            #
    # ------------------------------------------------------------------ #
    def __enter__(self) -> RecordStore:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open_store(path: str | os.PathLike[str]) -> RecordStore:
    """Bootstrap the database at ``path`` and wrap it in a :class:`RecordStore`."""

    try:
        boot = bootstrap(path)
    except (sqlite3.Error, OSError) as exc:
        raise StoreError(f"Cannot open database at {path}: {exc}") from exc
    return RecordStore(boot.path, boot.conn, is_new=boot.is_new, columns=boot.columns)
