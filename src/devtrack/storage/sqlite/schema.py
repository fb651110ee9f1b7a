"""
Fixed DevTrack schema and the bootstrap that opens the database file.
"""

from __future__ import annotations

import logging
import os
import sqlite3
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from devtrack.storage.sqlite.utils import open_db

log = logging.getLogger(__name__)

__all__ = [
    "TABLES",
    "TABLE_COLUMNS",
    "ColumnMap",
    "Bootstrap",
    "read_table_columns",
    "apply_default_pragmas",
    "ensure_schema",
    "bootstrap",
]

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS clients (
    id TEXT PRIMARY KEY,
    name TEXT,
    code TEXT,
    address TEXT
);

CREATE TABLE IF NOT EXISTS customers (
    id TEXT PRIMARY KEY,
    clientId TEXT,
    name TEXT,
    address TEXT,
    isInactive INTEGER DEFAULT 0
);

CREATE TABLE IF NOT EXISTS tickets (
    id TEXT PRIMARY KEY,
    clientId TEXT,
    customerId TEXT,
    sapId TEXT,
    sapModule TEXT,
    title TEXT,
    description TEXT,
    priority TEXT,
    status TEXT,
    budget INTEGER,
    estimation INTEGER,
    date TEXT,
    createdAt TEXT,
    startDate TEXT
);

CREATE TABLE IF NOT EXISTS worklogs (
    id TEXT PRIMARY KEY,
    clientId TEXT,
    customerId TEXT,
    ticketId TEXT,
    manualTicketId TEXT,
    manualModule TEXT,
    date TEXT,
    hours REAL,
    description TEXT,
    invoiceNumber TEXT,
    billingDate TEXT
);
"""

ColumnMap = Mapping[str, tuple[str, ...]]


def read_table_columns(
    conn: sqlite3.Connection,
    tables: Iterable[str] | None = None,
) -> ColumnMap:
    """
    Column names per table, in declaration order, as the engine reports them.

    Without ``tables`` every user table in the database is described, in
    creation order.
    """
    if tables is None:
        rows = conn.execute(
            "SELECT name FROM sqlite_master "
            "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY rowid"
        ).fetchall()
        tables = [row[0] for row in rows]

    columns: dict[str, tuple[str, ...]] = {}
    for table in tables:
        info = conn.execute(f'PRAGMA table_info("{table}")').fetchall()
        if info:
            columns[table] = tuple(row[1] for row in info)
    return MappingProxyType(columns)


def _describe_schema() -> ColumnMap:
    conn = sqlite3.connect(":memory:")
    try:
        conn.executescript(_SCHEMA_SQL)
        return read_table_columns(conn)
    finally:
        conn.close()


# Allow-list for identifiers interpolated into generated statements.
TABLE_COLUMNS: ColumnMap = _describe_schema()

TABLES: tuple[str, ...] = tuple(TABLE_COLUMNS)


@dataclass(frozen=True)
class Bootstrap:
    """Open connection, the first-run signal captured before opening it, and the file's columns."""

    path: Path
    conn: sqlite3.Connection
    is_new: bool
    columns: ColumnMap = field(default_factory=lambda: TABLE_COLUMNS)


def apply_default_pragmas(conn: sqlite3.Connection) -> None:
    """
    Keep the database a single self-contained file.

    DELETE journal mode leaves no ``-wal``/``-shm`` sidecars, so the file can be
    copied elsewhere while the application holds it open.
    """
    conn.execute("PRAGMA journal_mode = DELETE;")
    conn.execute("PRAGMA synchronous = FULL;")
    conn.execute("PRAGMA temp_store = MEMORY;")


def ensure_schema(conn: sqlite3.Connection) -> None:
    """Create any of the four tables that do not exist yet."""

    conn.executescript(_SCHEMA_SQL)


def bootstrap(path: str | os.PathLike[str]) -> Bootstrap:
    """Open (or create) the database at ``path`` and make sure the schema exists."""

    db_path = Path(path)
    is_new = not db_path.exists()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = open_db(db_path.as_posix())
    try:
        apply_default_pragmas(conn)
        ensure_schema(conn)
        columns = read_table_columns(conn, TABLES)
    except sqlite3.Error:
        conn.close()
        raise

    if is_new:
        log.info("Created new database at %s", db_path)
    else:
        log.info("Opened existing database at %s", db_path)
    for table, names in columns.items():
        extra = set(names) - set(TABLE_COLUMNS[table])
        if extra:
            log.info("Table %s carries extra columns: %s", table, ", ".join(sorted(extra)))
    return Bootstrap(path=db_path, conn=conn, is_new=is_new, columns=columns)
