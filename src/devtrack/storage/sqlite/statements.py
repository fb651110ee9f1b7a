"""
SQL builders for whole-table record access.

Statements are shaped by the table name and by the keys of the record being
written. The allow-list each builder checks against is read from the schema
catalog once, when the file is opened (see
:func:`~devtrack.storage.sqlite.schema.read_table_columns`).

Table and column names are interpolated into the SQL text because parameter
binding only covers values. That is safe only while those names come from the
application itself, never from untrusted input. As a guard, every identifier
is checked against that allow-list, or
:data:`~devtrack.storage.sqlite.schema.TABLE_COLUMNS` when none is given,
before it reaches the SQL string.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple

from devtrack.storage.errors import RecordShapeError, UnknownIdentifierError
from devtrack.storage.sqlite.codec import SQLValue, encode_record, encode_value
from devtrack.storage.sqlite.schema import TABLE_COLUMNS, TABLES, ColumnMap

__all__ = [
    "Statement",
    "check_table",
    "check_columns",
    "build_select_all",
    "build_count",
    "build_upsert",
    "build_delete",
    "build_clear",
]


class Statement(NamedTuple):
    sql: str
    params: tuple[SQLValue, ...] = ()


def check_table(table: str, columns: ColumnMap | None = None) -> str:
    """Return ``table`` if it is one of the known tables."""

    known = TABLE_COLUMNS if columns is None else columns
    if table not in known:
        raise UnknownIdentifierError(f"no such table: {table}")
    return table


def check_columns(table: str, names: Iterable[str], columns: ColumnMap | None = None) -> list[str]:
    """Return ``names`` as a list if every one exists on ``table``."""

    known = TABLE_COLUMNS if columns is None else columns
    allowed = known[check_table(table, known)]
    checked = list(names)
    for name in checked:
        if name not in allowed:
            raise UnknownIdentifierError(f"table {table} has no column named {name}")
    return checked


def build_select_all(table: str, columns: ColumnMap | None = None) -> Statement:
    return Statement(f"SELECT * FROM {check_table(table, columns)}")


def build_count(table: str, columns: ColumnMap | None = None) -> Statement:
    return Statement(f"SELECT COUNT(*) FROM {check_table(table, columns)}")


def build_upsert(table: str, record: Any, columns: ColumnMap | None = None) -> Statement:
    """
    Insert-or-replace ``record`` keyed by its ``id``.

    One placeholder per field, in the record's own key order. An existing row
    with the same ``id`` is replaced wholesale: columns the record omits fall
    back to their defaults. ``columns`` is the allow-list of the open file and
    defaults to the built-in schema.
    """
    if not isinstance(record, Mapping):
        raise RecordShapeError("Item must be an object")
    if not record:
        raise RecordShapeError("Item must have at least one field")

    check_columns(table, [str(key) for key in record], columns)
    names, values = encode_record(record)
    placeholders = ", ".join("?" for _ in names)
    sql = f"INSERT OR REPLACE INTO {table} ({', '.join(names)}) VALUES ({placeholders})"
    return Statement(sql, tuple(values))


def build_delete(table: str, record_id: Any, columns: ColumnMap | None = None) -> Statement:
    return Statement(
        f"DELETE FROM {check_table(table, columns)} WHERE id = ?",
        (encode_value(record_id),),
    )


def build_clear() -> list[Statement]:
    """One unconditional delete per known table, always in the same order."""

    return [Statement(f"DELETE FROM {table}") for table in TABLES]
