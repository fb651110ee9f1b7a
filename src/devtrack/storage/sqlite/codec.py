"""
Value coercion between dynamic record fields and SQLite storage classes.

Records arrive as plain mappings whose values may be any JSON-like scalar.
SQLite only knows NULL, INTEGER, REAL, TEXT and BLOB, so every field is
narrowed on the way in and widened on the way out:

* ``bool`` is stored as ``0``/``1`` and reads back as ``int``.
* ``int`` outside the signed 64-bit range is stored as REAL; one too large
  for a float is rejected.
* Nested containers are stored as compact JSON text (lossy).
* Text that cannot be encoded as UTF-8 (lone surrogates) is rejected.
* TEXT that is not valid UTF-8 reads back as ``""`` instead of failing the row.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from devtrack.storage.errors import RecordShapeError

log = logging.getLogger(__name__)

__all__ = [
    "SQLValue",
    "INT64_MIN",
    "INT64_MAX",
    "encode_value",
    "encode_record",
    "decode_value",
    "decode_text",
    "decode_row",
]

SQLValue = str | int | float | bytes | None

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def encode_value(value: Any) -> SQLValue:
    """Return the SQLite parameter for a single record field."""

    if value is None:
        return None
    if isinstance(value, str):
        return _checked_text(value)
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, int):
        if INT64_MIN <= value <= INT64_MAX:
            return value
        try:
            return float(value)
        except OverflowError as exc:
            raise RecordShapeError(f"number out of range ({value.bit_length()} bits)") from exc
    if isinstance(value, float):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    return _checked_text(_serialize_fallback(value))


def _checked_text(value: str) -> str:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise RecordShapeError(f"text is not valid Unicode at position {exc.start}") from exc
    return value


def _serialize_fallback(value: Any) -> str:
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        log.debug("Storing %s field as str()", type(value).__name__)
    try:
        return str(value)
    except ValueError as exc:
        raise RecordShapeError(f"cannot store {type(value).__name__} value: {exc}") from exc


def encode_record(record: Mapping[str, Any]) -> tuple[list[str], list[SQLValue]]:
    """Split ``record`` into its column names and encoded values, in key order."""

    columns = [str(key) for key in record.keys()]
    values = [encode_value(value) for value in record.values()]
    return columns, values


def decode_text(raw: bytes) -> str:
    """``text_factory`` for connections: invalid UTF-8 degrades to an empty string."""

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        log.warning("Column value is not valid UTF-8; returning empty string")
        return ""


def decode_value(value: Any) -> SQLValue:
    """Map a value fetched from SQLite onto a record field value."""

    if value is None:
        return None
    if isinstance(value, bool):
        # sqlite3 never yields bool; treat a stray one as its integer form
        return int(value)
    if isinstance(value, (int, float, str, bytes)):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"Unsupported SQLite value kind: {type(value).__name__}")


def decode_row(columns: list[str], row: tuple[Any, ...]) -> dict[str, SQLValue]:
    """Return ``row`` as a record keyed by ``columns``."""

    return {name: decode_value(value) for name, value in zip(columns, row)}
