"""
Connection and transaction helpers for the DevTrack database.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager

from devtrack.storage.sqlite.codec import decode_text

__all__ = ["open_db", "transaction"]


def open_db(path: str, *, timeout: float = 30.0) -> sqlite3.Connection:
    """
    Open ``path`` in autocommit mode, shareable across threads.

    ``isolation_level=None`` leaves transaction control to :func:`transaction`;
    single statements commit on their own. The caller is responsible for
    serialising access to the returned connection.
    """
    conn = sqlite3.connect(
        path,
        timeout=timeout,
        isolation_level=None,
        check_same_thread=False,
    )
    conn.text_factory = decode_text
    return conn


@contextmanager
def transaction(
    conn: sqlite3.Connection,
    *,
    begin: str = "BEGIN IMMEDIATE",
) -> Iterator[sqlite3.Connection]:
    """
    Transaction wrapper that commits on success and rolls back on error.
    Uses BEGIN IMMEDIATE so the write lock is taken up front.
    """

    conn.execute(begin)
    try:
        yield conn
        conn.execute("COMMIT")
    except BaseException:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise
