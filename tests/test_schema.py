import sqlite3
from pathlib import Path

from devtrack.storage.record_store import open_store
from devtrack.storage.sqlite.schema import TABLE_COLUMNS, TABLES, bootstrap, read_table_columns


def _table_names(conn: sqlite3.Connection) -> set[str]:
    rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
    return {row[0] for row in rows}


def test_bootstrap_creates_file_and_tables(tmp_path: Path):
    db_path = tmp_path / "nested" / "dir" / "devtrack_data.db"
    boot = bootstrap(db_path)
    try:
        assert boot.is_new is True
        assert db_path.exists()
        assert set(TABLES) <= _table_names(boot.conn)
    finally:
        boot.conn.close()


def test_bootstrap_reports_existing_file(tmp_path: Path):
    db_path = tmp_path / "devtrack_data.db"
    first = bootstrap(db_path)
    first.conn.execute("INSERT INTO clients (id, name) VALUES ('c1', 'Kept')")
    first.conn.close()

    second = bootstrap(db_path)
    try:
        assert second.is_new is False
        rows = second.conn.execute("SELECT id, name FROM clients").fetchall()
        assert rows == [("c1", "Kept")]
    finally:
        second.conn.close()


def test_allow_list_matches_created_columns(tmp_path: Path):
    boot = bootstrap(tmp_path / "devtrack_data.db")
    try:
        for table, columns in TABLE_COLUMNS.items():
            info = boot.conn.execute(f"PRAGMA table_info({table})").fetchall()
            assert tuple(row[1] for row in info) == columns
            pk = [row[1] for row in info if row[5]]
            assert pk == ["id"]
    finally:
        boot.conn.close()


def test_single_file_journal_mode(tmp_path: Path):
    boot = bootstrap(tmp_path / "devtrack_data.db")
    try:
        mode = boot.conn.execute("PRAGMA journal_mode").fetchone()[0]
        assert str(mode).lower() == "delete"
    finally:
        boot.conn.close()


def test_customers_inactive_defaults_to_zero(tmp_path: Path):
    boot = bootstrap(tmp_path / "devtrack_data.db")
    try:
        boot.conn.execute("INSERT INTO customers (id, name) VALUES ('cu', 'n')")
        value = boot.conn.execute("SELECT isInactive FROM customers").fetchone()[0]
        assert value == 0
    finally:
        boot.conn.close()


def test_allow_list_is_read_from_the_ddl():
    assert TABLES == ("clients", "customers", "tickets", "worklogs")
    assert TABLE_COLUMNS["clients"] == ("id", "name", "code", "address")
    assert TABLE_COLUMNS["tickets"][-1] == "startDate"


def test_bootstrap_reads_columns_from_the_file(tmp_path: Path):
    db_path = tmp_path / "devtrack_data.db"
    conn = sqlite3.connect(db_path)
    conn.execute("CREATE TABLE clients (id TEXT PRIMARY KEY, name TEXT, code TEXT, address TEXT, region TEXT)")
    conn.execute("CREATE TABLE notes (id TEXT PRIMARY KEY, body TEXT)")
    conn.commit()
    conn.close()

    boot = bootstrap(db_path)
    try:
        assert boot.is_new is False
        assert boot.columns["clients"] == ("id", "name", "code", "address", "region")
        assert boot.columns["worklogs"] == TABLE_COLUMNS["worklogs"]
        # tables outside the schema stay unreachable
        assert "notes" not in boot.columns
        assert set(read_table_columns(boot.conn)) == set(TABLES) | {"notes"}
    finally:
        boot.conn.close()

    with open_store(db_path) as store:
        store.put("clients", {"id": "CLI-1", "region": "West"})
        assert store.get_all("clients")[0]["region"] == "West"
