"""
Spreadsheet export of whole tables.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import pandas as pd

from devtrack.storage.errors import StoreError
from devtrack.storage.record_store import RecordStore
from devtrack.storage.sqlite.statements import check_columns, check_table

log = logging.getLogger(__name__)

__all__ = ["table_frame", "export_table"]

DEFAULT_SHEET_NAME = "Data"


def table_frame(
    store: RecordStore,
    table: str,
    headers: Mapping[str, str] | None = None,
) -> pd.DataFrame:
    """
    Return ``table`` as a DataFrame in the column order of the open file.

    With ``headers`` (column -> label), only the mapped columns are kept, in
    mapping order, and renamed to their labels.
    """
    check_table(table, store.columns)
    records = store.get_all(table)
    df = pd.DataFrame.from_records(records, columns=list(store.columns[table]))
    if headers:
        columns = check_columns(table, headers.keys(), store.columns)
        df = df[columns].rename(columns=dict(headers))
    return df


def export_table(
    store: RecordStore,
    table: str,
    dest: str | os.PathLike[str],
    *,
    headers: Mapping[str, str] | None = None,
    sheet_name: str = DEFAULT_SHEET_NAME,
) -> Path:
    """Write ``table`` to an ``.xlsx`` workbook at ``dest`` and return the written path."""

    out_path = Path(dest)
    if not out_path.suffix:
        out_path = out_path.with_suffix(".xlsx")

    df = table_frame(store, table, headers)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        df.to_excel(out_path, sheet_name=sheet_name, index=False, engine="openpyxl")
    except (OSError, ValueError) as exc:
        raise StoreError(f"Cannot export {table} to {out_path}: {exc}") from exc
    log.info("Exported %d %s rows to %s", len(df), table, out_path)
    return out_path
