"""
Command surface exposed to the front end.

Every command returns a :class:`CommandResult` instead of raising, so a caller
on the other side of a process or UI boundary always receives either a value
or a human-readable error message.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from devtrack.app.runtime import Runtime
from devtrack.core.config import relocate_db, resolve_db_path
from devtrack.storage.errors import DevTrackError
from devtrack.storage.export import export_table
from devtrack.storage.record_store import Record

__all__ = ["CommandResult", "Commands"]

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CommandResult(Generic[T]):
    ok: bool
    value: T | None = None
    error: str | None = None

    @classmethod
    def success(cls, value: T | None = None) -> CommandResult[T]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, message: str) -> CommandResult[T]:
        return cls(ok=False, error=message)

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {"ok": True, "value": self.value}
        return {"ok": False, "error": self.error}


class Commands:
    """Boundary operations bound to one :class:`Runtime`."""

    def __init__(self, runtime: Runtime) -> None:
        self.runtime = runtime

    # -- records --------------------------------------------------------
    def db_get_all(self, table: str) -> CommandResult[list[Record]]:
        return self._call(f"read {table}", lambda: self.runtime.store.get_all(table))

    def db_put(self, table: str, item: Any) -> CommandResult[None]:
        return self._call(f"write {table}", lambda: self.runtime.store.put(table, item))

    def db_bulk_put(self, table: str, items: Iterable[Any]) -> CommandResult[None]:
        return self._call(f"bulk write {table}", lambda: self.runtime.store.bulk_put(table, items))

    def db_delete(self, table: str, id: str) -> CommandResult[None]:
        return self._call(f"delete from {table}", lambda: self.runtime.store.delete(table, id))

    def db_clear_all(self) -> CommandResult[None]:
        return self._call("clear database", self.runtime.store.clear_all)

    # -- database location ----------------------------------------------
    def get_db_path(self) -> CommandResult[str]:
        return CommandResult.success(str(resolve_db_path(self.runtime.config_dir)))

    def set_db_path(self, new_path: str) -> CommandResult[None]:
        def _relocate() -> None:
            # no write may land in the file while it is being copied
            with self.runtime.store.exclusive():
                relocate_db(new_path, self.runtime.config_dir)

        return self._call("change database path", _relocate)

    def is_new_database(self) -> CommandResult[bool]:
        return CommandResult.success(self.runtime.is_first_run)

    # -- export ---------------------------------------------------------
    def export_table(
        self,
        table: str,
        dest: str | os.PathLike[str],
        headers: Mapping[str, str] | None = None,
        sheet_name: str = "Data",
    ) -> CommandResult[str]:
        def _export() -> str:
            path = export_table(
                self.runtime.store, table, dest, headers=headers, sheet_name=sheet_name
            )
            return str(path)

        return self._call(f"export {table}", _export)

    # -------------------------------------------------------------------
    def _call(self, action: str, func: Callable[[], T]) -> CommandResult[T]:
        try:
            return CommandResult.success(func())
        except DevTrackError as exc:
            log.error("Failed to %s: %s", action, exc)
            return CommandResult.failure(str(exc))
