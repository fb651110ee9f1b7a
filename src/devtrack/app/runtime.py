"""Application startup: resolve the database location and open the store."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from devtrack.core.config import resolve_db_path
from devtrack.core.paths import get_config_directory
from devtrack.storage.record_store import RecordStore, open_store
from devtrack.storage.seed import seed_demo_data

__all__ = ["Runtime", "start_runtime"]

log = logging.getLogger(__name__)


@dataclass
class Runtime:
    """Process-lifetime state shared by every command."""

    config_dir: Path
    db_path: Path
    store: RecordStore = field(repr=False)
    is_first_run: bool = False

    def close(self) -> None:
        try:
            self.store.close()
        except Exception as e:
            log.error(f"Error closing record store: {e}", exc_info=True)


def start_runtime(
    *,
    config_dir: str | os.PathLike[str] | None = None,
    db_path: str | os.PathLike[str] | None = None,
    seed_demo: bool = False,
) -> Runtime:
    """
    Run the startup sequence.

    The database path comes from ``db_path`` when given, else from the config
    file, else the platform default. Whether the file existed beforehand is
    captured once here and never recomputed.
    """
    resolved_config_dir = Path(config_dir) if config_dir is not None else get_config_directory()
    resolved_db_path = Path(db_path) if db_path is not None else resolve_db_path(resolved_config_dir)

    store = open_store(resolved_db_path)
    runtime = Runtime(
        config_dir=resolved_config_dir,
        db_path=store.path,
        store=store,
        is_first_run=store.is_new,
    )
    log.info(f"Using database {runtime.db_path} (first run: {runtime.is_first_run})")

    if seed_demo:
        try:
            seed_demo_data(store)
        except Exception:
            runtime.close()
            raise
    return runtime
