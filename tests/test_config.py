import json
import sys
from pathlib import Path

import pytest

from devtrack.core import config as _config
from devtrack.core import paths as _paths
from devtrack.core.config import (
    AppConfig,
    ConfigError,
    config_file_path,
    load_config,
    relocate_db,
    resolve_db_path,
    save_config,
)
from devtrack.storage.record_store import open_store


def _make_db(path: Path) -> Path:
    with open_store(path) as store:
        store.put("clients", {"id": "CLI-1", "name": "Original"})
    return path


def test_missing_config_loads_defaults(tmp_path):
    assert load_config(tmp_path) == AppConfig()
    assert load_config(tmp_path).db_path is None


@pytest.mark.parametrize("payload", ["{not json", "[1, 2]", '{"db_path": 5}'])
def test_unreadable_config_degrades_to_defaults(tmp_path, payload):
    config_file_path(tmp_path).write_text(payload, encoding="utf-8")
    assert load_config(tmp_path).db_path is None


def test_unknown_keys_are_ignored(tmp_path):
    config_file_path(tmp_path).write_text(
        json.dumps({"db_path": "/data/x.db", "theme": "dark"}), encoding="utf-8"
    )
    assert load_config(tmp_path).db_path == "/data/x.db"


def test_save_then_load(tmp_path):
    config_dir = tmp_path / "cfg"
    written = save_config(AppConfig(db_path="/srv/devtrack.db"), config_dir)
    assert written == config_dir / "config.json"
    assert load_config(config_dir).db_path == "/srv/devtrack.db"


def test_saved_file_keeps_null_field(tmp_path):
    save_config(AppConfig(), tmp_path)
    assert json.loads(config_file_path(tmp_path).read_text(encoding="utf-8")) == {"db_path": None}


def test_save_failure_raises_config_error(tmp_path):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(ConfigError):
        save_config(AppConfig(), blocker / "cfg")


def test_resolve_prefers_config_over_default(tmp_path, monkeypatch):
    default = tmp_path / "default" / "devtrack_data.db"
    monkeypatch.setattr(_config, "default_db_path", lambda: default)

    assert resolve_db_path(tmp_path) == default
    save_config(AppConfig(db_path=str(tmp_path / "custom.db")), tmp_path)
    assert resolve_db_path(tmp_path) == tmp_path / "custom.db"


def test_relocate_into_directory_copies_file(tmp_path):
    config_dir = tmp_path / "cfg"
    old = _make_db(tmp_path / "a" / "devtrack_data.db")
    save_config(AppConfig(db_path=str(old)), config_dir)
    original_bytes = old.read_bytes()
    target_dir = tmp_path / "b"
    target_dir.mkdir()

    new_path = relocate_db(str(target_dir), config_dir)

    assert new_path == target_dir / "devtrack_data.db"
    assert new_path.read_bytes() == original_bytes
    assert resolve_db_path(config_dir) == new_path
    # copy, not move
    assert old.exists()
    assert old.read_bytes() == original_bytes
    with open_store(new_path) as store:
        assert store.get_all("clients")[0]["name"] == "Original"


def test_relocate_to_file_path_creates_parents(tmp_path):
    config_dir = tmp_path / "cfg"
    old = _make_db(tmp_path / "devtrack_data.db")
    save_config(AppConfig(db_path=str(old)), config_dir)
    target = tmp_path / "deep" / "er" / "renamed.db"

    assert relocate_db(target, config_dir) == target
    assert target.exists()
    assert old.exists()


def test_relocate_without_existing_db_only_records_path(tmp_path, monkeypatch):
    monkeypatch.setattr(_config, "default_db_path", lambda: tmp_path / "missing.db")
    target = tmp_path / "elsewhere" / "data.db"

    assert relocate_db(str(target), tmp_path) == target
    assert not target.exists()
    assert load_config(tmp_path).db_path == str(target)


def test_relocate_copy_failure_raises_config_error(tmp_path):
    config_dir = tmp_path / "cfg"
    old = _make_db(tmp_path / "devtrack_data.db")
    save_config(AppConfig(db_path=str(old)), config_dir)
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(ConfigError):
        relocate_db(blocker / "sub" / "data.db", config_dir)
    assert load_config(config_dir).db_path == str(old)


def test_config_dir_env_override(tmp_path, monkeypatch):
    monkeypatch.setenv(_paths.CONFIG_DIR_ENV, str(tmp_path / "override"))
    assert _paths.get_config_directory() == tmp_path / "override"
    assert config_file_path() == tmp_path / "override" / "config.json"


def test_default_db_path_beside_frozen_executable(tmp_path, monkeypatch):
    exe = tmp_path / "bin" / "DevTrack.exe"
    monkeypatch.setattr(sys, "frozen", True, raising=False)
    monkeypatch.setattr(sys, "executable", str(exe))
    assert _paths.default_db_path() == exe.resolve().parent / "devtrack_data.db"


@pytest.mark.skipif(sys.platform in ("win32", "darwin"), reason="XDG layout")
def test_default_db_path_in_data_dir(tmp_path, monkeypatch):
    monkeypatch.delattr(sys, "frozen", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "share"))
    assert _paths.default_db_path() == tmp_path / "share" / "DevTrack" / "devtrack_data.db"
