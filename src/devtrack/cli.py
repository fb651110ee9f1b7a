from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from devtrack.app.commands import CommandResult, Commands
from devtrack.app.runtime import start_runtime
from devtrack.core.logging_config import setup_production_logging
from devtrack.storage.errors import DevTrackError

log = logging.getLogger(__name__)


def _emit(result: CommandResult[Any]) -> int:
    if result.ok:
        if result.value is not None:
            print(json.dumps(result.value, indent=2, ensure_ascii=False, default=_json_default))
        return 0
    print(f"error: {result.error}", file=sys.stderr)
    return 1


def _json_default(value: Any) -> Any:
    if isinstance(value, bytes):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def cmd_path(commands: Commands, args: argparse.Namespace) -> int:
    return _emit(commands.get_db_path())


def cmd_set_path(commands: Commands, args: argparse.Namespace) -> int:
    code = _emit(commands.set_db_path(args.new_path))
    if code == 0:
        print("Database path changed; restart to use it.", file=sys.stderr)
    return code


def cmd_first_run(commands: Commands, args: argparse.Namespace) -> int:
    return _emit(commands.is_new_database())


def cmd_list(commands: Commands, args: argparse.Namespace) -> int:
    return _emit(commands.db_get_all(args.table))


def cmd_put(commands: Commands, args: argparse.Namespace) -> int:
    try:
        item = json.loads(args.record)
    except ValueError as exc:
        print(f"error: invalid JSON record: {exc}", file=sys.stderr)
        return 1
    return _emit(commands.db_put(args.table, item))


def cmd_bulk_put(commands: Commands, args: argparse.Namespace) -> int:
    try:
        items = json.loads(Path(args.file).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        print(f"error: cannot read {args.file}: {exc}", file=sys.stderr)
        return 1
    if not isinstance(items, list):
        print("error: bulk input must be a JSON array of records", file=sys.stderr)
        return 1
    return _emit(commands.db_bulk_put(args.table, items))


def cmd_delete(commands: Commands, args: argparse.Namespace) -> int:
    return _emit(commands.db_delete(args.table, args.id))


def cmd_clear(commands: Commands, args: argparse.Namespace) -> int:
    if not args.yes:
        print("error: refusing to clear all tables without --yes", file=sys.stderr)
        return 1
    return _emit(commands.db_clear_all())


def cmd_export(commands: Commands, args: argparse.Namespace) -> int:
    return _emit(commands.export_table(args.table, args.dest, sheet_name=args.sheet))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("devtrack")
    parser.add_argument("--config-dir", default=None, help="directory holding config.json")
    parser.add_argument("--db", default=None, help="database file to open instead of the configured one")
    parser.add_argument("--seed-demo", action="store_true", help="write demo records into a new database")
    parser.add_argument("--verbose", "-v", action="store_true")
    parser.add_argument("--no-log-files", action="store_true", help="log to stderr only")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("path")
    sp.set_defaults(func=cmd_path)

    sp = sub.add_parser("set-path")
    sp.add_argument("new_path")
    sp.set_defaults(func=cmd_set_path)

    sp = sub.add_parser("first-run")
    sp.set_defaults(func=cmd_first_run)

    sp = sub.add_parser("list")
    sp.add_argument("table")
    sp.set_defaults(func=cmd_list)

    sp = sub.add_parser("put")
    sp.add_argument("table")
    sp.add_argument("record", help="JSON object")
    sp.set_defaults(func=cmd_put)

    sp = sub.add_parser("bulk-put")
    sp.add_argument("table")
    sp.add_argument("file", help="JSON file holding an array of objects")
    sp.set_defaults(func=cmd_bulk_put)

    sp = sub.add_parser("delete")
    sp.add_argument("table")
    sp.add_argument("id")
    sp.set_defaults(func=cmd_delete)

    sp = sub.add_parser("clear")
    sp.add_argument("--yes", action="store_true")
    sp.set_defaults(func=cmd_clear)

    sp = sub.add_parser("export")
    sp.add_argument("table")
    sp.add_argument("dest")
    sp.add_argument("--sheet", default="Data")
    sp.set_defaults(func=cmd_export)

    return parser


def _setup_logging(args: argparse.Namespace) -> None:
    console_level = logging.DEBUG if args.verbose else logging.WARNING
    if args.no_log_files:
        logging.basicConfig(level=console_level)
        return
    try:
        setup_production_logging(console_level=console_level)
    except Exception as e:
        # Fallback to basic logging if production logging fails
        logging.basicConfig(level=console_level)
        log.error(f"Failed to setup production logging: {e}", exc_info=True)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args)

    try:
        runtime = start_runtime(config_dir=args.config_dir, db_path=args.db, seed_demo=args.seed_demo)
    except DevTrackError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        return args.func(Commands(runtime), args)
    finally:
        runtime.close()


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
