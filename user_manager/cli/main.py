"""
CLI entry point for user-manager.

Usage
─────
  # Show everyone (or a search)
  python -m user_manager list
  python -m user_manager list --search "new york"

  # Create / edit / remove
  python -m user_manager add --name "Ann Lee" --email ann@example.com \\
      --phone "+1 555 0100" --city Oslo
  python -m user_manager update --id 4 --city Bergen
  python -m user_manager delete --id 4

  # Move data in and out
  python -m user_manager export --output ./backup/
  python -m user_manager import --file ./backup/users-data.json
  python -m user_manager clear --yes

  # Desktop window
  python -m user_manager gui

Subcommands are implemented as standalone functions (cmd_list, cmd_add, …)
so they can be unit-tested without invoking argparse.
"""

import argparse
import json as _json
import logging
import sys
from pathlib import Path
from typing import Optional

from user_manager.config import AppConfig
from user_manager.exceptions import StoreError, TransferError
from user_manager.gui.viewmodels import format_count
from user_manager.store.db import UserStore
from user_manager.store.models import USER_FIELDS, UserRecord
from user_manager.store.storage import JsonFileStorage
from user_manager.store.transfer import export_to_file, import_from_file

__all__ = [
    "build_parser",
    "cmd_list",
    "cmd_show",
    "cmd_add",
    "cmd_update",
    "cmd_delete",
    "cmd_export",
    "cmd_import",
    "cmd_clear",
    "cmd_gui",
    "main",
]

logger = logging.getLogger(__name__)


# ── Argument parser ────────────────────────────────────────────────────────────


def _add_field_args(parser: argparse.ArgumentParser, required: bool) -> None:
    for name in USER_FIELDS:
        parser.add_argument(
            f"--{name}",
            required=required,
            default=None,
            metavar=name.upper(),
            help=f"User {name}",
        )


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Subcommands: list | show | add | update | delete | export | import | clear | gui
    """
    parser = argparse.ArgumentParser(
        prog="user-manager",
        description="Manage a local list of user records",
    )
    parser.add_argument(
        "--data",
        default=None,
        metavar="PATH",
        help="Storage file (default: $USER_MANAGER_HOME/storage.json "
             "or ~/.user-manager/storage.json)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable verbose debug logging",
    )

    sub = parser.add_subparsers(dest="subcommand")

    # ── list ──────────────────────────────────────────────────────────────
    lst = sub.add_parser("list", help="List users")
    lst.add_argument(
        "--search",
        default=None,
        metavar="TERM",
        help="Only users whose name, email, city or phone contains TERM",
    )

    # ── show ──────────────────────────────────────────────────────────────
    show = sub.add_parser("show", help="Show one user as JSON")
    show.add_argument("--id", required=True, type=int, metavar="ID", help="User id")

    # ── add ───────────────────────────────────────────────────────────────
    add = sub.add_parser("add", help="Create a user")
    _add_field_args(add, required=True)

    # ── update ────────────────────────────────────────────────────────────
    upd = sub.add_parser("update", help="Change fields of an existing user")
    upd.add_argument("--id", required=True, type=int, metavar="ID", help="User id")
    _add_field_args(upd, required=False)

    # ── delete ────────────────────────────────────────────────────────────
    dele = sub.add_parser("delete", help="Delete a user")
    dele.add_argument("--id", required=True, type=int, metavar="ID", help="User id")

    # ── export ────────────────────────────────────────────────────────────
    exp = sub.add_parser("export", help="Write all users to a JSON file")
    exp.add_argument(
        "--output",
        default=None,
        metavar="PATH",
        help="File or directory (default: ./users-data.json)",
    )

    # ── import ────────────────────────────────────────────────────────────
    imp = sub.add_parser("import", help="Replace all users with a JSON file")
    imp.add_argument(
        "--file",
        required=True,
        metavar="PATH",
        help="JSON file holding an array of user objects",
    )

    # ── clear ─────────────────────────────────────────────────────────────
    clr = sub.add_parser("clear", help="Delete every user")
    clr.add_argument(
        "--yes",
        action="store_true",
        default=False,
        help="Confirm; required because this cannot be undone",
    )

    # ── gui ───────────────────────────────────────────────────────────────
    sub.add_parser("gui", help="Open the desktop window")

    return parser


# ── Helpers ───────────────────────────────────────────────────────────────────


def _print_record(rec: UserRecord) -> None:
    tag = f"[{rec.id:>4}]" if isinstance(rec.id, int) else "[   -]"
    print(f"{tag}  {rec.name:<24} {rec.email:<30} {rec.phone:<20} {rec.city}")


def open_store(config: AppConfig) -> UserStore:
    """Build the file-backed store described by *config* and load it."""
    store = UserStore(JsonFileStorage(config.data_path), key=config.storage_key)
    store.initialize()
    return store


# ── Command implementations ───────────────────────────────────────────────────


def cmd_list(store: UserStore, search: Optional[str]) -> list[UserRecord]:
    """Print users (optionally filtered) followed by the count line."""
    records = store.filter(search) if search else store.records
    for rec in records:
        _print_record(rec)
    print(format_count(len(records)))
    return records


def cmd_show(store: UserStore, record_id: int) -> UserRecord:
    """Print one user as JSON. Raises ValueError if the id is unknown."""
    record = store.find(record_id)
    if record is None:
        raise ValueError(f"No user with id={record_id}")
    print(_json.dumps(record.to_dict(), indent=2))
    return record


def cmd_add(store: UserStore, name: str, email: str, phone: str, city: str) -> UserRecord:
    """Create a user and print its new id."""
    record = store.create({"name": name, "email": email, "phone": phone, "city": city})
    print(f"Created user {record.id}: {record.name}")
    return record


def cmd_update(store: UserStore, record_id: int, fields: dict) -> UserRecord:
    """
    Apply the non-None entries of *fields* to user *record_id*.

    Raises:
        ValueError: no user has that id.
    """
    patch = {k: v for k, v in fields.items() if v is not None}
    if not store.update(record_id, patch):
        raise ValueError(f"No user with id={record_id}")
    record = store.find(record_id)
    print(f"Updated user {record_id}: {record.name}")
    return record


def cmd_delete(store: UserStore, record_id: int) -> None:
    """Delete user *record_id*. Raises ValueError if the id is unknown."""
    if not store.delete(record_id):
        raise ValueError(f"No user with id={record_id}")
    print(f"Deleted user {record_id}")


def cmd_export(store: UserStore, output: Optional[str]) -> Path:
    """Export all users; default target is ./users-data.json."""
    out_path = export_to_file(store, output if output else Path.cwd())
    print(f"Exported {len(store)} user(s) → {out_path}")
    return out_path


def cmd_import(store: UserStore, path: str) -> int:
    """Replace all users with the file at *path*; returns the count."""
    count = import_from_file(store, path)
    print(f"Data imported successfully: {format_count(count)}")
    return count


def cmd_clear(store: UserStore, yes: bool) -> bool:
    """Remove all users when *yes* is set. Returns True if cleared."""
    if not yes:
        print("Refusing to clear all data without --yes (this cannot be undone).",
              file=sys.stderr)
        return False
    store.clear()
    print("All data cleared!")
    return True


def cmd_gui(store: UserStore, config: AppConfig) -> int:
    """Run the PyQt6 window until it is closed; returns the Qt exit code."""
    from PyQt6.QtWidgets import QApplication
    from user_manager.gui.main_window import MainWindow

    app = QApplication.instance() or QApplication(sys.argv)
    window = MainWindow(store, config)
    window.show()
    return app.exec()


# ── Entry point ───────────────────────────────────────────────────────────────


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point. Returns exit code."""
    parser = build_parser()
    ns = parser.parse_args(argv)

    level = logging.DEBUG if ns.debug else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")

    if ns.subcommand is None:
        parser.print_help()
        return 0

    config = AppConfig(data_path=ns.data) if ns.data else AppConfig()
    try:
        store = open_store(config)
    except StoreError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        if ns.subcommand == "list":
            cmd_list(store=store, search=ns.search)
        elif ns.subcommand == "show":
            cmd_show(store=store, record_id=ns.id)
        elif ns.subcommand == "add":
            cmd_add(store=store, name=ns.name, email=ns.email, phone=ns.phone, city=ns.city)
        elif ns.subcommand == "update":
            cmd_update(
                store=store,
                record_id=ns.id,
                fields={name: getattr(ns, name) for name in USER_FIELDS},
            )
        elif ns.subcommand == "delete":
            cmd_delete(store=store, record_id=ns.id)
        elif ns.subcommand == "export":
            cmd_export(store=store, output=ns.output)
        elif ns.subcommand == "import":
            cmd_import(store=store, path=ns.file)
        elif ns.subcommand == "clear":
            return 0 if cmd_clear(store=store, yes=ns.yes) else 1
        elif ns.subcommand == "gui":
            return cmd_gui(store=store, config=config)
        else:
            parser.print_help()
    except (ValueError, TransferError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except (StoreError, OSError) as exc:
        logger.debug("%s failed", ns.subcommand, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
