"""
Import / export of the user list as a JSON file.

Export writes the current list pretty-printed with a 2-space indent.
Import replaces the whole list, but only after the payload has been fully
parsed and checked, so a bad file never touches the store:

    not valid JSON           → ImportParseError  ("Error importing data")
    valid JSON, not an array → ImportFormatError ("Invalid data format")

Any array is accepted; elements that are not objects become blank records.
"""

import json
import logging
from pathlib import Path
from typing import Iterable

from user_manager.config import EXPORT_FILENAME
from user_manager.exceptions import ImportFormatError, ImportParseError
from user_manager.store.db import UserStore
from user_manager.store.models import UserRecord

__all__ = [
    "export_json",
    "export_to_file",
    "parse_import",
    "import_from_file",
]

logger = logging.getLogger(__name__)


def export_json(records: Iterable[UserRecord]) -> str:
    """Return *records* as pretty-printed JSON (2-space indent)."""
    return json.dumps([r.to_dict() for r in records], indent=2)


def export_to_file(store: UserStore, path) -> Path:
    """
    Write the store's current list to *path*.

    If *path* is an existing directory the file is named users-data.json
    inside it.

    Returns:
        The path actually written.
    """
    out_path = Path(path).expanduser()
    if out_path.is_dir():
        out_path = out_path / EXPORT_FILENAME
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(export_json(store.records), encoding="utf-8")
    logger.info("Exported %d user(s) to %s", len(store), out_path)
    return out_path


def parse_import(text: str) -> list[UserRecord]:
    """
    Parse an import payload into records without touching any store.

    Raises:
        ImportParseError:  *text* is not valid JSON.
        ImportFormatError: the JSON value is not an array.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ImportParseError(f"Error importing data: {exc}") from exc
    if not isinstance(data, list):
        raise ImportFormatError(
            f"Invalid data format: expected a JSON array, got {type(data).__name__}"
        )
    return [
        UserRecord.from_dict(item) if isinstance(item, dict) else UserRecord(id=None)
        for item in data
    ]


def import_from_file(store: UserStore, path) -> int:
    """
    Replace the store's list with the contents of the JSON file at *path*.

    Returns:
        Number of users imported.

    Raises:
        ImportParseError:  file unreadable or not valid JSON.
        ImportFormatError: file holds JSON that is not an array of objects.
    """
    in_path = Path(path).expanduser()
    try:
        text = in_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ImportParseError(f"Error importing data: cannot read {in_path}: {exc}") from exc
    records = parse_import(text)
    store.replace_all(records)
    logger.info("Imported %d user(s) from %s", len(records), in_path)
    return len(records)
