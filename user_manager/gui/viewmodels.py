"""
GUI ViewModels — pure-Python state containers for the user manager window.

No Qt imports here; every class is testable without a display.
Qt widgets read these objects and update themselves after each change.

Public API
──────────
format_count        — "N user(s) found" label text
UserListViewModel   — table contents + search + pending delete
UserFormViewModel   — add/edit form state
MessageKind         — enum for banner styling
MessageViewModel    — the single transient message banner
"""

import logging
from enum import Enum
from typing import Optional

from user_manager.config import MESSAGE_TIMEOUT_MS
from user_manager.store.db import matches
from user_manager.store.models import USER_FIELDS, UserRecord

__all__ = [
    "format_count",
    "UserListViewModel",
    "UserFormViewModel",
    "MessageKind",
    "MessageViewModel",
]

logger = logging.getLogger(__name__)


def format_count(count: int) -> str:
    """'1 user found' for exactly one, 'N users found' otherwise (incl. 0)."""
    return f"{count} user{'' if count == 1 else 's'} found"


# ── UserListViewModel ──────────────────────────────────────────────────────────

class UserListViewModel:
    """
    Manages the user table.

    Attributes
    ──────────
    records           — full list, as last published by the store
    search_query      — text typed into the search box
    pending_delete_id — id awaiting delete confirmation, or None
    visible_records   — derived: records matching search_query
    count_label       — derived: "N user(s) found" for visible_records
    """

    def __init__(self) -> None:
        self.records:           list[UserRecord] = []
        self.search_query:      str               = ""
        self.pending_delete_id: Optional[int]     = None

    def load(self, records: list[UserRecord]) -> None:
        """Replace the record list (called whenever the store changes)."""
        self.records = list(records)
        ids = {r.id for r in self.records}
        if self.pending_delete_id is not None and self.pending_delete_id not in ids:
            self.pending_delete_id = None

    @property
    def visible_records(self) -> list[UserRecord]:
        """Records matching search_query, same rule as UserStore.filter()."""
        if not self.search_query:
            return list(self.records)
        return [r for r in self.records if matches(r, self.search_query)]

    @property
    def count_label(self) -> str:
        return format_count(len(self.visible_records))

    def request_delete(self, record_id: int) -> None:
        """Remember *record_id* until the user confirms or cancels."""
        self.pending_delete_id = record_id

    def cancel_delete(self) -> None:
        self.pending_delete_id = None


# ── UserFormViewModel ──────────────────────────────────────────────────────────

_FIELD_LABELS: dict[str, str] = {
    "name":  "Name",
    "email": "Email",
    "phone": "Phone",
    "city":  "City",
}


class UserFormViewModel:
    """
    Add/Edit form state.

    While editing_id is None a submit creates a user; otherwise it updates
    the user with that id.

    Attributes
    ──────────
    values      — {field: text} for name/email/phone/city
    editing_id  — id of the user being edited, or None
    """

    def __init__(self) -> None:
        self.values:     dict[str, str] = {name: "" for name in USER_FIELDS}
        self.editing_id: Optional[int]  = None

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    @property
    def title(self) -> str:
        return "Edit User" if self.is_editing else "Add New User"

    @property
    def submit_label(self) -> str:
        return "Update User" if self.is_editing else "Add User"

    def set_value(self, name: str, text: str) -> None:
        if name not in self.values:
            raise KeyError(f"Unknown form field: {name}")
        self.values[name] = text

    def start_edit(self, record: UserRecord) -> None:
        """Switch to edit mode and copy *record* into the form."""
        self.editing_id = record.id
        for name in USER_FIELDS:
            self.values[name] = getattr(record, name)

    def cancel_edit(self) -> None:
        """Leave edit mode and clear the form."""
        self.editing_id = None
        self.reset()

    def reset(self) -> None:
        for name in USER_FIELDS:
            self.values[name] = ""

    def missing_fields(self) -> list[str]:
        """Labels of fields that are empty or whitespace-only."""
        return [
            _FIELD_LABELS[name]
            for name in USER_FIELDS
            if not self.values[name].strip()
        ]

    def to_fields(self) -> dict[str, str]:
        """Field map to pass to UserStore.create()/update()."""
        return {name: self.values[name].strip() for name in USER_FIELDS}


# ── MessageViewModel ───────────────────────────────────────────────────────────

class MessageKind(str, Enum):
    SUCCESS = "success"
    ERROR   = "error"


class MessageViewModel:
    """
    The transient banner. Only one message is shown at a time; showing a new
    one replaces the old. The Qt layer hides it after timeout_ms.
    """

    def __init__(self, timeout_ms: int = MESSAGE_TIMEOUT_MS) -> None:
        self.text:       str                   = ""
        self.kind:       Optional[MessageKind] = None
        self.timeout_ms: int                   = timeout_ms

    @property
    def visible(self) -> bool:
        return bool(self.text)

    def show(self, text: str, kind: MessageKind = MessageKind.SUCCESS) -> None:
        self.text = text
        self.kind = MessageKind(kind)
        if self.kind is MessageKind.ERROR:
            logger.warning("%s", text)
        else:
            logger.info("%s", text)

    def dismiss(self) -> None:
        self.text = ""
        self.kind = None
