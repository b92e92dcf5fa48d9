"""
UserFormPage — the add/edit panel of the user manager window.

Layout
──────
  ┌───────────────────────────────┐
  │ Add New User                  │
  │ Name:  [_____________________]│
  │ Email: [_____________________]│
  │ Phone: [_____________________]│
  │ City:  [_____________________]│
  │        [+ Add User] [Cancel]  │
  └───────────────────────────────┘

The title and submit label switch to "Edit User" / "Update User" while a
user is being edited; Cancel is only visible in that mode.
"""

import logging

from PyQt6.QtWidgets import (
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from user_manager.gui.viewmodels import UserFormViewModel
from user_manager.store.models import USER_FIELDS, UserRecord

__all__ = ["UserFormPage"]

logger = logging.getLogger(__name__)

_PLACEHOLDERS: dict[str, str] = {
    "name":  "Full name",
    "email": "name@example.com",
    "phone": "+1 (555) 000-0000",
    "city":  "City",
}


class UserFormPage(QWidget):
    """Form for creating a user or editing the selected one."""

    def __init__(self, parent: QWidget = None) -> None:
        super().__init__(parent)
        self._vm = UserFormViewModel()
        self._edits: dict[str, QLineEdit] = {}
        self._build_ui()
        self._sync_mode()

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)

        self._title_label = QLabel()
        layout.addWidget(self._title_label)

        form = QFormLayout()
        for name in USER_FIELDS:
            edit = QLineEdit()
            edit.setPlaceholderText(_PLACEHOLDERS[name])
            edit.textChanged.connect(lambda t, n=name: self._vm.set_value(n, t))
            self._edits[name] = edit
            form.addRow(f"{name.title()}:", edit)
        layout.addLayout(form)

        btn_row = QHBoxLayout()
        btn_row.addStretch()
        self._submit_btn = QPushButton()
        self._submit_btn.setDefault(True)
        self._cancel_btn = QPushButton("Cancel")
        self._cancel_btn.clicked.connect(self.cancel_edit)
        btn_row.addWidget(self._submit_btn)
        btn_row.addWidget(self._cancel_btn)
        layout.addLayout(btn_row)

        layout.addStretch()

    def _sync_mode(self) -> None:
        self._title_label.setText(f"<b>{self._vm.title}</b>")
        prefix = "✎" if self._vm.is_editing else "+"
        self._submit_btn.setText(f"{prefix} {self._vm.submit_label}")
        self._cancel_btn.setVisible(self._vm.is_editing)

    def _sync_edits(self) -> None:
        for name, edit in self._edits.items():
            # setText fires textChanged, which writes the same value back
            edit.setText(self._vm.values[name])

    # ── Public API ─────────────────────────────────────────────────────────

    @property
    def view_model(self) -> UserFormViewModel:
        return self._vm

    def start_edit(self, record: UserRecord) -> None:
        """Load *record* into the form and switch to edit mode."""
        self._vm.start_edit(record)
        self._sync_edits()
        self._sync_mode()
        self._edits["name"].setFocus()

    def cancel_edit(self) -> None:
        """Leave edit mode and clear every field."""
        self._vm.cancel_edit()
        self._sync_edits()
        self._sync_mode()

    def reset(self) -> None:
        """Clear the fields but stay in the current mode."""
        self._vm.reset()
        self._sync_edits()

    def focus_name(self) -> None:
        self._edits["name"].setFocus()
