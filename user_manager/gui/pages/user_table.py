"""
UserTablePage — searchable list of users.

Layout
──────
  ┌──────────────────────────────────────────────────────────┐
  │ Search: [_____________________________]   3 users found  │
  │ ┌──────────────────────────────────────────────────────┐ │
  │ │ ID │ Name     │ Email       │ Phone │ City │ Actions │ │
  │ │  1 │ John Doe │ john.doe@…  │ +1 …  │ NY   │ [E] [D] │ │
  │ └──────────────────────────────────────────────────────┘ │
  └──────────────────────────────────────────────────────────┘

Cells are plain QTableWidgetItems, so user text is never interpreted as
markup. Row buttons emit edit_requested(id) / delete_requested(id); the
owning window decides what to do with them.
"""

import logging

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from user_manager.gui.viewmodels import UserListViewModel
from user_manager.store.models import UserRecord

__all__ = ["UserTablePage"]

logger = logging.getLogger(__name__)

# Column indices
_COL_ID      = 0
_COL_NAME    = 1
_COL_EMAIL   = 2
_COL_PHONE   = 3
_COL_CITY    = 4
_COL_ACTIONS = 5
_HEADERS = ["ID", "Name", "Email", "Phone", "City", "Actions"]

EMPTY_TEXT = "No users found"


class UserTablePage(QWidget):
    """Search box, user count and the user table."""

    edit_requested   = pyqtSignal(object)   # ids from imports may be any JSON value
    delete_requested = pyqtSignal(object)

    def __init__(self, parent: QWidget = None) -> None:
        super().__init__(parent)
        self._vm = UserListViewModel()
        self._build_ui()
        self._refresh_table()

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)

        search_row = QHBoxLayout()
        search_row.addWidget(QLabel("Search:"))
        self._search_edit = QLineEdit()
        self._search_edit.setPlaceholderText("Search by name, email, phone or city…")
        self._search_edit.textChanged.connect(self._on_search_changed)
        search_row.addWidget(self._search_edit)
        self._count_label = QLabel()
        search_row.addWidget(self._count_label)
        layout.addLayout(search_row)

        self._table = QTableWidget(0, len(_HEADERS))
        self._table.setHorizontalHeaderLabels(_HEADERS)
        self._table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self._table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self._table.verticalHeader().setVisible(False)
        self._table.horizontalHeader().setStretchLastSection(True)
        layout.addWidget(self._table)

    def _action_cell(self, record_id) -> QWidget:
        cell = QWidget()
        row = QHBoxLayout(cell)
        row.setContentsMargins(2, 0, 2, 0)
        edit_btn = QPushButton("Edit")
        edit_btn.clicked.connect(lambda: self.edit_requested.emit(record_id))
        delete_btn = QPushButton("Delete")
        delete_btn.clicked.connect(lambda: self.delete_requested.emit(record_id))
        row.addWidget(edit_btn)
        row.addWidget(delete_btn)
        return cell

    # ── Slots ──────────────────────────────────────────────────────────────

    def _on_search_changed(self, text: str) -> None:
        self._vm.search_query = text
        self._refresh_table()

    def _refresh_table(self) -> None:
        records = self._vm.visible_records
        self._count_label.setText(self._vm.count_label)
        self._table.clearSpans()
        self._table.setRowCount(0)   # drops stale items and row widgets

        if not records:
            self._table.setRowCount(1)
            item = QTableWidgetItem(EMPTY_TEXT)
            item.setTextAlignment(Qt.AlignmentFlag.AlignCenter)
            self._table.setItem(0, 0, item)
            self._table.setSpan(0, 0, 1, len(_HEADERS))
            return

        self._table.setRowCount(len(records))
        for row, rec in enumerate(records):
            self._table.setItem(row, _COL_ID,    QTableWidgetItem("" if rec.id is None else str(rec.id)))
            self._table.setItem(row, _COL_NAME,  QTableWidgetItem(rec.name))
            self._table.setItem(row, _COL_EMAIL, QTableWidgetItem(rec.email))
            self._table.setItem(row, _COL_PHONE, QTableWidgetItem(rec.phone))
            self._table.setItem(row, _COL_CITY,  QTableWidgetItem(rec.city))
            if rec.id is not None:
                self._table.setCellWidget(row, _COL_ACTIONS, self._action_cell(rec.id))

    # ── Public API ─────────────────────────────────────────────────────────

    @property
    def view_model(self) -> UserListViewModel:
        return self._vm

    def load_records(self, records: list[UserRecord]) -> None:
        """Populate the table with *records*; the current search is kept."""
        self._vm.load(records)
        self._refresh_table()

    def focus_search(self) -> None:
        self._search_edit.setFocus()
        self._search_edit.selectAll()
