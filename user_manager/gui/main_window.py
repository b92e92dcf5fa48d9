"""
MainWindow — top-level window of the user manager GUI.

Hosts the add/edit form on the left and the searchable user table on the
right, with a message banner above both and a toolbar for
Export / Import / Clear All.

The window never owns the data: it is handed a UserStore, subscribes to it,
and redraws the table whenever the store publishes a new list.

Keyboard shortcuts
──────────────────
  Ctrl+N   new user (leave edit mode, focus Name)
  Ctrl+F   focus the search box
  Esc      cancel editing
"""

import logging
from typing import Optional

from PyQt6.QtCore import QTimer
from PyQt6.QtGui import QAction, QKeySequence, QShortcut
from PyQt6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QToolBar,
    QVBoxLayout,
    QWidget,
)

from user_manager.config import AppConfig
from user_manager.exceptions import (
    ImportFormatError,
    ImportParseError,
    UserManagerError,
)
from user_manager.gui.pages.user_form import UserFormPage
from user_manager.gui.pages.user_table import UserTablePage
from user_manager.gui.viewmodels import MessageKind, MessageViewModel
from user_manager.store.db import UserStore
from user_manager.store.models import UserRecord
from user_manager.store.transfer import export_to_file, import_from_file

__all__ = ["MainWindow"]

logger = logging.getLogger(__name__)

_BANNER_STYLES = {
    MessageKind.SUCCESS: "background:#d4edda; color:#155724; padding:8px; border-radius:4px;",
    MessageKind.ERROR:   "background:#f8d7da; color:#721c24; padding:8px; border-radius:4px;",
}


class MainWindow(QMainWindow):
    """Root window: wires the form, the table and the store together."""

    def __init__(
        self,
        store: UserStore,
        config: Optional[AppConfig] = None,
        parent: QWidget = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("User Manager")
        self.resize(960, 540)

        self._store = store
        self._config = config or AppConfig()
        self._message_vm = MessageViewModel(timeout_ms=self._config.message_timeout_ms)

        self._build_ui()
        self._build_toolbar()
        self._build_shortcuts()
        self._connect_pages()

        self._store.subscribe(self._on_store_changed)
        self._page_table.load_records(self._store.records)

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(8, 8, 8, 8)

        self._banner = QLabel()
        self._banner.setVisible(False)
        layout.addWidget(self._banner)

        self._message_timer = QTimer(self)
        self._message_timer.setSingleShot(True)
        self._message_timer.timeout.connect(self.dismiss_message)

        panes = QHBoxLayout()
        self._page_form  = UserFormPage()
        self._page_table = UserTablePage()
        panes.addWidget(self._page_form, 1)
        panes.addWidget(self._page_table, 3)
        layout.addLayout(panes)

        self.setCentralWidget(central)

    def _build_toolbar(self) -> None:
        toolbar = QToolBar("Data")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self._export_action = QAction("Export", self)
        self._export_action.triggered.connect(self._on_export_clicked)
        self._import_action = QAction("Import", self)
        self._import_action.triggered.connect(self._on_import_clicked)
        self._clear_action = QAction("Clear All", self)
        self._clear_action.triggered.connect(self._on_clear_clicked)

        toolbar.addAction(self._export_action)
        toolbar.addAction(self._import_action)
        toolbar.addAction(self._clear_action)

    def _build_shortcuts(self) -> None:
        QShortcut(QKeySequence("Ctrl+N"), self, activated=self.new_user)
        QShortcut(QKeySequence("Ctrl+F"), self, activated=self._page_table.focus_search)
        QShortcut(QKeySequence("Esc"), self, activated=self._page_form.cancel_edit)

    def _connect_pages(self) -> None:
        self._page_form._submit_btn.clicked.connect(self._on_submit)
        self._page_table.edit_requested.connect(self._on_edit_requested)
        self._page_table.delete_requested.connect(self._on_delete_requested)

    # ── Store observer ─────────────────────────────────────────────────────

    def _on_store_changed(self, records: list[UserRecord]) -> None:
        self._page_table.load_records(records)

    # ── Form / table slots ─────────────────────────────────────────────────

    def _on_submit(self) -> None:
        vm = self._page_form.view_model
        missing = vm.missing_fields()
        if missing:
            self.show_message(f"Please fill in: {', '.join(missing)}", MessageKind.ERROR)
            return

        fields = vm.to_fields()
        try:
            if vm.is_editing:
                if self._store.update(vm.editing_id, fields):
                    self.show_message("User updated successfully!")
                else:
                    self.show_message("User not found!", MessageKind.ERROR)
                self._page_form.cancel_edit()
            else:
                self._store.create(fields)
                self.show_message("User created successfully!")
                self._page_form.reset()
        except UserManagerError as exc:
            logger.exception("Saving user failed")
            self.show_message(f"Could not save user: {exc}", MessageKind.ERROR)

    def _on_edit_requested(self, record_id) -> None:
        record = self._store.find(record_id)
        if record is not None:
            self._page_form.start_edit(record)

    def _on_delete_requested(self, record_id) -> None:
        table_vm = self._page_table.view_model
        table_vm.request_delete(record_id)
        if not self._confirm("Delete User", "Are you sure you want to delete this user?"):
            table_vm.cancel_delete()
            return
        try:
            self._store.delete(record_id)
        except UserManagerError as exc:
            logger.exception("Deleting user failed")
            self.show_message(f"Could not delete user: {exc}", MessageKind.ERROR)
            return
        finally:
            table_vm.cancel_delete()
        if self._page_form.view_model.editing_id == record_id:
            self._page_form.cancel_edit()
        self.show_message("User deleted successfully!")

    # ── Toolbar slots ──────────────────────────────────────────────────────

    def _on_export_clicked(self) -> None:
        path, _ = QFileDialog.getSaveFileName(
            self, "Export Users", self._config.export_filename, "JSON files (*.json)"
        )
        if path:
            self.export_to(path)

    def _on_import_clicked(self) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self, "Import Users", "", "JSON files (*.json)"
        )
        if path:
            self.import_from(path)

    def _on_clear_clicked(self) -> None:
        if self._confirm(
            "Clear All Data",
            "Are you sure you want to clear all data? This action cannot be undone.",
        ):
            self.clear_all()

    def _confirm(self, title: str, text: str) -> bool:
        answer = QMessageBox.question(self, title, text)
        return answer == QMessageBox.StandardButton.Yes

    # ── Public API ─────────────────────────────────────────────────────────

    @property
    def store(self) -> UserStore:
        return self._store

    def new_user(self) -> None:
        """Leave edit mode and put the cursor in the Name field."""
        self._page_form.cancel_edit()
        self._page_form.focus_name()

    def export_to(self, path) -> None:
        try:
            out_path = export_to_file(self._store, path)
        except OSError as exc:
            logger.exception("Export failed")
            self.show_message(f"Error exporting data: {exc}", MessageKind.ERROR)
            return
        logger.info("Exported users to %s", out_path)

    def import_from(self, path) -> None:
        """Replace the user list with the JSON file at *path*."""
        try:
            import_from_file(self._store, path)
        except ImportFormatError:
            self.show_message("Invalid data format!", MessageKind.ERROR)
            return
        except ImportParseError:
            logger.debug("Import failed", exc_info=True)
            self.show_message("Error importing data!", MessageKind.ERROR)
            return
        except UserManagerError as exc:
            logger.exception("Import failed")
            self.show_message(f"Error importing data: {exc}", MessageKind.ERROR)
            return
        self._page_form.cancel_edit()
        self.show_message("Data imported successfully!")

    def clear_all(self) -> None:
        try:
            self._store.clear()
        except UserManagerError as exc:
            logger.exception("Clear failed")
            self.show_message(f"Could not clear data: {exc}", MessageKind.ERROR)
            return
        self._page_form.cancel_edit()
        self.show_message("All data cleared!")

    def show_message(self, text: str, kind: MessageKind = MessageKind.SUCCESS) -> None:
        """Show *text* in the banner, replacing any current message."""
        self._message_vm.show(text, kind)
        self._banner.setText(text)
        self._banner.setStyleSheet(_BANNER_STYLES[self._message_vm.kind])
        self._banner.setVisible(True)
        self._message_timer.start(self._message_vm.timeout_ms)

    def dismiss_message(self) -> None:
        self._message_timer.stop()
        self._message_vm.dismiss()
        self._banner.clear()
        self._banner.setVisible(False)

    def closeEvent(self, event) -> None:  # noqa: N802
        self._store.unsubscribe(self._on_store_changed)
        super().closeEvent(event)
