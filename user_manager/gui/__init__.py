"""
gui — PyQt6 front-end for the user manager.

Public API
──────────
viewmodels            — pure-Python state containers (no Qt)
main_window.MainWindow — top-level application window
pages                 — the form and table panels

MainWindow is not re-exported here so that the view-models can be imported
without loading Qt.
"""

from user_manager.gui import viewmodels

__all__ = ["viewmodels"]
