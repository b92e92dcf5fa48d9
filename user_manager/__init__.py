"""
user_manager — a small local user-record manager.

Packages
────────
store       — UserRecord, UserStore and key-value persistence
gui         — PyQt6 window and Qt-free view-models
cli         — command-line interface
"""

__version__ = "1.0.0"
