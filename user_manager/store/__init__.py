"""
store — the user list and its key-value persistence.

Public API
──────────
UserRecord       — dataclass representing one user
UserStore        — CRUD + search over the list, persisted on every mutation
AbstractStorage  — get/set/remove interface of the persistence collaborator
MemoryStorage    — dict-backed storage
JsonFileStorage  — single-file JSON storage
export_to_file / import_from_file — users-data.json transfer
"""

from user_manager.store.models import UserRecord
from user_manager.store.db import UserStore
from user_manager.store.storage import AbstractStorage, JsonFileStorage, MemoryStorage
from user_manager.store.transfer import export_to_file, import_from_file

__all__ = [
    "UserRecord",
    "UserStore",
    "AbstractStorage",
    "MemoryStorage",
    "JsonFileStorage",
    "export_to_file",
    "import_from_file",
]
