"""
UserStore — the authoritative in-memory user list, synchronised to storage.

Usage::

    store = UserStore(JsonFileStorage("~/.user-manager/storage.json"))
    store.initialize()                 # load, or seed three sample users

    rec = store.create({"name": "Ann", "email": "ann@example.com",
                        "phone": "555", "city": "Oslo"})
    store.update(rec.id, {"city": "Bergen"})   # -> True
    store.filter("bergen")                     # -> [rec]
    store.delete(rec.id)                       # -> True

Every mutating call rewrites the full list under the "users" key before it
returns, then notifies subscribers with a copy of the new list.
"""

import json
import logging
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Union

from user_manager.config import STORAGE_KEY
from user_manager.exceptions import StoreError
from user_manager.store.models import USER_FIELDS, UserRecord, as_text, sample_users
from user_manager.store.storage import AbstractStorage

__all__ = [
    "UserStore",
    "matches",
    "next_id",
    "serialize_records",
    "deserialize_records",
]

logger = logging.getLogger(__name__)

Listener = Callable[[list[UserRecord]], None]


# ── Pure helpers ──────────────────────────────────────────────────────────────

def next_id(records: Iterable[UserRecord]) -> int:
    """Return max(existing integer ids, default 0) + 1."""
    ids = [r.id for r in records if isinstance(r.id, int)]
    return max(ids, default=0) + 1


def matches(record: UserRecord, term: str) -> bool:
    """
    Search rule: name, email and city match case-insensitively;
    phone matches the term verbatim.
    """
    folded = term.lower()
    return (
        folded in record.name.lower()
        or folded in record.email.lower()
        or folded in record.city.lower()
        or term in record.phone
    )


def serialize_records(records: Iterable[UserRecord]) -> str:
    """Encode records as the compact JSON array kept in storage."""
    return json.dumps([r.to_dict() for r in records])


def deserialize_records(blob: str) -> list[UserRecord]:
    """
    Decode a storage blob back into records.

    Raises:
        StoreError: blob is not JSON, not an array, or holds non-objects.
    """
    try:
        data = json.loads(blob)
    except json.JSONDecodeError as exc:
        raise StoreError(f"Stored user list is not valid JSON: {exc}") from exc
    if not isinstance(data, list) or not all(isinstance(d, dict) for d in data):
        raise StoreError("Stored user list is not an array of objects")
    return [UserRecord.from_dict(d) for d in data]


# ── Store ─────────────────────────────────────────────────────────────────────

class UserStore:
    """
    Ordered, id-keyed user list with persist-on-every-mutation semantics.

    The store is constructed explicitly and handed to whichever presentation
    layer needs it; tests build independent instances over MemoryStorage.
    """

    def __init__(self, storage: AbstractStorage, key: str = STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key
        self._records: list[UserRecord] = []
        self._listeners: list[Listener] = []

    # ── Internal helpers ──────────────────────────────────────────────────

    def _persist(self) -> None:
        self._storage.set_item(self._key, serialize_records(self._records))

    def _commit(self) -> None:
        """Persist the full list, then tell subscribers."""
        self._persist()
        snapshot = self.records
        for listener in list(self._listeners):
            listener(snapshot)

    def _index_of(self, record_id: int) -> int:
        for i, rec in enumerate(self._records):
            if rec.id == record_id:
                return i
        return -1

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def initialize(self) -> None:
        """
        Load the list from storage, or fall back to the sample users when
        the key has never been written. Seed data is not persisted until
        the first mutation.

        Raises:
            StoreError: the stored blob exists but cannot be decoded.
        """
        blob = self._storage.get_item(self._key)
        if blob:
            self._records = deserialize_records(blob)
            logger.info("Loaded %d user(s) from storage", len(self._records))
        else:
            self._records = sample_users()
            logger.info("No saved users; starting with %d sample users", len(self._records))

    # ── Observers ─────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> None:
        """Call *listener(records)* after every committed mutation."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ── Read access ───────────────────────────────────────────────────────

    @property
    def records(self) -> list[UserRecord]:
        """Shallow copy of the current list, in store order."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[UserRecord]:
        return iter(self.records)

    def find(self, record_id: int) -> Optional[UserRecord]:
        """Return the record with *record_id*, or None."""
        i = self._index_of(record_id)
        return self._records[i] if i >= 0 else None

    def filter(self, term: str) -> list[UserRecord]:
        """Records matching *term* (see matches()), in store order."""
        return [r for r in self._records if matches(r, term)]

    # ── Mutations ─────────────────────────────────────────────────────────

    def create(self, fields: Mapping[str, Any]) -> UserRecord:
        """
        Append a new record with a freshly allocated id.

        Duplicate names or e-mails are allowed.

        Returns:
            The stored UserRecord.
        """
        record = UserRecord(id=next_id(self._records))
        for name in USER_FIELDS:
            setattr(record, name, as_text(fields.get(name)))
        self._records.append(record)
        logger.debug("Created %s", record)
        self._commit()
        return record

    def update(self, record_id: int, fields: Mapping[str, Any]) -> bool:
        """
        Merge *fields* over the record with *record_id*.

        Only name/email/phone/city are applied; fields absent from the patch
        keep their current value and the id never changes.

        Returns:
            True if the record was found and saved, False if no record has
            that id (nothing is changed or persisted in that case).
        """
        i = self._index_of(record_id)
        if i < 0:
            logger.debug("update: no user with id=%s", record_id)
            return False
        record = self._records[i]
        for name in USER_FIELDS:
            if name in fields:
                setattr(record, name, as_text(fields[name]))
        logger.debug("Updated %s", record)
        self._commit()
        return True

    def delete(self, record_id: int) -> bool:
        """
        Remove the record with *record_id*. The list is persisted even when
        nothing matched.

        Returns:
            True if a record was removed.
        """
        before = len(self._records)
        self._records = [r for r in self._records if r.id != record_id]
        removed = len(self._records) < before
        logger.debug("delete id=%s removed=%s", record_id, removed)
        self._commit()
        return removed

    def replace_all(self, records: Iterable[Union[UserRecord, Mapping[str, Any]]]) -> None:
        """Replace the whole list (used by import); accepts records or dicts."""
        self._records = [
            r if isinstance(r, UserRecord)
            else UserRecord.from_dict(r) if isinstance(r, Mapping)
            else UserRecord(id=None)
            for r in records
        ]
        logger.info("Replaced user list (%d user(s))", len(self._records))
        self._commit()

    def clear(self) -> None:
        """Remove every record."""
        self._records = []
        logger.info("Cleared all users")
        self._commit()
