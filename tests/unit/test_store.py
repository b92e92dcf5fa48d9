"""
Unit tests for user_manager/store/ — models, storage backends and UserStore.

Coverage plan
─────────────
models.py    → UserRecord fields, from_dict leniency, sample users
storage.py   → MemoryStorage, JsonFileStorage (round-trip, corrupt file)
db.py        → initialize, create, update, delete, find, filter,
               replace_all, clear, subscribers, serialise round-trip
"""

import json

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def storage():
    from user_manager.store.storage import MemoryStorage
    return MemoryStorage()


@pytest.fixture
def store(storage):
    """Fresh UserStore seeded with the three sample users."""
    from user_manager.store.db import UserStore
    s = UserStore(storage)
    s.initialize()
    return s


def _fields(name="Ann Lee", email="ann@example.com", phone="+47 555 0100", city="Oslo"):
    return {"name": name, "email": email, "phone": phone, "city": city}


def _stored(storage) -> list[dict]:
    return json.loads(storage.get_item("users"))


# ─────────────────────────────────────────────────────────────────────────────
# 1. UserRecord model
# ─────────────────────────────────────────────────────────────────────────────

class TestUserRecord:

    def test_to_dict_has_all_fields_in_order(self):
        from user_manager.store.models import UserRecord
        rec = UserRecord(id=7, name="A", email="a@x", phone="1", city="C")
        assert list(rec.to_dict()) == ["id", "name", "email", "phone", "city"]
        assert rec.to_dict()["id"] == 7

    def test_from_dict_fills_missing_fields_with_empty_string(self):
        from user_manager.store.models import UserRecord
        rec = UserRecord.from_dict({"id": 3, "name": "Only Name"})
        assert rec.name == "Only Name"
        assert rec.email == ""
        assert rec.city == ""

    def test_from_dict_without_id_gives_none(self):
        from user_manager.store.models import UserRecord
        assert UserRecord.from_dict({"name": "x"}).id is None

    def test_sample_users_are_the_three_demo_records(self):
        from user_manager.store.models import sample_users
        users = sample_users()
        assert [u.id for u in users] == [1, 2, 3]
        assert [u.name for u in users] == ["John Doe", "Jane Smith", "Mike Johnson"]
        assert users[0].city == "New York"


# ─────────────────────────────────────────────────────────────────────────────
# 2. Storage backends
# ─────────────────────────────────────────────────────────────────────────────

class TestMemoryStorage:

    def test_missing_key_returns_none(self, storage):
        assert storage.get_item("users") is None

    def test_set_then_get(self, storage):
        storage.set_item("users", "[]")
        assert storage.get_item("users") == "[]"

    def test_remove_item(self, storage):
        storage.set_item("users", "[]")
        storage.remove_item("users")
        storage.remove_item("users")  # second remove is harmless
        assert storage.get_item("users") is None


class TestJsonFileStorage:

    def test_file_created_on_first_write(self, tmp_path):
        from user_manager.store.storage import JsonFileStorage
        path = tmp_path / "nested" / "storage.json"
        s = JsonFileStorage(path)
        assert s.get_item("users") is None
        s.set_item("users", "[1]")
        assert path.exists()
        assert json.loads(path.read_text()) == {"users": "[1]"}

    def test_values_survive_a_new_instance(self, tmp_path):
        from user_manager.store.storage import JsonFileStorage
        path = tmp_path / "storage.json"
        JsonFileStorage(path).set_item("users", "abc")
        assert JsonFileStorage(path).get_item("users") == "abc"

    def test_other_keys_are_preserved(self, tmp_path):
        from user_manager.store.storage import JsonFileStorage
        s = JsonFileStorage(tmp_path / "storage.json")
        s.set_item("theme", "dark")
        s.set_item("users", "[]")
        assert s.get_item("theme") == "dark"

    def test_corrupt_file_raises_store_error(self, tmp_path):
        from user_manager.exceptions import StoreError
        from user_manager.store.storage import JsonFileStorage
        path = tmp_path / "storage.json"
        path.write_text("{not json")
        with pytest.raises(StoreError):
            JsonFileStorage(path).get_item("users")

    def test_no_temp_files_left_behind(self, tmp_path):
        from user_manager.store.storage import JsonFileStorage
        s = JsonFileStorage(tmp_path / "storage.json")
        s.set_item("users", "[]")
        s.set_item("users", "[1]")
        assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]


# ─────────────────────────────────────────────────────────────────────────────
# 3. UserStore.initialize
# ─────────────────────────────────────────────────────────────────────────────

class TestInitialize:

    def test_empty_storage_seeds_sample_users(self, store):
        assert [r.id for r in store.records] == [1, 2, 3]

    def test_seed_is_not_written_until_first_mutation(self, store, storage):
        assert storage.get_item("users") is None

    def test_loads_saved_users(self, storage):
        from user_manager.store.db import UserStore
        storage.set_item("users", json.dumps([
            {"id": 10, "name": "Saved", "email": "s@x", "phone": "1", "city": "Rome"},
        ]))
        s = UserStore(storage)
        s.initialize()
        assert len(s) == 1
        assert s.records[0].name == "Saved"

    def test_saved_empty_list_is_not_reseeded(self, storage):
        from user_manager.store.db import UserStore
        storage.set_item("users", "[]")
        s = UserStore(storage)
        s.initialize()
        assert s.records == []

    def test_malformed_blob_raises_store_error(self, storage):
        from user_manager.exceptions import StoreError
        from user_manager.store.db import UserStore
        storage.set_item("users", "{oops")
        with pytest.raises(StoreError):
            UserStore(storage).initialize()

    def test_independent_instances_do_not_share_state(self):
        from user_manager.store.db import UserStore
        from user_manager.store.storage import MemoryStorage
        a, b = UserStore(MemoryStorage()), UserStore(MemoryStorage())
        a.initialize()
        b.initialize()
        a.clear()
        assert len(b) == 3


# ─────────────────────────────────────────────────────────────────────────────
# 4. create
# ─────────────────────────────────────────────────────────────────────────────

class TestCreate:

    def test_new_id_is_max_plus_one(self, store):
        rec = store.create(_fields())
        assert rec.id == 4

    def test_appended_at_end(self, store):
        before = store.records
        rec = store.create(_fields())
        assert store.records == before + [rec]

    def test_first_id_in_empty_store_is_one(self, store):
        store.clear()
        assert store.create(_fields()).id == 1

    def test_id_follows_current_max_not_count(self, store):
        store.replace_all([{"id": 40, "name": "x"}, {"id": 2, "name": "y"}])
        assert store.create(_fields()).id == 41

    def test_ids_without_integer_value_are_ignored(self, store):
        store.replace_all([{"name": "no id"}])
        assert store.create(_fields()).id == 1

    def test_persists_full_list(self, store, storage):
        store.create(_fields())
        assert [d["id"] for d in _stored(storage)] == [1, 2, 3, 4]

    def test_duplicates_are_allowed(self, store):
        a = store.create(_fields())
        b = store.create(_fields())
        assert a.id != b.id
        assert a.email == b.email

    def test_non_string_values_become_text(self, store):
        rec = store.create({"name": 0, "email": False, "phone": 5550100, "city": None})
        assert rec.name == "0"
        assert rec.email == "False"
        assert rec.phone == "5550100"
        assert rec.city == ""


# ─────────────────────────────────────────────────────────────────────────────
# 5. update
# ─────────────────────────────────────────────────────────────────────────────

class TestUpdate:

    def test_merges_only_given_fields(self, store):
        assert store.update(2, {"city": "San Diego"}) is True
        rec = store.find(2)
        assert rec.city == "San Diego"
        assert rec.name == "Jane Smith"
        assert rec.email == "jane.smith@example.com"

    def test_keeps_id_length_and_order(self, store):
        store.update(2, {"id": 99, "name": "Janet"})
        assert [r.id for r in store.records] == [1, 2, 3]
        assert store.records[1].name == "Janet"

    def test_persists_change(self, store, storage):
        store.update(1, {"phone": "000"})
        assert _stored(storage)[0]["phone"] == "000"

    def test_zero_is_kept_as_text(self, store, storage):
        store.update(1, {"phone": 0, "city": None})
        assert store.find(1).phone == "0"
        assert store.find(1).city == ""
        assert _stored(storage)[0]["phone"] == "0"

    def test_unknown_id_is_a_silent_no_op(self, store, storage):
        before = [r.to_dict() for r in store.records]
        assert store.update(42, {"name": "Ghost"}) is False
        assert [r.to_dict() for r in store.records] == before
        assert storage.get_item("users") is None  # nothing persisted


# ─────────────────────────────────────────────────────────────────────────────
# 6. delete
# ─────────────────────────────────────────────────────────────────────────────

class TestDelete:

    def test_removes_record_and_keeps_order(self, store):
        assert store.delete(2) is True
        assert [r.id for r in store.records] == [1, 3]

    def test_unknown_id_leaves_list_unchanged_but_persists(self, store, storage):
        before = [r.to_dict() for r in store.records]
        assert store.delete(42) is False
        assert [r.to_dict() for r in store.records] == before
        assert _stored(storage) == before

    def test_create_after_delete_uses_current_max(self, store):
        store.delete(2)
        assert store.create(_fields()).id == 4

    def test_deleting_max_id_allows_its_reuse(self, store):
        store.delete(3)
        rec = store.create(_fields())
        assert rec.id == 3
        assert len({r.id for r in store.records}) == len(store)


# ─────────────────────────────────────────────────────────────────────────────
# 7. find / filter
# ─────────────────────────────────────────────────────────────────────────────

class TestFind:

    def test_find_existing(self, store):
        assert store.find(3).name == "Mike Johnson"

    def test_find_missing_returns_none(self, store):
        assert store.find(99) is None

    def test_find_does_not_persist(self, store, storage):
        store.find(1)
        assert storage.get_item("users") is None


class TestFilter:

    def test_city_match_is_case_insensitive(self, store):
        result = store.filter("new york")
        assert [r.name for r in result] == ["John Doe"]

    def test_matches_name_and_email(self, store):
        assert [r.id for r in store.filter("JANE")] == [2]
        assert [r.id for r in store.filter("mike.johnson@")] == [3]

    def test_phone_is_matched_verbatim(self, store):
        assert [r.id for r in store.filter("987-6543")] == [2]

    def test_phone_is_not_case_folded(self, store):
        store.create(_fields(name="Ext", email="e@x", phone="555 EXT 9", city="Here"))
        assert store.filter("ext 9") == []
        assert [r.name for r in store.filter("EXT 9")] == ["Ext"]

    def test_empty_term_returns_everything(self, store):
        assert store.filter("") == store.records

    def test_no_match_returns_empty_list(self, store):
        assert store.filter("zzz") == []

    def test_result_is_ordered_subsequence(self, store):
        result = store.filter("example.com")
        assert result == store.records

    def test_filter_is_idempotent(self, store):
        from user_manager.store.db import matches
        once = store.filter("an")
        twice = [r for r in once if matches(r, "an")]
        assert once == twice

    def test_filter_does_not_persist(self, store, storage):
        store.filter("john")
        assert storage.get_item("users") is None


# ─────────────────────────────────────────────────────────────────────────────
# 8. replace_all / clear
# ─────────────────────────────────────────────────────────────────────────────

class TestReplaceAndClear:

    def test_replace_all_accepts_dicts(self, store, storage):
        store.replace_all([{"id": 5, "name": "Imported", "email": "", "phone": "", "city": ""}])
        assert [r.id for r in store.records] == [5]
        assert _stored(storage)[0]["name"] == "Imported"

    def test_replace_all_accepts_records(self, store):
        from user_manager.store.models import UserRecord
        store.replace_all([UserRecord(id=9, name="R")])
        assert store.find(9).name == "R"

    def test_clear_empties_and_persists(self, store, storage):
        store.clear()
        assert len(store) == 0
        assert _stored(storage) == []


# ─────────────────────────────────────────────────────────────────────────────
# 9. Subscribers
# ─────────────────────────────────────────────────────────────────────────────

class TestSubscribers:

    def test_listener_sees_every_mutation(self, store):
        seen = []
        store.subscribe(lambda records: seen.append(len(records)))
        store.create(_fields())
        store.update(1, {"city": "Boston"})
        store.delete(2)
        store.clear()
        assert seen == [4, 4, 3, 0]

    def test_listener_not_called_for_missing_update(self, store):
        seen = []
        store.subscribe(seen.append)
        store.update(404, {"name": "x"})
        assert seen == []

    def test_listener_runs_after_persisting(self, store, storage):
        stored_at_callback = []
        store.subscribe(lambda _: stored_at_callback.append(_stored(storage)))
        store.create(_fields())
        assert len(stored_at_callback[0]) == 4

    def test_unsubscribe(self, store):
        seen = []
        store.subscribe(seen.append)
        store.unsubscribe(seen.append)
        store.clear()
        assert seen == []


# ─────────────────────────────────────────────────────────────────────────────
# 10. Serialisation
# ─────────────────────────────────────────────────────────────────────────────

class TestSerialisation:

    def test_round_trip_preserves_every_field(self):
        from user_manager.store.db import deserialize_records, serialize_records
        from user_manager.store.models import sample_users
        records = sample_users()
        assert deserialize_records(serialize_records(records)) == records

    def test_reload_from_storage_matches_memory(self, store, storage):
        from user_manager.store.db import UserStore
        store.create(_fields())
        store.update(2, {"name": "Changed"})
        reloaded = UserStore(storage)
        reloaded.initialize()
        assert reloaded.records == store.records

    def test_non_array_blob_raises(self):
        from user_manager.exceptions import StoreError
        from user_manager.store.db import deserialize_records
        with pytest.raises(StoreError):
            deserialize_records('{"id": 1}')
