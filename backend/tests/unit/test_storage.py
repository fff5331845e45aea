"""
Tests for the SQL-backed key-value store.
"""
import pytest

from stockroom.models.kv_entry import KeyValueEntry

pytestmark = pytest.mark.unit


class TestGet:
    def test_missing_key_returns_default(self, store):
        assert store.get("nope", []) == []
        assert store.get("nope") is None

    def test_malformed_value_returns_default(self, store):
        db = store._session_factory()
        try:
            db.add(KeyValueEntry(key="broken", value="{not json"))
            db.commit()
        finally:
            db.close()

        assert store.get("broken", {"fallback": True}) == {"fallback": True}


class TestSet:
    def test_set_then_get(self, store):
        store.set("users", [{"id": "1", "username": "admin"}])
        assert store.get("users", []) == [{"id": "1", "username": "admin"}]

    def test_set_replaces_previous_value(self, store):
        store.set("k", {"a": 1, "b": 2})
        store.set("k", {"c": 3})
        assert store.get("k") == {"c": 3}

    def test_set_many_writes_all_keys(self, store):
        store.set_many({"users": [1, 2], "credentials": {"x": "y"}})
        assert store.get("users") == [1, 2]
        assert store.get("credentials") == {"x": "y"}

    def test_set_many_is_all_or_nothing(self, store):
        store.set("users", ["before"])

        # second value cannot be encoded, so nothing is written
        with pytest.raises(TypeError):
            store.set_many({"users": ["after"], "credentials": object()})

        assert store.get("users") == ["before"]
        assert store.get("credentials") is None


class TestRemove:
    def test_remove_deletes_value(self, store):
        store.set("session", {"token": "t"})
        store.remove("session")
        assert store.get("session") is None

    def test_remove_missing_key_is_noop(self, store):
        store.remove("never-set")
        assert store.get("never-set", "d") == "d"
