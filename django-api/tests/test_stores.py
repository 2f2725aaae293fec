"""Tests for key-value stores and the EventStore key layout.

Run with: pytest tests/test_stores.py -v
"""

import pytest
from django.core.cache import cache

from event_editor.domain import ChangeLogEntry
from event_editor.models import StoredValue
from event_editor.stores import InMemoryKeyValueStore, KeyValueEventStore, build_key_value_store
from event_editor.stores.cache_store import CacheKeyValueStore
from event_editor.stores.django_store import DjangoKeyValueStore, cache_key_for

from tests.factories import FIXED_NOW, published_record

ENTRY = ChangeLogEntry("name", "Event Title", "Spring Cup", "Renamed", '"Spring Cup"', '"Renamed"')


class PublishedRemovalFails(DjangoKeyValueStore):
    def remove(self, key):
        if ":published:" in key:
            raise RuntimeError("database unavailable")
        super().remove(key)


class TestInMemoryKeyValueStore:
    """Tests for the dict-backed store."""

    def test_values_are_copied(self):
        backend = InMemoryKeyValueStore()
        value = {"slots": {"filled": 0}}
        backend.set("k", value)
        value["slots"]["filled"] = 5
        backend.get("k")["slots"]["filled"] = 9
        assert backend.get("k") == {"slots": {"filled": 0}}

    def test_remove_missing_key(self):
        backend = InMemoryKeyValueStore()
        backend.remove("missing")
        assert backend.get("missing") is None

    def test_atomic_restores_contents_on_error(self):
        backend = InMemoryKeyValueStore()
        backend.set("kept", 1)
        with pytest.raises(RuntimeError):
            with backend.atomic():
                backend.set("added", 2)
                backend.remove("kept")
                raise RuntimeError("write failed")
        assert backend.keys() == ["kept"]

    def test_atomic_keeps_writes_on_success(self):
        backend = InMemoryKeyValueStore()
        with backend.atomic():
            backend.set("added", 2)
        assert backend.get("added") == 2


class TestKeyValueEventStore:
    """Tests for the scoped key layout."""

    def test_concerns_are_stored_under_separate_keys(self, store, backend):
        store.save_draft(published_record(name="Draft name"))
        store.publish(published_record())
        store.set_change_log("event-1", [ENTRY])
        assert backend.keys() == [
            "test-events:changelog:event-1",
            "test-events:draft:event-1",
            "test-events:published:event-1",
        ]
        assert store.get_draft("event-1")["name"] == "Draft name"
        assert store.get_published("event-1")["name"] == "Spring Cup"

    def test_records_are_scoped_per_event(self, store):
        store.save_draft(published_record(id="event-1"))
        store.save_draft(published_record(id="event-2", name="Other"))
        store.delete_draft("event-1")
        assert store.get_draft("event-1") is None
        assert store.get_draft("event-2")["name"] == "Other"

    def test_writes_stamp_updated_at(self, store):
        store.publish(published_record())
        assert store.get_published("event-1")["updatedAt"] == FIXED_NOW.isoformat()

    def test_unpublish_leaves_draft(self, store):
        store.save_draft(published_record())
        store.publish(published_record())
        store.unpublish("event-1")
        assert store.get_published("event-1") is None
        assert store.get_draft("event-1") is not None

    def test_change_log_round_trip(self, store):
        store.set_change_log("event-1", [ENTRY])
        assert store.get_change_log("event-1") == [ENTRY]

    def test_empty_change_log_removes_key(self, store, backend):
        store.set_change_log("event-1", [ENTRY])
        store.set_change_log("event-1", [])
        assert backend.get("test-events:changelog:event-1") is None
        assert store.get_change_log("event-1") is None

    @pytest.mark.parametrize("value", ["garbage", [{"field": "name"}], [None]])
    def test_malformed_change_log_reads_as_missing(self, store, backend, value):
        backend.set("test-events:changelog:event-1", value)
        assert store.get_change_log("event-1") is None

    def test_malformed_record_reads_as_missing(self, store, backend):
        backend.set("test-events:draft:event-1", ["not", "a", "record"])
        assert store.get_draft("event-1") is None


class TestCacheKeyValueStore:
    """Tests for the Django cache backed store."""

    def test_set_get_remove(self):
        backend = CacheKeyValueStore()
        backend.set("k", {"a": 1})
        assert backend.get("k") == {"a": 1}
        backend.remove("k")
        assert backend.get("k") is None


@pytest.mark.django_db
class TestDjangoKeyValueStore:
    """Tests for the ORM backed store and its cache invalidation."""

    def test_set_get_remove(self):
        backend = DjangoKeyValueStore()
        backend.set("k", {"name": "Spring Cup"})
        assert StoredValue.objects.get(key="k").value == {"name": "Spring Cup"}
        assert backend.get("k") == {"name": "Spring Cup"}
        backend.remove("k")
        assert backend.get("k") is None
        assert not StoredValue.objects.filter(key="k").exists()

    def test_reads_are_cached(self):
        backend = DjangoKeyValueStore()
        backend.set("k", {"v": 1})
        backend.get("k")
        assert cache.get(cache_key_for("k")) == {"v": 1}

    def test_save_invalidates_cached_value(self):
        backend = DjangoKeyValueStore()
        backend.set("k", {"v": 1})
        assert backend.get("k") == {"v": 1}
        backend.set("k", {"v": 2})
        assert cache.get(cache_key_for("k")) is None
        assert backend.get("k") == {"v": 2}

    def test_delete_invalidates_cached_value(self):
        backend = DjangoKeyValueStore()
        backend.set("k", {"v": 1})
        backend.get("k")
        backend.remove("k")
        assert cache.get(cache_key_for("k")) is None

    def test_event_store_over_database(self):
        store = KeyValueEventStore(DjangoKeyValueStore(), prefix="db-events")
        store.publish(published_record())
        store.set_change_log("event-1", [ENTRY])
        assert store.get_published("event-1")["name"] == "Spring Cup"
        assert store.get_change_log("event-1") == [ENTRY]

    def test_atomic_rolls_back_paired_writes(self):
        store = KeyValueEventStore(PublishedRemovalFails(), prefix="db-events")
        store.publish(published_record())

        with pytest.raises(RuntimeError):
            with store.atomic():
                store.save_draft(published_record(status="draft"))
                store.unpublish("event-1")

        assert store.get_draft("event-1") is None
        assert store.get_published("event-1")["name"] == "Spring Cup"
        assert not StoredValue.objects.filter(key="db-events:draft:event-1").exists()


class TestBuildKeyValueStore:
    """Tests for backend selection from settings."""

    def test_memory_backend_is_shared(self):
        assert build_key_value_store("memory") is build_key_value_store("memory")

    def test_cache_backend(self):
        assert isinstance(build_key_value_store("cache"), CacheKeyValueStore)

    def test_database_backend_is_default(self, settings):
        settings.EVENT_EDITOR = {}
        assert isinstance(build_key_value_store(), DjangoKeyValueStore)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            build_key_value_store("redis")

