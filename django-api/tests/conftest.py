"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from event_editor.services import EditorIdentity, RecordingNavigator, RecordingNotifier
from event_editor.stores import InMemoryKeyValueStore, KeyValueEventStore
from tests.factories import FixedClock, published_record


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def backend() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def store(backend, clock) -> KeyValueEventStore:
    return KeyValueEventStore(backend, prefix="test-events", now=clock.now)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def collaborators(clock, notifier, navigator) -> dict:
    return {
        "identity": EditorIdentity(user_id="7", display_name="Cheer Org"),
        "clock": clock,
        "notifier": notifier,
        "navigator": navigator,
    }


@pytest.fixture
def publish(store):
    """Store a published record and return it as the store hands it back."""

    def _publish(**overrides) -> dict:
        record = published_record(**overrides)
        store.publish(record)
        return store.get_published(record["id"])

    return _publish
