from event_editor.conf import get_setting
from event_editor.stores.interfaces import EventStore, KeyValueStore
from event_editor.stores.keyvalue_store import KeyValueEventStore
from event_editor.stores.memory_store import InMemoryKeyValueStore

__all__ = [
    "EventStore",
    "InMemoryKeyValueStore",
    "KeyValueEventStore",
    "KeyValueStore",
    "build_key_value_store",
    "get_event_store",
]

_memory_backend: InMemoryKeyValueStore | None = None


def build_key_value_store(backend: str | None = None) -> KeyValueStore:
    """Build the configured KeyValueStore (``STORE_BACKEND`` setting)."""
    global _memory_backend

    backend = backend or get_setting("STORE_BACKEND")
    if backend == "database":
        from event_editor.stores.django_store import DjangoKeyValueStore

        return DjangoKeyValueStore(cache_alias=get_setting("CACHE_ALIAS"))
    if backend == "cache":
        from event_editor.stores.cache_store import CacheKeyValueStore

        return CacheKeyValueStore(alias=get_setting("CACHE_ALIAS"))
    if backend == "memory":
        if _memory_backend is None:
            _memory_backend = InMemoryKeyValueStore()
        return _memory_backend
    raise ValueError(f"Unknown event editor store backend: {backend}")


def get_event_store() -> EventStore:
    return KeyValueEventStore(build_key_value_store(), prefix=get_setting("KEY_PREFIX"))
