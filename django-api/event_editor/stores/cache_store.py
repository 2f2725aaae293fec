"""Key-value store over the Django cache framework."""

from typing import Any

from django.core.cache import caches

from event_editor.stores.interfaces import KeyValueStore


class CacheKeyValueStore(KeyValueStore):
    """Stores values in a Django cache without expiry.

    Only durable when the configured cache backend is (e.g. Redis with
    persistence, or the database cache).
    """

    def __init__(self, alias: str = "default") -> None:
        self._cache = caches[alias]

    def get(self, key: str) -> Any | None:
        return self._cache.get(key)

    def set(self, key: str, value: Any) -> None:
        self._cache.set(key, value, timeout=None)

    def remove(self, key: str) -> None:
        self._cache.delete(key)
