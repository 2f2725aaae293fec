"""Django ORM implementation of the KeyValueStore.

Reads go through the cache; ``signals.py`` drops the cached copy whenever a
row is saved or deleted.
"""

from contextlib import AbstractContextManager
from typing import Any

from django.core.cache import caches
from django.db import transaction

from event_editor.models import StoredValue
from event_editor.stores.interfaces import KeyValueStore


def cache_key_for(key: str) -> str:
    return f"event_editor:kv:{key}"


class DjangoKeyValueStore(KeyValueStore):
    """Database-backed store using the ``StoredValue`` model."""

    def __init__(self, cache_alias: str = "default") -> None:
        self._cache = caches[cache_alias]

    def get(self, key: str) -> Any | None:
        cached = self._cache.get(cache_key_for(key))
        if cached is not None:
            return cached
        row = StoredValue.objects.filter(key=key).first()
        if row is None:
            return None
        self._cache.set(cache_key_for(key), row.value)
        return row.value

    def set(self, key: str, value: Any) -> None:
        StoredValue.objects.update_or_create(key=key, defaults={"value": value})

    def remove(self, key: str) -> None:
        StoredValue.objects.filter(key=key).delete()

    def atomic(self) -> AbstractContextManager:
        return transaction.atomic()
