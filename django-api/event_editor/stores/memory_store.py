"""Process-local key-value store, used by tests and the "memory" backend."""

import copy
from contextlib import contextmanager
from typing import Any

from event_editor.stores.interfaces import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store. Values are copied in and out so callers never share state."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    @contextmanager
    def atomic(self):
        """Restore the previous contents if the block raises."""
        snapshot = dict(self._data)
        try:
            yield
        except Exception:
            self._data = snapshot
            raise

    def keys(self) -> list[str]:
        return sorted(self._data)
