"""Store interfaces (repository pattern).

Stores must be swappable. The editor only ever talks to ``EventStore``;
``KeyValueStore`` is the durable medium underneath it.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager, nullcontext
from typing import Any

from event_editor.domain import ChangeLogEntry, EventRecord


class KeyValueStore(ABC):
    """Durable string-keyed storage of JSON-compatible values."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the value stored under key, or None."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove key. Removing a missing key is not an error."""
        ...

    def atomic(self) -> AbstractContextManager:
        """Group writes so they land together or not at all.

        Backends without transactions apply each write as it comes.
        """
        return nullcontext()


class EventStore(ABC):
    """Interface for draft, published and change-log persistence per event."""

    @abstractmethod
    def get_draft(self, event_id: str) -> EventRecord | None:
        """Return the saved working draft, or None."""
        ...

    @abstractmethod
    def save_draft(self, record: EventRecord) -> None:
        """Persist a draft under its ``id``."""
        ...

    @abstractmethod
    def delete_draft(self, event_id: str) -> None:
        """Remove the saved draft, if any."""
        ...

    @abstractmethod
    def get_published(self, event_id: str) -> EventRecord | None:
        """Return the published snapshot, or None."""
        ...

    @abstractmethod
    def publish(self, record: EventRecord) -> None:
        """Store record as the published snapshot for its ``id``."""
        ...

    @abstractmethod
    def unpublish(self, event_id: str) -> None:
        """Remove the published snapshot, if any."""
        ...

    @abstractmethod
    def get_change_log(self, event_id: str) -> list[ChangeLogEntry] | None:
        """Return the persisted change log, or None if absent or unreadable."""
        ...

    @abstractmethod
    def set_change_log(self, event_id: str, entries: list[ChangeLogEntry]) -> None:
        """Persist entries; an empty list removes the key."""
        ...

    @abstractmethod
    def atomic(self) -> AbstractContextManager:
        """Context in which several writes commit as one transition."""
        ...
