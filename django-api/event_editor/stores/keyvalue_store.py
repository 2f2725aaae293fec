"""EventStore over any KeyValueStore.

Each event gets three independent slots, scoped by concern and event id:
``<prefix>:draft:<id>``, ``<prefix>:published:<id>`` and
``<prefix>:changelog:<id>``.
"""

import logging
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Callable

from django.utils import timezone

from event_editor.domain import ChangeLogEntry, EventRecord
from event_editor.stores.interfaces import EventStore, KeyValueStore

logger = logging.getLogger(__name__)

DRAFT = "draft"
PUBLISHED = "published"
CHANGE_LOG = "changelog"


class KeyValueEventStore(EventStore):
    """Maps draft, published and change-log persistence onto scoped keys."""

    def __init__(
        self,
        backend: KeyValueStore,
        prefix: str = "cheerbase-organizer-events",
        now: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._backend = backend
        self._prefix = prefix
        self._now = now

    def key(self, concern: str, event_id: str) -> str:
        return f"{self._prefix}:{concern}:{event_id}"

    def _stamped(self, record: EventRecord) -> EventRecord:
        return {**record, "updatedAt": self._now().isoformat()}

    def _get_record(self, concern: str, event_id: str) -> EventRecord | None:
        value = self._backend.get(self.key(concern, event_id))
        if value is None:
            return None
        if not isinstance(value, dict):
            logger.warning(
                "Ignoring malformed %s record",
                concern,
                extra={"event_id": event_id},
            )
            return None
        return value

    def get_draft(self, event_id: str) -> EventRecord | None:
        return self._get_record(DRAFT, event_id)

    def save_draft(self, record: EventRecord) -> None:
        self._backend.set(self.key(DRAFT, record["id"]), self._stamped(record))

    def delete_draft(self, event_id: str) -> None:
        self._backend.remove(self.key(DRAFT, event_id))

    def get_published(self, event_id: str) -> EventRecord | None:
        return self._get_record(PUBLISHED, event_id)

    def publish(self, record: EventRecord) -> None:
        self._backend.set(self.key(PUBLISHED, record["id"]), self._stamped(record))

    def unpublish(self, event_id: str) -> None:
        self._backend.remove(self.key(PUBLISHED, event_id))

    def get_change_log(self, event_id: str) -> list[ChangeLogEntry] | None:
        value = self._backend.get(self.key(CHANGE_LOG, event_id))
        if value is None:
            return None
        try:
            if not isinstance(value, list):
                raise TypeError("Change log must be a list")
            return [ChangeLogEntry.from_dict(row) for row in value]
        except (KeyError, TypeError) as exc:
            logger.warning(
                "Ignoring malformed change log: %s",
                exc,
                extra={"event_id": event_id},
            )
            return None

    def set_change_log(self, event_id: str, entries: list[ChangeLogEntry]) -> None:
        key = self.key(CHANGE_LOG, event_id)
        if not entries:
            self._backend.remove(key)
            return
        self._backend.set(key, [entry.to_dict() for entry in entries])

    def atomic(self) -> AbstractContextManager:
        return self._backend.atomic()
