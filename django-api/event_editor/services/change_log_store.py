"""Change log held for one edit session, restored from and saved to the store."""

import logging
from typing import Any, Mapping

from event_editor.domain import ChangeLog, ChangeLogEntry, EventRecord, FieldDiffEngine
from event_editor.services.persistence import persisting
from event_editor.stores.interfaces import EventStore

logger = logging.getLogger(__name__)


class ChangeLogStore:
    """Owns the in-memory change log and its persisted copy."""

    def __init__(self, store: EventStore, engine: FieldDiffEngine) -> None:
        self._store = store
        self._engine = engine
        self._log = ChangeLog()

    @property
    def entries(self) -> list[ChangeLogEntry]:
        return self._log.entries

    def __len__(self) -> int:
        return len(self._log)

    def load(self, event_id: str) -> bool:
        """Restore the persisted log. Returns False when there is none to restore."""
        entries = self._store.get_change_log(event_id)
        if entries is None:
            self._log = ChangeLog()
            return False
        self._log = ChangeLog(entries)
        return True

    def seed(self, published: EventRecord, draft: EventRecord) -> list[ChangeLogEntry]:
        """Rebuild the log by comparing a loaded draft with its published snapshot."""
        self._log = ChangeLog()
        entries = self._engine.seed(self._log, published, draft)
        logger.info("Seeded change log from published snapshot", extra={"changes": len(entries)})
        return entries

    def apply(self, previous: EventRecord, updates: Mapping[str, Any]) -> list[ChangeLogEntry]:
        return self._engine.apply_update(self._log, previous, updates)

    def persist(self, event_id: str | None) -> None:
        """Write the log under the event id; an empty log removes the key.

        Nothing is written while the record has no id yet.
        """
        if event_id is None:
            return
        with persisting(event_id, "set_change_log"):
            self._store.set_change_log(event_id, self._log.entries)

    def clear(self, event_id: str | None = None) -> None:
        self._log.clear()
        self.persist(event_id)
