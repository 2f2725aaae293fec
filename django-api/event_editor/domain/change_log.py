"""In-memory change log with merge-or-append and revert semantics."""

from dataclasses import replace
from typing import Iterable, Iterator

from event_editor.domain.models import ChangeLogEntry


class ChangeLog:
    """Ordered change entries, at most one per field key.

    An entry only lives while its raw old and new values differ.
    """

    def __init__(self, entries: Iterable[ChangeLogEntry] = ()) -> None:
        self._entries: list[ChangeLogEntry] = []
        for entry in entries:
            self.upsert(entry)

    def __iter__(self) -> Iterator[ChangeLogEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[ChangeLogEntry]:
        return list(self._entries)

    def get(self, field_key: object) -> ChangeLogEntry | None:
        for entry in self._entries:
            if entry.field == field_key:
                return entry
        return None

    def upsert(self, entry: ChangeLogEntry) -> None:
        """Merge into the existing entry for the key, else append.

        A merge only moves the new side; the original old side is kept.
        """
        if self.merge_existing(entry.field, entry.new_value, entry.raw_new):
            return
        if not entry.is_reverted:
            self._entries.append(entry)

    def merge_existing(self, field_key: str, new_value: str, raw_new: str) -> bool:
        """Move the new side of an existing entry. Returns False if none exists."""
        for index, existing in enumerate(self._entries):
            if existing.field == field_key:
                self._entries[index] = replace(existing, new_value=new_value, raw_new=raw_new)
                return True
        return False

    def prune(self) -> None:
        """Drop entries whose raw old and new values are equal again."""
        self._entries = [entry for entry in self._entries if not entry.is_reverted]

    def clear(self) -> None:
        self._entries = []

    def to_list(self) -> list[dict[str, str]]:
        return [entry.to_dict() for entry in self._entries]
