"""Event editor service - the draft lifecycle lives here.

The editor:
- Owns the working draft for one edit session
- Keeps the change log against the last published snapshot
- Guards publish/unpublish/cancel/delete/discard
- Depends only on interfaces (stores and collaborator ports)
"""

import logging
from enum import Enum
from typing import Any, Mapping

from event_editor.conf import get_setting
from event_editor.domain import (
    ChangeLogEntry,
    EventId,
    EventRecord,
    EventStatus,
    FieldDiffEngine,
    LifecycleState,
    ValueFormatter,
)
from event_editor.domain.errors import (
    EventNotFoundError,
    InvalidEventIdError,
    InvalidPriceError,
    MissingRequiredFieldsError,
    PersistenceError,
)
from event_editor.domain.models import (
    DIVISIONS_FIELD,
    LIFECYCLE_FIELDS,
    REQUIRED_FIELDS,
    invalid_prices,
    is_empty_value,
)
from event_editor.services.change_log_store import ChangeLogStore
from event_editor.services.collaborators import (
    Clock,
    EditorIdentity,
    LoggingNotifier,
    Navigator,
    Notifier,
    NullNavigator,
    SystemClock,
    timestamp_ms,
)
from event_editor.services.persistence import transition
from event_editor.stores.interfaces import EventStore

logger = logging.getLogger(__name__)

EVENTS_LIST_PATH = "/organizer/events"


class EditorMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


def configured_diff_engine() -> FieldDiffEngine:
    formatter = ValueFormatter(
        long_string_limit=get_setting("LONG_STRING_LIMIT"),
        truncate_to=get_setting("TRUNCATE_TO"),
    )
    return FieldDiffEngine(formatter)


def new_event_template(organizer: str = "") -> EventRecord:
    """Defaults for a record started in create mode."""
    return {
        "organizer": organizer,
        "status": EventStatus.DRAFT.value,
        "visibility": "public",
        "slots": {"filled": 0, "capacity": 0},
        "type": "Championship",
        "image": "",
        "description": "",
        "teams": "0 / 0 teams",
        "name": "",
    }


def merge_draft(published: EventRecord, draft: EventRecord) -> EventRecord:
    """Overlay a saved draft on a published record, skipping empty draft values.

    A partially abandoned session therefore cannot blank out published fields.
    """
    merged = dict(published)
    for key, value in draft.items():
        if not is_empty_value(value):
            merged[key] = value
    return merged


class EventEditor:
    """Lifecycle controller for one event edit session.

    Actions whose guard is false are no-ops; callers are expected to disable
    them using the ``can_*`` flags.
    """

    def __init__(
        self,
        store: EventStore,
        *,
        mode: EditorMode | str = EditorMode.CREATE,
        event_id: str | None = None,
        initial_event: EventRecord | None = None,
        identity: EditorIdentity | None = None,
        clock: Clock | None = None,
        notifier: Notifier | None = None,
        navigator: Navigator | None = None,
        diff_engine: FieldDiffEngine | None = None,
    ) -> None:
        self._store = store
        self.mode = EditorMode(mode)
        self._identity = identity or EditorIdentity()
        self._clock = clock or SystemClock()
        self._notifier = notifier or LoggingNotifier()
        self._navigator = navigator or NullNavigator()
        self._changes = ChangeLogStore(store, diff_engine or configured_diff_engine())

        self._event_id = event_id
        self.is_dirty = False
        self.is_deleted = False

        published = store.get_published(event_id) if event_id else None
        self._was_published = self._detect_published(initial_event, published)
        self._baseline = published or (dict(initial_event) if initial_event and self._was_published else None)
        self._record = self._load_record(initial_event)
        self._load_change_log()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _detect_published(self, initial_event: EventRecord | None, published: EventRecord | None) -> bool:
        if initial_event is not None:
            status = initial_event.get("status")
            if status == EventStatus.PUBLISHED.value:
                return True
            # Catalog records carry no status and are live by definition.
            if not status and self.mode is EditorMode.EDIT:
                return True
        return published is not None

    def _load_record(self, initial_event: EventRecord | None) -> EventRecord:
        if self.mode is EditorMode.EDIT and self._event_id:
            draft = self._store.get_draft(self._event_id)
            if draft and initial_event:
                return merge_draft(initial_event, draft)
            if draft:
                return dict(draft)
            if initial_event:
                return dict(initial_event)
        if initial_event:
            return dict(initial_event)
        return new_event_template(self._identity.display_name)

    def _load_change_log(self) -> None:
        if self._event_id is None:
            return
        if self._changes.load(self._event_id):
            return
        if self._was_published and self._baseline is not None:
            self._changes.seed(self._baseline, self._record)

    # ------------------------------------------------------------------
    # State exposed to the UI
    # ------------------------------------------------------------------

    @property
    def event_id(self) -> str | None:
        return self._event_id

    @property
    def record(self) -> EventRecord:
        return dict(self._record)

    @property
    def change_log(self) -> list[ChangeLogEntry]:
        return self._changes.entries

    @property
    def lifecycle(self) -> LifecycleState:
        return LifecycleState.derive(self._record, self._was_published, len(self._changes))

    @property
    def is_published(self) -> bool:
        return self.lifecycle.is_published

    @property
    def is_cancelled(self) -> bool:
        return self.lifecycle.is_cancelled

    @property
    def has_registrations(self) -> bool:
        return self.lifecycle.has_registrations

    @property
    def has_unpublished_changes(self) -> bool:
        return self.lifecycle.has_unpublished_changes

    @property
    def can_unpublish(self) -> bool:
        return self.lifecycle.can_unpublish

    @property
    def can_cancel(self) -> bool:
        return self.lifecycle.can_cancel

    @property
    def can_delete(self) -> bool:
        return self.lifecycle.can_delete

    def missing_required_fields(self) -> list[str]:
        return [label for field_key, label in REQUIRED_FIELDS if not self._record.get(field_key)]

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _organizer_name(self) -> str:
        return self._identity.display_name or self._record.get("organizer", "")

    def _now_iso(self) -> str:
        return self._clock.now().isoformat()

    def _ensure_event_id(self) -> str:
        if self._event_id is None:
            return EventId.generate(timestamp_ms(self._clock.now())).value
        return self._event_id

    def _apply(self, updates: Mapping[str, Any]) -> None:
        ignored = sorted(key for key in updates if key in LIFECYCLE_FIELDS)
        if ignored:
            logger.debug("Ignoring lifecycle fields in edit", extra={"event_id": self._event_id, "fields": ignored})
        updates = {key: value for key, value in updates.items() if key not in LIFECYCLE_FIELDS}
        invalid = invalid_prices(updates.get(DIVISIONS_FIELD))
        if invalid:
            raise InvalidPriceError(invalid)
        self._changes.apply(self._record, updates)
        self._record = {**self._record, **updates}

    def _is_live(self, action: str) -> bool:
        if self.is_deleted:
            logger.debug("Ignoring %s: event was deleted", action, extra={"event_id": self._event_id})
            return False
        return True

    def update(self, updates: Mapping[str, Any]) -> list[ChangeLogEntry]:
        """Apply field edits in memory and record them in the change log.

        Lifecycle fields (id, status, cancelledAt, updatedAt) are ignored.

        Raises:
            InvalidPriceError: If a division price is not a non-negative number.
        """
        if not self._is_live("update"):
            return self.change_log
        self._apply(updates)
        self.is_dirty = True
        self._changes.persist(self._event_id)
        return self.change_log

    def save(self, updates: Mapping[str, Any] | None = None) -> EventRecord:
        """Apply field edits and persist the working draft. Status is kept."""
        if not self._is_live("save"):
            return self.record
        is_first_save = self._event_id is None
        status = EventStatus.PUBLISHED if self.is_published else EventStatus.DRAFT
        event_id = self._ensure_event_id()

        self._apply(updates or {})
        self._event_id = event_id
        self._record = {
            **self._record,
            "id": event_id,
            "organizer": self._organizer_name(),
            "status": status.value,
            "updatedAt": self._now_iso(),
        }

        with transition(self._store, event_id, "save_draft"):
            self._store.save_draft(self._record)
            self._changes.persist(event_id)
        self.is_dirty = False
        logger.info("Saved event draft", extra={"event_id": event_id, "changes": len(self._changes)})

        if self.mode is EditorMode.CREATE and is_first_save:
            self._navigator.replace(f"{EVENTS_LIST_PATH}/{event_id}/edit")
        return self.record

    def publish(self) -> EventRecord:
        """Promote the draft to the published snapshot.

        Raises:
            MissingRequiredFieldsError: If name, description, date or location is empty.
            PersistenceError: If the store rejects the write. Nothing is changed.
        """
        if not self._is_live("publish"):
            return self.record
        missing = self.missing_required_fields()
        if missing:
            error = MissingRequiredFieldsError(missing)
            self._notifier.error(error.message)
            logger.info("Publish rejected", extra={"event_id": self._event_id, "missing": missing})
            raise error

        event_id = self._ensure_event_id()
        final = {
            **self._record,
            "id": event_id,
            "organizer": self._organizer_name(),
            "status": EventStatus.PUBLISHED.value,
            "updatedAt": self._now_iso(),
        }
        final.pop("cancelledAt", None)

        try:
            with transition(self._store, event_id, "publish"):
                self._store.publish(final)
                self._store.delete_draft(event_id)
                self._store.set_change_log(event_id, [])
        except PersistenceError:
            self._notifier.error("Failed to publish event")
            raise

        self._event_id = event_id
        self._record = final
        self._baseline = dict(final)
        self._was_published = True
        self.is_dirty = False
        self._changes.clear()
        logger.info("Published event", extra={"event_id": event_id})

        self._notifier.success("Event published successfully!")
        self._navigator.push(f"/events/{event_id}")
        return self.record

    def _guard(self, action: str, allowed: bool) -> bool:
        if not self._is_live(action):
            return False
        if self._event_id is None or not allowed:
            logger.debug("Ignoring %s: not allowed in current state", action, extra={"event_id": self._event_id})
            return False
        return True

    def _leave_published(self, record: EventRecord) -> None:
        self._record = record
        self._was_published = False
        self._baseline = None
        self.is_dirty = False
        self._changes.clear()

    def unpublish(self) -> None:
        """Return a published event without registrations to draft."""
        if not self._guard("unpublish", self.can_unpublish):
            return
        event_id = self._event_id
        draft = {**self._record, "id": event_id, "status": EventStatus.DRAFT.value}
        with transition(self._store, event_id, "unpublish"):
            self._store.unpublish(event_id)
            self._store.save_draft(draft)
            self._store.set_change_log(event_id, [])
        self._leave_published(draft)
        logger.info("Unpublished event", extra={"event_id": event_id})

        self._notifier.success("Event unpublished and returned to draft")
        self._navigator.push(EVENTS_LIST_PATH)

    def cancel(self) -> None:
        """Take a published event down, keeping it as a draft that remembers it was live."""
        if not self._guard("cancel", self.can_cancel):
            return
        event_id = self._event_id
        now = self._now_iso()
        draft = {
            **self._record,
            "id": event_id,
            "status": EventStatus.DRAFT.value,
            "updatedAt": now,
            "cancelledAt": now,
        }
        with transition(self._store, event_id, "cancel"):
            self._store.save_draft(draft)
            self._store.unpublish(event_id)
            self._store.set_change_log(event_id, [])
        self._leave_published(draft)
        logger.info("Cancelled event", extra={"event_id": event_id})

        self._notifier.success("Event cancelled. Registered attendees will be notified.")
        self._navigator.push(EVENTS_LIST_PATH)

    def delete(self) -> None:
        """Remove every persisted trace of a draft or cancelled event.

        The session is inert afterwards: further actions are no-ops.
        """
        if not self._guard("delete", self.can_delete):
            return
        event_id = self._event_id
        with transition(self._store, event_id, "delete"):
            self._store.unpublish(event_id)
            self._store.delete_draft(event_id)
            self._store.set_change_log(event_id, [])
        self._leave_published(self._record)
        self.is_deleted = True
        logger.info("Deleted event", extra={"event_id": event_id})

        self._notifier.success("Event deleted permanently")
        self._navigator.push(EVENTS_LIST_PATH)

    def discard(self) -> None:
        """Drop unsaved edits and return to the last published snapshot."""
        if self._event_id is None or not self._is_live("discard"):
            return
        event_id = self._event_id
        published = self._store.get_published(event_id) or self._baseline
        if published is None:
            logger.debug("Ignoring discard: nothing published", extra={"event_id": event_id})
            return
        with transition(self._store, event_id, "discard"):
            self._store.delete_draft(event_id)
            self._store.set_change_log(event_id, [])
        self._record = dict(published)
        self.is_dirty = False
        self._changes.clear()
        logger.info("Discarded event changes", extra={"event_id": event_id})

        self._notifier.success("Changes discarded")


def open_editor(store: EventStore, event_id: str, **kwargs: Any) -> EventEditor:
    """Resume an edit session for an existing event.

    Raises:
        InvalidEventIdError: If event_id cannot scope storage keys.
        EventNotFoundError: If neither a draft nor a published record exists.
    """
    try:
        parsed = EventId.from_string(event_id)
    except ValueError as exc:
        raise InvalidEventIdError() from exc

    published = store.get_published(parsed.value)
    if published is None and store.get_draft(parsed.value) is None:
        raise EventNotFoundError(parsed.value)
    return EventEditor(
        store,
        mode=EditorMode.EDIT,
        event_id=parsed.value,
        initial_event=published,
        **kwargs,
    )
