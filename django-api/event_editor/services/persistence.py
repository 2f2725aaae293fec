"""Error mapping for writes to the event store."""

import logging
from contextlib import contextmanager

from event_editor.domain.errors import PersistenceError
from event_editor.stores.interfaces import EventStore

logger = logging.getLogger(__name__)


@contextmanager
def persisting(event_id: str | None, operation: str):
    """
    Turn any failure of the store into a PersistenceError.

    Usage:
        with persisting(event_id, "save_draft"):
            store.save_draft(record)
    """
    try:
        yield
    except PersistenceError:
        raise
    except Exception as exc:
        logger.error(
            "Persistence write failed",
            exc_info=True,
            extra={"event_id": event_id, "operation": operation},
        )
        raise PersistenceError(event_id, operation) from exc


@contextmanager
def transition(store: EventStore, event_id: str | None, operation: str):
    """
    Run several store writes as one lifecycle step.

    Either every write lands or none does, and the failure surfaces as a
    PersistenceError.
    """
    with persisting(event_id, operation), store.atomic():
        yield
