from event_editor.domain.change_log import ChangeLog
from event_editor.domain.diff import DiffStrategy, FieldDiffEngine, PricedCollectionDiffStrategy, ScalarDiffStrategy
from event_editor.domain.formatting import ValueFormatter
from event_editor.domain.models import ChangeLogEntry, EventRecord, LifecycleState, PricedItem
from event_editor.domain.value_objects import EventId, EventStatus, Money, Slots

__all__ = [
    "ChangeLog",
    "ChangeLogEntry",
    "DiffStrategy",
    "EventId",
    "EventRecord",
    "EventStatus",
    "FieldDiffEngine",
    "LifecycleState",
    "Money",
    "PricedCollectionDiffStrategy",
    "PricedItem",
    "ScalarDiffStrategy",
    "Slots",
    "ValueFormatter",
]
