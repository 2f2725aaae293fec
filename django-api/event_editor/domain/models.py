"""Domain models for the event editor.

An event record is kept as a plain mapping of field name to JSON-compatible
value, exactly as it is stored and exchanged with the UI. The types here wrap
the parts of it the editor reasons about.
"""

from dataclasses import dataclass, field
from typing import Any, Self

from event_editor.domain.value_objects import EventStatus, Money, Slots

EventRecord = dict[str, Any]

DIVISIONS_FIELD = "availableDivisions"

# (tier key, label used in change-log display names)
PRICE_TIERS: tuple[tuple[str, str], ...] = (
    ("regular", "Regular Price"),
    ("earlyBird", "Early Bird Price"),
)

FIELD_DISPLAY_NAMES: dict[str, str] = {
    "name": "Event Title",
    "description": "Description",
    "date": "Event Date",
    "location": "Location",
    "venue": "Venue",
    "registrationStartDate": "Registration Opens",
    "registrationDeadline": "Registration Closes",
    "registrationEnabled": "Registration",
    "earlyBirdEnabled": "Early Bird Pricing",
    "earlyBirdDeadline": "Early Bird Deadline",
    "earlyBirdDiscount": "Early Bird Discount",
    DIVISIONS_FIELD: "Division Pricing",
    "gallery": "Gallery",
    "image": "Cover Image",
    "documents": "Documents",
    "status": "Status",
    "visibility": "Visibility",
    "slots": "Team Capacity",
}

# (field, label reported when it is missing at publish time)
REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("name", "event name"),
    ("description", "description"),
    ("date", "event date"),
    ("location", "location"),
)

# Owned by the lifecycle actions; never taken from field edits.
LIFECYCLE_FIELDS = frozenset({"id", "status", "cancelledAt", "updatedAt"})


def display_name_for(field_key: str) -> str:
    return FIELD_DISPLAY_NAMES.get(field_key, field_key)


def is_empty_value(value: Any) -> bool:
    """True for values a stale draft must not write over a published one."""
    return value is None or value == "" or (isinstance(value, list) and not value)


@dataclass(frozen=True)
class PricedItem:
    """One division of the priced collection. The name is its identity."""

    name: str
    prices: dict[str, Money | None] = field(default_factory=dict)

    @classmethod
    def from_record(cls, value: dict[str, Any]) -> Self:
        prices = {}
        for tier, _label in PRICE_TIERS:
            tier_value = value.get(tier)
            raw_price = tier_value.get("price") if isinstance(tier_value, dict) else None
            prices[tier] = Money.coerce(raw_price)
        return cls(name=str(value.get("name", "")), prices=prices)

    def price(self, tier: str) -> Money | None:
        return self.prices.get(tier)


def priced_items(value: Any) -> dict[str, PricedItem]:
    """Name-keyed view of a priced collection; later duplicates win."""
    if not isinstance(value, list):
        return {}
    items = {}
    for raw in value:
        if isinstance(raw, dict):
            item = PricedItem.from_record(raw)
            items[item.name] = item
    return items


def invalid_prices(value: Any) -> list[str]:
    """Labels of tier prices that are set but are not non-negative numbers."""
    if not isinstance(value, list):
        return []
    invalid = []
    for raw in value:
        if not isinstance(raw, dict):
            continue
        for tier, label in PRICE_TIERS:
            tier_value = raw.get(tier)
            raw_price = tier_value.get("price") if isinstance(tier_value, dict) else None
            if raw_price is None or raw_price == "":
                continue
            if Money.coerce(raw_price) is None:
                invalid.append(f"{raw.get('name', '')} {label}".strip())
    return invalid


@dataclass(frozen=True)
class ChangeLogEntry:
    """One row of the audit log.

    ``old_value``/``new_value`` are for display. ``raw_old``/``raw_new`` are
    serialized values used only to decide merges and reverts.
    """

    field: str
    display_name: str
    old_value: str
    new_value: str
    raw_old: str
    raw_new: str

    @property
    def is_reverted(self) -> bool:
        return self.raw_old == self.raw_new

    def to_dict(self) -> dict[str, str]:
        return {
            "field": self.field,
            "displayName": self.display_name,
            "oldValue": self.old_value,
            "newValue": self.new_value,
            "rawOld": self.raw_old,
            "rawNew": self.raw_new,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Raises ``KeyError``/``TypeError`` for rows that are not entries."""
        values = {
            "field": data["field"],
            "display_name": data["displayName"],
            "old_value": data["oldValue"],
            "new_value": data["newValue"],
            "raw_old": data["rawOld"],
            "raw_new": data["rawNew"],
        }
        for key, value in values.items():
            if not isinstance(value, str):
                raise TypeError(f"Change log entry {key} must be a string")
        return cls(**values)


@dataclass(frozen=True)
class LifecycleState:
    """Derived lifecycle flags and the action guards computed from them."""

    is_published: bool
    is_cancelled: bool
    has_registrations: bool
    has_unpublished_changes: bool

    @classmethod
    def derive(cls, record: EventRecord, was_published: bool, pending_changes: int) -> Self:
        status = record.get("status")
        is_cancelled = status != EventStatus.PUBLISHED.value and bool(record.get("cancelledAt"))
        is_published = status == EventStatus.PUBLISHED.value or was_published
        return cls(
            is_published=is_published,
            is_cancelled=is_cancelled,
            has_registrations=Slots.from_record(record.get("slots")).has_registrations,
            has_unpublished_changes=is_published and pending_changes > 0,
        )

    @property
    def can_unpublish(self) -> bool:
        return self.is_published and not self.is_cancelled and not self.has_registrations

    @property
    def can_cancel(self) -> bool:
        return self.is_published and not self.is_cancelled

    @property
    def can_delete(self) -> bool:
        return (not self.is_published or self.is_cancelled) and not self.has_registrations
