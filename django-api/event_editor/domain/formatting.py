"""Human-readable rendering of field values for the change log."""

import json
from datetime import datetime
from typing import Any

from event_editor.domain.models import DIVISIONS_FIELD, priced_items

EMPTY = "empty"
NOT_SET = "not set"

TOGGLE_FIELDS = frozenset({"earlyBirdEnabled", "registrationEnabled"})

# field -> (singular, plural)
COLLECTION_NOUNS: dict[str, tuple[str, str]] = {
    "gallery": ("image", "images"),
    "documents": ("document", "documents"),
}


def is_date_field(field_key: str) -> bool:
    return field_key == "date" or "Date" in field_key or "Deadline" in field_key


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    noun = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {noun}"


def format_price(price: Any) -> str:
    return str(price) if price is not None else NOT_SET


def _parse_date(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None


class ValueFormatter:
    """Renders a raw field value into a short, stable display string.

    Long strings keep their length as a suffix so two different long values
    never render identically.
    """

    def __init__(self, long_string_limit: int = 50, truncate_to: int = 35) -> None:
        self.long_string_limit = long_string_limit
        self.truncate_to = truncate_to

    def format(self, field_key: str, value: Any) -> str:
        if value is None or value == "":
            return EMPTY

        if isinstance(value, bool):
            if field_key in TOGGLE_FIELDS:
                return "enabled" if value else "disabled"
            return "Yes" if value else "No"

        if is_date_field(field_key):
            parsed = _parse_date(value)
            if parsed is not None:
                return f"{parsed:%b} {parsed.day}, {parsed.year}"

        if isinstance(value, list):
            if field_key == DIVISIONS_FIELD:
                return self.format_divisions(value)
            singular, plural = COLLECTION_NOUNS.get(field_key, ("item", "items"))
            return pluralize(len(value), singular, plural)

        if isinstance(value, dict):
            if "capacity" in value:
                capacity = value.get("capacity")
                return f"{capacity} teams" if capacity else "Unlimited"
            return json.dumps(value, sort_keys=True, default=str)

        text = str(value)
        if len(text) > self.long_string_limit:
            return f"{text[:self.truncate_to]}... ({len(text)} chars)"
        return text

    def format_divisions(self, value: list) -> str:
        items = list(priced_items(value).values())
        if not items:
            return "no divisions"
        if len(items) == 1:
            only = items[0]
            price = only.price("regular")
            return f"{only.name} @ {price}" if price is not None else only.name

        prices = [item.price("regular") for item in items if item.price("regular") is not None]
        summary = pluralize(len(items), "division")
        if not prices:
            return summary
        low = min(prices, key=lambda money: money.amount)
        high = max(prices, key=lambda money: money.amount)
        return f"{summary} ({low}-{high})"
