"""Domain primitives that enforce validity at creation time."""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Self

_EVENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


@dataclass(frozen=True)
class EventId:
    """Identifier for an event record; also the scope of its storage keys."""

    value: str

    def __post_init__(self) -> None:
        if not _EVENT_ID_PATTERN.match(self.value):
            raise ValueError(f"Invalid event id: {self.value!r}")

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=value.strip())

    @classmethod
    def generate(cls, timestamp_ms: int) -> Self:
        return cls(value=f"event-{timestamp_ms}")

    def __str__(self) -> str:
        return self.value


class EventStatus(str, Enum):
    """Stored lifecycle status. Cancelled is a draft with a cancelledAt stamp."""

    DRAFT = "draft"
    PUBLISHED = "published"


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if not self.amount.is_finite():
            raise ValueError("Money amount must be a finite number")
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    @classmethod
    def coerce(cls, value: Any) -> Self | None:
        """Build from a raw stored price, or None when unset or not numeric."""
        if value is None or value == "" or isinstance(value, bool):
            return None
        try:
            return cls(amount=Decimal(str(value)))
        except (InvalidOperation, ValueError):
            return None

    def __str__(self) -> str:
        if self.amount == self.amount.to_integral_value():
            return f"${self.amount.to_integral_value()}"
        return f"${self.amount:.2f}"


@dataclass(frozen=True)
class Slots:
    """Team capacity and how much of it registrations have filled."""

    filled: int = 0
    capacity: int = 0

    def __post_init__(self) -> None:
        if self.filled < 0:
            raise ValueError("Filled slots cannot be negative")
        if self.capacity < 0:
            raise ValueError("Capacity cannot be negative")

    @classmethod
    def from_record(cls, value: Any) -> Self:
        if not isinstance(value, dict):
            return cls()
        return cls(
            filled=max(int(value.get("filled") or 0), 0),
            capacity=max(int(value.get("capacity") or 0), 0),
        )

    @property
    def has_registrations(self) -> bool:
        return self.filled > 0
