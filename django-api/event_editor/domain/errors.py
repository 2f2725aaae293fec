"""Domain error codes for the event editor."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    MISSING_REQUIRED_FIELDS = "MISSING_REQUIRED_FIELDS"
    INVALID_PRICE = "INVALID_PRICE"
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when no draft or published record exists for an id."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class InvalidEventIdError(DomainError):
    """Raised when an event ID cannot be used as a storage scope."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class MissingRequiredFieldsError(DomainError):
    """Raised by publish when required fields are empty.

    Nothing has been mutated when this is raised; supplying the fields and
    publishing again is enough to recover.
    """

    def __init__(self, missing_fields: list[str]) -> None:
        super().__init__(
            code=ErrorCode.MISSING_REQUIRED_FIELDS,
            message=f"Missing required fields: {', '.join(missing_fields)}",
        )
        self.missing_fields = list(missing_fields)


class InvalidPriceError(DomainError):
    """Raised when a division price is present but not a non-negative number."""

    def __init__(self, invalid_prices: list[str]) -> None:
        super().__init__(
            code=ErrorCode.INVALID_PRICE,
            message=f"Invalid prices: {', '.join(invalid_prices)}",
        )
        self.invalid_prices = list(invalid_prices)


class PersistenceError(DomainError):
    """Raised when a write to durable storage fails.

    After a field edit the in-memory draft and change log already hold the
    change. Lifecycle transitions are rolled back in full and leave the
    session as it was.
    """

    def __init__(self, event_id: str | None, operation: str) -> None:
        super().__init__(
            code=ErrorCode.PERSISTENCE_FAILED,
            message="Changes could not be saved",
        )
        self.event_id = event_id
        self.operation = operation
