"""Ports the editor drives for time, identity and UI side effects."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from django.utils import timezone

LOGGER = logging.getLogger("event_editor.notifications")


class Clock(Protocol):
    """Port for the current time."""

    def now(self) -> datetime:
        """Return the current, timezone-aware time."""


class SystemClock:
    def now(self) -> datetime:
        return timezone.now()


def timestamp_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


@dataclass(frozen=True)
class EditorIdentity:
    """Who is editing. Only used to stamp the organizer on saved records."""

    user_id: str | None = None
    display_name: str = ""


class Notifier(Protocol):
    """Port for user-facing toast messages."""

    def success(self, message: str) -> None:
        """Report a completed action."""

    def error(self, message: str) -> None:
        """Report a failed action."""


class LoggingNotifier:
    """Emit toasts to the logs when no UI is attached."""

    def success(self, message: str) -> None:
        LOGGER.info("notify_success", extra={"toast": message})

    def error(self, message: str) -> None:
        LOGGER.warning("notify_error", extra={"toast": message})


@dataclass
class RecordingNotifier:
    """Collect toasts so they can be returned to an API client."""

    messages: list[dict[str, str]] = field(default_factory=list)

    def success(self, message: str) -> None:
        self.messages.append({"level": "success", "message": message})

    def error(self, message: str) -> None:
        self.messages.append({"level": "error", "message": message})


class Navigator(Protocol):
    """Port for route changes after an action."""

    def push(self, path: str) -> None:
        """Navigate to path, keeping history."""

    def replace(self, path: str) -> None:
        """Navigate to path, replacing the current history entry."""


class NullNavigator:
    """No-op navigator used when there is nothing to route."""

    def push(self, path: str) -> None:  # noqa: ARG002
        return

    def replace(self, path: str) -> None:  # noqa: ARG002
        return


@dataclass
class RecordingNavigator:
    """Remember the last requested route."""

    redirect: str | None = None
    replace_history: bool = False

    def push(self, path: str) -> None:
        self.redirect = path
        self.replace_history = False

    def replace(self, path: str) -> None:
        self.redirect = path
        self.replace_history = True
