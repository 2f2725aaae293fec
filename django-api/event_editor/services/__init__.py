from event_editor.services.collaborators import (
    EditorIdentity,
    LoggingNotifier,
    NullNavigator,
    RecordingNavigator,
    RecordingNotifier,
    SystemClock,
)
from event_editor.services.editor_service import EditorMode, EventEditor, open_editor

__all__ = [
    "EditorIdentity",
    "EditorMode",
    "EventEditor",
    "LoggingNotifier",
    "NullNavigator",
    "RecordingNavigator",
    "RecordingNotifier",
    "SystemClock",
    "open_editor",
]
