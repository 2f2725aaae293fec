"""Event editor app configuration."""

from django.apps import AppConfig


class EventEditorConfig(AppConfig):
    """Configuration for the event editor app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "event_editor"
    verbose_name = "Event Editor"

    def ready(self) -> None:
        from event_editor import signals  # noqa: F401
