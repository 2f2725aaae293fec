"""Access to the ``EVENT_EDITOR`` settings block with defaults."""

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "KEY_PREFIX": "cheerbase-organizer-events",
    "STORE_BACKEND": "database",
    "CACHE_ALIAS": "default",
    "LONG_STRING_LIMIT": 50,
    "TRUNCATE_TO": 35,
}


def get_setting(name: str) -> Any:
    if name not in DEFAULTS:
        raise KeyError(f"Unknown event editor setting: {name}")
    return getattr(settings, "EVENT_EDITOR", {}).get(name, DEFAULTS[name])
