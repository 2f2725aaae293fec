"""Django ORM models (persistence layer).

Domain logic lives in domain/. The editor persists everything as keyed JSON
values; see stores/keyvalue_store.py for the key layout.
"""

from django.db import models


class StoredValue(models.Model):
    """Persistence model for one key-value slot."""

    key = models.CharField(max_length=255, primary_key=True)
    value = models.JSONField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["key"]

    def __str__(self) -> str:
        return self.key
