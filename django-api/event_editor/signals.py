"""Django signals for cache invalidation."""

from django.core.cache import caches
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from event_editor.conf import get_setting
from event_editor.models import StoredValue
from event_editor.stores.django_store import cache_key_for


@receiver([post_save, post_delete], sender=StoredValue)
def invalidate_stored_value_cache(sender, instance, **kwargs):
    """Invalidate the read-through cache when a stored value changes."""
    caches[get_setting("CACHE_ALIAS")].delete(cache_key_for(instance.key))
