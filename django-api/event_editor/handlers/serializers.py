"""Serializers for transforming editor state to API responses."""

from rest_framework import serializers

from event_editor.domain.models import LIFECYCLE_FIELDS


class ChangeLogEntrySerializer(serializers.Serializer):
    """Serializer for ChangeLogEntry. Raw values never leave the server."""

    field = serializers.CharField()
    displayName = serializers.CharField(source="display_name")
    oldValue = serializers.CharField(source="old_value")
    newValue = serializers.CharField(source="new_value")


class LifecycleStateSerializer(serializers.Serializer):
    """Serializer for LifecycleState, guards included."""

    isPublished = serializers.BooleanField(source="is_published")
    isCancelled = serializers.BooleanField(source="is_cancelled")
    hasRegistrations = serializers.BooleanField(source="has_registrations")
    hasUnpublishedChanges = serializers.BooleanField(source="has_unpublished_changes")
    canUnpublish = serializers.BooleanField(source="can_unpublish")
    canCancel = serializers.BooleanField(source="can_cancel")
    canDelete = serializers.BooleanField(source="can_delete")


class EditorStateSerializer(serializers.Serializer):
    """Serializer for an EventEditor session."""

    eventId = serializers.CharField(source="event_id", allow_null=True)
    mode = serializers.CharField(source="mode.value")
    event = serializers.DictField(source="record")
    isDirty = serializers.BooleanField(source="is_dirty")
    isDeleted = serializers.BooleanField(source="is_deleted")
    lifecycle = LifecycleStateSerializer()
    changeLog = ChangeLogEntrySerializer(source="change_log", many=True)


class SaveRequestSerializer(serializers.Serializer):
    """Input for save: a partial event record."""

    updates = serializers.DictField(child=serializers.JSONField(), required=False, default=dict)

    def validate_updates(self, value):
        owned = sorted(key for key in value if key in LIFECYCLE_FIELDS)
        if owned:
            raise serializers.ValidationError(f"Set by lifecycle actions, not by edits: {', '.join(owned)}")
        return value
