"""
Serializers for AuditLog model.
"""

from rest_framework import serializers
from apps.audit.models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    """Serializer for AuditLog."""

    id = serializers.UUIDField(read_only=True)
    actorId = serializers.UUIDField(source="actor_id", read_only=True, allow_null=True)
    societyId = serializers.UUIDField(
        source="society_id", read_only=True, allow_null=True
    )
    tableName = serializers.CharField(source="table_name", read_only=True)
    recordId = serializers.CharField(source="record_id", read_only=True)
    oldValues = serializers.JSONField(
        source="old_values", read_only=True, allow_null=True
    )
    newValues = serializers.JSONField(
        source="new_values", read_only=True, allow_null=True
    )
    ipAddress = serializers.CharField(source="ip_address", read_only=True)
    requestId = serializers.CharField(source="request_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = AuditLog
        fields = [
            "id",
            "action",
            "actorId",
            "societyId",
            "tableName",
            "recordId",
            "oldValues",
            "newValues",
            "ipAddress",
            "requestId",
            "createdAt",
        ]
