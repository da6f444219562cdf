"""
Serializers for User model.

No business logic in serializers - validation only.
"""

from rest_framework import serializers
from apps.users.models import User, Role, UserStatus
from apps.users.services import permissions_for_role


class UserSerializer(serializers.ModelSerializer):
    """Serializer for User model."""

    id = serializers.UUIDField(read_only=True)
    role = serializers.ChoiceField(choices=Role.choices, read_only=True)
    status = serializers.ChoiceField(choices=UserStatus.choices, read_only=True)
    societyId = serializers.UUIDField(source="society_id", read_only=True)
    permissions = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "email", "name", "phone", "role", "status", "societyId", "permissions"]
        read_only_fields = fields

    def get_permissions(self, obj):
        return list(permissions_for_role(obj.role))


class AdminContactSerializer(serializers.ModelSerializer):
    """Society admin contact details."""

    class Meta:
        model = User
        fields = ["id", "name", "email", "phone"]
        read_only_fields = fields
