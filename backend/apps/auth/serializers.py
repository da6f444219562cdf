"""
Serializers for authentication endpoints.
"""

from rest_framework import serializers


class LoginSerializer(serializers.Serializer):
    """Serializer for login request."""

    email = serializers.CharField(required=True)
    password = serializers.CharField(required=True, write_only=True)

    def validate(self, attrs):
        email = attrs.get("email")
        password = attrs.get("password")

        if not email or not password:
            raise serializers.ValidationError("Email and password are required")

        return attrs


class LogoutSerializer(serializers.Serializer):
    """Serializer for logout response."""

    success = serializers.BooleanField(default=True)
    message = serializers.CharField(default="Logout successful")
