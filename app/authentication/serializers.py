"""
Serializers for authentication.

This module provides DRF serializers for:
- User model (read operations, also the dj-rest-auth user details serializer)
- Registration requests
- Login requests (email + password, no username field)

Related files:
    - views.py: Views that use these serializers
    - services.py: RegistrationService
    - settings.py: REST_AUTH serializer configuration

Security:
    - Password fields are write-only
"""

from dj_rest_auth.serializers import LoginSerializer as BaseLoginSerializer
from rest_framework import serializers

from authentication.models import User


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for User model (read operations).

    Used by dj-rest-auth for the /api/v1/auth/user/ endpoint, the
    directory, and participant lists in chat responses.
    """

    class Meta:
        model = User
        fields = ["id", "name", "email", "date_joined"]
        read_only_fields = ["id", "email", "date_joined"]


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user representation embedded in conversations and messages."""

    class Meta:
        model = User
        fields = ["id", "name", "email"]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    """
    Serializer for user registration.

    Validates shape only. Duplicate emails are a conflict, not a validation
    failure, so RegistrationService reports them.
    """

    name = serializers.CharField(max_length=150, trim_whitespace=True)
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        trim_whitespace=False,
        style={"input_type": "password"},
    )

    def validate_email(self, value):
        return value.lower().strip()


class LoginSerializer(BaseLoginSerializer):
    """dj-rest-auth login, restricted to email + password."""

    username = None


class AuthTokensSerializer(serializers.Serializer):
    """JWT pair returned alongside a newly registered user."""

    access = serializers.CharField()
    refresh = serializers.CharField()


class RegisterResponseSerializer(serializers.Serializer):
    user = UserSerializer()
    tokens = AuthTokensSerializer()


class UserDirectorySerializer(serializers.Serializer):
    users = UserSummarySerializer(many=True)
