"""
Tests for authentication services.

RegistrationService:
    - Creates users with normalized email and hashed password
    - Rejects duplicate emails with EMAIL_EXISTS, including the race where
      the unique constraint fires after the lookup passed

UserDirectoryService:
    - Lists active users other than the requester, ordered by name
    - Resolves ids from request bodies, treating junk as not found
"""

from unittest.mock import patch

import pytest
from django.db import IntegrityError

from authentication.models import User
from authentication.services import RegistrationService, UserDirectoryService
from authentication.tests.factories import UserFactory


class TestRegistrationService:
    """Tests for RegistrationService.register()."""

    def test_register_creates_user(self, db):
        result = RegistrationService.register("Alice", "alice@x.com", "pw1")

        assert result.success is True
        user = result.data
        assert user.name == "Alice"
        assert user.email == "alice@x.com"
        assert user.check_password("pw1")

    def test_register_normalizes_email_and_strips_name(self, db):
        result = RegistrationService.register("  Alice ", "Alice@X.com", "pw1")

        assert result.data.email == "alice@x.com"
        assert result.data.name == "Alice"

    def test_register_duplicate_email_fails(self, db):
        UserFactory(email="alice@x.com")

        result = RegistrationService.register("Other", "ALICE@x.com", "pw")

        assert result.success is False
        assert result.error_code == "EMAIL_EXISTS"
        assert User.objects.count() == 1

    def test_register_integrity_error_is_reported_as_duplicate(self, db):
        """
        Two registrations racing on one address: the lookup sees nothing,
        then the insert hits the unique constraint.
        """
        with patch.object(
            User.objects, "create_user", side_effect=IntegrityError("duplicate")
        ):
            result = RegistrationService.register("Alice", "alice@x.com", "pw1")

        assert result.success is False
        assert result.error_code == "EMAIL_EXISTS"


class TestUserDirectoryService:
    """Tests for UserDirectoryService."""

    def test_list_users_excludes_requester(self, db):
        alice = UserFactory(name="Alice")
        bob = UserFactory(name="Bob")

        assert list(UserDirectoryService.list_users(alice)) == [bob]

    def test_list_users_excludes_inactive(self, db):
        alice = UserFactory(name="Alice")
        UserFactory(name="Gone", is_active=False)

        assert list(UserDirectoryService.list_users(alice)) == []

    def test_list_users_ordered_by_name(self, db):
        requester = UserFactory(name="Zed")
        carol = UserFactory(name="Carol")
        bob = UserFactory(name="Bob")

        assert list(UserDirectoryService.list_users(requester)) == [bob, carol]

    def test_get_active_user_accepts_string_id(self, db):
        bob = UserFactory()

        result = UserDirectoryService.get_active_user(str(bob.pk))

        assert result.success is True
        assert result.data == bob

    @pytest.mark.parametrize("user_id", ["abc", 999999, None, "1.5"])
    def test_get_active_user_not_found(self, db, user_id):
        result = UserDirectoryService.get_active_user(user_id)

        assert result.success is False
        assert result.error_code == "USER_NOT_FOUND"

    def test_get_active_user_inactive_is_not_found(self, db):
        gone = UserFactory(is_active=False)

        result = UserDirectoryService.get_active_user(gone.pk)

        assert result.error_code == "USER_NOT_FOUND"
