"""
Tests for the User model.

Covers field defaults, the case-insensitive email constraint and the
display-name helpers used across chat responses.
"""

import pytest
from django.db import IntegrityError
from freezegun import freeze_time

from authentication.models import User
from authentication.tests.factories import UserFactory


class TestUserModel:
    """Tests for User fields and helpers."""

    def test_str_returns_email(self, user):
        assert str(user) == "test@example.com"

    def test_email_must_be_unique(self, db, user):
        with pytest.raises(IntegrityError):
            User.objects.create(email=user.email)

    def test_email_unique_ignores_case(self, db, user):
        """
        The Lower(email) constraint rejects case variants even when they
        bypass the manager's normalization.
        """
        with pytest.raises(IntegrityError):
            User.objects.create(email=user.email.upper())

    def test_date_joined_is_set_on_creation(self, db):
        with freeze_time("2025-03-01 12:00:00"):
            user = UserFactory()

        assert user.date_joined.isoformat().startswith("2025-03-01T12:00:00")

    def test_get_full_name_returns_name_when_set(self, db):
        user = UserFactory(name="Alice Smith")

        assert user.get_full_name() == "Alice Smith"

    def test_get_full_name_falls_back_to_email(self, db):
        user = UserFactory(name="", email="anon@example.com")

        assert user.get_full_name() == "anon@example.com"

    def test_get_short_name(self, db):
        assert UserFactory(name="Alice Smith").get_short_name() == "Alice"
        assert UserFactory(name="", email="bob@x.com").get_short_name() == "bob"

    def test_users_ordered_by_date_joined_descending(self, db):
        with freeze_time("2025-01-01"):
            older = UserFactory()
        with freeze_time("2025-02-01"):
            newer = UserFactory()

        assert list(User.objects.all()) == [newer, older]
