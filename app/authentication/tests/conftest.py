"""
Test configuration and fixtures for authentication tests.

This module provides:
- User fixtures (active, inactive, staff)
- A JWT-authenticated API client for the default user

Client fixtures shared across apps (api_client, authenticated_client_factory)
live in the project conftest.

Usage:
    def test_example(user, authenticated_client):
        response = authenticated_client.get('/api/v1/auth/user/')
        assert response.status_code == 200
"""

import pytest

from authentication.models import User
from authentication.tests.factories import UserFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """Create a basic active user."""
    return UserFactory(name="Test User", email="test@example.com")


@pytest.fixture
def superuser(db):
    """Create a superuser with admin privileges."""
    return User.objects.create_superuser(
        email="admin@example.com", password="AdminPass123!", name="Admin"
    )


@pytest.fixture
def deactivated_user(db):
    """Create a deactivated user (is_active=False)."""
    return UserFactory(is_active=False)


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def authenticated_client(user, authenticated_client_factory):
    """
    API client authenticated with JWT token for the default user fixture.

    Use this for tests that need a logged-in user.
    """
    return authenticated_client_factory(user)
