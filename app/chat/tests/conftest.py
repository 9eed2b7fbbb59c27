"""
Test configuration and fixtures for chat tests.

This module provides:
- Three users: alice and bob share a conversation, carol is an outsider
- The alice/bob conversation
- JWT-authenticated API clients per user

Usage:
    def test_example(conversation, alice_client):
        response = alice_client.get(f'/api/v1/conversations/{conversation.id}/')
        assert response.status_code == 200
"""

import pytest

from authentication.tests.factories import UserFactory
from chat.tests.factories import ConversationFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def alice(db):
    return UserFactory(name="Alice", email="alice@x.com", password="pw1")


@pytest.fixture
def bob(db):
    return UserFactory(name="Bob", email="bob@x.com", password="pw2")


@pytest.fixture
def carol(db):
    """A user who is not a participant in any test conversation."""
    return UserFactory(name="Carol", email="carol@x.com")


# =============================================================================
# Conversation Fixtures
# =============================================================================


@pytest.fixture
def conversation(db, alice, bob):
    """Conversation between alice and bob."""
    return ConversationFactory(participants=[alice, bob])


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def alice_client(alice, authenticated_client_factory):
    return authenticated_client_factory(alice)


@pytest.fixture
def bob_client(bob, authenticated_client_factory):
    return authenticated_client_factory(bob)


@pytest.fixture
def carol_client(carol, authenticated_client_factory):
    return authenticated_client_factory(carol)
