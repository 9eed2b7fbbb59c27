"""
Tests for chat API views.

This module tests:
- ConversationViewSet: list, open (find-or-create), retrieve
- MessageViewSet: list by ?conversationId=, send

Testing Philosophy:
    Tests focus on observable HTTP behavior:
    - Response status codes and envelopes
    - Error bodies ({"error", "error_code"})
    - Database state changes
"""

import uuid

import pytest
from freezegun import freeze_time
from rest_framework import status

from authentication.tests.factories import UserFactory
from chat.models import Conversation, Message
from chat.tests.factories import ConversationFactory, MessageFactory

# =============================================================================
# URL Constants
# =============================================================================


CONVERSATIONS_URL = "/api/v1/conversations/"
MESSAGES_URL = "/api/v1/messages/"


def conversation_url(conversation_id) -> str:
    return f"{CONVERSATIONS_URL}{conversation_id}/"


class TestAuthenticationRequired:
    @pytest.mark.parametrize(
        "method,url",
        [
            ("get", CONVERSATIONS_URL),
            ("post", CONVERSATIONS_URL),
            ("get", MESSAGES_URL),
            ("post", MESSAGES_URL),
        ],
    )
    def test_anonymous_gets_401(self, api_client, db, method, url):
        response = getattr(api_client, method)(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data["error_code"] == "NOT_AUTHENTICATED"


# =============================================================================
# Conversations
# =============================================================================


class TestConversationList:
    """GET /api/v1/conversations/"""

    def test_lists_conversations_with_participants_and_last_message(
        self, alice_client, conversation, alice, bob
    ):
        MessageFactory(conversation=conversation, sender=bob, content="yo")

        response = alice_client.get(CONVERSATIONS_URL)

        assert response.status_code == status.HTTP_200_OK
        [item] = response.data["conversations"]
        assert item["id"] == conversation.id
        assert {p["id"] for p in item["participants"]} == {alice.id, bob.id}
        assert item["lastMessage"]["content"] == "yo"
        assert item["lastMessage"]["sender"]["name"] == "Bob"

    def test_conversation_without_messages_has_null_last_message(
        self, alice_client, conversation
    ):
        response = alice_client.get(CONVERSATIONS_URL)

        assert response.data["conversations"][0]["lastMessage"] is None

    def test_excludes_other_peoples_conversations(self, carol_client, conversation):
        response = carol_client.get(CONVERSATIONS_URL)

        assert response.data == {"conversations": []}

    def test_most_recently_active_first(self, alice_client, alice):
        with freeze_time("2025-01-01 10:00:00"):
            quiet = ConversationFactory(participants=[alice, UserFactory()])
        with freeze_time("2025-01-01 11:00:00"):
            busy = ConversationFactory(participants=[alice, UserFactory()])

        ids = [c["id"] for c in alice_client.get(CONVERSATIONS_URL).data["conversations"]]
        assert ids == [busy.id, quiet.id]

        alice_client.post(
            MESSAGES_URL, {"conversationId": quiet.id, "content": "wake up"}
        )

        ids = [c["id"] for c in alice_client.get(CONVERSATIONS_URL).data["conversations"]]
        assert ids == [quiet.id, busy.id]


class TestConversationOpen:
    """POST /api/v1/conversations/"""

    def test_creates_conversation(self, alice_client, alice, bob):
        response = alice_client.post(CONVERSATIONS_URL, {"otherUserId": bob.id})

        assert response.status_code == status.HTTP_200_OK
        participants = response.data["conversation"]["participants"]
        assert {p["email"] for p in participants} == {"alice@x.com", "bob@x.com"}

    def test_returns_same_conversation_twice(self, alice_client, bob_client, alice, bob):
        first = alice_client.post(CONVERSATIONS_URL, {"otherUserId": bob.id})
        second = bob_client.post(CONVERSATIONS_URL, {"otherUserId": alice.id})

        assert first.data["conversation"]["id"] == second.data["conversation"]["id"]
        assert Conversation.objects.count() == 1

    def test_missing_other_user_id(self, alice_client):
        response = alice_client.post(CONVERSATIONS_URL, {})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "MISSING_FIELD"

    def test_self_chat_rejected(self, alice_client, alice):
        response = alice_client.post(CONVERSATIONS_URL, {"otherUserId": alice.id})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "SAME_USER"

    def test_unknown_user_404(self, alice_client):
        response = alice_client.post(CONVERSATIONS_URL, {"otherUserId": 987654})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {"error": "User not found", "error_code": "USER_NOT_FOUND"}


class TestConversationRetrieve:
    """GET /api/v1/conversations/{id}/"""

    def test_participant_gets_detail(self, bob_client, conversation):
        response = bob_client.get(conversation_url(conversation.id))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["conversation"]["id"] == conversation.id

    @pytest.mark.parametrize("target", ["other", "missing", "garbage"])
    def test_denials_are_indistinguishable(self, carol_client, conversation, target):
        conversation_id = {
            "other": conversation.id,
            "missing": 999999,
            "garbage": "abc",
        }[target]

        response = carol_client.get(conversation_url(conversation_id))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data == {"error": "Forbidden", "error_code": "NOT_PARTICIPANT"}


# =============================================================================
# Messages
# =============================================================================


class TestMessageList:
    """GET /api/v1/messages/?conversationId="""

    def test_lists_messages_in_order(self, bob_client, conversation, alice, bob):
        with freeze_time("2025-01-01 09:00:00"):
            MessageFactory(conversation=conversation, sender=alice, content="one")
        with freeze_time("2025-01-01 09:01:00"):
            MessageFactory(conversation=conversation, sender=bob, content="two")

        response = bob_client.get(MESSAGES_URL, {"conversationId": conversation.id})

        assert response.status_code == status.HTTP_200_OK
        messages = response.data["messages"]
        assert [m["content"] for m in messages] == ["one", "two"]
        assert messages[0]["senderId"] == alice.id
        assert messages[0]["conversationId"] == conversation.id
        assert messages[0]["sender"]["email"] == "alice@x.com"

    def test_missing_conversation_id(self, alice_client):
        response = alice_client.get(MESSAGES_URL)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "MISSING_FIELD"

    def test_outsider_forbidden(self, carol_client, conversation):
        response = carol_client.get(MESSAGES_URL, {"conversationId": conversation.id})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["error_code"] == "NOT_PARTICIPANT"


class TestMessageSend:
    """POST /api/v1/messages/"""

    def test_send_returns_201(self, alice_client, conversation, alice):
        response = alice_client.post(
            MESSAGES_URL, {"conversationId": conversation.id, "content": "hi"}
        )

        assert response.status_code == status.HTTP_201_CREATED
        message = response.data["message"]
        assert message["content"] == "hi"
        assert message["senderId"] == alice.id
        assert message["clientKey"] is None
        assert Message.objects.count() == 1

    @pytest.mark.parametrize(
        "with_conversation,content,error_code",
        [
            (False, "hi", "MISSING_FIELD"),
            (True, None, "MISSING_FIELD"),
            (True, "", "MISSING_FIELD"),
            (True, "   ", "EMPTY_CONTENT"),
        ],
    )
    def test_invalid_input_400(
        self, alice_client, conversation, with_conversation, content, error_code
    ):
        payload = {}
        if with_conversation:
            payload["conversationId"] = conversation.id
        if content is not None:
            payload["content"] = content

        response = alice_client.post(MESSAGES_URL, payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == error_code
        assert Message.objects.count() == 0

    def test_outsider_forbidden(self, carol_client, conversation):
        response = carol_client.post(
            MESSAGES_URL, {"conversationId": conversation.id, "content": "hi"}
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Message.objects.count() == 0

    def test_client_key_replay_returns_200_with_same_message(
        self, alice_client, conversation
    ):
        key = str(uuid.uuid4())
        payload = {"conversationId": conversation.id, "content": "hi", "clientKey": key}

        first = alice_client.post(MESSAGES_URL, payload)
        second = alice_client.post(MESSAGES_URL, payload)

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_200_OK
        assert second.data["message"]["id"] == first.data["message"]["id"]
        assert second.data["message"]["clientKey"] == key
        assert Message.objects.count() == 1

    def test_client_key_reuse_across_conversations_409(
        self, alice_client, conversation, alice
    ):
        other = ConversationFactory(participants=[alice, UserFactory()])
        key = str(uuid.uuid4())
        alice_client.post(
            MESSAGES_URL,
            {"conversationId": conversation.id, "content": "a", "clientKey": key},
        )

        response = alice_client.post(
            MESSAGES_URL,
            {"conversationId": other.id, "content": "b", "clientKey": key},
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "DUPLICATE_CLIENT_KEY"

    def test_malformed_client_key_400(self, alice_client, conversation):
        response = alice_client.post(
            MESSAGES_URL,
            {"conversationId": conversation.id, "content": "hi", "clientKey": "nope"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "VALIDATION_ERROR"
        assert "clientKey" in response.data["errors"]
