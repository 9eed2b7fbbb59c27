"""
End-to-end chat journey through the public API.

Two people register, find each other in the directory, open a
conversation and exchange a message, using only HTTP calls and the tokens
the API hands out.
"""

from rest_framework import status
from rest_framework.test import APIClient

REGISTER_URL = "/api/v1/auth/register/"
LOGIN_URL = "/api/v1/auth/login/"
USERS_URL = "/api/v1/users/"
CONVERSATIONS_URL = "/api/v1/conversations/"
MESSAGES_URL = "/api/v1/messages/"


def register(name: str, email: str, password: str) -> APIClient:
    client = APIClient()
    response = client.post(
        REGISTER_URL, {"name": name, "email": email, "password": password}
    )
    assert response.status_code == status.HTTP_201_CREATED
    client.credentials(
        HTTP_AUTHORIZATION=f"Bearer {response.data['tokens']['access']}"
    )
    return client


class TestTwoPersonChat:
    def test_alice_messages_bob(self, db):
        alice = register("Alice", "alice@x.com", "pw1")
        register("Bob", "bob@x.com", "pw2")

        # Alice sees only Bob in the directory
        users = alice.get(USERS_URL).data["users"]
        assert [u["email"] for u in users] == ["bob@x.com"]
        bob_id = users[0]["id"]

        # Alice opens a conversation with Bob
        response = alice.post(CONVERSATIONS_URL, {"otherUserId": bob_id})
        assert response.status_code == status.HTTP_200_OK
        conversation = response.data["conversation"]
        assert sorted(p["email"] for p in conversation["participants"]) == [
            "alice@x.com",
            "bob@x.com",
        ]

        # Alice says hi
        response = alice.post(
            MESSAGES_URL, {"conversationId": conversation["id"], "content": "hi"}
        )
        assert response.status_code == status.HTTP_201_CREATED

        # Bob logs in separately and reads the conversation
        bob = APIClient()
        login = bob.post(LOGIN_URL, {"email": "bob@x.com", "password": "pw2"})
        assert login.status_code == status.HTTP_200_OK
        bob.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['access']}")

        messages = bob.get(MESSAGES_URL, {"conversationId": conversation["id"]}).data[
            "messages"
        ]
        assert len(messages) == 1
        assert messages[0]["content"] == "hi"
        assert messages[0]["sender"]["email"] == "alice@x.com"

        # Bob's conversation list leads with the same conversation
        listed = bob.get(CONVERSATIONS_URL).data["conversations"]
        assert listed[0]["id"] == conversation["id"]
        assert listed[0]["lastMessage"]["content"] == "hi"

    def test_third_user_cannot_read(self, db):
        alice = register("Alice", "alice@x.com", "pw1")
        bob_client = register("Bob", "bob@x.com", "pw2")
        carol = register("Carol", "carol@x.com", "pw3")

        bob_id = bob_client.get("/api/v1/auth/user/").data["id"]
        conversation_id = alice.post(CONVERSATIONS_URL, {"otherUserId": bob_id}).data[
            "conversation"
        ]["id"]

        response = carol.get(MESSAGES_URL, {"conversationId": conversation_id})

        assert response.status_code == status.HTTP_403_FORBIDDEN
