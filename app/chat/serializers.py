"""
Serializers for chat API.

This module provides serializers for the chat system:
- Conversation serializers (read, create)
- Message serializers (read, create, list query)

Serializer Hierarchy:
    ConversationSerializer: Conversation with participants and last message
    ConversationCreateSerializer: Find-or-create request ({otherUserId})

    MessageSerializer: Message with sender summary
    MessageCreateSerializer: Send request ({conversationId, content, clientKey?})
    MessageListQuerySerializer: ?conversationId= query parameter

Design Decisions:
    - Read and write serializers are separate for clarity
    - Field names are camelCase on the wire, matching the request bodies
    - Request serializers only shape input. Missing fields, blank content
      and length limits are reported by the services with error codes, so
      the fields here are optional and permissive.
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from chat.models import Conversation, Message

# =============================================================================
# Message Serializers
# =============================================================================


class MessageSerializer(serializers.ModelSerializer):
    """Full message serializer, used in message lists and send responses."""

    conversationId = serializers.IntegerField(source="conversation_id", read_only=True)
    senderId = serializers.IntegerField(source="sender_id", read_only=True)
    sender = UserSummarySerializer(read_only=True)
    clientKey = serializers.UUIDField(
        source="client_key",
        read_only=True,
        allow_null=True,
        help_text="Idempotency key supplied by the sending client",
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "conversationId",
            "senderId",
            "sender",
            "content",
            "clientKey",
            "createdAt",
        ]
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    """
    Serializer for sending messages.

    clientKey is optional. Resending the same key returns the stored
    message instead of creating a duplicate.
    """

    conversationId = serializers.CharField(
        required=False,
        allow_null=True,
        allow_blank=True,
        help_text="Conversation to post in",
    )
    content = serializers.CharField(
        required=False,
        allow_null=True,
        allow_blank=True,
        trim_whitespace=False,
        help_text="Message text",
    )
    clientKey = serializers.UUIDField(
        required=False,
        allow_null=True,
        help_text="Client-generated UUID for idempotent retries (optional)",
    )


class MessageListQuerySerializer(serializers.Serializer):
    """Query parameters for the message history endpoint."""

    conversationId = serializers.CharField(
        required=False,
        allow_blank=True,
        help_text="Conversation whose messages to list",
    )


# =============================================================================
# Conversation Serializers
# =============================================================================


class ConversationSerializer(serializers.ModelSerializer):
    """
    Conversation with its two participants and most recent message.

    Expects the queryset helpers in chat.services, which prefetch
    participants and attach latest_messages. Falls back to queries when
    given a bare instance.
    """

    participants = serializers.SerializerMethodField(
        help_text="The two users in the conversation"
    )
    lastMessage = serializers.SerializerMethodField(
        help_text="Most recent message, or null"
    )
    lastActivityAt = serializers.DateTimeField(
        source="last_activity_at", read_only=True
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Conversation
        fields = [
            "id",
            "participants",
            "lastMessage",
            "lastActivityAt",
            "createdAt",
        ]
        read_only_fields = fields

    def get_participants(self, obj: Conversation) -> list[dict]:
        users = [participant.user for participant in obj.participants.all()]
        return UserSummarySerializer(users, many=True).data

    def get_lastMessage(self, obj: Conversation) -> dict | None:
        latest = getattr(obj, "latest_messages", None)
        if latest is None:
            message = (
                obj.messages.select_related("sender")
                .order_by("-created_at", "-id")
                .first()
            )
        else:
            message = latest[0] if latest else None

        if message is None:
            return None
        return MessageSerializer(message).data


class ConversationCreateSerializer(serializers.Serializer):
    """Serializer for opening a conversation with another user."""

    otherUserId = serializers.CharField(
        required=False,
        allow_null=True,
        allow_blank=True,
        help_text="User to open a conversation with",
    )


# =============================================================================
# Response Envelopes
# =============================================================================


class ConversationListResponseSerializer(serializers.Serializer):
    conversations = ConversationSerializer(many=True)


class ConversationResponseSerializer(serializers.Serializer):
    conversation = ConversationSerializer()


class MessageListResponseSerializer(serializers.Serializer):
    messages = MessageSerializer(many=True)


class MessageResponseSerializer(serializers.Serializer):
    message = MessageSerializer()
