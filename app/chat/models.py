"""
Chat system models.

This module defines the data models for two-person chat:

Models:
    Conversation: Container for messages between exactly two users
    DirectConversationPair: Enforces one conversation per unordered user pair
    Participant: Membership of a user in a conversation
    Message: Individual message within a conversation

Design Decisions:
    - Conversations are created lazily on first contact and never deleted
    - Membership is fixed at creation (two participants, no joining or leaving)
    - Messages are immutable: no editing, no deletion
    - last_activity_at is denormalized onto Conversation so a user's
      conversation list can be ordered without aggregating messages
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from core.models import BaseModel


class Conversation(BaseModel):
    """
    A conversation between two users.

    Unique per user pair (enforced via DirectConversationPair).

    Fields:
        last_activity_at: Creation time, then the time of the latest message.
            Bumped in the same transaction that stores the message.

    Relationships:
        participants: The two Participant records
        messages: All Message records for this conversation
        direct_pair: The normalized user pair backing uniqueness
    """

    last_activity_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="Time of the most recent message, or creation time if none",
    )

    class Meta:
        db_table = "chat_conversation"
        ordering = ["-last_activity_at", "-id"]

    def __str__(self) -> str:
        return f"Conversation({self.pk})"


class DirectConversationPair(models.Model):
    """
    Enforces uniqueness of conversations between two users.

    Stores user pairs in canonical order (lower user id first), so whoever
    initiates the conversation the same row is found.

    Constraints:
        - UniqueConstraint(user_lower, user_higher): One conversation per pair
        - CheckConstraint(user_lower_id < user_higher_id): Canonical order,
          which also rules out a user paired with themselves

    Usage:
        lower, higher = DirectConversationPair.normalize(alice.id, bob.id)
        pair = DirectConversationPair.objects.get(
            user_lower_id=lower, user_higher_id=higher
        )
    """

    conversation = models.OneToOneField(
        Conversation,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="direct_pair",
        help_text="The conversation this pair represents",
    )

    user_lower = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="User with lower ID in this conversation pair",
    )

    user_higher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="User with higher ID in this conversation pair",
    )

    class Meta:
        db_table = "chat_direct_conversation_pair"
        constraints = [
            models.UniqueConstraint(
                fields=["user_lower", "user_higher"],
                name="unique_direct_conversation_pair",
            ),
            models.CheckConstraint(
                condition=Q(user_lower_id__lt=F("user_higher_id")),
                name="user_lower_less_than_higher",
            ),
        ]

    def __str__(self) -> str:
        return f"DirectPair({self.user_lower_id}, {self.user_higher_id})"

    @staticmethod
    def normalize(user_id_a: int, user_id_b: int) -> tuple[int, int]:
        """Return the pair as (lower id, higher id)."""
        return (user_id_a, user_id_b) if user_id_a < user_id_b else (user_id_b, user_id_a)


class Participant(models.Model):
    """
    A user's membership in a conversation.

    Constraints:
        - UniqueConstraint(conversation, user): A user appears once per conversation
    """

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="participants",
        help_text="Conversation this participation belongs to",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="chat_participations",
        help_text="Participating user",
    )

    joined_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user joined the conversation",
    )

    class Meta:
        db_table = "chat_participant"
        ordering = ["joined_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["conversation", "user"],
                name="unique_conversation_participant",
            ),
        ]
        indexes = [
            # User's conversations
            models.Index(
                fields=["user", "conversation"],
                name="chat_part_user_conv_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"User {self.user_id} in Conversation {self.conversation_id}"


class Message(BaseModel):
    """
    A message within a conversation.

    Ordering is (created_at, id): two messages stored within the same clock
    tick come back in insertion order.

    Fields:
        conversation: Conversation this message belongs to
        sender: Participant who wrote the message
        content: Message text, never blank
        client_key: Optional idempotency key chosen by the sending client.
            Resubmitting the same key returns the stored message instead of
            creating a second one.
    """

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Conversation this message belongs to",
    )

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
        help_text="User who sent this message",
    )

    content = models.TextField(
        help_text="Message text",
    )

    client_key = models.UUIDField(
        null=True,
        blank=True,
        help_text="Client-generated idempotency key",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["sender", "client_key"],
                condition=Q(client_key__isnull=False),
                name="unique_message_client_key_per_sender",
            ),
        ]
        indexes = [
            models.Index(
                fields=["conversation", "created_at", "id"],
                name="chat_msg_conv_order_idx",
            ),
        ]

    def __str__(self) -> str:
        content_preview = (
            self.content[:50] + "..." if len(self.content) > 50 else self.content
        )
        return f"User {self.sender_id}: {content_preview}"
