"""
Chat system service layer.

This module provides the business logic for the chat system, encapsulating
all operations on conversations and messages.

Services:
    ConversationService: Find-or-create, listing and detail of conversations
    MessageService: Sending and listing messages

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure()
    - Unexpected failures raise exceptions
    - Every read or write on a conversation passes the participant check
      in chat.authorization first

Consistency:
    - One conversation per unordered pair of users. The pair row carries a
      unique constraint; a create that loses a race falls back to the row
      that won, so concurrent callers converge on one conversation.
    - A message and the bump of its conversation's last_activity_at are
      committed in one transaction.

Usage:
    from chat.services import ConversationService, MessageService

    result = ConversationService.get_or_create_direct(alice, bob.id)
    if result.success:
        conversation = result.data.conversation

    result = MessageService.send_message(
        conversation_id=conversation.id,
        user=alice,
        content="hi",
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.db import IntegrityError
from django.db.models import Prefetch

from authentication.services import UserDirectoryService
from core.services import BaseService, ServiceResult

from chat.authorization import (
    ChatAuthorizationService,
    parse_conversation_id,
    require_conversation_participant,
)
from chat.constants import ErrorCode, get_max_content_length
from chat.models import Conversation, DirectConversationPair, Message, Participant

if TYPE_CHECKING:
    from uuid import UUID

    from django.db.models import QuerySet

    from authentication.models import User


@dataclass
class DirectConversationResult:
    """Outcome of find-or-create: the conversation and whether it is new."""

    conversation: Conversation
    created: bool


@dataclass
class SentMessage:
    """Outcome of a send; created is False for an idempotent replay."""

    message: Message
    created: bool


def _with_participants(queryset: QuerySet[Conversation]) -> QuerySet[Conversation]:
    return queryset.prefetch_related(
        Prefetch(
            "participants",
            queryset=Participant.objects.select_related("user"),
        ),
        Prefetch(
            "messages",
            queryset=Message.objects.select_related("sender").order_by(
                "-created_at", "-id"
            )[:1],
            to_attr="latest_messages",
        ),
    )


class ConversationService(BaseService):
    """
    Service for conversation lifecycle operations.

    Methods:
        get_or_create_direct: Find or create the conversation with another user
        list_for_user: A user's conversations, most recently active first
        get_conversation: One conversation, participants only
    """

    @classmethod
    def get_or_create_direct(
        cls,
        requester: User,
        other_user_id,
    ) -> ServiceResult[DirectConversationResult]:
        """
        Find or create the conversation between requester and another user.

        Implementation:
            1. Validate the other user id and resolve the user
            2. Canonicalize order (lower user_id first)
            3. Look up existing DirectConversationPair
            4. If not found, create conversation, pair and participants in
               one transaction
            5. If the pair insert hits the unique constraint, another request
               created it first: return that one

        Error codes:
            MISSING_FIELD: No other user id given
            SAME_USER: Cannot open a conversation with yourself
            USER_NOT_FOUND: Other user does not exist or is inactive
        """
        validation = cls.validate_required(otherUserId=other_user_id)
        if validation:
            return validation

        lookup = UserDirectoryService.get_active_user(other_user_id)
        if not lookup.success:
            return lookup

        other_user = lookup.data
        if other_user.pk == requester.pk:
            return ServiceResult.failure(
                "Cannot create a conversation with yourself",
                error_code=ErrorCode.SAME_USER,
            )

        lower_id, higher_id = DirectConversationPair.normalize(
            requester.pk, other_user.pk
        )

        existing = cls._find_pair(lower_id, higher_id)
        if existing is not None:
            cls.get_logger().debug(
                f"Found existing conversation {existing.pk} "
                f"between users {lower_id} and {higher_id}"
            )
            return ServiceResult.success(
                DirectConversationResult(conversation=existing, created=False)
            )

        try:
            with cls.atomic():
                conversation = Conversation.objects.create()
                DirectConversationPair.objects.create(
                    conversation=conversation,
                    user_lower_id=lower_id,
                    user_higher_id=higher_id,
                )
                Participant.objects.bulk_create(
                    [
                        Participant(conversation=conversation, user_id=lower_id),
                        Participant(conversation=conversation, user_id=higher_id),
                    ]
                )
        except IntegrityError:
            existing = cls._find_pair(lower_id, higher_id)
            if existing is None:
                raise
            cls.get_logger().info(
                f"Concurrent create for users {lower_id} and {higher_id}, "
                f"reusing conversation {existing.pk}"
            )
            return ServiceResult.success(
                DirectConversationResult(conversation=existing, created=False)
            )

        cls.get_logger().info(
            f"Created conversation {conversation.pk} "
            f"between users {lower_id} and {higher_id}"
        )
        conversation = _with_participants(
            Conversation.objects.filter(pk=conversation.pk)
        ).get()
        return ServiceResult.success(
            DirectConversationResult(conversation=conversation, created=True)
        )

    @classmethod
    def _find_pair(cls, lower_id: int, higher_id: int) -> Conversation | None:
        return (
            _with_participants(
                Conversation.objects.filter(
                    direct_pair__user_lower_id=lower_id,
                    direct_pair__user_higher_id=higher_id,
                )
            )
            .first()
        )

    @classmethod
    def list_for_user(cls, user: User) -> QuerySet[Conversation]:
        """
        Conversations the user participates in.

        Ordered by last activity, newest first. Participants and the latest
        message are prefetched (see latest_messages).
        """
        return _with_participants(
            Conversation.objects.filter(participants__user=user)
        ).order_by("-last_activity_at", "-id")

    @classmethod
    @require_conversation_participant()
    def get_conversation(
        cls,
        *,
        user: User,
        conversation_id,
    ) -> ServiceResult[Conversation]:
        """
        Fetch a single conversation for one of its participants.

        Error codes:
            NOT_PARTICIPANT: Not a participant, or no such conversation
        """
        conversation = _with_participants(
            Conversation.objects.filter(pk=conversation_id)
        ).get()
        return ServiceResult.success(conversation)


class MessageService(BaseService):
    """
    Service for message operations.

    Methods:
        send_message: Append a message and bump conversation activity
        list_messages: Full history of a conversation, oldest first
    """

    @classmethod
    def send_message(
        cls,
        *,
        conversation_id,
        user: User,
        content: str | None,
        client_key: UUID | None = None,
    ) -> ServiceResult[SentMessage]:
        """
        Append a message to a conversation.

        Input is validated before the participant check, so a malformed
        request is a 400 whoever sends it.

        When client_key is given and the sender already stored a message
        with that key in this conversation, that message is returned and
        nothing is written.

        Error codes:
            MISSING_FIELD: conversation_id or content absent
            EMPTY_CONTENT: content is blank after stripping whitespace
            CONTENT_TOO_LONG: content exceeds the configured maximum
            NOT_PARTICIPANT: Sender may not post in this conversation
            DUPLICATE_CLIENT_KEY: client_key already used in another conversation
        """
        # Whitespace-only content is present but empty, not missing
        missing = cls.validate_required(conversationId=conversation_id)
        errors = dict(missing.errors) if missing else {}
        if content is None or content == "":
            errors["content"] = ["This field is required."]
        if errors:
            return ServiceResult.failure(
                "Missing required fields",
                error_code=ErrorCode.MISSING_FIELD,
                errors=errors,
            )

        if not content.strip():
            return ServiceResult.failure(
                "Message content cannot be empty",
                error_code=ErrorCode.EMPTY_CONTENT,
            )

        max_length = get_max_content_length()
        if len(content) > max_length:
            return ServiceResult.failure(
                f"Message content exceeds {max_length} characters",
                error_code=ErrorCode.CONTENT_TOO_LONG,
            )

        if not ChatAuthorizationService.is_conversation_participant(
            user, conversation_id
        ):
            cls.get_logger().warning(
                f"User {user.pk} denied send to conversation {conversation_id}"
            )
            return ServiceResult.failure(
                "Forbidden",
                error_code=ErrorCode.NOT_PARTICIPANT,
            )
        conversation_id = parse_conversation_id(conversation_id)

        if client_key is not None:
            replay = cls._replay(user, conversation_id, client_key)
            if replay is not None:
                return replay

        try:
            with cls.atomic():
                message = Message.objects.create(
                    conversation_id=conversation_id,
                    sender=user,
                    content=content,
                    client_key=client_key,
                )
                Conversation.objects.filter(pk=conversation_id).update(
                    last_activity_at=message.created_at,
                    updated_at=message.created_at,
                )
        except IntegrityError:
            if client_key is None:
                raise
            replay = cls._replay(user, conversation_id, client_key)
            if replay is None:
                raise
            return replay

        cls.get_logger().info(
            f"User {user.pk} sent message {message.pk} "
            f"to conversation {conversation_id}"
        )
        return ServiceResult.success(SentMessage(message=message, created=True))

    @classmethod
    def _replay(
        cls, user: User, conversation_id: int, client_key
    ) -> ServiceResult[SentMessage] | None:
        existing = (
            Message.objects.select_related("sender")
            .filter(sender=user, client_key=client_key)
            .first()
        )
        if existing is None:
            return None

        if existing.conversation_id != conversation_id:
            return ServiceResult.failure(
                "This client key was already used for another conversation",
                error_code=ErrorCode.DUPLICATE_CLIENT_KEY,
            )

        cls.get_logger().debug(
            f"Replayed message {existing.pk} for client key {client_key}"
        )
        return ServiceResult.success(SentMessage(message=existing, created=False))

    @classmethod
    @require_conversation_participant()
    def list_messages(
        cls,
        *,
        user: User,
        conversation_id,
    ) -> ServiceResult[QuerySet[Message]]:
        """
        Full message history of a conversation, oldest first.

        Not paginated: clients re-fetch the whole list on every poll.

        Error codes:
            MISSING_FIELD: No conversation id
            NOT_PARTICIPANT: Not a participant, or no such conversation
        """
        messages = (
            Message.objects.filter(conversation_id=conversation_id)
            .select_related("sender")
            .order_by("created_at", "id")
        )
        return ServiceResult.success(messages)
