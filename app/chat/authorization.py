"""
Service-level authorization for chat operations.

Every read or write on a conversation goes through this module. A
conversation that does not exist and a conversation the user is not part
of produce the same NOT_PARTICIPANT denial, so ids cannot be probed.

Key Components:
    ChatAuthorizationService: Stateless service class with authorization methods
    require_conversation_participant: Decorator for conversation-level access

Error Codes:
    NOT_PARTICIPANT: User is not a participant, or the conversation is missing
    MISSING_FIELD: No conversation id was supplied

Usage:
    # Direct method call
    if ChatAuthorizationService.is_conversation_participant(user, conversation_id):
        # proceed with operation

    # Raising variant, for code that is not built on ServiceResult
    ChatAuthorizationService.assert_participant(user, conversation_id)

    # Decorator usage
    class MessageService(BaseService):
        @classmethod
        @require_conversation_participant()
        def list_messages(cls, *, user, conversation_id):
            ...
"""

from __future__ import annotations

from functools import wraps
from typing import TYPE_CHECKING, Callable, Optional, TypeVar

from core.exceptions import PermissionDeniedError
from core.services import ServiceResult

from chat.constants import ErrorCode

if TYPE_CHECKING:
    from authentication.models import User


T = TypeVar("T")

NOT_PARTICIPANT_MESSAGE = "Forbidden"


def parse_conversation_id(value) -> Optional[int]:
    """
    Coerce a conversation id from a query string or JSON body.

    Returns None for anything that is not a positive integer.
    """
    if isinstance(value, bool):
        return None
    try:
        conversation_id = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return conversation_id if conversation_id > 0 else None


class ChatAuthorizationService:
    """
    Stateless service providing authorization checks for chat operations.

    Performance Notes:
        - One indexed EXISTS query per check
        - Results are not cached; callers should cache if needed
    """

    @classmethod
    def is_conversation_participant(
        cls,
        user: "User",
        conversation_id,
    ) -> bool:
        """
        Check if user is a participant in the conversation.

        Unparseable ids and missing conversations return False.
        """
        from chat.models import Participant

        conversation_id = parse_conversation_id(conversation_id)
        if conversation_id is None or user is None or not user.is_authenticated:
            return False

        return Participant.objects.filter(
            conversation_id=conversation_id,
            user=user,
        ).exists()

    @classmethod
    def assert_participant(cls, user: "User", conversation_id) -> None:
        """
        Raise PermissionDeniedError unless user is a participant.

        Raises:
            PermissionDeniedError: error_code NOT_PARTICIPANT
        """
        if not cls.is_conversation_participant(user, conversation_id):
            raise PermissionDeniedError(
                NOT_PARTICIPANT_MESSAGE,
                error_code=ErrorCode.NOT_PARTICIPANT,
            )


def require_conversation_participant(
    conversation_id_param: str = "conversation_id",
    user_param: str = "user",
) -> Callable:
    """
    Decorator that requires user to be a conversation participant.

    Extracts user and conversation_id from method kwargs and checks
    participation before allowing the method to execute. The wrapped method
    receives the conversation id already parsed to an int.

    Args:
        conversation_id_param: Name of the kwarg containing conversation ID
        user_param: Name of the kwarg containing user (default: "user")

    Returns:
        ServiceResult.failure with MISSING_FIELD if no conversation id was given
        ServiceResult.failure with NOT_PARTICIPANT if the check fails

    Example:
        class MessageService(BaseService):
            @classmethod
            @require_conversation_participant()
            def list_messages(cls, *, user, conversation_id):
                # Only called if user is participant
                ...
    """

    def decorator(
        func: Callable[..., ServiceResult[T]],
    ) -> Callable[..., ServiceResult[T]]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> ServiceResult[T]:
            user = kwargs.get(user_param)
            raw_id = kwargs.get(conversation_id_param)

            if raw_id is None or (isinstance(raw_id, str) and not raw_id.strip()):
                return ServiceResult.failure(
                    "Missing required fields",
                    error_code=ErrorCode.MISSING_FIELD,
                    errors={conversation_id_param: ["This field is required."]},
                )

            try:
                ChatAuthorizationService.assert_participant(user, raw_id)
            except PermissionDeniedError as exc:
                return ServiceResult.from_exception(exc)

            kwargs[conversation_id_param] = parse_conversation_id(raw_id)
            return func(*args, **kwargs)

        return wrapper

    return decorator
