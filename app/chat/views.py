"""
ViewSets for chat API.

This module provides REST API endpoints for the chat system:
- ConversationViewSet: List, find-or-create and detail of conversations
- MessageViewSet: Message history and sending

URL Structure:
    /api/v1/conversations/                    GET, POST
    /api/v1/conversations/{id}/               GET
    /api/v1/messages/?conversationId={id}     GET
    /api/v1/messages/                         POST

Design Decisions:
    - Views handle HTTP only: parse the request, call a service, map the
      result's error_code to a status via ERROR_STATUS_CODES
    - Participant checks live in the services, not in DRF permission
      classes, so every caller of a service gets the same guard
    - Responses wrap payloads in a named key ({"conversation": ...})
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
    extend_schema_view,
)
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from chat.constants import ERROR_STATUS_CODES
from chat.serializers import (
    ConversationCreateSerializer,
    ConversationListResponseSerializer,
    ConversationResponseSerializer,
    ConversationSerializer,
    MessageCreateSerializer,
    MessageListQuerySerializer,
    MessageListResponseSerializer,
    MessageResponseSerializer,
    MessageSerializer,
)
from chat.services import ConversationService, MessageService


def error_response(result) -> Response:
    """Render a failed ServiceResult with the status for its error code."""
    return Response(
        result.to_response(),
        status=ERROR_STATUS_CODES.get(result.error_code, status.HTTP_400_BAD_REQUEST),
    )


@extend_schema_view(
    list=extend_schema(
        operation_id="list_conversations",
        summary="List conversations",
        description="Your conversations, most recently active first.",
        tags=["Chat - Conversations"],
        responses={200: ConversationListResponseSerializer},
    ),
    create=extend_schema(
        operation_id="open_conversation",
        summary="Open conversation",
        description=(
            "Return the conversation with another user, creating it on first "
            "contact. Calling this again returns the same conversation."
        ),
        tags=["Chat - Conversations"],
        request=ConversationCreateSerializer,
        responses={
            200: ConversationResponseSerializer,
            400: OpenApiResponse(description="Missing otherUserId, or yourself"),
            404: OpenApiResponse(description="User not found"),
        },
    ),
    retrieve=extend_schema(
        operation_id="get_conversation",
        summary="Get conversation",
        tags=["Chat - Conversations"],
        responses={
            200: ConversationResponseSerializer,
            403: OpenApiResponse(description="Not a participant"),
        },
    ),
)
class ConversationViewSet(viewsets.GenericViewSet):
    """
    ViewSet for conversation operations.

    list:
        Get all conversations for the current user, each with its
        participants and last message.

    create:
        Find or create the conversation with another user.

    retrieve:
        Get one conversation. Non-participants and unknown ids get the
        same 403.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ConversationSerializer

    def get_queryset(self):
        return ConversationService.list_for_user(self.request.user)

    def list(self, request):
        serializer = ConversationSerializer(self.get_queryset(), many=True)
        return Response({"conversations": serializer.data})

    def create(self, request):
        serializer = ConversationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ConversationService.get_or_create_direct(
            request.user,
            serializer.validated_data.get("otherUserId"),
        )
        if not result.success:
            return error_response(result)

        return Response(
            {"conversation": ConversationSerializer(result.data.conversation).data},
            status=status.HTTP_200_OK,
        )

    def retrieve(self, request, pk=None):
        result = ConversationService.get_conversation(
            user=request.user,
            conversation_id=pk,
        )
        if not result.success:
            return error_response(result)

        return Response({"conversation": ConversationSerializer(result.data).data})


@extend_schema_view(
    list=extend_schema(
        operation_id="list_messages",
        summary="List messages",
        description="Full history of a conversation, oldest first.",
        tags=["Chat - Messages"],
        parameters=[
            OpenApiParameter(
                name="conversationId",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                required=True,
            ),
        ],
        responses={
            200: MessageListResponseSerializer,
            400: OpenApiResponse(description="Missing conversationId"),
            403: OpenApiResponse(description="Not a participant"),
        },
    ),
    create=extend_schema(
        operation_id="send_message",
        summary="Send message",
        tags=["Chat - Messages"],
        request=MessageCreateSerializer,
        responses={
            200: OpenApiResponse(
                response=MessageResponseSerializer,
                description="clientKey already stored; the original message",
            ),
            201: MessageResponseSerializer,
            400: OpenApiResponse(description="Missing field, empty or too long"),
            403: OpenApiResponse(description="Not a participant"),
            409: OpenApiResponse(description="clientKey used in another conversation"),
        },
    ),
)
class MessageViewSet(viewsets.GenericViewSet):
    """
    ViewSet for message operations.

    list:
        Get the messages of ?conversationId=, ascending by creation time.
        Not paginated.

    create:
        Send a message. Returns 201, or 200 when clientKey matches a
        message already stored.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = MessageSerializer

    def list(self, request):
        query = MessageListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = MessageService.list_messages(
            user=request.user,
            conversation_id=query.validated_data.get("conversationId"),
        )
        if not result.success:
            return error_response(result)

        return Response({"messages": MessageSerializer(result.data, many=True).data})

    def create(self, request):
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = MessageService.send_message(
            conversation_id=data.get("conversationId"),
            user=request.user,
            content=data.get("content"),
            client_key=data.get("clientKey"),
        )
        if not result.success:
            return error_response(result)

        sent = result.data
        return Response(
            {"message": MessageSerializer(sent.message).data},
            status=status.HTTP_201_CREATED if sent.created else status.HTTP_200_OK,
        )
