"""
URL configuration for chat API.

URL Structure:
    Conversations:
        /conversations/                   GET, POST
        /conversations/{id}/              GET

    Messages:
        /messages/?conversationId={id}    GET
        /messages/                        POST

All URLs are prefixed with /api/v1/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from chat.views import ConversationViewSet, MessageViewSet

router = DefaultRouter()
router.register(r"conversations", ConversationViewSet, basename="conversation")
router.register(r"messages", MessageViewSet, basename="message")

app_name = "chat"

urlpatterns = [
    path("", include(router.urls)),
]
