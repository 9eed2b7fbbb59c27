"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Conversation browsing with inline participants
- Participant viewing
- Message moderation

Conversations and messages are immutable in the API; the admin is
read-mostly and exists for support and debugging.
"""

from django.contrib import admin

from chat.models import Conversation, DirectConversationPair, Message, Participant


class ParticipantInline(admin.TabularInline):
    """Inline display of participants in conversation admin."""

    model = Participant
    extra = 0
    readonly_fields = ["joined_at"]
    raw_id_fields = ["user"]


@admin.register(Conversation)
class ConversationAdmin(admin.ModelAdmin):
    """Admin interface for Conversation model."""

    list_display = ["id", "created_at", "last_activity_at"]
    list_filter = ["created_at"]
    search_fields = ["id", "participants__user__email"]
    readonly_fields = ["created_at", "updated_at", "last_activity_at"]
    inlines = [ParticipantInline]
    ordering = ["-last_activity_at"]


@admin.register(DirectConversationPair)
class DirectConversationPairAdmin(admin.ModelAdmin):
    """Admin interface for DirectConversationPair model."""

    list_display = ["conversation", "user_lower", "user_higher"]
    raw_id_fields = ["conversation", "user_lower", "user_higher"]


@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    list_display = ["id", "conversation", "user", "joined_at"]
    search_fields = ["user__email"]
    readonly_fields = ["joined_at"]
    raw_id_fields = ["conversation", "user"]
    ordering = ["-joined_at"]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message model."""

    list_display = [
        "id",
        "conversation",
        "sender",
        "content_preview",
        "created_at",
    ]
    list_filter = ["created_at"]
    search_fields = ["content", "sender__email"]
    readonly_fields = ["created_at", "updated_at", "client_key"]
    raw_id_fields = ["conversation", "sender"]
    ordering = ["-created_at"]

    @admin.display(description="Content Preview")
    def content_preview(self, obj: Message) -> str:
        """Return truncated content for list display."""
        max_length = 50
        if len(obj.content) > max_length:
            return obj.content[:max_length] + "..."
        return obj.content
