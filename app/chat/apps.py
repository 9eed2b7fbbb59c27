"""
Chat application configuration.

This app provides two-person chat with:
- One conversation per pair of users, found or created on demand
- Append-only message history read by polling
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"
