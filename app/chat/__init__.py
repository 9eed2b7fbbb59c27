"""
Chat app for two-person messaging.

This app handles:
- Conversations between exactly two users (one per pair)
- Message sending and history
- Participant-only access to both
- A polling client (delivery.py) that keeps a local copy in sync

Related apps:
    - authentication: User model for participants

Usage:
    from chat.services import ConversationService, MessageService

    # Find or create the conversation with another user
    result = ConversationService.get_or_create_direct(user, other_user.id)
    conversation = result.data.conversation

    # Send message
    result = MessageService.send_message(
        conversation_id=conversation.id,
        user=user,
        content="Hello!",
    )
"""
