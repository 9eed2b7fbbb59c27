"""
Tests for chat app.

This package contains test modules for:
- test_models.py: Pair, participant and message constraints
- test_authorization.py: Participant checks and the guard decorator
- test_services.py: ConversationService, MessageService
- test_views.py: REST API endpoint tests
- test_delivery.py: Polling client against a mocked transport
- test_integration.py: Register-to-message journey

Usage:
    pytest app/chat/tests/
    pytest app/chat/tests/test_delivery.py
"""
