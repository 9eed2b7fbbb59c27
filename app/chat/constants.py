"""
Constants and configuration for the chat module.

This module centralizes configuration values for:
- Message content limits
- The client delivery loop (poll intervals)
- Service error codes and their HTTP status

Import example:
    from chat.constants import DELIVERY_CONFIG, ErrorCode, ERROR_STATUS_CODES
"""

from typing import Final

from rest_framework import status


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    # Default; settings.CHAT["MAX_MESSAGE_LENGTH"] takes precedence
    MAX_CONTENT_LENGTH: Final[int] = 10000  # Characters


def get_max_content_length() -> int:
    from django.conf import settings

    return getattr(settings, "CHAT", {}).get(
        "MAX_MESSAGE_LENGTH", MESSAGE_CONFIG.MAX_CONTENT_LENGTH
    )


# =============================================================================
# Delivery Loop Configuration
# =============================================================================


class DELIVERY_CONFIG:
    """
    Timing for the client-side polling loop (chat.delivery).

    Empty polls back off by INTERVAL_STEP_SECONDS up to MAX_INTERVAL_SECONDS;
    any non-empty poll drops straight back to BASE_INTERVAL_SECONDS.
    """

    BASE_INTERVAL_SECONDS: Final[float] = 2.0
    INTERVAL_STEP_SECONDS: Final[float] = 1.0
    MAX_INTERVAL_SECONDS: Final[float] = 10.0

    # Forced fetch after a send, to pick up the authoritative copy
    RECONCILE_DELAY_SECONDS: Final[float] = 0.1

    # Per-request timeout for the HTTP client
    REQUEST_TIMEOUT_SECONDS: Final[float] = 10.0


# =============================================================================
# Error Codes
# =============================================================================


class ErrorCode:
    """Error codes returned by chat services."""

    MISSING_FIELD: Final[str] = "MISSING_FIELD"
    SAME_USER: Final[str] = "SAME_USER"
    EMPTY_CONTENT: Final[str] = "EMPTY_CONTENT"
    CONTENT_TOO_LONG: Final[str] = "CONTENT_TOO_LONG"
    USER_NOT_FOUND: Final[str] = "USER_NOT_FOUND"
    NOT_PARTICIPANT: Final[str] = "NOT_PARTICIPANT"
    DUPLICATE_CLIENT_KEY: Final[str] = "DUPLICATE_CLIENT_KEY"


# Anything not listed here is a 400
ERROR_STATUS_CODES: Final[dict[str, int]] = {
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.NOT_PARTICIPANT: status.HTTP_403_FORBIDDEN,
    ErrorCode.DUPLICATE_CLIENT_KEY: status.HTTP_409_CONFLICT,
}
