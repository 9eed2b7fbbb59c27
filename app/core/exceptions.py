"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error responses across the application
- Machine-readable error codes for client handling
- A single HTTP status per error family

Exception Hierarchy:
    BaseApplicationError (base, 500)
    ├── ValidationError - Missing or malformed input (400)
    ├── PermissionDeniedError - Authorization failures (403)
    ├── NotFoundError - Referenced resource absent (404)
    └── ConflictError - Uniqueness conflicts (409)

Usage:
    from core.exceptions import ConflictError, NotFoundError

    # Raise with message only
    raise NotFoundError("User not found")

    # Raise with error code for client handling
    raise ConflictError("Email already registered", error_code="EMAIL_EXISTS")

    # Raised anywhere inside a DRF view, the exception is rendered by
    # core.exception_handler.api_exception_handler:
    #   HTTP 409 {"error": "Email already registered", "error_code": "EMAIL_EXISTS"}

Note:
    These exceptions are for domain/business logic errors.
    DRF handles API-layer exceptions (serialization, authentication, etc.).
    Unauthenticated requests never reach the domain layer: DRF answers them
    with 401 before any view code runs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, ids, etc.)
        http_status: Status code used when rendered as an API response

    Example:
        try:
            UserDirectoryService.get_active_user(user_id)
        except NotFoundError as e:
            logger.warning(f"User lookup failed: {e.error_code}")
            return Response(e.to_dict(), status=e.http_status)
    """

    default_error_code: str = "APPLICATION_ERROR"
    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and (when present) details keys

        Example:
            {
                "error": "User not found",
                "error_code": "USER_NOT_FOUND",
                "details": {"user_id": 123}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for:
    - Missing required fields (conversationId, otherUserId)
    - Blank message content
    - Identifiers that do not parse

    Note:
        For DRF serializer validation, use DRF's built-in validation.
        Use this for service-layer validation logic.
    """

    default_error_code: str = "VALIDATION_ERROR"
    http_status: int = 400


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when an authenticated user may not touch a resource.

    A conversation that does not exist is reported the same way as one the
    user does not belong to, so callers cannot probe for conversation ids.

    Note:
        For authentication failures (missing/invalid token), use DRF's
        AuthenticationFailed. Use this for authorization failures.
    """

    default_error_code: str = "PERMISSION_DENIED"
    http_status: int = 403


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Example:
        user = User.objects.filter(id=user_id, is_active=True).first()
        if not user:
            raise NotFoundError(
                "User not found",
                error_code="USER_NOT_FOUND",
                details={"user_id": user_id},
            )
    """

    default_error_code: str = "NOT_FOUND"
    http_status: int = 404


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with existing state.

    Use for:
    - Duplicate entries (unique constraint violations)
    - Reused idempotency keys

    Note:
        HTTP 409 Conflict is the appropriate status for these errors.
    """

    default_error_code: str = "CONFLICT"
    http_status: int = 409
