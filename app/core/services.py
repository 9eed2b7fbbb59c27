"""
Base service layer patterns for business logic encapsulation.

This module provides foundational patterns for the service layer:
- ServiceResult: Standard result wrapper for consistent success/failure handling
- BaseService: Base class with common service utilities

Service Layer Philosophy:
    Services encapsulate business logic separate from views and models.
    Views handle HTTP concerns, models handle data, services handle logic.

Pattern Comparison:
    - ServiceResult: Use for expected failures (missing fields, denials)
    - Exceptions: Use for unexpected failures (database errors, bugs)

Usage:
    from core.services import BaseService, ServiceResult

    class RegistrationService(BaseService):
        @classmethod
        def register(cls, name: str, email: str, password: str) -> ServiceResult[User]:
            if User.objects.filter(email__iexact=email).exists():
                return ServiceResult.failure(
                    "Email already registered",
                    error_code="EMAIL_EXISTS",
                )

            with cls.atomic():
                user = User.objects.create_user(email=email, password=password, name=name)

            cls.get_logger().info(f"Registered user {user.id}")
            return ServiceResult.success(user)

    # In view
    result = RegistrationService.register(name, email, password)
    if result.success:
        return Response({"user": UserSerializer(result.data).data}, status=201)
    return Response(result.to_response(), status=409)

Related:
    - core.exceptions: For exceptional errors rendered by the DRF handler
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator
    from typing import Any

# Generic type for ServiceResult data
T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Provides consistent success/failure handling without exceptions.
    Use this for expected failures (validation errors, access denials).

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code for client handling
        errors: Field-level errors for validation failures

    Usage:
        # Success case
        return ServiceResult.success(conversation)

        # Failure case
        return ServiceResult.failure("Not a participant", "NOT_PARTICIPANT")

        # Check result
        result = MessageService.send_message(conversation_id, user, content)
        if result:
            message = result.data
        else:
            print(f"Error: {result.error} ({result.error_code})")
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = field(default=None)

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """
        Create a successful result.

        Args:
            data: The result data

        Returns:
            ServiceResult with success=True and data set
        """
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code for client handling
            errors: Field-level errors (for validation failures)

        Example:
            return ServiceResult.failure(
                "Required fields missing",
                error_code="MISSING_FIELD",
                errors={"content": ["This field is required."]},
            )
        """
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            errors=errors,
        )

    @classmethod
    def from_exception(
        cls, exc: Exception, error_code: str | None = None
    ) -> ServiceResult[T]:
        """
        Create a failed result from an exception.

        Application errors keep their own error code; anything else falls
        back to the exception class name.
        """
        return cls(
            success=False,
            error=getattr(exc, "message", None) or str(exc),
            error_code=error_code
            or getattr(exc, "error_code", None)
            or exc.__class__.__name__.upper(),
        )

    def to_response(self) -> dict[str, Any]:
        """
        Convert a failed result to the API error body.

        Returns:
            {"error": ..., "error_code": ...} plus "errors" for field errors.
            Successful results return {"data": ...}.
        """
        if self.success:
            return {"data": self.data}

        response: dict[str, Any] = {"error": self.error}
        if self.error_code:
            response["error_code"] = self.error_code
        if self.errors:
            response["errors"] = self.errors
        return response

    def __bool__(self) -> bool:
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management
    - Required-field validation

    Design Notes:
        - Use @staticmethod or @classmethod (no instance state)
        - Services should be stateless
        - Use ServiceResult for expected failures
        - Raise exceptions for unexpected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        The logger name is "<module>.<ClassName>", so configuring the
        "chat" logger covers every chat service.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        Nested use creates a savepoint, so an IntegrityError raised inside
        can be caught by the caller without breaking an outer transaction.

        Example:
            with cls.atomic():
                message = Message.objects.create(...)
                Conversation.objects.filter(pk=...).update(...)
                # If the update fails, the message is rolled back too
        """
        with transaction.atomic():
            yield

    @classmethod
    def validate_required(cls, **kwargs) -> ServiceResult | None:
        """
        Validate that required fields are provided.

        A value counts as missing when it is None or a blank string.

        Returns:
            ServiceResult.failure with error_code MISSING_FIELD, or None

        Example:
            validation = cls.validate_required(conversation_id=conversation_id)
            if validation:
                return validation
        """
        errors = {}
        for field_name, value in kwargs.items():
            if value is None or (isinstance(value, str) and not value.strip()):
                errors[field_name] = ["This field is required."]

        if errors:
            return ServiceResult.failure(
                "Missing required fields",
                error_code="MISSING_FIELD",
                errors=errors,
            )
        return None
