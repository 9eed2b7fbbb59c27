"""
Authentication services.

This module provides:
- RegistrationService: Create accounts from name/email/password
- UserDirectoryService: List the people a user can start a chat with

Related files:
    - models.py: User
    - serializers.py: Request validation for registration
    - views.py: RegisterView, UserDirectoryView

Error codes:
    EMAIL_EXISTS: Another account already uses this email (HTTP 409)
    USER_NOT_FOUND: No active user with the given id (HTTP 404)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import IntegrityError

from authentication.models import User
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from django.db.models import QuerySet


class RegistrationService(BaseService):
    """
    Account creation.

    Usage:
        result = RegistrationService.register("Alice", "alice@x.com", "pw1")
        if result.success:
            user = result.data
    """

    @classmethod
    def register(cls, name: str, email: str, password: str) -> ServiceResult[User]:
        """
        Create a user, rejecting emails that are already taken.

        The duplicate check runs twice: once as a cheap lookup, and again
        through the unique constraint for two registrations racing on the
        same address.
        """
        logger = cls.get_logger()
        email = User.objects.normalize_email(email)

        if User.objects.filter(email__iexact=email).exists():
            logger.info(f"Registration rejected, email already in use: {email}")
            return cls._email_taken()

        try:
            with cls.atomic():
                user = User.objects.create_user(
                    email=email,
                    password=password,
                    name=name.strip(),
                )
        except IntegrityError:
            logger.info(f"Registration lost a race for email: {email}")
            return cls._email_taken()

        logger.info(f"Registered user {user.id}")
        return ServiceResult.success(user)

    @staticmethod
    def _email_taken() -> ServiceResult[User]:
        return ServiceResult.failure(
            "A user with this email already exists.",
            error_code="EMAIL_EXISTS",
        )


class UserDirectoryService(BaseService):
    """
    Read-only access to other users.

    The directory is deliberately flat: no search, no pagination.
    """

    @classmethod
    def list_users(cls, requester: User) -> QuerySet[User]:
        """Every active user except the requester, ordered by name."""
        return (
            User.objects.filter(is_active=True)
            .exclude(pk=requester.pk)
            .order_by("name", "id")
        )

    @classmethod
    def get_active_user(cls, user_id) -> ServiceResult[User]:
        """
        Resolve a user id coming from a request body.

        Ids that do not parse are reported the same way as unknown ids.
        """
        try:
            user = User.objects.get(pk=int(user_id), is_active=True)
        except (TypeError, ValueError, User.DoesNotExist):
            return ServiceResult.failure("User not found", error_code="USER_NOT_FOUND")
        return ServiceResult.success(user)
