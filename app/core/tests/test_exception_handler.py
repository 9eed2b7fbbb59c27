"""
Tests for the DRF exception handler and the health check.

The handler is exercised directly with a fake view context, so these
tests do not depend on any domain endpoint.
"""

from unittest.mock import patch

import pytest
from django.core.exceptions import PermissionDenied
from django.db import DatabaseError
from django.http import Http404
from rest_framework import exceptions as drf_exceptions

from core.exception_handler import api_exception_handler
from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)


class FakeView:
    pass


@pytest.fixture
def context():
    return {"view": FakeView(), "request": None}


class TestApplicationErrors:
    @pytest.mark.parametrize(
        "exc_class,status_code,default_code",
        [
            (ValidationError, 400, "VALIDATION_ERROR"),
            (PermissionDeniedError, 403, "PERMISSION_DENIED"),
            (NotFoundError, 404, "NOT_FOUND"),
            (ConflictError, 409, "CONFLICT"),
            (BaseApplicationError, 500, "APPLICATION_ERROR"),
        ],
    )
    def test_rendered_with_own_status(
        self, context, exc_class, status_code, default_code
    ):
        response = api_exception_handler(exc_class("Nope"), context)

        assert response.status_code == status_code
        assert response.data == {"error": "Nope", "error_code": default_code}

    def test_custom_code_and_details(self, context):
        exc = NotFoundError(
            "User not found", error_code="USER_NOT_FOUND", details={"user_id": 7}
        )

        response = api_exception_handler(exc, context)

        assert response.data == {
            "error": "User not found",
            "error_code": "USER_NOT_FOUND",
            "details": {"user_id": 7},
        }

    def test_str_includes_code(self):
        assert str(ConflictError("Taken", error_code="EMAIL_EXISTS")) == (
            "[EMAIL_EXISTS] Taken"
        )


class TestFrameworkErrors:
    def test_not_authenticated(self, context):
        response = api_exception_handler(drf_exceptions.NotAuthenticated(), context)

        assert response.status_code == 401
        assert response.data["error_code"] == "NOT_AUTHENTICATED"

    def test_serializer_validation_error_keeps_fields(self, context):
        exc = drf_exceptions.ValidationError({"email": ["Enter a valid email."]})

        response = api_exception_handler(exc, context)

        assert response.status_code == 400
        assert response.data["error_code"] == "VALIDATION_ERROR"
        assert response.data["errors"] == {"email": ["Enter a valid email."]}

    def test_django_http404(self, context):
        response = api_exception_handler(Http404("gone"), context)

        assert response.status_code == 404
        assert response.data["error_code"] == "NOT_FOUND"

    def test_django_permission_denied(self, context):
        response = api_exception_handler(PermissionDenied(), context)

        assert response.status_code == 403
        assert response.data["error_code"] == "PERMISSION_DENIED"


class TestUnexpectedErrors:
    def test_unexpected_exception_is_500(self, context, mocker):
        mock_logger = mocker.patch("core.exception_handler.logger")

        response = api_exception_handler(RuntimeError("kaboom"), context)

        assert response.status_code == 500
        assert response.data == {
            "error": "Internal server error",
            "error_code": "INTERNAL_ERROR",
        }
        mock_logger.exception.assert_called_once()
        assert "FakeView" in mock_logger.exception.call_args.args[0]


class TestHealthCheck:
    def test_healthy(self, client, db):
        response = client.get("/health/")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "ok"}

    def test_database_down(self, client, db):
        with patch("core.views.connection") as mock_connection:
            mock_connection.cursor.side_effect = DatabaseError

            response = client.get("/health/")

        assert response.status_code == 503
        assert response.json() == {"status": "unhealthy", "database": "unavailable"}
