"""
DRF exception handler for the API.

Wired in through REST_FRAMEWORK["EXCEPTION_HANDLER"]. Every error leaving a
DRF view ends up in the same shape:

    {"error": "<message>", "error_code": "<CODE>"}

Mapping:
    - BaseApplicationError subclasses: their own http_status and to_dict()
    - DRF APIException (401, 403, 404, 405, parse errors): DRF's status code,
      with the message and code flattened into the shape above. Serializer
      ValidationErrors keep their field errors under "errors".
    - Anything else: logged with traceback, 500 "Internal server error"

Usage:
    # config/settings.py
    REST_FRAMEWORK = {
        "EXCEPTION_HANDLER": "core.exception_handler.api_exception_handler",
    }
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)

INTERNAL_ERROR_BODY = {
    "error": "Internal server error",
    "error_code": "INTERNAL_ERROR",
}


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response:
    """Render any exception raised inside a DRF view as a JSON error body."""
    if isinstance(exc, BaseApplicationError):
        log = logger.error if exc.http_status >= 500 else logger.info
        log(f"{exc} in {_view_name(context)}")
        return Response(exc.to_dict(), status=exc.http_status)

    if isinstance(exc, Http404):
        exc = drf_exceptions.NotFound(*exc.args)
    elif isinstance(exc, PermissionDenied):
        exc = drf_exceptions.PermissionDenied(*exc.args)

    response = drf_exception_handler(exc, context)
    if response is not None:
        response.data = _flatten(exc, response.data)
        return response

    logger.exception(f"Unhandled error in {_view_name(context)}")
    return Response(INTERNAL_ERROR_BODY, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def _flatten(exc: drf_exceptions.APIException, data: Any) -> dict[str, Any]:
    if isinstance(exc, drf_exceptions.ValidationError):
        return {
            "error": "Validation failed",
            "error_code": "VALIDATION_ERROR",
            "errors": data,
        }

    codes = exc.get_codes()
    return {
        "error": str(exc.detail),
        "error_code": str(codes).upper() if isinstance(codes, str) else "ERROR",
    }


def _view_name(context: dict[str, Any]) -> str:
    view = context.get("view")
    return view.__class__.__name__ if view is not None else "unknown view"
