# backend/apps/core/exceptions.py
"""
API error handling

Every error leaves the API as {"error": "<message>"}.
"""
import logging

from django.conf import settings
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.domain.models import NotFoundError
from apps.domain.models import ValidationError as DomainValidationError

logger = logging.getLogger(__name__)


class AuthenticationRequired(exceptions.APIException):
    """401 without a WWW-Authenticate challenge"""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"
    default_code = "not_authenticated"


def _first_message(detail) -> str:
    """Flatten DRF error detail into one readable line"""
    if isinstance(detail, dict):
        for field_name, value in detail.items():
            message = _first_message(value)
            if field_name in ("non_field_errors", "detail"):
                return message
            return f"{field_name}: {message}"
        return "Invalid request"
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else "Invalid request"
    return str(detail)


def api_exception_handler(exc, context):
    """
    Project-wide DRF exception handler

    Maps domain exceptions to HTTP statuses and normalises every DRF
    error body to {"error": ...}.
    """
    if isinstance(exc, NotFoundError):
        return Response({"error": str(exc)}, status=status.HTTP_404_NOT_FOUND)

    if isinstance(exc, DomainValidationError):
        return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, exceptions.ValidationError):
            message = _first_message(exc.detail)
        elif isinstance(exc, Http404):
            message = "Not found"
        else:
            message = _first_message(getattr(exc, "detail", str(exc)))
        response.data = {"error": message}
        return response

    view = context.get("view")
    logger.error(
        f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: {exc}",
        exc_info=exc,
    )

    body = {"error": "Internal server error"}
    if settings.DEBUG:
        body["details"] = str(exc)
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
