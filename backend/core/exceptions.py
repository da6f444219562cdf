"""
Domain exceptions for the CoopBase backend.

All exceptions follow the standard error format:
{
    "error": {
        "code": "ERROR_CODE",
        "message": "Human-readable description",
        "details": {}
    }
"""

import logging
import traceback

from django.conf import settings
from django.http import JsonResponse
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base exception for all domain errors."""

    def __init__(self, code, message, details=None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(DomainError):
    """Validation error - request body or parameters fail validation."""

    def __init__(self, message, details=None):
        super().__init__("VALIDATION_ERROR", message, details)


class AuthenticationError(DomainError):
    """Credentials are missing or wrong. Never says which one."""

    def __init__(self, message="Invalid email or password", details=None):
        super().__init__("UNAUTHORIZED", message, details)


class PermissionDeniedError(DomainError):
    """Authenticated user lacks required role."""

    def __init__(self, message, details=None):
        super().__init__("FORBIDDEN", message, details)


class SocietyNotApprovedError(DomainError):
    """Society admin tried to log in before the society was approved."""

    def __init__(self, message, details=None):
        super().__init__("SOCIETY_NOT_APPROVED", message, details)


class NotFoundError(DomainError):
    """Requested resource does not exist."""

    def __init__(self, message, details=None):
        super().__init__("NOT_FOUND", message, details)


class ConflictError(DomainError):
    """A unique key (registration number, email) is already taken."""

    def __init__(self, message, details=None):
        super().__init__("CONFLICT", message, details)


class InvalidStateError(DomainError):
    """Entity is not in the required state for the operation."""

    def __init__(self, message, details=None):
        super().__init__("INVALID_STATE", message, details)


STATUS_CODE_MAP = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "SOCIETY_NOT_APPROVED": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "INVALID_STATE": status.HTTP_409_CONFLICT,
}


def error_body(code, message, details=None):
    return {"error": {"code": code, "message": message, "details": details or {}}}


def _drf_error_code(exc):
    if isinstance(exc, drf_exceptions.ValidationError):
        return "VALIDATION_ERROR"
    if isinstance(
        exc, (drf_exceptions.NotAuthenticated, drf_exceptions.AuthenticationFailed)
    ):
        return "UNAUTHORIZED"
    if isinstance(exc, drf_exceptions.PermissionDenied):
        return "FORBIDDEN"
    if isinstance(exc, drf_exceptions.NotFound):
        return "NOT_FOUND"
    if isinstance(exc, drf_exceptions.Throttled):
        return "RATE_LIMITED"
    if isinstance(exc, drf_exceptions.ParseError):
        return "VALIDATION_ERROR"
    return "INTERNAL_ERROR"


def domain_exception_handler(exc, context):
    """
    Custom exception handler for domain exceptions.

    Returns standard error format:
    {
        "error": {
            "code": "ERROR_CODE",
            "message": "Human-readable description",
            "details": {}
        }
    }
    """
    if isinstance(exc, DomainError):
        status_code = STATUS_CODE_MAP.get(exc.code, status.HTTP_400_BAD_REQUEST)
        return Response(error_body(exc.code, exc.message, exc.details), status=status_code)

    # Use default REST framework exception handler for other exceptions
    response = exception_handler(exc, context)

    if response is not None:
        code = _drf_error_code(exc)
        if isinstance(response.data, dict) and "detail" in response.data:
            response.data = error_body(code, str(response.data["detail"]))
        elif code == "VALIDATION_ERROR":
            response.data = error_body(code, "Invalid input", response.data)
        else:
            response.data = error_body(code, "An error occurred", response.data)
        return response

    logger.exception("Unhandled exception", exc_info=exc)
    details = {}
    if settings.DEBUG:
        details["trace"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return Response(
        error_body("INTERNAL_ERROR", "An internal error occurred", details),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def not_found_handler(request, exception=None):
    """handler404: unmatched URLs get the standard error envelope."""
    return JsonResponse(
        error_body("NOT_FOUND", "Resource not found"),
        status=status.HTTP_404_NOT_FOUND,
    )


def server_error_handler(request):
    """handler500: errors raised outside DRF views."""
    return JsonResponse(
        error_body("INTERNAL_ERROR", "An internal error occurred"),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
