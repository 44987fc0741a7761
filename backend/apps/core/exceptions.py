"""
Unified exception handling for the API.
=======================================
Every business error raised by the service layer inherits from
BaseAppException. Views never catch these; the DRF exception handler
below turns them into one JSON shape:

    {
        "timestamp": "2026-01-31T09:12:44.123456+00:00",
        "status": 400,
        "type": "error",
        "code": "INVALID_STATE",
        "message": "Cannot dispense from a prescription with status COMPLETED",
        "detail": []
    }

Never put PHI (names, national ids) into messages.
"""

import structlog
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.views import set_rollback

logger = structlog.get_logger(__name__)


# ============================================================
# Base class
# ============================================================
class BaseAppException(Exception):
    """
    Base class for all application errors.

    Subclasses override ``code``, ``http_status`` and ``message``.
    """
    type = "error"
    code = "UNKNOWN_ERROR"
    http_status = 500
    message = "An unexpected error occurred"

    def __init__(self, message=None, detail=None, code=None):
        if message:
            self.message = message
        if code:
            self.code = code

        # detail is always a list so clients can iterate it
        if detail is None:
            self.detail = []
        elif isinstance(detail, str):
            self.detail = [detail]
        else:
            self.detail = list(detail)

        super().__init__(self.message)

    def to_dict(self):
        """JSON-serializable body."""
        return {
            "timestamp": timezone.now().isoformat(),
            "status": self.http_status,
            "type": self.type,
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }


# ============================================================
# 404 - referenced entity absent
# ============================================================
class NotFoundError(BaseAppException):
    code = "NOT_FOUND"
    http_status = 404
    message = "Resource not found"


class ReferenceNotFound(NotFoundError):
    """
    An id supplied in a request body points at nothing.

    Still a NotFoundError, but the caller sent a bad reference so it maps
    to 400 rather than 404.
    """
    code = "REFERENCE_NOT_FOUND"
    http_status = 400
    message = "Referenced resource not found"


# ============================================================
# 401 / 403 - identity & ownership
# ============================================================
class IdentityRequired(BaseAppException):
    code = "IDENTITY_REQUIRED"
    http_status = 401
    message = "Caller identity is required"


class ForbiddenError(BaseAppException):
    code = "FORBIDDEN"
    http_status = 403
    message = "Not authorized to perform this action"


# ============================================================
# 400 - business rules & validation
# ============================================================
class InvalidStateError(BaseAppException):
    """Wrong status, quantity overflow, already cancelled..."""
    code = "INVALID_STATE"
    http_status = 400
    message = "Operation not allowed in the current state"


class InvalidReferenceError(BaseAppException):
    """Two references in a request do not belong together."""
    code = "INVALID_REFERENCE"
    http_status = 400
    message = "Inconsistent reference"


class AppValidationError(BaseAppException):
    """
    Malformed input.

    Named AppValidationError to avoid clashing with DRF's ValidationError.
    """
    code = "VALIDATION_FAILED"
    http_status = 400
    message = "Input validation failed"

    def __init__(self, message=None, detail=None, code=None, field_errors=None):
        super().__init__(message=message, detail=detail, code=code)
        self.field_errors = field_errors or {}

    def to_dict(self):
        data = super().to_dict()
        data["field_errors"] = self.field_errors
        return data


# ============================================================
# 503
# ============================================================
class PrescriptionNumberExhausted(BaseAppException):
    code = "PRESCRIPTION_NUMBER_EXHAUSTED"
    http_status = 503
    message = "Could not allocate a unique prescription number"


# ============================================================
# DRF handler
# ============================================================
def _flatten_field_errors(data):
    """{"dose": ["Must be positive."]} -> {"dose": "Must be positive."}"""
    field_errors = {}
    detail = []
    if isinstance(data, dict):
        for field, messages in data.items():
            if isinstance(messages, list):
                text = " ".join(str(m) for m in messages)
            elif isinstance(messages, dict):
                text = str(_flatten_field_errors(messages)[0])
            else:
                text = str(messages)
            field_errors[field] = text
            detail.append(f"{field}: {text}")
    elif isinstance(data, list):
        detail = [str(m) for m in data]
    else:
        detail = [str(data)]
    return field_errors, detail


def unified_exception_handler(exc, context):
    """
    Single entry point for every exception a DRF view lets escape.

    1. BaseAppException -> its own status and body
    2. DRF / Django validation errors -> VALIDATION_FAILED with field_errors
    3. Other DRF exceptions (404, 405, parse errors) and Django's Http404 /
       PermissionDenied -> same shape, DRF status
    4. Anything else -> 500, logged, no internals exposed
    """
    request = context.get("request")
    view = context.get("view")
    log_context = {
        "path": request.path if request else "unknown",
        "method": request.method if request else "unknown",
        "view": view.__class__.__name__ if view else "unknown",
    }

    if isinstance(exc, BaseAppException):
        set_rollback()
        log = logger.warning if exc.http_status < 500 else logger.error
        log("app_exception", code=exc.code, status=exc.http_status, **log_context)
        return Response(exc.to_dict(), status=exc.http_status)

    if isinstance(exc, Http404):
        exc = NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = PermissionDenied()
    elif isinstance(exc, DjangoValidationError):
        exc = DRFValidationError(
            detail=exc.message_dict if hasattr(exc, "error_dict") else exc.messages
        )

    response = drf_exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, DRFValidationError):
            field_errors, detail = _flatten_field_errors(response.data)
            logger.warning(
                "request_validation_failed",
                fields=sorted(field_errors),
                **log_context,
            )
            body = AppValidationError(detail=detail, field_errors=field_errors).to_dict()
            return Response(body, status=status.HTTP_400_BAD_REQUEST)

        logger.warning(
            "api_exception",
            exception=exc.__class__.__name__,
            status=response.status_code,
            **log_context,
        )
        message = getattr(exc, "detail", None) or "An error occurred"
        return Response(
            {
                "timestamp": timezone.now().isoformat(),
                "status": response.status_code,
                "type": "error",
                "code": str(getattr(exc, "default_code", "error")).upper(),
                "message": str(message),
                "detail": [],
            },
            status=response.status_code,
            headers=_passthrough_headers(response),
        )

    # Unknown error - never expose internals
    set_rollback()
    logger.exception("unexpected_error", **log_context)
    return Response(
        {
            "timestamp": timezone.now().isoformat(),
            "status": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "type": "error",
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "detail": [],
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _passthrough_headers(response):
    headers = {}
    for name in ("Allow", "WWW-Authenticate", "Retry-After"):
        if name in response:
            headers[name] = response[name]
    return headers
