"""Domain error hierarchy and the DRF exception handler.

Services raise subclasses of ``DomainError``; each class carries the HTTP
status it maps to.  ``api_exception_handler`` is registered as DRF's
``EXCEPTION_HANDLER`` and is the only place errors become responses, so
views never need ``try``/``except`` around service calls.

Every error response uses the same envelope::

    {
        "timestamp": "...",
        "status": 404,
        "error": "Not Found",
        "message": "Customer not found: ...",
        "path": "/api/v1/customers/.../",
        "errors": []
    }
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Dict, List, Optional

import structlog
from django.utils import timezone
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.views import set_rollback

logger = structlog.get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


class DomainError(Exception):
    """Base class for errors raised by the service layer."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(DomainError):
    status_code = status.HTTP_409_CONFLICT


class BadRequestError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidArgument(BadRequestError):
    """A request is missing the arguments an operation needs."""


class ValidationFailed(BadRequestError):
    """Schema-level validation failed.

    ``errors`` holds ``{"field": ..., "message": ...}`` pairs.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[List[Dict[str, str]]] = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or []


class StorageUnavailable(DomainError):
    """The persistence layer failed; details are never sent to clients."""


# ---------------------------------------------------------------------------
# DRF exception handler
# ---------------------------------------------------------------------------


def build_error_body(
    status_code: int,
    message: str,
    path: str,
    errors: Optional[List[Dict[str, str]]] = None,
) -> Dict[str, Any]:
    return {
        "timestamp": timezone.now().isoformat(),
        "status": status_code,
        "error": HTTPStatus(status_code).phrase,
        "message": message,
        "path": path,
        "errors": errors or [],
    }


def _flatten_drf_detail(detail: Any, prefix: str = "") -> List[Dict[str, str]]:
    """Turn DRF ``ValidationError.detail`` into field/message pairs."""
    if isinstance(detail, dict):
        pairs: List[Dict[str, str]] = []
        for key, value in detail.items():
            field = f"{prefix}.{key}" if prefix else str(key)
            pairs.extend(_flatten_drf_detail(value, field))
        return pairs
    if isinstance(detail, list):
        pairs = []
        for item in detail:
            pairs.extend(_flatten_drf_detail(item, prefix))
        return pairs
    return [{"field": prefix or "non_field_errors", "message": str(detail)}]


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    request = context.get("request")
    path = request.path if request is not None else ""

    if isinstance(exc, DomainError):
        set_rollback()
        if exc.status_code >= 500:
            logger.error("request.failed", error_type=type(exc).__name__, exc_info=exc)
            message = GENERIC_ERROR_MESSAGE
        else:
            logger.warning(
                "request.rejected",
                error_type=type(exc).__name__,
                status_code=exc.status_code,
            )
            message = str(exc)
        body = build_error_body(
            exc.status_code, message, path, getattr(exc, "errors", None)
        )
        return Response(body, status=exc.status_code)

    response = drf_exception_handler(exc, context)
    if response is not None:
        errors: List[Dict[str, str]] = []
        if isinstance(exc, drf_exceptions.ValidationError):
            errors = _flatten_drf_detail(exc.detail)
            message = "Validation failed"
        elif isinstance(exc, drf_exceptions.APIException):
            message = str(exc.detail)
        else:
            message = HTTPStatus(response.status_code).phrase
        response.data = build_error_body(response.status_code, message, path, errors)
        return response

    set_rollback()
    logger.error("request.unhandled_exception", exc_info=exc)
    body = build_error_body(
        status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE, path
    )
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
