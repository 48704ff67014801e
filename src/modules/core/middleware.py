import uuid
from contextvars import ContextVar
from typing import Callable

import structlog
from django.conf import settings
from django.http import HttpRequest, HttpResponse

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

logger = structlog.get_logger()


def _header_to_meta_key(header: str) -> str:
    return "HTTP_" + header.upper().replace("-", "_")


class CorrelationIdMiddleware:
    """Middleware that extracts or generates a correlation ID for each request.

    Reads the ``X-Correlation-Id`` header (name configurable through
    ``settings.CORRELATION_ID_HEADER``) from the incoming request.  If absent
    or blank, generates a new UUID4.  The ID is stored in a ContextVar so
    structlog processors can inject it into every log line, and is returned
    to the client on the same response header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response
        self.header = getattr(settings, "CORRELATION_ID_HEADER", "X-Correlation-Id")
        self.meta_key = _header_to_meta_key(self.header)

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request.META.get(self.meta_key, "").strip() or str(uuid.uuid4())
        token = correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)

        logger.info(
            "request_started",
            method=request.method,
            path=request.get_full_path(),
        )

        try:
            response = self.get_response(request)

            logger.info(
                "request_finished",
                method=request.method,
                path=request.get_full_path(),
                status_code=response.status_code,
            )

            response[self.header] = cid
            return response
        finally:
            structlog.contextvars.clear_contextvars()
            correlation_id_var.reset(token)
