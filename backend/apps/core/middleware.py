"""
Request logging middleware.
"""

import time
import uuid

import structlog

logger = structlog.get_logger("request")

# Health checks and scrapes would drown everything else
QUIET_PATHS = {"/health/", "/metrics", "/metrics/"}


class RequestLoggingMiddleware:
    """
    Log one structured event per HTTP request.

    Binds a short request id into structlog's contextvars so every log
    line emitted while handling the request carries it, and echoes it
    back in the ``X-Request-ID`` response header.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.monotonic()
        response = self.get_response(request)
        duration_ms = round((time.monotonic() - start_time) * 1000, 2)

        response["X-Request-ID"] = request_id

        if request.path in QUIET_PATHS:
            return response

        status_code = response.status_code
        if status_code >= 500:
            log_func = logger.error
        elif status_code >= 400:
            log_func = logger.warning
        else:
            log_func = logger.info

        log_func(
            "http_request",
            method=request.method,
            path=request.path,
            status_code=status_code,
            duration_ms=duration_ms,
            client_ip=_client_ip(request),
            user_agent=request.META.get("HTTP_USER_AGENT", "")[:100],
        )
        return response


def _client_ip(request):
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "unknown")
