"""
TechNotes Backend — Request Logging Middleware
================================================

What:  One access log line per API call on the `technotes.access` logger.
How:   Times the rest of the stack, then logs method, path, status, duration
       and request ID. Rejected calls also carry the application error code
       (`conflict`, `validation_error`, ...) that the exception handlers in
       main.py leave on `request.state.error_code`.
When:  Runs inside RequestIDMiddleware, so the request ID is already set.

Not logged:
    - request bodies (user payloads carry plaintext passwords)
    - health checks and documentation pages (QUIET_PATHS)
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from technotes.middleware.request_id import request_id_var

logger = logging.getLogger("technotes.access")

QUIET_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


def level_for_status(status: int) -> int:
    # Store failures and unexpected errors share 5xx; client mistakes are 4xx
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log for the /notes and /users API."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        # Creates scope["state"] up front so the handlers write into this dict
        request.state.error_code = None
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        error_code: Optional[str] = getattr(request.state, "error_code", None)
        rid = request_id_var.get("")
        line = f"{request.method} {request.url.path} -> {response.status_code} in {elapsed_ms}ms [{rid}]"
        if error_code:
            line += f" error={error_code}"

        logger.log(
            level_for_status(response.status_code),
            line,
            extra={
                "request_id": rid,
                "status": response.status_code,
                "duration_ms": elapsed_ms,
                "error_code": error_code,
            },
        )
        return response
