"""
Questions Portal Backend — Request Logging Middleware
======================================================

What:  One structured access-log line per HTTP request.
How:   Measures handler duration and logs method, path, status, duration,
       request id, caller id and client IP. The log level follows the
       status code: 5xx → ERROR, 4xx → WARNING, otherwise INFO.
Who:   Applied to every request except /health.

Never logged: request bodies (question drafts are user content) and
identity headers.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("questions.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs structured information about each HTTP request and response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path == "/health":
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        # Set by app.auth.get_current_user_id once the caller is resolved
        user_id = getattr(request.state, "user_id", None)

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] user=%s from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            user_id or "-",
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "user_id": str(user_id) if user_id else None,
            },
        )

        return response
