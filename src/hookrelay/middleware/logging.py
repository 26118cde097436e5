"""Request logging middleware for API observability."""

import logging
import time
from collections.abc import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("hookrelay.access")


def client_ip(request: Request) -> str:
    """Client address, preferring the first X-Forwarded-For hop."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs incoming HTTP requests.

    Logs:
    - Client IP address
    - Request method and path
    - Response status code
    - Response time in milliseconds
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log details."""
        start_time = time.perf_counter()
        ip = client_ip(request)

        response: Response = await call_next(request)

        process_time_ms = (time.perf_counter() - start_time) * 1000

        # Format: IP METHOD PATH STATUS TIME_MS
        logger.info(
            "%s %s %s %d %.2fms",
            ip,
            request.method,
            request.url.path,
            response.status_code,
            process_time_ms,
        )

        response.headers["X-Process-Time-Ms"] = f"{process_time_ms:.2f}"
        return response
