"""Prometheus metrics middleware for FastAPI."""

import time
from collections.abc import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from hookrelay.metrics.definitions import REQUEST_DURATION, REQUEST_TOTAL


def _get_path_template(request: Request) -> str:
    """Get the path template for metrics labeling.

    Returns the route path pattern instead of the actual path
    to avoid high cardinality from endpoint ids.
    """
    route = request.scope.get("route")
    if route is not None and hasattr(route, "path"):
        return route.path

    path = request.url.path
    if path != "/" and path.endswith("/"):
        path = path.rstrip("/")
    return path


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware that collects Prometheus metrics for HTTP requests."""

    # Paths to exclude from metrics (to avoid self-referential metrics)
    EXCLUDED_PATHS = {"/metrics", "/health", "/ready"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and collect metrics."""
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response: Response = await call_next(request)
        duration = time.perf_counter() - start_time

        path_template = _get_path_template(request)
        REQUEST_TOTAL.labels(
            method=request.method,
            endpoint=path_template,
            status_code=response.status_code,
        ).inc()
        REQUEST_DURATION.labels(
            method=request.method,
            endpoint=path_template,
        ).observe(duration)

        return response
