"""HookRelay Prometheus metrics."""

from hookrelay.metrics.definitions import (
    DELIVERIES_TOTAL,
    DELIVERY_DURATION,
    DISPATCH_FANOUT,
    DISPATCHES_TOTAL,
    REQUEST_DURATION,
    REQUEST_TOTAL,
)
from hookrelay.metrics.middleware import MetricsMiddleware

__all__ = [
    "MetricsMiddleware",
    "REQUEST_TOTAL",
    "REQUEST_DURATION",
    "DISPATCHES_TOTAL",
    "DISPATCH_FANOUT",
    "DELIVERIES_TOTAL",
    "DELIVERY_DURATION",
]
