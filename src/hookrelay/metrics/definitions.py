"""Prometheus metrics definitions for HookRelay."""

from prometheus_client import Counter, Histogram

# HTTP Request metrics
REQUEST_TOTAL = Counter(
    "hookrelay_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "hookrelay_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Dispatch metrics
DISPATCHES_TOTAL = Counter(
    "hookrelay_dispatches_total",
    "Total inbound events dispatched",
    ["status"],  # delivered, partial, failed, no_active_endpoints
)

DISPATCH_FANOUT = Histogram(
    "hookrelay_dispatch_fanout",
    "Number of active endpoints per dispatch",
    buckets=(0, 1, 2, 5, 10, 25, 50, 100),
)

# Delivery metrics
DELIVERIES_TOTAL = Counter(
    "hookrelay_deliveries_total",
    "Total delivery attempts",
    ["result"],  # success, timeout, connection_error, http_error, other
)

DELIVERY_DURATION = Histogram(
    "hookrelay_delivery_duration_seconds",
    "Delivery attempt duration in seconds",
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)
