"""Dispatch engine module."""

from hookrelay.dispatch.aggregate import aggregate, dispatch_status, summary_line, to_response
from hookrelay.dispatch.attempt import attempt_delivery, forwardable_headers
from hookrelay.dispatch.engine import ActiveEndpointSource, DispatchEngine
from hookrelay.dispatch.models import DeliveryOutcome, DispatchResult, Endpoint, Event

__all__ = [
    "ActiveEndpointSource",
    "DeliveryOutcome",
    "DispatchEngine",
    "DispatchResult",
    "Endpoint",
    "Event",
    "aggregate",
    "attempt_delivery",
    "dispatch_status",
    "forwardable_headers",
    "summary_line",
    "to_response",
]
