"""Pydantic schemas for the HTTP API."""

from hookrelay.schemas.common import (
    AcceptedResponse,
    ErrorResponse,
    HealthResponse,
    ReadyResponse,
)
from hookrelay.schemas.dispatch import DeliveryOutcomeResponse, DispatchResponse
from hookrelay.schemas.endpoint import EndpointCreate, EndpointResponse, EndpointStatusUpdate

__all__ = [
    "AcceptedResponse",
    "DeliveryOutcomeResponse",
    "DispatchResponse",
    "EndpointCreate",
    "EndpointResponse",
    "EndpointStatusUpdate",
    "ErrorResponse",
    "HealthResponse",
    "ReadyResponse",
]
