"""Dispatch result Pydantic schemas."""

from pydantic import BaseModel


class DeliveryOutcomeResponse(BaseModel):
    """Per-endpoint delivery detail."""

    endpoint_id: str
    name: str
    url: str
    success: bool
    http_status: int | None = None
    error: str | None = None
    detail: str | None = None
    latency_ms: float


class DispatchResponse(BaseModel):
    """Summary returned to the webhook poster."""

    status: str
    total: int
    succeeded: int
    failed: int
    outcomes: list[DeliveryOutcomeResponse] | None = None
