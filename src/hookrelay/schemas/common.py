"""Common Pydantic schemas."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
    instance_id: str


class ReadyResponse(BaseModel):
    """Readiness check response."""

    status: str = "ok"
    registry: str = "ok"
    active_endpoints: int | None = None


class ErrorResponse(BaseModel):
    """Error response, as read by the management UI."""

    error: str
    details: object | None = None


class AcceptedResponse(BaseModel):
    """Response for events forwarded in the background."""

    status: str = "accepted"
    message: str = "Webhook received and processing started"
