"""Endpoint Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class EndpointCreate(BaseModel):
    """Schema for registering an endpoint."""

    url: str = Field(..., description="Destination URL (http or https)")
    name: str = Field(..., description="Display name")
    is_active: bool = False


class EndpointStatusUpdate(BaseModel):
    """Schema for toggling an endpoint."""

    is_active: bool


class EndpointResponse(BaseModel):
    """Schema for endpoint response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    url: str
    is_active: bool
