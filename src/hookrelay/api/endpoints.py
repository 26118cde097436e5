"""Endpoint registry API used by the management UI."""

from fastapi import APIRouter, Depends, status

from hookrelay.api.deps import get_registry
from hookrelay.registry.store import EndpointRegistry
from hookrelay.schemas import (
    EndpointCreate,
    EndpointResponse,
    EndpointStatusUpdate,
    ErrorResponse,
)

router = APIRouter(prefix="/endpoints", tags=["endpoints"])


async def _all_endpoints(registry: EndpointRegistry) -> list[EndpointResponse]:
    return [EndpointResponse.model_validate(e) for e in await registry.list_all()]


@router.get("", response_model=list[EndpointResponse])
async def list_endpoints(
    registry: EndpointRegistry = Depends(get_registry),
) -> list[EndpointResponse]:
    """List all registered endpoints."""
    return await _all_endpoints(registry)


@router.post(
    "",
    response_model=list[EndpointResponse],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def register_endpoint(
    data: EndpointCreate,
    registry: EndpointRegistry = Depends(get_registry),
) -> list[EndpointResponse]:
    """Register a new endpoint and return the updated list."""
    await registry.create(name=data.name, url=data.url, is_active=data.is_active)
    return await _all_endpoints(registry)


@router.put(
    "/{endpoint_id}/status",
    response_model=EndpointResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_endpoint_status(
    endpoint_id: str,
    data: EndpointStatusUpdate,
    registry: EndpointRegistry = Depends(get_registry),
) -> EndpointResponse:
    """Activate or deactivate an endpoint."""
    endpoint = await registry.set_status(endpoint_id, data.is_active)
    return EndpointResponse.model_validate(endpoint)


@router.delete(
    "/{endpoint_id}",
    response_model=list[EndpointResponse],
    responses={404: {"model": ErrorResponse}},
)
async def delete_endpoint(
    endpoint_id: str,
    registry: EndpointRegistry = Depends(get_registry),
) -> list[EndpointResponse]:
    """Delete an endpoint and return the updated list."""
    await registry.delete(endpoint_id)
    return await _all_endpoints(registry)
