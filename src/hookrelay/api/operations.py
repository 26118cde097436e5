"""Operations API endpoints (health, ready)."""

from fastapi import APIRouter, Depends, HTTPException, status

from hookrelay import __version__
from hookrelay.api.deps import get_app_settings, get_registry
from hookrelay.config import Settings
from hookrelay.registry.store import EndpointRegistry
from hookrelay.schemas import HealthResponse, ReadyResponse

router = APIRouter(tags=["operations"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """Health check endpoint - returns server status."""
    return HealthResponse(
        status="ok",
        version=__version__,
        instance_id=settings.instance_id,
    )


@router.get("/ready", response_model=ReadyResponse)
async def ready_check(
    registry: EndpointRegistry = Depends(get_registry),
) -> ReadyResponse:
    """Readiness check endpoint - verifies the endpoint store answers."""
    try:
        await registry.ping()
        active = await registry.list_active()
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Endpoint registry not ready",
        ) from e

    return ReadyResponse(status="ok", registry="ok", active_endpoints=len(active))
