"""Inbound webhook endpoints."""

import json
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request

from hookrelay.api.deps import get_app_settings, get_dispatch_engine
from hookrelay.config import Settings
from hookrelay.dispatch import DispatchEngine, Event, forwardable_headers, to_response
from hookrelay.errors import InternalError, NotFoundError, ValidationError
from hookrelay.schemas import AcceptedResponse, DispatchResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhook"])


async def _read_event(request: Request, settings: Settings) -> Event:
    """Build an Event from the raw request, refusing bodies that are not JSON."""
    body = await request.body()
    try:
        json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError("Invalid JSON body", details=str(e)) from e

    headers = forwardable_headers(request.headers.items()) if settings.forward_headers else {}
    return Event(payload=body, headers=headers)


@router.post(
    "/webhook",
    response_model=DispatchResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def receive_webhook(
    request: Request,
    detail: bool | None = Query(None, description="Include per-endpoint outcomes"),
    engine: DispatchEngine = Depends(get_dispatch_engine),
    settings: Settings = Depends(get_app_settings),
) -> DispatchResponse:
    """Relay the event to every active endpoint.

    Answers 200 whatever the downstream endpoints did; the body says how
    many deliveries succeeded.
    """
    event = await _read_event(request, settings)

    try:
        result = await engine.dispatch(event)
    except Exception as e:
        logger.exception("Dispatch failed")
        raise InternalError("Internal error while dispatching webhook") from e

    include_outcomes = settings.webhook_response_detail if detail is None else detail
    return DispatchResponse.model_validate(to_response(result, include_outcomes=include_outcomes))


@router.post(
    "/webhook/{service}",
    response_model=AcceptedResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def receive_service_webhook(
    service: str,
    request: Request,
    background_tasks: BackgroundTasks,
    engine: DispatchEngine = Depends(get_dispatch_engine),
    settings: Settings = Depends(get_app_settings),
) -> AcceptedResponse:
    """Forward the event to a statically configured service in the background."""
    url = settings.service_routes.get(service)
    if url is None:
        raise NotFoundError(f"Unknown service: {service}")

    event = await _read_event(request, settings)
    background_tasks.add_task(engine.forward, service, url, event)
    return AcceptedResponse()
