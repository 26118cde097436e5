"""Main API router combining all endpoints."""

from fastapi import APIRouter

from hookrelay.api import endpoints, operations, webhook

api_router = APIRouter()

api_router.include_router(operations.router)
api_router.include_router(endpoints.router)
api_router.include_router(webhook.router)
