"""FastAPI dependencies resolving the components stored on app state."""

from fastapi import Request

from hookrelay.config import Settings
from hookrelay.dispatch.engine import DispatchEngine
from hookrelay.registry.store import EndpointRegistry


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_registry(request: Request) -> EndpointRegistry:
    return request.app.state.registry


def get_dispatch_engine(request: Request) -> DispatchEngine:
    return request.app.state.dispatch_engine
