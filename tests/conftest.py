"""Pytest configuration and fixtures for hookrelay tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from hookrelay.config import Settings, clear_settings_cache
from hookrelay.main import create_app
from hookrelay.registry import EndpointRegistry, create_registry


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Create test settings with a throwaway SQLite registry."""
    clear_settings_cache()
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'hookrelay.db'}",
        api_host="127.0.0.1",
        api_port=18080,
        dispatch_timeout=2.0,
        instance_id="test-instance",
    )


@pytest_asyncio.fixture
async def registry(test_settings: Settings) -> AsyncGenerator[EndpointRegistry, None]:
    """Create an initialized endpoint registry."""
    reg = create_registry(test_settings)
    await reg.initialize()
    yield reg
    await reg.close()


@pytest_asyncio.fixture
async def app(test_settings: Settings) -> AsyncGenerator[FastAPI, None]:
    """Create test FastAPI application.

    ASGITransport does not run the lifespan, so startup and shutdown are
    driven here.
    """
    application = create_app(test_settings)
    await application.state.registry.initialize()

    yield application

    await application.state.dispatch_engine.aclose()
    await application.state.registry.close()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
