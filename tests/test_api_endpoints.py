"""Tests for the endpoint registry API."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient


async def _create(client: AsyncClient, name: str, url: str, is_active: bool = False) -> dict:
    response = await client.post(
        "/endpoints", json={"name": name, "url": url, "is_active": is_active}
    )
    assert response.status_code == 201
    return next(e for e in response.json() if e["name"] == name)


@pytest.mark.asyncio
async def test_list_empty(client: AsyncClient):
    response = await client.get("/endpoints")
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_register_returns_updated_list(client: AsyncClient):
    response = await client.post(
        "/endpoints",
        json={"name": "Splice", "url": "https://hooks.example.com/splice", "is_active": True},
    )
    assert response.status_code == 201

    data = response.json()
    assert len(data) == 1
    assert set(data[0]) == {"id", "name", "url", "is_active"}
    assert data[0]["name"] == "Splice"
    assert data[0]["is_active"] is True


@pytest.mark.asyncio
async def test_register_defaults_inactive(client: AsyncClient):
    response = await client.post(
        "/endpoints", json={"name": "UseOrange", "url": "https://hooks.example.com/orange"}
    )
    assert response.status_code == 201
    assert response.json()[0]["is_active"] is False


@pytest.mark.asyncio
async def test_register_empty_name(client: AsyncClient):
    response = await client.post(
        "/endpoints", json={"name": "  ", "url": "https://hooks.example.com", "is_active": False}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Name cannot be empty"


@pytest.mark.asyncio
async def test_register_empty_url(client: AsyncClient):
    response = await client.post("/endpoints", json={"name": "A", "url": ""})
    assert response.status_code == 400
    assert response.json()["error"] == "URL cannot be empty"


@pytest.mark.asyncio
async def test_register_invalid_url(client: AsyncClient):
    response = await client.post("/endpoints", json={"name": "A", "url": "hooks.example.com"})
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Invalid URL format"
    assert "details" in data


@pytest.mark.asyncio
async def test_register_missing_fields(client: AsyncClient):
    response = await client.post("/endpoints", json={"name": "A"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request body"


@pytest.mark.asyncio
async def test_toggle_status(client: AsyncClient):
    endpoint = await _create(client, "A", "https://a.example.com/hook")

    response = await client.put(f"/endpoints/{endpoint['id']}/status", json={"is_active": True})
    assert response.status_code == 200
    assert response.json() == {**endpoint, "is_active": True}

    listed = (await client.get("/endpoints")).json()
    assert listed[0]["is_active"] is True


@pytest.mark.asyncio
async def test_toggle_same_value_twice(client: AsyncClient):
    """Setting the same status twice is a no-op that still answers 200."""
    endpoint = await _create(client, "A", "https://a.example.com/hook")

    first = await client.put(f"/endpoints/{endpoint['id']}/status", json={"is_active": True})
    state_after_first = (await client.get("/endpoints")).json()
    second = await client.put(f"/endpoints/{endpoint['id']}/status", json={"is_active": True})

    assert first.status_code == 200
    assert second.status_code == 200
    assert (await client.get("/endpoints")).json() == state_after_first


@pytest.mark.asyncio
async def test_toggle_unknown(client: AsyncClient):
    response = await client.put("/endpoints/does-not-exist/status", json={"is_active": True})
    assert response.status_code == 404
    assert "not found" in response.json()["error"]


@pytest.mark.asyncio
async def test_toggle_invalid_body(client: AsyncClient):
    endpoint = await _create(client, "A", "https://a.example.com/hook")
    response = await client.put(f"/endpoints/{endpoint['id']}/status", json={})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete(client: AsyncClient):
    a = await _create(client, "A", "https://a.example.com/hook")
    b = await _create(client, "B", "https://b.example.com/hook")

    response = await client.delete(f"/endpoints/{a['id']}")
    assert response.status_code == 200
    assert response.json() == [b]


@pytest.mark.asyncio
async def test_delete_unknown(client: AsyncClient):
    response = await client.delete("/endpoints/does-not-exist")
    assert response.status_code == 404
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_delete_twice(client: AsyncClient):
    a = await _create(client, "A", "https://a.example.com/hook")

    assert (await client.delete(f"/endpoints/{a['id']}")).status_code == 200
    assert (await client.delete(f"/endpoints/{a['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_unexpected_fault_renders_error_json(app: FastAPI, monkeypatch):
    """A fault outside the relay's own errors still answers with {error}."""

    async def broken_list_all():
        raise RuntimeError("database is gone")

    monkeypatch.setattr(app.state.registry, "list_all", broken_list_all)

    # Starlette re-raises after rendering the 500, so read the rendered response
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/endpoints")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
