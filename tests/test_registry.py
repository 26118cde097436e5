"""Tests for the endpoint registry."""

import pytest

from hookrelay.config import Settings
from hookrelay.errors import NotFoundError, ValidationError
from hookrelay.registry import EndpointRegistry, create_registry
from hookrelay.registry.validation import is_ip_blocked, validate_endpoint_url


class TestEndpointRegistry:
    """CRUD behaviour of EndpointRegistry."""

    @pytest.mark.asyncio
    async def test_create_and_list(self, registry: EndpointRegistry):
        created = await registry.create("Fincra", "https://hooks.example.com/fincra")

        assert created.id
        assert created.name == "Fincra"
        assert created.is_active is False

        endpoints = await registry.list_all()
        assert [e.id for e in endpoints] == [created.id]

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, registry: EndpointRegistry):
        a = await registry.create("A", "https://a.example.com")
        b = await registry.create("A", "https://a.example.com")
        assert a.id != b.id

    @pytest.mark.asyncio
    async def test_list_in_creation_order(self, registry: EndpointRegistry):
        ids = [(await registry.create(f"E{i}", f"https://e{i}.example.com")).id for i in range(5)]
        assert [e.id for e in await registry.list_all()] == ids

    @pytest.mark.asyncio
    async def test_list_active(self, registry: EndpointRegistry):
        a = await registry.create("A", "https://a.example.com", is_active=True)
        await registry.create("B", "https://b.example.com", is_active=False)
        c = await registry.create("C", "https://c.example.com", is_active=True)

        active = await registry.list_active()
        assert [e.id for e in active] == [a.id, c.id]

    @pytest.mark.asyncio
    async def test_create_strips_input(self, registry: EndpointRegistry):
        created = await registry.create("  Galoy  ", "  https://galoy.example.com/hook ")
        assert created.name == "Galoy"
        assert created.url == "https://galoy.example.com/hook"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("name", "url", "message"),
        [
            ("", "https://a.example.com", "Name cannot be empty"),
            ("   ", "https://a.example.com", "Name cannot be empty"),
            ("A", "", "URL cannot be empty"),
            ("A", "not a url", "Invalid URL format"),
            ("A", "ftp://a.example.com", "Invalid URL format"),
            ("A", "https://", "Invalid URL format"),
            ("A", "http://a.example.com:99999", "Invalid URL format"),
        ],
    )
    async def test_create_validation(self, registry: EndpointRegistry, name, url, message):
        with pytest.raises(ValidationError, match=message):
            await registry.create(name, url)
        assert await registry.list_all() == []

    @pytest.mark.asyncio
    async def test_get(self, registry: EndpointRegistry):
        created = await registry.create("A", "https://a.example.com")
        assert await registry.get(created.id) == created

    @pytest.mark.asyncio
    async def test_get_unknown(self, registry: EndpointRegistry):
        with pytest.raises(NotFoundError):
            await registry.get("missing")

    @pytest.mark.asyncio
    async def test_set_status(self, registry: EndpointRegistry):
        created = await registry.create("A", "https://a.example.com")

        updated = await registry.set_status(created.id, True)

        assert updated.is_active is True
        assert [e.id for e in await registry.list_active()] == [created.id]

    @pytest.mark.asyncio
    async def test_set_status_idempotent(self, registry: EndpointRegistry):
        created = await registry.create("A", "https://a.example.com")

        first = await registry.set_status(created.id, True)
        before = await registry.list_all()
        second = await registry.set_status(created.id, True)

        assert first == second
        assert await registry.list_all() == before

    @pytest.mark.asyncio
    async def test_set_status_unknown(self, registry: EndpointRegistry):
        with pytest.raises(NotFoundError):
            await registry.set_status("missing", True)

    @pytest.mark.asyncio
    async def test_snapshot_is_not_mutated(self, registry: EndpointRegistry):
        created = await registry.create("A", "https://a.example.com", is_active=True)
        snapshot = await registry.list_active()

        await registry.set_status(created.id, False)

        assert snapshot[0].is_active is True
        assert await registry.list_active() == []

    @pytest.mark.asyncio
    async def test_delete(self, registry: EndpointRegistry):
        a = await registry.create("A", "https://a.example.com")
        b = await registry.create("B", "https://b.example.com")

        await registry.delete(a.id)

        assert [e.id for e in await registry.list_all()] == [b.id]

    @pytest.mark.asyncio
    async def test_delete_unknown(self, registry: EndpointRegistry):
        with pytest.raises(NotFoundError):
            await registry.delete("missing")

    @pytest.mark.asyncio
    async def test_survives_restart(self, test_settings: Settings):
        """Records persist in the backing database across registry instances."""
        first = create_registry(test_settings)
        await first.initialize()
        created = await first.create("A", "https://a.example.com", is_active=True)
        await first.close()

        second = create_registry(test_settings)
        await second.initialize()
        try:
            assert await second.list_active() == [created]
        finally:
            await second.close()

    @pytest.mark.asyncio
    async def test_ping(self, registry: EndpointRegistry):
        await registry.ping()


class TestPrivateNetworkBlocking:
    """Tests for the optional private network guard."""

    @pytest.mark.asyncio
    async def test_blocks_loopback_when_enabled(self, test_settings: Settings):
        reg = create_registry(test_settings.model_copy(update={"block_private_networks": True}))
        await reg.initialize()
        try:
            with pytest.raises(ValidationError, match="blocked"):
                await reg.create("Local", "http://127.0.0.1:9000/hook")
            with pytest.raises(ValidationError, match="blocked"):
                await reg.create("Local", "http://localhost/hook")
            created = await reg.create("Public", "https://hooks.example.com/hook")
            assert created.url == "https://hooks.example.com/hook"
        finally:
            await reg.close()

    @pytest.mark.asyncio
    async def test_allows_loopback_by_default(self, registry: EndpointRegistry):
        created = await registry.create("Local", "http://127.0.0.1:9000/hook")
        assert created.url == "http://127.0.0.1:9000/hook"

    @pytest.mark.parametrize(
        ("ip", "blocked"),
        [
            ("127.0.0.1", True),
            ("10.1.2.3", True),
            ("172.16.0.1", True),
            ("192.168.1.1", True),
            ("169.254.169.254", True),
            ("::1", True),
            ("8.8.8.8", False),
            ("2001:4860:4860::8888", False),
            ("not-an-ip", False),
        ],
    )
    def test_is_ip_blocked(self, ip, blocked):
        assert is_ip_blocked(ip) is blocked

    def test_validate_metadata_hostname(self):
        with pytest.raises(ValidationError):
            validate_endpoint_url("http://metadata.google.internal/", block_private_networks=True)
