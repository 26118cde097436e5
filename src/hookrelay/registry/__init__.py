"""Endpoint registry module."""

from hookrelay.config import Settings
from hookrelay.db.session import create_engine, create_session_factory
from hookrelay.registry.store import EndpointRegistry
from hookrelay.registry.validation import is_ip_blocked, validate_endpoint_url, validate_name


def create_registry(settings: Settings) -> EndpointRegistry:
    """Build a registry backed by ``settings.database_url``."""
    engine = create_engine(settings)
    return EndpointRegistry(
        engine,
        create_session_factory(engine),
        block_private_networks=settings.block_private_networks,
    )


__all__ = [
    "EndpointRegistry",
    "create_registry",
    "is_ip_blocked",
    "validate_endpoint_url",
    "validate_name",
]
