"""Database module."""

from hookrelay.db.models import Base, EndpointRecord
from hookrelay.db.session import create_engine, create_session_factory

__all__ = [
    "Base",
    "EndpointRecord",
    "create_engine",
    "create_session_factory",
]
