"""Async database engine and session factory."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from hookrelay.config import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the database engine for the endpoint registry."""
    # SQLite doesn't support connection pooling parameters
    engine_kwargs: dict = {
        "echo": settings.database_echo,
    }
    if not settings.database_url.startswith("sqlite"):
        engine_kwargs["pool_pre_ping"] = True

    return create_async_engine(settings.database_url, **engine_kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
