"""Persistent endpoint registry."""

import asyncio
import logging

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from hookrelay.db.models import Base, EndpointRecord
from hookrelay.dispatch.models import Endpoint
from hookrelay.errors import NotFoundError
from hookrelay.registry.validation import validate_endpoint_url, validate_name

logger = logging.getLogger(__name__)


def _to_endpoint(record: EndpointRecord) -> Endpoint:
    return Endpoint(
        id=record.id,
        name=record.name,
        url=record.url,
        is_active=record.is_active,
    )


class EndpointRegistry:
    """Owns the canonical set of endpoints.

    All operations run under one lock, so a reader never observes a
    half-applied mutation. Readers get frozen Endpoint copies; changes made
    after a read never alter what was already returned.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: async_sessionmaker[AsyncSession],
        block_private_networks: bool = False,
    ):
        self.engine = engine
        self.session_factory = session_factory
        self.block_private_networks = block_private_networks
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Create the schema if it does not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        count = len(await self.list_all())
        logger.info(f"Endpoint registry ready ({count} endpoints)")

    async def ping(self) -> None:
        """Check that the backing store answers."""
        async with self.session_factory() as session:
            await session.execute(text("SELECT 1"))

    async def close(self) -> None:
        await self.engine.dispose()

    async def list_all(self) -> list[Endpoint]:
        """List every endpoint in creation order."""
        async with self._lock, self.session_factory() as session:
            stmt = select(EndpointRecord).order_by(EndpointRecord.created_at, EndpointRecord.id)
            result = await session.execute(stmt)
            return [_to_endpoint(r) for r in result.scalars().all()]

    async def list_active(self) -> list[Endpoint]:
        """Snapshot of the active endpoints in creation order."""
        async with self._lock, self.session_factory() as session:
            stmt = (
                select(EndpointRecord)
                .where(EndpointRecord.is_active.is_(True))
                .order_by(EndpointRecord.created_at, EndpointRecord.id)
            )
            result = await session.execute(stmt)
            return [_to_endpoint(r) for r in result.scalars().all()]

    async def get(self, endpoint_id: str) -> Endpoint:
        """Get an endpoint by id.

        Raises:
            NotFoundError: If no endpoint has this id
        """
        async with self._lock, self.session_factory() as session:
            record = await session.get(EndpointRecord, endpoint_id)
            if record is None:
                raise NotFoundError(f"Endpoint {endpoint_id} not found")
            return _to_endpoint(record)

    async def create(self, name: str, url: str, is_active: bool = False) -> Endpoint:
        """Register a new endpoint.

        Raises:
            ValidationError: If the name is empty or the URL is invalid
        """
        name = validate_name(name)
        url = validate_endpoint_url(url, block_private_networks=self.block_private_networks)

        async with self._lock, self.session_factory() as session:
            record = EndpointRecord(name=name, url=url, is_active=is_active)
            session.add(record)
            await session.commit()
            endpoint = _to_endpoint(record)

        logger.info(f"Registered endpoint {endpoint.id} ({endpoint.name} -> {endpoint.url})")
        return endpoint

    async def set_status(self, endpoint_id: str, is_active: bool) -> Endpoint:
        """Activate or deactivate an endpoint. Setting the current value is a no-op.

        Raises:
            NotFoundError: If no endpoint has this id
        """
        async with self._lock, self.session_factory() as session:
            record = await session.get(EndpointRecord, endpoint_id)
            if record is None:
                raise NotFoundError(f"Endpoint {endpoint_id} not found")
            if record.is_active != is_active:
                record.is_active = is_active
                await session.commit()
                logger.info(
                    f"Endpoint {endpoint_id} {'activated' if is_active else 'deactivated'}"
                )
            return _to_endpoint(record)

    async def delete(self, endpoint_id: str) -> None:
        """Remove an endpoint. Dispatches already in flight keep their snapshot.

        Raises:
            NotFoundError: If no endpoint has this id
        """
        async with self._lock, self.session_factory() as session:
            record = await session.get(EndpointRecord, endpoint_id)
            if record is None:
                raise NotFoundError(f"Endpoint {endpoint_id} not found")
            await session.delete(record)
            await session.commit()

        logger.info(f"Deleted endpoint {endpoint_id}")
