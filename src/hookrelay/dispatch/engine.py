"""Concurrent fan-out of one event to every active endpoint."""

import asyncio
import logging
import time
from typing import Protocol

import httpx

from hookrelay.config import Settings, get_settings
from hookrelay.dispatch.aggregate import aggregate, dispatch_status, summary_line
from hookrelay.dispatch.attempt import attempt_delivery
from hookrelay.dispatch.models import DeliveryOutcome, DispatchResult, Endpoint, Event
from hookrelay.errors import DeliveryError
from hookrelay.metrics.definitions import (
    DELIVERIES_TOTAL,
    DELIVERY_DURATION,
    DISPATCH_FANOUT,
    DISPATCHES_TOTAL,
)

logger = logging.getLogger(__name__)


class ActiveEndpointSource(Protocol):
    """Anything that can hand out a snapshot of active endpoints."""

    async def list_active(self) -> list[Endpoint]: ...


class DispatchEngine:
    """Relays events to the active endpoints of a registry.

    Each dispatch takes one snapshot of the active endpoints, starts one
    delivery task per endpoint and joins them all. A failing or slow
    endpoint only affects its own outcome; the wall time of a dispatch is
    bounded by ``dispatch_timeout`` plus scheduling overhead.
    """

    def __init__(
        self,
        registry: ActiveEndpointSource,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.registry = registry
        self.settings = settings or get_settings()
        self._http_client = client
        self._owns_client = client is None
        self._http_client_lock = asyncio.Lock()

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._http_client is None:
            async with self._http_client_lock:
                # Double-check after acquiring lock
                if self._http_client is None:
                    keepalive = self.settings.dispatch_max_keepalive_connections
                    self._http_client = httpx.AsyncClient(
                        timeout=self.settings.dispatch_timeout,
                        verify=self.settings.dispatch_verify_tls,
                        # Uncapped: no delivery may wait on a sibling's connection
                        limits=httpx.Limits(
                            max_connections=None,
                            max_keepalive_connections=keepalive,
                        ),
                    )
                    self._owns_client = True
        return self._http_client

    async def aclose(self) -> None:
        """Close the HTTP client if this engine created it."""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
        self._http_client = None

    def _record(self, outcome: DeliveryOutcome) -> None:
        label = "success" if outcome.success else (outcome.error or "other").split(":")[0]
        DELIVERIES_TOTAL.labels(result=label).inc()
        DELIVERY_DURATION.observe(outcome.latency)
        if not outcome.success:
            logger.warning(
                f"Delivery to {outcome.endpoint_name or outcome.endpoint_id} "
                f"({outcome.url}) failed: {outcome.error} - {outcome.detail}"
            )

    async def dispatch(self, event: Event) -> DispatchResult:
        """Deliver one event to every endpoint active at call time.

        Args:
            event: Inbound event; its payload is forwarded verbatim

        Returns:
            DispatchResult with outcomes in snapshot order
        """
        # Registry changes after this point do not affect this dispatch
        snapshot = await self.registry.list_active()
        DISPATCH_FANOUT.observe(len(snapshot))

        if not snapshot:
            result = aggregate([])
            DISPATCHES_TOTAL.labels(status=dispatch_status(result)).inc()
            logger.info("No active endpoints configured, nothing to dispatch")
            return result

        client = await self._get_http_client()
        timeout = self.settings.dispatch_timeout
        headers = dict(event.headers) if self.settings.forward_headers else None

        # Every attempt is scheduled before any of them is awaited
        started = time.perf_counter()
        tasks = [
            asyncio.create_task(
                attempt_delivery(endpoint, event.payload, timeout, client=client, headers=headers),
                name=f"deliver:{endpoint.id}",
            )
            for endpoint in snapshot
        ]
        finished: dict[str, float] = {}
        for task in tasks:
            task.add_done_callback(lambda t: finished.setdefault(t.get_name(), time.perf_counter()))
        results = await asyncio.gather(*tasks, return_exceptions=True)

        outcomes: list[DeliveryOutcome] = []
        for endpoint, outcome in zip(snapshot, results, strict=True):
            if isinstance(outcome, BaseException):
                logger.error(
                    f"Delivery task for endpoint {endpoint.id} crashed: {outcome!r}",
                    exc_info=outcome,
                )
                outcome = DeliveryOutcome(
                    endpoint_id=endpoint.id,
                    endpoint_name=endpoint.name,
                    url=endpoint.url,
                    success=False,
                    error=DeliveryError.OTHER,
                    detail=f"Unexpected error: {outcome!r}",
                    latency=finished.get(f"deliver:{endpoint.id}", time.perf_counter()) - started,
                )
            self._record(outcome)
            outcomes.append(outcome)

        result = aggregate(outcomes, order=[endpoint.id for endpoint in snapshot])
        DISPATCHES_TOTAL.labels(status=dispatch_status(result)).inc()
        logger.info(summary_line(result))
        return result

    async def forward(self, service: str, url: str, event: Event) -> DeliveryOutcome:
        """Deliver one event to a statically configured service route."""
        endpoint = Endpoint(
            id=service,
            name=f"Static {service} endpoint",
            url=url,
            is_active=True,
        )
        client = await self._get_http_client()
        headers = dict(event.headers) if self.settings.forward_headers else None
        outcome = await attempt_delivery(
            endpoint,
            event.payload,
            self.settings.dispatch_timeout,
            client=client,
            headers=headers,
        )
        self._record(outcome)
        if outcome.success:
            logger.info(f"Forwarded to {endpoint.name}: status {outcome.http_status}")
        return outcome
