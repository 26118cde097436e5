"""Single delivery attempt to one endpoint."""

import asyncio
import logging
import time
from collections.abc import Iterable, Mapping

import httpx

from hookrelay import __version__
from hookrelay.dispatch.models import DeliveryOutcome, Endpoint
from hookrelay.errors import DeliveryError

logger = logging.getLogger(__name__)

USER_AGENT = f"HookRelay/{__version__}"

# Headers never copied from the inbound request to a destination
EXCLUDED_FORWARD_HEADERS = {
    "host",
    "content-length",
    "content-type",
    "user-agent",
    "connection",
    "keep-alive",
    "transfer-encoding",
    "te",
    "trailer",
    "upgrade",
    "expect",
}


def forwardable_headers(headers: Mapping[str, str] | Iterable[tuple[str, str]]) -> dict[str, str]:
    """Select the inbound headers that may be forwarded downstream.

    Drops Host (it must match the destination), body framing headers that
    httpx recomputes, and hop-by-hop headers.
    """
    items = headers.items() if isinstance(headers, Mapping) else headers
    forwarded: dict[str, str] = {}
    for name, value in items:
        lowered = name.lower()
        if lowered in EXCLUDED_FORWARD_HEADERS or lowered.startswith("proxy-"):
            continue
        forwarded[lowered] = value
    return forwarded


async def _post(
    client: httpx.AsyncClient,
    url: str,
    payload: bytes,
    headers: Mapping[str, str] | None,
    timeout: float,
) -> httpx.Response:
    """POST the payload once and raise DeliveryError on any failure."""
    all_headers = httpx.Headers(headers or {})
    all_headers["Content-Type"] = "application/json"
    all_headers["User-Agent"] = USER_AGENT

    try:
        # httpx timeouts apply per phase; wait_for bounds the whole attempt
        response = await asyncio.wait_for(
            client.post(url, content=payload, headers=all_headers, timeout=timeout),
            timeout=timeout,
        )
    except (httpx.TimeoutException, asyncio.TimeoutError) as e:
        raise DeliveryError(DeliveryError.TIMEOUT, f"Request timed out after {timeout}s") from e
    except httpx.NetworkError as e:
        raise DeliveryError(DeliveryError.CONNECTION_ERROR, f"Connection error: {e}") from e
    except httpx.InvalidURL as e:
        raise DeliveryError(DeliveryError.OTHER, f"Invalid URL: {e}") from e
    except httpx.HTTPError as e:
        raise DeliveryError(DeliveryError.OTHER, f"HTTP error: {e}") from e

    if not response.is_success:
        raise DeliveryError.http_error(response.status_code, response.text)
    return response


async def attempt_delivery(
    endpoint: Endpoint,
    payload: bytes,
    timeout: float,
    *,
    client: httpx.AsyncClient,
    headers: Mapping[str, str] | None = None,
) -> DeliveryOutcome:
    """Deliver ``payload`` to one endpoint and classify the result.

    Performs exactly one outbound request with no retries. Every failure
    mode is captured in the returned outcome; only cancellation of the
    calling task propagates.

    Args:
        endpoint: Destination snapshot
        payload: Raw JSON body, sent verbatim
        timeout: Upper bound for the whole attempt in seconds
        client: Shared HTTP client
        headers: Extra headers (Content-Type and User-Agent always win)

    Returns:
        DeliveryOutcome for this endpoint
    """
    start_time = time.perf_counter()

    try:
        response = await _post(client, endpoint.url, payload, headers, timeout)
    except DeliveryError as e:
        return DeliveryOutcome(
            endpoint_id=endpoint.id,
            endpoint_name=endpoint.name,
            url=endpoint.url,
            success=False,
            http_status=e.status_code,
            error=e.kind,
            detail=e.message,
            latency=time.perf_counter() - start_time,
        )
    except Exception as e:
        logger.exception(f"Unexpected error delivering to {endpoint.url}")
        return DeliveryOutcome(
            endpoint_id=endpoint.id,
            endpoint_name=endpoint.name,
            url=endpoint.url,
            success=False,
            error=DeliveryError.OTHER,
            detail=f"Unexpected error: {e}",
            latency=time.perf_counter() - start_time,
        )

    return DeliveryOutcome(
        endpoint_id=endpoint.id,
        endpoint_name=endpoint.name,
        url=endpoint.url,
        success=True,
        http_status=response.status_code,
        latency=time.perf_counter() - start_time,
    )
