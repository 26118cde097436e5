"""Merge delivery outcomes into a dispatch result and render it."""

from collections.abc import Iterable, Sequence
from typing import Any

from hookrelay.dispatch.models import DeliveryOutcome, DispatchResult

STATUS_NO_ACTIVE_ENDPOINTS = "no_active_endpoints"
STATUS_DELIVERED = "delivered"
STATUS_PARTIAL = "partial"
STATUS_FAILED = "failed"


def aggregate(
    outcomes: Iterable[DeliveryOutcome],
    order: Sequence[str] | None = None,
) -> DispatchResult:
    """Count outcomes and order them deterministically.

    Args:
        outcomes: One outcome per attempted endpoint, in any order
        order: Endpoint ids in snapshot order. Outcomes are sorted by their
            position in it; ids not listed keep their relative order at the end.

    Returns:
        DispatchResult with total == succeeded + failed == len(outcomes)
    """
    items = list(outcomes)
    if order is not None:
        position = {endpoint_id: i for i, endpoint_id in enumerate(order)}
        items.sort(key=lambda o: position.get(o.endpoint_id, len(position)))

    succeeded = sum(1 for o in items if o.success)
    return DispatchResult(
        total=len(items),
        succeeded=succeeded,
        failed=len(items) - succeeded,
        outcomes=tuple(items),
    )


def dispatch_status(result: DispatchResult) -> str:
    """Classify a result as a single word."""
    if result.total == 0:
        return STATUS_NO_ACTIVE_ENDPOINTS
    if result.failed == 0:
        return STATUS_DELIVERED
    if result.succeeded == 0:
        return STATUS_FAILED
    return STATUS_PARTIAL


def summary_line(result: DispatchResult) -> str:
    """One log line, e.g. ``dispatch total=3 succeeded=2 failed=1 [hook-b:timeout]``."""
    line = f"dispatch total={result.total} succeeded={result.succeeded} failed={result.failed}"
    failures = [
        f"{o.endpoint_name or o.endpoint_id}:{o.error}" for o in result.outcomes if not o.success
    ]
    if failures:
        line = f"{line} [{', '.join(failures)}]"
    return line


def to_response(result: DispatchResult, include_outcomes: bool = False) -> dict[str, Any]:
    """Shape a result for the webhook poster."""
    body: dict[str, Any] = {
        "status": dispatch_status(result),
        "total": result.total,
        "succeeded": result.succeeded,
        "failed": result.failed,
    }
    if include_outcomes:
        body["outcomes"] = [o.to_dict() for o in result.outcomes]
    return body
