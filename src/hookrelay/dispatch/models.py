"""Value types shared by the registry and the dispatch engine."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(slots=True, frozen=True)
class Endpoint:
    """Point-in-time copy of a registered endpoint."""

    id: str
    name: str
    url: str
    is_active: bool

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "url": self.url, "is_active": self.is_active}


@dataclass(slots=True, frozen=True)
class Event:
    """One inbound webhook event.

    Attributes:
        payload: JSON body exactly as received
        received_at: Time the relay accepted the request
        headers: Inbound headers eligible for forwarding
    """

    payload: bytes
    received_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class DeliveryOutcome:
    """Result of one delivery attempt to one endpoint."""

    endpoint_id: str
    success: bool
    latency: float
    http_status: int | None = None
    error: str | None = None
    detail: str | None = None
    endpoint_name: str = ""
    url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "endpoint_id": self.endpoint_id,
            "name": self.endpoint_name,
            "url": self.url,
            "success": self.success,
            "http_status": self.http_status,
            "error": self.error,
            "detail": self.detail,
            "latency_ms": round(self.latency * 1000, 2),
        }


@dataclass(slots=True, frozen=True)
class DispatchResult:
    """Aggregate of all outcomes of one dispatch."""

    total: int
    succeeded: int
    failed: int
    outcomes: tuple[DeliveryOutcome, ...] = ()

    def __post_init__(self) -> None:
        if not (self.total == self.succeeded + self.failed == len(self.outcomes)):
            raise ValueError(
                f"Inconsistent dispatch result: total={self.total} "
                f"succeeded={self.succeeded} failed={self.failed} "
                f"outcomes={len(self.outcomes)}"
            )

    def outcome_for(self, endpoint_id: str) -> DeliveryOutcome | None:
        for outcome in self.outcomes:
            if outcome.endpoint_id == endpoint_id:
                return outcome
        return None
