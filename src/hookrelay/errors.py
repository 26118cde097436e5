"""Error taxonomy for the relay.

Registry and inbound errors map onto HTTP statuses. Delivery errors never
leave the dispatch engine: they are folded into a DeliveryOutcome.
"""

from typing import Any


class RelayError(Exception):
    """Base class for errors rendered as ``{"error": ...}`` responses."""

    status_code: int = 500

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(RelayError):
    """Bad registry input or malformed inbound body."""

    status_code = 400


class NotFoundError(RelayError):
    """Unknown endpoint id or service route."""

    status_code = 404


class InternalError(RelayError):
    """Unexpected fault inside the relay itself."""

    status_code = 500


class DeliveryError(Exception):
    """A single delivery attempt failed.

    Attributes:
        kind: Classification (timeout, connection_error, http_error:<code>, other)
        status_code: HTTP status of the downstream response, if one arrived
    """

    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"
    OTHER = "other"

    def __init__(self, kind: str, message: str, status_code: int | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    @classmethod
    def http_error(cls, status_code: int, body: str = "") -> "DeliveryError":
        message = f"HTTP {status_code}"
        if body:
            message = f"{message}: {body[:200]}"
        return cls(f"http_error:{status_code}", message, status_code=status_code)
