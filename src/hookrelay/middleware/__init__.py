"""HookRelay middleware modules."""

from hookrelay.middleware.logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
