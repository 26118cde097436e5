"""HookRelay - webhook fan-out relay server."""

__version__ = "0.1.0"
