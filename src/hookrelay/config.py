"""HookRelay configuration using pydantic-settings."""

import os
from functools import lru_cache
from pathlib import Path
from uuid import uuid4

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HOOKRELAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # CORS settings
    cors_origins: list[str] = Field(
        default_factory=list,
        description="Allowed CORS origins. Empty disables CORS. ['*'] for dev only.",
    )

    # Endpoint registry storage
    database_url: str = Field(
        default="sqlite+aiosqlite:///./hookrelay.db",
        description="Database connection URL for the endpoint registry",
    )
    database_echo: bool = False

    # Dispatch
    dispatch_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Per-endpoint delivery timeout in seconds. Bounds the whole attempt.",
    )
    dispatch_max_keepalive_connections: int = Field(
        default=20,
        ge=0,
        description=(
            "Idle connections kept open by the shared outbound HTTP client. "
            "Open connections are not capped, so no delivery waits for another."
        ),
    )
    dispatch_verify_tls: bool = Field(
        default=True,
        description="Verify TLS certificates of downstream endpoints.",
    )
    forward_headers: bool = Field(
        default=True,
        description="Forward inbound request headers (minus Host and hop-by-hop) downstream.",
    )
    block_private_networks: bool = Field(
        default=False,
        description="Reject endpoints pointing at loopback, private or metadata addresses.",
    )
    service_routes: dict[str, str] = Field(
        default_factory=dict,
        description="Static service name -> URL map served by POST /webhook/{service}.",
    )
    webhook_response_detail: bool = Field(
        default=False,
        description="Include per-endpoint outcomes in POST /webhook responses by default.",
    )

    # Management UI
    static_dir: Path | None = Field(
        default=None,
        description="Directory with the management UI static files, mounted at '/'.",
    )

    # Logging
    log_level: str = "info"

    # K8s/Operations
    instance_id: str = Field(default_factory=lambda: os.getenv("HOSTNAME", uuid4().hex[:8]))

    @field_validator("service_routes")
    @classmethod
    def validate_service_routes(cls, v: dict[str, str]) -> dict[str, str]:
        """Service routes must point at http(s) URLs."""
        for service, url in v.items():
            if not url.startswith(("http://", "https://")):
                raise ValueError(f"service_routes[{service!r}] must be an http(s) URL, got {url!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.lower()
        if level not in ("critical", "error", "warning", "info", "debug"):
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are cached after first load. Use clear_settings_cache()
    to reload settings (e.g., in tests or after environment changes).
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this to force settings to be reloaded on the next get_settings() call.
    """
    get_settings.cache_clear()
