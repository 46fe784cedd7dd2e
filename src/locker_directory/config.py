"""Application configuration and settings management."""

from typing import Annotated, Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="LOCKERS_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Locker Directory Service"
    api_prefix: str = "/api"

    # Upstream locker/shipping provider
    api_key: Optional[str] = Field(default=None, description="Bearer key for the upstream locker API.")
    use_sandbox: bool = Field(default=False, description="Route upstream calls to the sandbox environment.")
    production_base_url: str = Field(default="https://api-pudo.co.za")
    sandbox_base_url: str = Field(default="https://sandbox-api.pudo.co.za")
    base_url: Optional[str] = Field(
        default=None,
        description="Explicit upstream base URL; overrides both production and sandbox URLs.",
    )
    listing_paths: Annotated[tuple[str, ...], NoDecode] = Field(
        default=("/lockers-data",),
        description="Listing endpoint paths tried in order (e.g. /lockers-data,/terminals).",
    )

    # First-party relay (Proxy tier)
    relay_url: Optional[str] = Field(
        default=None,
        description="URL of the same-origin relay that fetches lockers server-side.",
    )
    relay_auth_token: Optional[str] = Field(default=None, description="Bearer token sent to the relay.")
    relay_page_size: int = Field(default=100, ge=1)
    relay_max_pages: int = Field(default=50, ge=1)
    relay_max_records: int = Field(default=10_000, ge=1)
    relay_timeout_seconds: float = Field(default=20.0, gt=0)

    # Cache and timeouts
    cache_ttl_seconds: int = Field(default=30 * 60, ge=0)
    proxy_timeout_seconds: float = Field(default=15.0, ge=8.0, le=15.0)
    direct_timeout_seconds: float = Field(default=10.0, ge=8.0, le=15.0)
    action_timeout_seconds: float = Field(default=15.0, gt=0)

    frontend_allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    def resolve_base_url(self) -> str:
        """Return the upstream base URL honouring the override and sandbox flag."""
        if self.base_url:
            return self.base_url.rstrip("/")
        url = self.sandbox_base_url if self.use_sandbox else self.production_base_url
        return url.rstrip("/")

    def listing_urls(self) -> list[str]:
        base = self.resolve_base_url()
        return [f"{base}/{path.lstrip('/')}" for path in self.listing_paths]

    @field_validator("listing_paths", "frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
