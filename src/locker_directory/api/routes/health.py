"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...services.lockers import LockerDirectoryService, check_relay_health
from ..dependencies import get_directory

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/lockers", status_code=status.HTTP_200_OK)
async def health_lockers(directory: LockerDirectoryService = Depends(get_directory)) -> dict:
    """Report cache state and whether the relay tier answers."""
    config = directory.settings
    return {
        "service": "lockers",
        "cache": directory.cache_status(),
        "relay_configured": bool(config.relay_url),
        "relay_healthy": await check_relay_health(config),
        "api_key_configured": bool(config.api_key),
        "sandbox": config.use_sandbox,
        "base_url": config.resolve_base_url(),
    }
