"""First-party relay endpoint backing the proxy tier."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ...schemas.relay import RelayRequest, RelayResponse
from ...services.lockers import LockerRelay
from ..dependencies import get_relay

router = APIRouter(prefix="/relay", tags=["relay"])


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.post("/lockers", response_model=RelayResponse, status_code=status.HTTP_200_OK)
async def relay_lockers(payload: RelayRequest, relay: LockerRelay = Depends(get_relay)):
    if payload.test:
        return RelayResponse(success=True, message="Proxy is working", timestamp=_timestamp())

    result = await relay.fetch(api_key=payload.apiKey, endpoints=payload.endpoints, use_sandbox=payload.useSandbox)
    if not result.success:
        body = RelayResponse(
            success=False,
            error=result.error,
            endpoints=list(result.endpoints),
            timestamp=_timestamp(),
        )
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=body.model_dump(exclude_none=True))

    return RelayResponse(
        success=True,
        lockers=result.lockers,
        source=result.source,
        method=result.method,
        strategy=result.strategy,
        totalPages=result.total_pages,
        totalCount=result.total_count,
    )
