"""Shipping action endpoints; failures are reported, never substituted."""

from __future__ import annotations

from typing import Awaitable

from fastapi import APIRouter, Depends, HTTPException, status

from ...schemas.shipping import (
    ActionErrorDetail,
    ActionResponse,
    CancelRequest,
    RateRequest,
    ReturnRequest,
    ShipmentRequest,
)
from ...services.lockers import ErrorKind
from ...services.shipping import ShippingActionError, ShippingClient, ShippingConfigurationError
from ..dependencies import get_shipping_client

router = APIRouter(prefix="/shipping", tags=["shipping"])

_STATUS_BY_KIND = {
    ErrorKind.NETWORK_UNAVAILABLE: status.HTTP_504_GATEWAY_TIMEOUT,
    ErrorKind.CORS_BLOCKED: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.UPSTREAM_ERROR: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.MALFORMED_RESPONSE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.NO_USABLE_RECORDS: status.HTTP_502_BAD_GATEWAY,
}


async def _run(action: Awaitable) -> ActionResponse:
    try:
        return ActionResponse(data=await action)
    except ShippingConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except ShippingActionError as exc:
        detail = ActionErrorDetail(
            error=str(exc),
            kind=exc.kind.value,
            status_code=exc.status_code,
            cors_detected=exc.cors_detected,
            advisory=exc.advisory,
            upstream={"body": exc.body} if exc.body else None,
        )
        raise HTTPException(status_code=_STATUS_BY_KIND[exc.kind], detail=detail.model_dump()) from exc


@router.post("/rates", response_model=ActionResponse)
async def get_rates(payload: RateRequest, client: ShippingClient = Depends(get_shipping_client)) -> ActionResponse:
    return await _run(client.get_rates(payload))


@router.post("/shipments", response_model=ActionResponse, status_code=status.HTTP_201_CREATED)
async def create_shipment(
    payload: ShipmentRequest, client: ShippingClient = Depends(get_shipping_client)
) -> ActionResponse:
    return await _run(client.create_shipment(payload))


@router.post("/shipments/return", response_model=ActionResponse)
async def return_shipment(
    payload: ReturnRequest, client: ShippingClient = Depends(get_shipping_client)
) -> ActionResponse:
    return await _run(client.return_shipment(payload))


@router.put("/shipments/cancel", response_model=ActionResponse)
async def cancel_shipment(
    payload: CancelRequest, client: ShippingClient = Depends(get_shipping_client)
) -> ActionResponse:
    return await _run(client.cancel_shipment(payload.shipment_id))


@router.get("/shipments/{shipment_id}/tracking", response_model=ActionResponse)
async def track_shipment(shipment_id: str, client: ShippingClient = Depends(get_shipping_client)) -> ActionResponse:
    return await _run(client.track_shipment(shipment_id))


@router.get("/shipments/{shipment_id}/label", response_model=ActionResponse)
async def shipment_label(shipment_id: str, client: ShippingClient = Depends(get_shipping_client)) -> ActionResponse:
    return await _run(client.get_label(shipment_id))


@router.get("/shipments/{shipment_id}/sticker", response_model=ActionResponse)
async def shipment_sticker(shipment_id: str, client: ShippingClient = Depends(get_shipping_client)) -> ActionResponse:
    return await _run(client.get_sticker(shipment_id))


@router.get("/shipments/{shipment_id}/pod", response_model=ActionResponse)
async def shipment_pod(shipment_id: str, client: ShippingClient = Depends(get_shipping_client)) -> ActionResponse:
    return await _run(client.get_pod(shipment_id))
