"""HTTP client for shipping actions (rates, shipments, tracking, documents).

Actions are never cached and never retried: a repeated shipment create can
double-book a collection. Failures propagate to the caller as
:class:`ShippingActionError` carrying the classified error kind.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...config import Settings, settings as default_settings
from ...schemas.shipping import RateRequest, ReturnRequest, ShipmentRequest
from ..lockers.errors import (
    CORS_ADVISORY,
    ErrorKind,
    LockerDirectoryError,
    UpstreamError,
    classify_transport_error,
)
from ..lockers.transport import build_headers

logger = logging.getLogger(__name__)


class ShippingConfigurationError(RuntimeError):
    """Raised when an action is attempted without an API key."""


class ShippingActionError(Exception):
    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        status_code: int | None = None,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code
        self.body = body

    @property
    def cors_detected(self) -> bool:
        return self.kind is ErrorKind.CORS_BLOCKED

    @property
    def advisory(self) -> str | None:
        return CORS_ADVISORY if self.cors_detected else None

    @classmethod
    def from_error(cls, error: LockerDirectoryError) -> "ShippingActionError":
        if isinstance(error, UpstreamError):
            return cls(error.kind, str(error), status_code=error.status_code, body=error.body)
        return cls(error.kind, str(error))


class ShippingClient:
    def __init__(
        self,
        settings: Settings | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.timeout = timeout if timeout is not None else self.settings.action_timeout_seconds
        self._client = client

    @property
    def base_url(self) -> str:
        return self.settings.resolve_base_url()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)))

    async def _request(self, method: str, path: str, *, json: Any = None) -> Any:
        if not self.settings.api_key:
            raise ShippingConfigurationError("Upstream API key is not configured (set LOCKERS_API_KEY).")

        url = f"{self.base_url}/{path.lstrip('/')}"
        client = self._get_client()
        try:
            response = await client.request(
                method,
                url,
                json=json,
                headers=build_headers(self.settings.api_key),
            )
            response.raise_for_status()
        except (httpx.HTTPError, OSError) as exc:
            error = classify_transport_error(exc, url=url)
            logger.error(f"Shipping action {method} {path} failed ({error.kind.value}): {error}")
            raise ShippingActionError.from_error(error) from exc
        finally:
            if client is not self._client:
                await client.aclose()

        if not response.content:
            return None
        content_type = response.headers.get("content-type", "")
        if "json" not in content_type:
            return {"content_type": content_type, "text": response.text}
        try:
            return response.json()
        except ValueError as exc:
            raise ShippingActionError(
                ErrorKind.MALFORMED_RESPONSE,
                f"Response from {url} is not valid JSON",
                status_code=response.status_code,
            ) from exc

    async def get_rates(self, request: RateRequest) -> Any:
        logger.info(f"Requesting {request.service_type} rates")
        return await self._request("POST", "/rates", json=request.to_upstream())

    async def create_shipment(self, request: ShipmentRequest) -> Any:
        logger.info(f"Creating {request.service_type} shipment ({request.service_level_code})")
        return await self._request("POST", "/shipments", json=request.to_upstream())

    async def track_shipment(self, shipment_id: str) -> Any:
        return await self._request("GET", f"/shipments/{shipment_id}/tracking")

    async def get_label(self, shipment_id: str) -> Any:
        return await self._request("GET", f"/shipments/{shipment_id}/label")

    async def get_sticker(self, shipment_id: str) -> Any:
        return await self._request("GET", f"/shipments/{shipment_id}/sticker")

    async def get_pod(self, shipment_id: str) -> Any:
        """Proof-of-delivery document for a delivered shipment."""
        return await self._request("GET", f"/shipments/{shipment_id}/pod")

    async def return_shipment(self, request: ReturnRequest) -> Any:
        logger.info(f"Requesting return for shipment {request.shipment_id}")
        return await self._request("POST", "/shipments/return", json=request.to_upstream())

    async def cancel_shipment(self, shipment_id: str) -> Any:
        logger.info(f"Cancelling shipment {shipment_id}")
        return await self._request("PUT", "/shipments/cancel", json={"id": shipment_id})
