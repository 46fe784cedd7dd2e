"""HTTP transports for the locker listing endpoint."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from ...config import Settings, settings as default_settings
from .errors import (
    CorsBlocked,
    LockerDirectoryError,
    MalformedResponse,
    NetworkUnavailable,
    UpstreamError,
    classify_transport_error,
)

USER_AGENT = "LockerDirectory/1.0"

logger = logging.getLogger(__name__)


class LockerTransport(Protocol):
    """Anything able to return a raw locker payload."""

    name: str
    timeout: float

    async def fetch(self) -> Any:
        ...


def build_headers(api_key: str | None) -> dict[str, str]:
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
    }
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers


def mask_key(api_key: str | None) -> str:
    if not api_key:
        return "<none>"
    if len(api_key) <= 12:
        return api_key[:2] + "..."
    return f"{api_key[:8]}...{api_key[-4:]}"


def decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise MalformedResponse(f"Response from {response.request.url} is not valid JSON") from exc


class _HttpTransport:
    """Shared client handling for both listing transports."""

    name = "http"

    def __init__(
        self,
        settings: Settings | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.timeout = timeout if timeout is not None else self._default_timeout()
        self._client = client

    def _default_timeout(self) -> float:
        return self.settings.direct_timeout_seconds

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)))

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        client = self._get_client()
        try:
            response = await client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except LockerDirectoryError:
            raise
        except (httpx.HTTPError, OSError) as exc:
            raise classify_transport_error(exc, url=url) from exc
        finally:
            if client is not self._client:
                await client.aclose()


class ProxyTransport(_HttpTransport):
    """Fetch lockers through the first-party relay.

    Relay contract: ``{apiKey, endpoints, useSandbox}`` in,
    ``{success, lockers, error?}`` out.
    """

    name = "proxy"

    def _default_timeout(self) -> float:
        return self.settings.proxy_timeout_seconds

    def build_payload(self) -> dict[str, Any]:
        return {
            "apiKey": self.settings.api_key,
            "endpoints": self.settings.listing_urls(),
            "useSandbox": self.settings.use_sandbox,
        }

    async def fetch(self) -> Any:
        relay_url = self.settings.relay_url
        if not relay_url:
            raise NetworkUnavailable("Relay URL is not configured (set LOCKERS_RELAY_URL)")

        logger.info(f"Requesting lockers via relay {relay_url}")
        response = await self._send(
            "POST",
            relay_url,
            json=self.build_payload(),
            headers=build_headers(self.settings.relay_auth_token),
        )
        body = decode_json(response)
        if not isinstance(body, dict):
            raise MalformedResponse("Relay response is not a JSON object")
        if not body.get("success"):
            error = body.get("error") or "relay reported failure"
            raise UpstreamError(f"Relay failed: {error}", status_code=response.status_code, body=str(error))
        if "lockers" not in body:
            raise MalformedResponse("Relay response has no 'lockers' field")
        return body["lockers"]


class DirectTransport(_HttpTransport):
    """Call the upstream listing endpoint directly, trying each configured path."""

    name = "direct"

    async def fetch(self) -> Any:
        urls = self.settings.listing_urls()
        if not urls:
            raise NetworkUnavailable("No listing endpoints configured")

        headers = build_headers(self.settings.api_key)
        logger.info(f"Requesting lockers directly (key {mask_key(self.settings.api_key)})")
        failures: list[LockerDirectoryError] = []
        for url in urls:
            try:
                response = await self._send("GET", url, headers=headers)
                return decode_json(response)
            except LockerDirectoryError as exc:
                logger.warning(f"Direct listing call to {url} failed: {exc}")
                failures.append(exc)

        # A CORS signature anywhere is the most useful diagnosis for operators.
        for failure in failures:
            if isinstance(failure, CorsBlocked):
                raise failure
        raise failures[-1]


async def check_relay_health(
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> bool:
    """Ping the relay in test mode; False when unconfigured or unreachable."""
    config = settings or default_settings
    if not config.relay_url:
        return False
    own_client = client is None
    http = client or httpx.AsyncClient(timeout=5.0)
    try:
        response = await http.post(
            config.relay_url,
            json={"test": True},
            headers=build_headers(config.relay_auth_token),
        )
        response.raise_for_status()
        data = response.json()
        return isinstance(data, dict) and bool(data.get("success"))
    except (httpx.HTTPError, ValueError) as exc:
        logger.debug(f"Relay health check failed: {exc}")
        return False
    finally:
        if own_client:
            await http.aclose()
