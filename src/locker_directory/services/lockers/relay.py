"""Server-side relay that fetches raw locker listings on behalf of browsers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

import httpx

from ...config import Settings, settings as default_settings
from .errors import LockerDirectoryError, classify_transport_error
from .normalizer import find_records
from .transport import build_headers, mask_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PaginationStrategy:
    page_param: str
    limit_param: str

    @property
    def label(self) -> str:
        return f"{self.page_param}/{self.limit_param}"

    def params(self, page: int, page_size: int) -> dict[str, str]:
        if self.page_param == "offset":
            params = {"offset": str((page - 1) * page_size)}
        else:
            params = {self.page_param: str(page)}
        params[self.limit_param] = str(page_size)
        if page > 1:
            params["status"] = "active"
        return params


PAGINATION_STRATEGIES: tuple[PaginationStrategy, ...] = (
    PaginationStrategy("page", "limit"),
    PaginationStrategy("offset", "limit"),
    PaginationStrategy("page", "size"),
    PaginationStrategy("page", "per_page"),
)


@dataclass(slots=True)
class RelayResult:
    success: bool
    lockers: list[Any]
    source: Optional[str] = None
    method: Optional[str] = None
    strategy: Optional[str] = None
    total_pages: Optional[int] = None
    error: Optional[str] = None
    endpoints: Sequence[str] = ()

    @property
    def total_count(self) -> int:
        return len(self.lockers)


def _pagination_meta(data: Any) -> Mapping[str, Any]:
    if isinstance(data, Mapping):
        return {"hasMore": data.get("hasMore"), "totalPages": data.get("totalPages")}
    return {}


class LockerRelay:
    """Fetch raw lockers from the upstream listing endpoints.

    Each endpoint gets one plain GET first; when that yields nothing the
    pagination strategies are tried in order until one returns records.
    """

    def __init__(self, settings: Settings | None = None, client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings or default_settings
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        timeout = self.settings.relay_timeout_seconds
        return httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)))

    def default_endpoints(self, use_sandbox: bool) -> list[str]:
        config = self.settings.model_copy(update={"use_sandbox": use_sandbox})
        return config.listing_urls()

    async def fetch(
        self,
        api_key: str | None = None,
        endpoints: Sequence[str] | None = None,
        use_sandbox: bool = False,
    ) -> RelayResult:
        targets = list(endpoints or self.default_endpoints(use_sandbox))
        key = api_key or self.settings.api_key
        headers = build_headers(key)
        logger.info(f"Relay fetching lockers from {len(targets)} endpoint(s) (key {mask_key(key)})")

        client = self._get_client()
        try:
            for endpoint in targets:
                lockers = await self._fetch_plain(client, endpoint, headers)
                if lockers:
                    logger.info(f"Relay found {len(lockers)} lockers in plain response from {endpoint}")
                    return RelayResult(True, lockers, source=endpoint, method="direct")

                for strategy in PAGINATION_STRATEGIES:
                    lockers, pages = await self._fetch_paginated(client, endpoint, headers, strategy)
                    if lockers:
                        logger.info(
                            f"Relay strategy {strategy.label} returned {len(lockers)} lockers over {pages} page(s)"
                        )
                        return RelayResult(
                            True,
                            lockers,
                            source=endpoint,
                            method="paginated",
                            strategy=strategy.label,
                            total_pages=pages,
                        )
        finally:
            if client is not self._client:
                await client.aclose()

        logger.error("All relay endpoints failed")
        return RelayResult(False, [], error="All API endpoints failed", endpoints=targets)

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        url: str,
        headers: Mapping[str, str],
        params: Mapping[str, str] | None = None,
    ) -> Any:
        try:
            response = await client.get(url, headers=headers, params=params)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError, OSError) as exc:
            raise classify_transport_error(exc, url=url) from exc

    async def _fetch_plain(self, client: httpx.AsyncClient, endpoint: str, headers: Mapping[str, str]) -> list[Any]:
        try:
            data = await self._get_json(client, endpoint, headers)
        except LockerDirectoryError as exc:
            logger.warning(f"Relay plain request to {endpoint} failed: {exc}")
            return []
        return find_records(data) or []

    async def _fetch_paginated(
        self,
        client: httpx.AsyncClient,
        endpoint: str,
        headers: Mapping[str, str],
        strategy: PaginationStrategy,
    ) -> tuple[list[Any], int]:
        page_size = self.settings.relay_page_size
        collected: list[Any] = []
        pages = 0
        while pages < self.settings.relay_max_pages and len(collected) < self.settings.relay_max_records:
            page = pages + 1
            try:
                data = await self._get_json(client, endpoint, headers, strategy.params(page, page_size))
            except LockerDirectoryError as exc:
                logger.warning(f"Relay page {page} ({strategy.label}) from {endpoint} failed: {exc}")
                break

            records = find_records(data) or []
            if not records:
                break
            collected.extend(records)
            pages = page

            meta = _pagination_meta(data)
            if meta.get("hasMore") is False:
                break
            total_pages = meta.get("totalPages")
            if isinstance(total_pages, int) and page >= total_pages:
                break
            if len(records) < page_size:
                break
        return collected, pages
