import logging

import httpx
import pytest

from locker_directory.config import Settings
from locker_directory.services.lockers import LockerRelay
from locker_directory.services.lockers.relay import PAGINATION_STRATEGIES, PaginationStrategy


def _settings(**overrides) -> Settings:
    values = {"api_key": "server-key", "base_url": "https://lockers.example", "relay_page_size": 2}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def _relay(handler, **overrides) -> LockerRelay:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return LockerRelay(_settings(**overrides), client=client)


def _page(*ids: str) -> list[dict]:
    return [{"id": locker_id, "name": f"Locker {locker_id}"} for locker_id in ids]


def test_strategy_parameters():
    page_limit, offset_limit, page_size, page_per_page = PAGINATION_STRATEGIES

    assert page_limit.params(1, 100) == {"page": "1", "limit": "100"}
    assert page_limit.params(2, 100) == {"page": "2", "limit": "100", "status": "active"}
    assert offset_limit.params(3, 50) == {"offset": "100", "limit": "50", "status": "active"}
    assert page_size.label == "page/size"
    assert page_per_page.params(1, 10) == {"page": "1", "per_page": "10"}
    assert PaginationStrategy("page", "limit").label == "page/limit"


@pytest.mark.asyncio
async def test_plain_response_is_returned_without_pagination():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(dict(request.url.params))
        return httpx.Response(200, json=_page("A", "B", "C"))

    result = await _relay(handler).fetch()

    assert result.success
    assert result.method == "direct"
    assert result.total_count == 3
    assert result.source == "https://lockers.example/lockers-data"
    assert calls == [{}]


@pytest.mark.asyncio
async def test_paginates_until_short_page():
    def handler(request: httpx.Request) -> httpx.Response:
        params = request.url.params
        if "page" not in params:
            return httpx.Response(200, json={"message": "use pagination"})
        if params["page"] == "1":
            return httpx.Response(200, json={"data": _page("A", "B")})
        assert params["status"] == "active"
        return httpx.Response(200, json={"data": _page("C")})

    result = await _relay(handler).fetch()

    assert result.success
    assert result.method == "paginated"
    assert result.strategy == "page/limit"
    assert result.total_pages == 2
    assert [locker["id"] for locker in result.lockers] == ["A", "B", "C"]


@pytest.mark.asyncio
async def test_falls_through_to_offset_strategy():
    def handler(request: httpx.Request) -> httpx.Response:
        params = request.url.params
        if "offset" not in params:
            return httpx.Response(200, json={"data": []})
        if params["offset"] == "0":
            return httpx.Response(200, json={"lockers": _page("A", "B")})
        return httpx.Response(200, json={"lockers": []})

    result = await _relay(handler).fetch()

    assert result.strategy == "offset/limit"
    assert result.total_count == 2


@pytest.mark.asyncio
async def test_has_more_flag_stops_pagination():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(dict(request.url.params))
        if "page" not in request.url.params:
            return httpx.Response(404)
        return httpx.Response(200, json={"data": _page("A", "B"), "hasMore": False})

    result = await _relay(handler).fetch()

    assert result.total_count == 2
    assert len(requests) == 2


@pytest.mark.asyncio
async def test_record_cap_bounds_pagination():
    def handler(request: httpx.Request) -> httpx.Response:
        if "page" not in request.url.params:
            return httpx.Response(200, json={})
        page = int(request.url.params["page"])
        return httpx.Response(200, json={"data": _page(f"{page}a", f"{page}b")})

    result = await _relay(handler, relay_max_pages=50, relay_max_records=5).fetch()

    assert result.total_count == 6
    assert result.total_pages == 3


@pytest.mark.asyncio
async def test_uses_caller_key_and_endpoints():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((str(request.url), request.headers.get("authorization")))
        return httpx.Response(200, json={"terminals": _page("T1")})

    result = await _relay(handler).fetch(api_key="browser-key", endpoints=["https://other.example/terminals"])

    assert result.success
    assert seen == [("https://other.example/terminals", "Bearer browser-key")]


@pytest.mark.asyncio
async def test_sandbox_endpoints_when_requested():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.host)
        return httpx.Response(200, json=_page("S1"))

    relay = _relay(handler, base_url=None)

    await relay.fetch(use_sandbox=True)

    assert seen == ["sandbox-api.pudo.co.za"]


@pytest.mark.asyncio
async def test_reports_failure_when_every_attempt_fails():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="upstream down")

    result = await _relay(handler).fetch()

    assert not result.success
    assert result.lockers == []
    assert result.error == "All API endpoints failed"
    assert list(result.endpoints) == ["https://lockers.example/lockers-data"]


@pytest.mark.asyncio
async def test_log_masks_the_key_actually_sent(caplog: pytest.LogCaptureFixture):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get("authorization"))
        return httpx.Response(200, json=_page("A"))

    caplog.set_level(logging.INFO, logger="locker_directory.services.lockers.relay")

    await _relay(handler, api_key="server-side-secret-key").fetch()

    assert seen == ["Bearer server-side-secret-key"]
    assert "server-s...-key" in caplog.text
    assert "<none>" not in caplog.text
    assert "server-side-secret-key" not in caplog.text
