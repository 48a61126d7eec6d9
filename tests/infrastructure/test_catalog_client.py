"""Catalog HTTP Client — wire contract and error mapping via httpx.MockTransport.

Tests cover:
    - bulk fetch sends comma-separated ids and parses snapshots
    - 5xx / transport errors / malformed payloads -> UpstreamUnavailableError
    - reserve sends items + orderTempId; 4xx -> StockConflictError
    - commit sends orderId + items; failure -> UpstreamUnavailableError
    - release never raises
"""

import json
from uuid import uuid4

import httpx
import pytest

from order_service.core.errors import (
    StockConflictError, UpstreamUnavailableError,
)
from order_service.infrastructure.catalog_client import HttpCatalogClient


def _client(handler) -> HttpCatalogClient:
    return HttpCatalogClient(httpx.AsyncClient(
        base_url="http://catalog.test", transport=httpx.MockTransport(handler),
    ))


async def test_get_snapshots_parses_bulk_response():
    seen = {}

    def handler(request: httpx.Request):
        seen["path"] = request.url.path
        seen["ids"] = request.url.params["ids"]
        return httpx.Response(200, json=[
            {"id": 1, "name": "Widget", "price": 10.0, "stock": 3},
            {"id": 2, "name": "Gadget", "price": 4.5},
        ])

    snapshots = await _client(handler).get_snapshots([1, 2])

    assert seen == {"path": "/products/bulk", "ids": "1,2"}
    assert snapshots[0].name == "Widget"
    assert snapshots[0].price == 10.0
    assert snapshots[0].stock == 3
    assert snapshots[1].stock is None


async def test_get_snapshots_empty_ids_skips_request():
    def handler(request):
        raise AssertionError("no request expected")

    assert await _client(handler).get_snapshots([]) == []


async def test_get_snapshots_server_error_is_upstream_unavailable():
    client = _client(lambda request: httpx.Response(503))
    with pytest.raises(UpstreamUnavailableError) as exc:
        await client.get_snapshots([1])
    assert exc.value.http_status == 502


async def test_get_snapshots_transport_error_is_upstream_unavailable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamUnavailableError):
        await _client(handler).get_snapshots([1])


async def test_get_snapshots_timeout_is_upstream_unavailable():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(UpstreamUnavailableError) as exc:
        await _client(handler).get_snapshots([1])
    assert "timeout" in exc.value.message


async def test_get_snapshots_malformed_payload():
    client = _client(lambda request: httpx.Response(200, json={"items": []}))
    with pytest.raises(UpstreamUnavailableError):
        await client.get_snapshots([1])


async def test_reserve_stock_wire_shape():
    seen = {}

    def handler(request: httpx.Request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(201)

    await _client(handler).reserve_stock(
        [{"productId": 1, "quantity": 2}], "corr-1",
    )

    assert seen["path"] == "/inventory/reserve"
    assert seen["body"] == {
        "items": [{"productId": 1, "quantity": 2}],
        "context": {"orderTempId": "corr-1"},
    }


async def test_reserve_stock_rejected_is_conflict():
    client = _client(lambda request: httpx.Response(409, json={"message": "out of stock"}))
    with pytest.raises(StockConflictError) as exc:
        await client.reserve_stock([{"productId": 1, "quantity": 99}], "corr-2")
    assert exc.value.context.correlation_id == "corr-2"


async def test_reserve_stock_server_error_is_upstream_unavailable():
    client = _client(lambda request: httpx.Response(500))
    with pytest.raises(UpstreamUnavailableError):
        await client.reserve_stock([{"productId": 1, "quantity": 1}], "corr-3")


async def test_commit_stock_wire_shape_and_failure():
    order_id = uuid4()
    seen = {}

    def handler(request: httpx.Request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(502)

    with pytest.raises(UpstreamUnavailableError):
        await _client(handler).commit_stock(order_id, [{"productId": 1, "quantity": 1}])
    assert seen["body"] == {
        "orderId": str(order_id),
        "items": [{"productId": 1, "quantity": 1}],
    }


async def test_release_stock_swallows_errors():
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    await _client(handler).release_stock("corr-4")


async def test_release_stock_swallows_http_error_status():
    seen = {}

    def handler(request: httpx.Request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(500)

    await _client(handler).release_stock("corr-5")
    assert seen["body"] == {"orderTempId": "corr-5"}
