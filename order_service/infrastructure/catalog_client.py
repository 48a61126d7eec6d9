"""Catalog HTTP Client — ProductCatalogClient over the product service REST API.

Invariants:
    - get_snapshots:  GET  /products/bulk?ids=1,2,3 -> [ProductSnapshot]
    - reserve_stock:  POST /inventory/reserve {items, context: {orderTempId}}
    - commit_stock:   POST /inventory/commit  {orderId, items}
    - release_stock:  POST /inventory/release {orderTempId}
    - Transport errors, timeouts and 5xx -> UpstreamUnavailableError
    - 4xx on reserve -> StockConflictError (reservation rejected)
    - release_stock never raises: failures are logged once, no retry
    - No retries anywhere: retry policy belongs to callers / infrastructure

Design Decisions:
    - One shared httpx.AsyncClient (connection pool) per process, created in the
      FastAPI lifespan and closed on shutdown
    - The timeout is enforced here, at the collaborator, not threaded through the core
"""

import logging
from collections.abc import Sequence

import httpx

from order_service.core.domain_types import (
    CorrelationId, OrderId, ProductId,
)
from order_service.core.errors import (
    ErrorContext, StockConflictError, UpstreamUnavailableError,
)
from order_service.core.order_records import ProductSnapshot

logger = logging.getLogger(__name__)


def parse_snapshot(raw: dict) -> ProductSnapshot:
    """Bulk-endpoint entry -> ProductSnapshot. Price is validated later by OrderBuilder."""
    stock = raw.get("stock")
    return ProductSnapshot(
        id=ProductId(int(raw["id"])),
        name=str(raw.get("name", "")),
        price=raw.get("price"),
        stock=int(stock) if stock is not None else None,
    )


class HttpCatalogClient:
    """Talks to the product service. Maps every failure to core/errors.py types."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    @classmethod
    def from_url(cls, base_url: str, timeout_seconds: float = 10.0) -> "HttpCatalogClient":
        return cls(httpx.AsyncClient(
            base_url=base_url, timeout=timeout_seconds,
        ))

    async def aclose(self) -> None:
        await self.client.aclose()

    async def get_snapshots(
        self, ids: Sequence[ProductId],
    ) -> list[ProductSnapshot]:
        if not ids:
            return []
        response = await self._send(
            "GET", "/products/bulk", "fetch products",
            params={"ids": ",".join(str(i) for i in ids)},
        )
        if response.is_error:
            raise UpstreamUnavailableError(
                f"HTTP {response.status_code}", "fetch products",
            )
        try:
            payload = response.json()
            if not isinstance(payload, list):
                raise TypeError("expected a JSON array")
            return [parse_snapshot(raw) for raw in payload]
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            raise UpstreamUnavailableError(
                f"malformed product payload: {e}", "fetch products",
            )

    async def reserve_stock(
        self, items: Sequence[dict], correlation_id: CorrelationId,
    ) -> None:
        context = ErrorContext(correlation_id=correlation_id)
        response = await self._send(
            "POST", "/inventory/reserve", "reserve stock",
            json={"items": list(items), "context": {"orderTempId": correlation_id}},
            context=context,
        )
        if response.is_server_error:
            raise UpstreamUnavailableError(
                f"HTTP {response.status_code}", "reserve stock", context=context,
            )
        if response.is_error:
            raise StockConflictError(
                "Failed to reserve stock", context=context,
            )

    async def commit_stock(
        self, order_id: OrderId, items: Sequence[dict],
    ) -> None:
        context = ErrorContext(order_id=str(order_id))
        response = await self._send(
            "POST", "/inventory/commit", "commit stock",
            json={"orderId": str(order_id), "items": list(items)},
            context=context,
        )
        if response.is_error:
            raise UpstreamUnavailableError(
                f"HTTP {response.status_code}", "commit stock", context=context,
            )

    async def release_stock(self, correlation_id: CorrelationId) -> None:
        """Best-effort compensation. Never raises."""
        try:
            response = await self.client.post(
                "/inventory/release", json={"orderTempId": correlation_id},
            )
            if response.is_error:
                logger.warning(
                    f"Stock release rejected: HTTP {response.status_code}",
                    extra={"correlation_id": correlation_id},
                )
        except httpx.HTTPError as e:
            logger.warning(
                f"Stock release failed: {e}",
                extra={"correlation_id": correlation_id},
            )

    async def _send(
        self,
        method: str,
        url: str,
        operation: str,
        context: ErrorContext | None = None,
        **kwargs,
    ) -> httpx.Response:
        """Issue one request; transport failures become UpstreamUnavailableError."""
        try:
            return await self.client.request(method, url, **kwargs)
        except httpx.TimeoutException:
            raise UpstreamUnavailableError("timeout", operation, context=context)
        except httpx.HTTPError as e:
            logger.error(
                f"Catalog {operation} transport error: {e}",
                extra={"operation": operation},
            )
            raise UpstreamUnavailableError(str(e), operation, context=context)
