"""Boundary Protocols — contracts between the ordering core and its shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - OrderService talks to persistence and the catalog only through these Protocols
    - Implementations (infrastructure/) are provided by constructor injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO; the pure builder/state machine
      that OrderService calls between these awaits are never async themselves
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from order_service.core.domain_types import (
    CorrelationId, OrderId, ProductId, UserId,
)
from order_service.core.order_records import (
    NewOrder, OrderItemDraft, OrderRecord, ProductSnapshot, StatusPatch,
)


class OrderStore(Protocol):
    """Contract for order persistence — implemented by shell.

    save_new writes header + items in one transaction; nothing partial is visible
    on failure. update_status_fields never touches financial fields and stamps
    updated_at with the caller's clock.
    """
    async def save_new(
        self, order: NewOrder, items: Sequence[OrderItemDraft],
    ) -> OrderRecord: ...
    async def find_by_id(self, order_id: OrderId) -> OrderRecord: ...
    async def list_by_user(self, user_id: UserId) -> list[OrderRecord]: ...
    async def update_status_fields(
        self, order_id: OrderId, patch: StatusPatch, updated_at: datetime,
    ) -> OrderRecord: ...


class ProductCatalogClient(Protocol):
    """Contract for the remote catalog — implemented by shell.

    get_snapshots may return fewer entries than requested; the caller treats a
    missing id as ProductNotFoundError. release_stock never raises.
    """
    async def get_snapshots(
        self, ids: Sequence[ProductId],
    ) -> list[ProductSnapshot]: ...
    async def reserve_stock(
        self, items: Sequence[dict], correlation_id: CorrelationId,
    ) -> None: ...
    async def commit_stock(
        self, order_id: OrderId, items: Sequence[dict],
    ) -> None: ...
    async def release_stock(self, correlation_id: CorrelationId) -> None: ...
