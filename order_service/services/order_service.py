"""Order Service — creation saga and status lifecycle over store + catalog.

Invariants:
    - Creation runs: validate -> fetch snapshots -> build -> reserve -> save -> commit
    - Nothing is written locally before the reservation succeeds
    - A failed local write releases the reservation, then re-raises the original error
    - A failed commit after a successful write is logged for reconciliation; the
      order is still returned (it exists regardless of catalog-side outcome)
    - Status changes go through OrderStateMachine; a rejected change never reaches the store
    - Cross-effects (PAID => PROCESSING, CANCELLED => REFUNDED) persist in the same write
    - No upstream call is retried here

Design Decisions:
    - Collaborators injected through the constructor:
      OrderService(store, catalog, state_machine, builder)
    - Order-number collisions regenerate the number and retry only the local
      write (bounded by order_number_attempts); the reservation is kept meanwhile
    - Status updates are read-modify-write without a version column: two
      concurrent updates on one order can lose one of them
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from order_service.core.build_order import OrderBuilder
from order_service.core.domain_types import (
    CorrelationId, OrderId, OrderStatus, PaymentStatus, UserId,
)
from order_service.core.errors import (
    DuplicateOrderNumberError, NoItemsError,
)
from order_service.core.order_number import generate_order_number
from order_service.core.order_records import (
    BuiltOrder, NewOrder, OrderRecord, RequestedItem,
)
from order_service.core.order_state_machine import OrderStateMachine
from order_service.core.repository_protocols import (
    OrderStore, ProductCatalogClient,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def distinct_product_ids(items: Sequence[RequestedItem]) -> list[int]:
    """Requested ids in first-seen order, duplicates dropped."""
    return list(dict.fromkeys(item.product_id for item in items))


class OrderService:
    """Orchestrates OrderBuilder, OrderStateMachine, OrderStore and the catalog."""

    def __init__(
        self,
        store: OrderStore,
        catalog: ProductCatalogClient,
        state_machine: OrderStateMachine,
        builder: OrderBuilder,
        *,
        clock: Callable[[], datetime] = _utcnow,
        order_number_attempts: int = 3,
    ):
        self.store = store
        self.catalog = catalog
        self.state_machine = state_machine
        self.builder = builder
        self.clock = clock
        self.order_number_attempts = max(1, order_number_attempts)

    # ─── Creation saga ──────────────────────────────────────────

    async def create_order(
        self,
        user_id: UserId,
        items: Sequence[RequestedItem],
        shipping_address: dict,
        shipping_cost: Decimal | int | float = 0,
        discount: Decimal | int | float = 0,
    ) -> OrderRecord:
        if not items:
            raise NoItemsError()

        correlation_id = CorrelationId(str(uuid4()))
        log_extra = {"correlation_id": correlation_id, "user_id": user_id}
        logger.info("Order creation started", extra=log_extra)

        # Nothing to compensate until the reservation succeeds
        snapshots = await self.catalog.get_snapshots(distinct_product_ids(items))
        built = self.builder.build(items, snapshots, shipping_cost, discount)

        stock_lines = [item.as_stock_line() for item in built.items]
        await self.catalog.reserve_stock(stock_lines, correlation_id)

        try:
            order = await self._save_with_fresh_number(
                user_id, built, shipping_address, correlation_id,
            )
        except Exception:
            logger.warning(
                "Order write failed, releasing reservation",
                extra=log_extra, exc_info=True,
            )
            await self._release_reservation(correlation_id)
            raise

        await self._commit_reservation(order, stock_lines, correlation_id)
        logger.info(
            "Order created",
            extra={**log_extra, "order_id": order.id, "order_number": order.order_number},
        )
        return order

    async def _save_with_fresh_number(
        self,
        user_id: UserId,
        built: BuiltOrder,
        shipping_address: dict,
        correlation_id: CorrelationId,
    ) -> OrderRecord:
        """Persist header + items; regenerate the order number on collision."""
        attempt = 1
        while True:
            now = self.clock()
            header = NewOrder(
                order_number=generate_order_number(now),
                user_id=user_id,
                subtotal=built.subtotal,
                shipping_cost=built.shipping_cost,
                discount=built.discount,
                total=built.total,
                shipping_address=shipping_address,
                created_at=now,
            )
            try:
                return await self.store.save_new(header, built.items)
            except DuplicateOrderNumberError as e:
                if attempt >= self.order_number_attempts:
                    e.context.correlation_id = correlation_id
                    raise
                logger.warning(
                    f"Order number collision, regenerating (attempt {attempt})",
                    extra={"correlation_id": correlation_id, "order_number": e.order_number},
                )
                attempt += 1

    async def _commit_reservation(
        self, order: OrderRecord, stock_lines: list[dict], correlation_id: CorrelationId,
    ) -> None:
        try:
            await self.catalog.commit_stock(order.id, stock_lines)
        except Exception as e:
            logger.warning(
                f"Stock commit failed, order needs reconciliation: {e}",
                extra={
                    "order_id": order.id,
                    "order_number": order.order_number,
                    "correlation_id": correlation_id,
                },
            )

    async def _release_reservation(self, correlation_id: CorrelationId) -> None:
        try:
            await self.catalog.release_stock(correlation_id)
        except Exception as e:
            logger.warning(
                f"Stock release failed: {e}",
                extra={"correlation_id": correlation_id},
            )

    # ─── Reads ──────────────────────────────────────────────────

    async def find_by_id(self, order_id: OrderId) -> OrderRecord:
        return await self.store.find_by_id(order_id)

    async def list_by_user(self, user_id: UserId) -> list[OrderRecord]:
        return await self.store.list_by_user(user_id)

    # ─── Status lifecycle ───────────────────────────────────────

    async def update_order_status(
        self, order_id: OrderId, new_status: OrderStatus,
    ) -> OrderRecord:
        order = await self.store.find_by_id(order_id)
        patch = self.state_machine.apply_order_status(
            order.order_status, order.payment_status, new_status,
        )
        updated = await self.store.update_status_fields(order_id, patch, self.clock())
        logger.info(
            f"Order status {order.order_status.value} -> {updated.order_status.value}",
            extra={"order_id": order_id},
        )
        return updated

    async def update_payment_status(
        self,
        order_id: OrderId,
        new_status: PaymentStatus,
        transaction_id: str | None = None,
    ) -> OrderRecord:
        order = await self.store.find_by_id(order_id)
        patch = self.state_machine.apply_payment_status(
            order.order_status, order.payment_status, new_status, transaction_id,
        )
        updated = await self.store.update_status_fields(order_id, patch, self.clock())
        logger.info(
            f"Payment status {order.payment_status.value} -> {updated.payment_status.value}",
            extra={"order_id": order_id},
        )
        return updated

    async def cancel_order(self, order_id: OrderId) -> OrderRecord:
        """Cancel; a PAID order is marked REFUNDED in the same write."""
        return await self.update_order_status(order_id, OrderStatus.CANCELLED)
