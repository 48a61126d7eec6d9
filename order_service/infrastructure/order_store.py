"""SQLAlchemy Order Store — OrderStore implementation over an AsyncSession.

Invariants:
    - save_new adds header + items and commits once: one transaction, all or nothing
    - Any failure inside save_new rolls back before raising; no partial order is visible
    - Unique violation on order_number -> DuplicateOrderNumberError; other DB errors -> DatabaseError
    - update_status_fields issues a single-row UPDATE limited to status columns,
      transaction_id and updated_at — financial columns are never in the SET clause
    - Every public method returns core records (OrderRecord), never ORM objects

Design Decisions:
    - One store per request session: constructed by the API dependency with the
      request's AsyncSession
    - Re-reads after writes use populate_existing so the identity map cannot
      serve stale status values
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from order_service.core.domain_types import (
    OrderId, OrderStatus, PaymentStatus, UserId,
)
from order_service.core.errors import (
    DatabaseError, DuplicateOrderNumberError, ResourceNotFoundError,
)
from order_service.core.order_records import (
    NewOrder, OrderItemDraft, OrderItemRecord, OrderRecord, StatusPatch,
)
from order_service.models.order import Order
from order_service.models.order_item import OrderItem

logger = logging.getLogger(__name__)


def _is_order_number_violation(error: IntegrityError) -> bool:
    """Postgres reports the constraint name, SQLite the column."""
    detail = str(error.orig)
    return "uq_orders_order_number" in detail or "orders.order_number" in detail


def to_item_record(item: OrderItem) -> OrderItemRecord:
    return OrderItemRecord(
        id=item.id,
        order_id=OrderId(item.order_id),
        product_id=item.product_id,
        product_name=item.product_name,
        price=item.price,
        quantity=item.quantity,
        subtotal=item.subtotal,
    )


def to_record(order: Order) -> OrderRecord:
    """Convert an ORM order (items loaded) to an immutable OrderRecord."""
    return OrderRecord(
        id=OrderId(order.id),
        order_number=order.order_number,
        user_id=UserId(order.user_id),
        items=tuple(to_item_record(it) for it in order.items),
        subtotal=order.subtotal,
        shipping_cost=order.shipping_cost,
        discount=order.discount,
        total=order.total,
        order_status=OrderStatus(order.order_status),
        payment_status=PaymentStatus(order.payment_status),
        shipping_address=order.shipping_address,
        created_at=order.created_at,
        updated_at=order.updated_at,
        transaction_id=order.transaction_id,
    )


class SqlAlchemyOrderStore:
    """OrderStore backed by the orders / order_items tables."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save_new(
        self, order: NewOrder, items: Sequence[OrderItemDraft],
    ) -> OrderRecord:
        """Insert header and items in one transaction."""
        row = Order(
            order_number=order.order_number,
            user_id=order.user_id,
            subtotal=order.subtotal,
            shipping_cost=order.shipping_cost,
            discount=order.discount,
            total=order.total,
            order_status=order.order_status.value,
            payment_status=order.payment_status.value,
            shipping_address=order.shipping_address,
            created_at=order.created_at,
            updated_at=order.created_at,
        )
        row.items = [
            OrderItem(
                position=position,
                product_id=item.product_id,
                product_name=item.product_name,
                price=item.price,
                quantity=item.quantity,
                subtotal=item.subtotal,
            )
            for position, item in enumerate(items)
        ]
        self.db.add(row)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if _is_order_number_violation(e):
                raise DuplicateOrderNumberError(order.order_number)
            logger.error(f"Order insert violated a constraint: {e}")
            raise DatabaseError("Integrity constraint violated", "insert")
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Order insert failed: {e}")
            raise DatabaseError("Order insert failed", "insert")

        logger.info(
            "Order persisted",
            extra={"order_id": row.id, "order_number": row.order_number},
        )
        return await self.find_by_id(OrderId(row.id))

    async def find_by_id(self, order_id: OrderId) -> OrderRecord:
        result = await self.db.execute(
            select(Order)
            .where(Order.id == order_id)
            .execution_options(populate_existing=True),
        )
        order = result.scalar_one_or_none()
        if not order:
            raise ResourceNotFoundError("Order", str(order_id))
        return to_record(order)

    async def list_by_user(self, user_id: UserId) -> list[OrderRecord]:
        """All orders of a user, newest first."""
        result = await self.db.execute(
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.order_number.desc()),
        )
        return [to_record(o) for o in result.scalars().all()]

    async def update_status_fields(
        self, order_id: OrderId, patch: StatusPatch, updated_at: datetime,
    ) -> OrderRecord:
        """Single-row UPDATE of status columns; NotFound if the row is gone."""
        values = patch.as_values()
        values["updated_at"] = updated_at
        try:
            result = await self.db.execute(
                update(Order)
                .where(Order.id == order_id)
                .values(**values)
                .execution_options(synchronize_session=False),
            )
            if result.rowcount == 0:
                await self.db.rollback()
                raise ResourceNotFoundError("Order", str(order_id))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Order status update failed: {e}")
            raise DatabaseError("Order status update failed", "update")
        return await self.find_by_id(order_id)
