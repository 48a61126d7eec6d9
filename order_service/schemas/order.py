"""Order Schemas — Pydantic models for the HTTP boundary.

Invariants:
    - Bodies use camelCase on the wire (userId, shippingCost, orderStatus, ...);
      snake_case names are accepted too
    - Item lines require productId > 0 and quantity >= 1
    - An empty items list passes schema validation; OrderService rejects it as NO_ITEMS
    - Money fields serialize as strings with 2 decimals ("25.00"); item unit
      prices with 4 ("10.0000")

Design Decisions:
    - Amount policy (non-negative shipping/discount) lives in OrderBuilder, so
      the HTTP edge and direct callers get the same INVALID_AMOUNT error
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from order_service.core.domain_types import OrderStatus, PaymentStatus
from order_service.core.order_records import (
    OrderItemRecord, OrderRecord, RequestedItem,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderItemCreate(_CamelModel):
    product_id: int = Field(gt=0)
    quantity: int = Field(ge=1)

    def to_requested(self) -> RequestedItem:
        return RequestedItem(product_id=self.product_id, quantity=self.quantity)


class OrderCreate(_CamelModel):
    """Order creation body as forwarded by the gateway."""
    user_id: int = Field(gt=0)
    items: list[OrderItemCreate]
    shipping_address: dict
    shipping_cost: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")


class OrderStatusUpdate(_CamelModel):
    order_status: OrderStatus


class PaymentStatusUpdate(_CamelModel):
    payment_status: PaymentStatus
    transaction_id: str | None = Field(None, max_length=255)


class OrderItemResponse(_CamelModel):
    id: UUID
    product_id: int
    product_name: str
    price: Decimal
    quantity: int
    subtotal: Decimal

    @classmethod
    def from_record(cls, item: OrderItemRecord) -> "OrderItemResponse":
        return cls(
            id=item.id,
            product_id=item.product_id,
            product_name=item.product_name,
            price=item.price,
            quantity=item.quantity,
            subtotal=item.subtotal,
        )


class OrderResponse(_CamelModel):
    """Order as returned to the gateway."""
    id: UUID
    order_number: str
    user_id: int
    items: list[OrderItemResponse]
    subtotal: Decimal
    shipping_cost: Decimal
    discount: Decimal
    total: Decimal
    payment_status: PaymentStatus
    order_status: OrderStatus
    shipping_address: dict
    transaction_id: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, order: OrderRecord) -> "OrderResponse":
        return cls(
            id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            items=[OrderItemResponse.from_record(it) for it in order.items],
            subtotal=order.subtotal,
            shipping_cost=order.shipping_cost,
            discount=order.discount,
            total=order.total,
            payment_status=order.payment_status,
            order_status=order.order_status,
            shipping_address=order.shipping_address,
            transaction_id=order.transaction_id,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
