"""Order Records — plain immutable value records passed between core and shell.

Invariants:
    - All records are frozen dataclasses: snapshots and totals cannot be mutated after build
    - OrderRecord.items is a tuple (ordered, exclusively owned, never individually replaced)
    - Money fields are Decimal quantized to 0.01; item unit prices to 0.0001
    - StatusPatch only ever carries status fields and transaction_id — never financial fields

Design Decisions:
    - Records instead of ORM entities: the store converts at its boundary, so the
      core and OrderService never see a SQLAlchemy object
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from order_service.core.domain_types import (
    Money, OrderId, OrderStatus, PaymentStatus, ProductId, UserId,
)


@dataclass(frozen=True)
class RequestedItem:
    """One line of a creation request, before pricing."""
    product_id: ProductId
    quantity: int


@dataclass(frozen=True)
class ProductSnapshot:
    """Catalog fields as returned by the bulk lookup.

    price is kept as received; OrderBuilder decides whether it is valid.
    """
    id: ProductId
    name: str
    price: Any
    stock: int | None = None


@dataclass(frozen=True)
class OrderItemDraft:
    """Priced line item with frozen name/price, not yet persisted."""
    product_id: ProductId
    product_name: str
    price: Money
    quantity: int
    subtotal: Money

    def as_stock_line(self) -> dict:
        """Wire shape used by reserve/commit calls."""
        return {"productId": self.product_id, "quantity": self.quantity}


@dataclass(frozen=True)
class BuiltOrder:
    """OrderBuilder output: priced items plus aggregate totals."""
    items: tuple[OrderItemDraft, ...]
    subtotal: Money
    shipping_cost: Money
    discount: Money
    total: Money


@dataclass(frozen=True)
class NewOrder:
    """Order header handed to OrderStore.save_new."""
    order_number: str
    user_id: UserId
    subtotal: Money
    shipping_cost: Money
    discount: Money
    total: Money
    shipping_address: dict
    created_at: datetime
    order_status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING


@dataclass(frozen=True)
class OrderItemRecord:
    id: Any
    order_id: OrderId
    product_id: ProductId
    product_name: str
    price: Money
    quantity: int
    subtotal: Money


@dataclass(frozen=True)
class OrderRecord:
    """Persisted order with its items, as read back from the store."""
    id: OrderId
    order_number: str
    user_id: UserId
    items: tuple[OrderItemRecord, ...]
    subtotal: Money
    shipping_cost: Money
    discount: Money
    total: Money
    order_status: OrderStatus
    payment_status: PaymentStatus
    shipping_address: dict
    created_at: datetime
    updated_at: datetime
    transaction_id: str | None = None


@dataclass(frozen=True)
class StatusPatch:
    """Fields changed by one legal status transition (None = unchanged)."""
    order_status: OrderStatus | None = None
    payment_status: PaymentStatus | None = None
    transaction_id: str | None = None

    def as_values(self) -> dict:
        """Column values for the single-row update; skips unchanged fields."""
        values: dict[str, Any] = {}
        if self.order_status is not None:
            values["order_status"] = self.order_status.value
        if self.payment_status is not None:
            values["payment_status"] = self.payment_status.value
        if self.transaction_id is not None:
            values["transaction_id"] = self.transaction_id
        return values
