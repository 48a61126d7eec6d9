"""Order Builder — prices a requested item list against catalog snapshots.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Missing snapshots are checked before prices: first requested product_id
      without a snapshot wins (ProductNotFoundError)
    - Price must be int/float/Decimal, finite and >= 0 (bool and str rejected)
    - item.price is the snapshot price at 4 decimals; item.subtotal =
      round_half_up(item.price * quantity, 2), so the stored pair always agrees
    - subtotal = sum(item.subtotal); total = round_half_up(subtotal + shipping - discount, 2)
    - Negative shipping_cost/discount and non-positive quantities are rejected

Design Decisions:
    - Decimal arithmetic throughout; floats from JSON are converted via str()
      so 10.1 stays 10.1 instead of its binary expansion
    - Raises typed errors from core/errors.py: OrderService propagates them unchanged
"""

from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from order_service.core.domain_types import (
    CENT, PRICE_QUANTUM, Money, ProductId,
)
from order_service.core.errors import (
    InvalidAmountError, InvalidPriceError, ProductNotFoundError,
)
from order_service.core.order_records import (
    BuiltOrder, OrderItemDraft, ProductSnapshot, RequestedItem,
)


def round_money(value: Decimal) -> Money:
    """Round half-up to 2 decimals."""
    return Money(value.quantize(CENT, rounding=ROUND_HALF_UP))


def round_price(value: Decimal) -> Money:
    """Unit price snapshot: half-up to 4 decimals."""
    return Money(value.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP))


def to_decimal(value: object) -> Decimal | None:
    """Numeric value as Decimal, or None if it is not a finite number."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        return None
    if not result.is_finite():
        return None
    return result


def check_price(snapshot: ProductSnapshot) -> Decimal:
    price = to_decimal(snapshot.price)
    if price is None or price < 0:
        raise InvalidPriceError(snapshot.id)
    return price


def check_amount(field: str, value: object) -> Decimal:
    """Shipping cost / discount: finite and non-negative."""
    amount = to_decimal(value)
    if amount is None:
        raise InvalidAmountError(field, "must be a number")
    if amount < 0:
        raise InvalidAmountError(field, "must not be negative")
    return amount


def check_quantity(item: RequestedItem) -> int:
    qty = item.quantity
    if isinstance(qty, bool) or not isinstance(qty, int) or qty < 1:
        raise InvalidAmountError(
            "quantity", f"must be a positive integer (product {item.product_id})",
        )
    return qty


def index_snapshots(
    snapshots: Iterable[ProductSnapshot],
) -> dict[ProductId, ProductSnapshot]:
    """Map product id -> snapshot. Later duplicates overwrite earlier ones."""
    return {snap.id: snap for snap in snapshots}


def build_item(item: RequestedItem, snapshot: ProductSnapshot) -> OrderItemDraft:
    """Freeze name and price from the snapshot into a priced line."""
    price = round_price(check_price(snapshot))
    quantity = check_quantity(item)
    return OrderItemDraft(
        product_id=snapshot.id,
        product_name=snapshot.name,
        price=price,
        quantity=quantity,
        subtotal=round_money(price * quantity),
    )


class OrderBuilder:
    """Turns requested items + catalog snapshots into priced drafts and totals."""

    def build(
        self,
        requested_items: Sequence[RequestedItem],
        snapshots: Iterable[ProductSnapshot],
        shipping_cost: object = 0,
        discount: object = 0,
    ) -> BuiltOrder:
        shipping = check_amount("shipping_cost", shipping_cost)
        disc = check_amount("discount", discount)

        by_id = index_snapshots(snapshots)
        for requested in requested_items:
            if requested.product_id not in by_id:
                raise ProductNotFoundError(requested.product_id)
        items = [
            build_item(requested, by_id[requested.product_id])
            for requested in requested_items
        ]

        subtotal = sum((it.subtotal for it in items), Decimal("0"))
        return BuiltOrder(
            items=tuple(items),
            subtotal=round_money(subtotal),
            shipping_cost=round_money(shipping),
            discount=round_money(disc),
            total=round_money(subtotal + shipping - disc),
        )
