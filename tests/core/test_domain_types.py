"""Domain Types — identity wrappers and status enums.

Tests:
    - NewType wrappers are transparent at runtime
    - Status enums serialize to their lowercase wire values
"""

from decimal import Decimal
from uuid import uuid4

from order_service.core.domain_types import (
    CENT, Money, OrderId, OrderStatus, PaymentStatus, ProductId, UserId,
)


def test_identity_types_wrap_values():
    uid = uuid4()
    assert OrderId(uid) == uid
    assert UserId(7) == 7
    assert ProductId(3) == 3
    assert Money(Decimal("1.50")) == Decimal("1.50")


def test_cent_is_two_decimal_places():
    assert CENT == Decimal("0.01")


def test_order_status_values():
    assert [s.value for s in OrderStatus] == [
        "pending", "processing", "shipped", "delivered", "cancelled",
    ]
    assert OrderStatus("shipped") is OrderStatus.SHIPPED


def test_payment_status_values():
    assert [s.value for s in PaymentStatus] == ["pending", "paid", "refunded"]
    assert PaymentStatus.PAID == "paid"
