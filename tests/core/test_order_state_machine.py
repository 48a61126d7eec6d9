"""Order State Machine — tests for the transition tables and cross-effects.

Tests cover:
    - every legal order/payment transition succeeds
    - terminal states reject every request
    - skips and same-state requests rejected
    - PAID while PENDING advances order to PROCESSING
    - CANCELLED while PAID marks payment REFUNDED
"""

import pytest

from order_service.core.domain_types import OrderStatus, PaymentStatus
from order_service.core.errors import InvalidTransitionError
from order_service.core.order_records import StatusPatch
from order_service.core.order_state_machine import (
    ORDER_TRANSITIONS, PAYMENT_TRANSITIONS, OrderStateMachine,
    can_change_order_status, is_terminal,
)

sm = OrderStateMachine()

LEGAL_ORDER = [
    (OrderStatus.PENDING, OrderStatus.PROCESSING),
    (OrderStatus.PENDING, OrderStatus.CANCELLED),
    (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
    (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
    (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
]


def test_tables_cover_every_status():
    assert set(ORDER_TRANSITIONS) == set(OrderStatus)
    assert set(PAYMENT_TRANSITIONS) == set(PaymentStatus)


@pytest.mark.parametrize("current,requested", LEGAL_ORDER)
def test_legal_order_transitions(current, requested):
    patch = sm.apply_order_status(current, PaymentStatus.PENDING, requested)
    assert patch == StatusPatch(order_status=requested)


@pytest.mark.parametrize(
    "current,requested",
    [
        (c, r) for c in OrderStatus for r in OrderStatus
        if (c, r) not in LEGAL_ORDER
    ],
)
def test_every_unlisted_order_transition_fails(current, requested):
    with pytest.raises(InvalidTransitionError) as exc:
        sm.apply_order_status(current, PaymentStatus.PENDING, requested)
    assert exc.value.from_status == current
    assert exc.value.to_status == requested


def test_pending_to_shipped_is_rejected():
    assert not can_change_order_status(OrderStatus.PENDING, OrderStatus.SHIPPED)
    with pytest.raises(InvalidTransitionError):
        sm.apply_order_status(
            OrderStatus.PENDING, PaymentStatus.PENDING, OrderStatus.SHIPPED,
        )


def test_terminal_states():
    assert is_terminal(OrderStatus.DELIVERED)
    assert is_terminal(OrderStatus.CANCELLED)
    assert not is_terminal(OrderStatus.SHIPPED)


def test_paid_while_pending_advances_to_processing():
    patch = sm.apply_payment_status(
        OrderStatus.PENDING, PaymentStatus.PENDING, PaymentStatus.PAID, "tx-1",
    )
    assert patch.order_status == OrderStatus.PROCESSING
    assert patch.payment_status == PaymentStatus.PAID
    assert patch.transaction_id == "tx-1"


def test_paid_while_processing_leaves_order_status():
    patch = sm.apply_payment_status(
        OrderStatus.PROCESSING, PaymentStatus.PENDING, PaymentStatus.PAID,
    )
    assert patch.order_status is None
    assert patch.as_values() == {"payment_status": "paid"}


def test_cancel_paid_order_marks_refunded():
    patch = sm.apply_order_status(
        OrderStatus.PROCESSING, PaymentStatus.PAID, OrderStatus.CANCELLED,
    )
    assert patch == StatusPatch(
        order_status=OrderStatus.CANCELLED, payment_status=PaymentStatus.REFUNDED,
    )


def test_cancel_unpaid_order_leaves_payment():
    patch = sm.apply_order_status(
        OrderStatus.PENDING, PaymentStatus.PENDING, OrderStatus.CANCELLED,
    )
    assert patch.payment_status is None


@pytest.mark.parametrize(
    "current,requested",
    [
        (PaymentStatus.PENDING, PaymentStatus.PENDING),
        (PaymentStatus.PENDING, PaymentStatus.REFUNDED),
        (PaymentStatus.PAID, PaymentStatus.PAID),
        (PaymentStatus.PAID, PaymentStatus.PENDING),
        (PaymentStatus.REFUNDED, PaymentStatus.PAID),
        (PaymentStatus.REFUNDED, PaymentStatus.PENDING),
        (PaymentStatus.REFUNDED, PaymentStatus.REFUNDED),
    ],
)
def test_illegal_payment_transitions(current, requested):
    with pytest.raises(InvalidTransitionError) as exc:
        sm.apply_payment_status(OrderStatus.PROCESSING, current, requested)
    assert exc.value.code == "INVALID_TRANSITION"


def test_refund_after_payment_allowed():
    patch = sm.apply_payment_status(
        OrderStatus.SHIPPED, PaymentStatus.PAID, PaymentStatus.REFUNDED,
    )
    assert patch == StatusPatch(payment_status=PaymentStatus.REFUNDED)
