"""Order State Machine — transition tables for order and payment status.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Tables are closed: any (from, to) pair not listed raises InvalidTransitionError,
      including same-state requests and skips such as PENDING -> SHIPPED
    - DELIVERED, CANCELLED and REFUNDED are terminal
    - Cross-effects are returned in the same StatusPatch as the triggering change:
        * payment -> PAID while order PENDING      => order -> PROCESSING
        * order -> CANCELLED while payment PAID    => payment -> REFUNDED
    - Every reachable (order_status, payment_status) pair starts from (PENDING, PENDING)

Design Decisions:
    - Explicit dict tables instead of inline conditionals: the allowed set per
      state is auditable in one place and testable without a store
    - REFUNDED on cancel is a compensating marker only; moving funds is a
      payment collaborator's job
"""

from order_service.core.domain_types import OrderStatus, PaymentStatus
from order_service.core.errors import InvalidTransitionError
from order_service.core.order_records import StatusPatch


ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),  # Terminal
    OrderStatus.CANCELLED: frozenset(),  # Terminal
}

PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PAID}),
    PaymentStatus.PAID: frozenset({PaymentStatus.REFUNDED}),
    PaymentStatus.REFUNDED: frozenset(),  # Terminal
}


def can_change_order_status(current: OrderStatus, requested: OrderStatus) -> bool:
    return requested in ORDER_TRANSITIONS[current]


def can_change_payment_status(
    current: PaymentStatus, requested: PaymentStatus,
) -> bool:
    return requested in PAYMENT_TRANSITIONS[current]


def is_terminal(status: OrderStatus) -> bool:
    return not ORDER_TRANSITIONS[status]


class OrderStateMachine:
    """Validates a requested status change and returns the fields to persist."""

    def apply_order_status(
        self,
        order_status: OrderStatus,
        payment_status: PaymentStatus,
        requested: OrderStatus,
    ) -> StatusPatch:
        if not can_change_order_status(order_status, requested):
            raise InvalidTransitionError(order_status, requested)
        if requested == OrderStatus.CANCELLED and payment_status == PaymentStatus.PAID:
            return StatusPatch(
                order_status=requested, payment_status=PaymentStatus.REFUNDED,
            )
        return StatusPatch(order_status=requested)

    def apply_payment_status(
        self,
        order_status: OrderStatus,
        payment_status: PaymentStatus,
        requested: PaymentStatus,
        transaction_id: str | None = None,
    ) -> StatusPatch:
        if not can_change_payment_status(payment_status, requested):
            raise InvalidTransitionError(payment_status, requested)
        if requested == PaymentStatus.PAID and order_status == OrderStatus.PENDING:
            return StatusPatch(
                order_status=OrderStatus.PROCESSING,
                payment_status=requested,
                transaction_id=transaction_id,
            )
        return StatusPatch(payment_status=requested, transaction_id=transaction_id)
