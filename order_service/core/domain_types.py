"""Domain Types — identity wrappers and status enums for the ordering core.

Invariants:
    - OrderId wraps UUID; UserId and ProductId wrap the integer ids issued by
      the identity and catalog services (never owned here)
    - Every order/payment status is an Enum member — no raw string matching
    - Initial state of every order is (OrderStatus.PENDING, PaymentStatus.PENDING)

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and to the DB status columns without custom encoders
"""

from decimal import Decimal
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

OrderId = NewType("OrderId", UUID)
UserId = NewType("UserId", int)
ProductId = NewType("ProductId", int)
CorrelationId = NewType("CorrelationId", str)


# ─── Value Types ─────────────────────────────────────────────────

Money = NewType("Money", Decimal)   # totals quantized to 0.01, unit prices to 0.0001

CENT = Decimal("0.01")
PRICE_QUANTUM = Decimal("0.0001")   # catalog price snapshots keep 4 decimals


# ─── Enums ───────────────────────────────────────────────────────

class OrderStatus(str, Enum):
    """Order lifecycle states — maps to DB `order_status` column."""
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Payment lifecycle states — maps to DB `payment_status` column."""
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"
