"""ORM Models — SQLAlchemy declarative models for orders and their items.

Invariants:
    - All models inherit from Base (db/base.py)
    - Order is the aggregate root; OrderItem rows live and die with their order
    - ORM objects never leave infrastructure/: the store converts them to core records

Design Decisions:
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from order_service.models.order import Order  # noqa: F401
from order_service.models.order_item import OrderItem  # noqa: F401
