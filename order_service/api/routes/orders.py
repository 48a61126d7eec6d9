"""Order Routes — HTTP edge for the ordering core.

Invariants:
    - POST   /orders               -> 201, created order
    - GET    /orders/{id}          -> order (404 RESOURCE_NOT_FOUND)
    - GET    /orders?userId=       -> orders of the user, newest first
    - PATCH  /orders/{id}/status   -> order after orderStatus transition
    - PATCH  /orders/{id}/payment  -> order after paymentStatus transition
    - PATCH  /orders/{id}/cancel   -> order after cancellation (PAID => REFUNDED)
    - Path ids are validated as UUIDs before reaching OrderService
    - Callers are authenticated upstream by the gateway; no auth here

Design Decisions:
    - Paths match what the gateway already calls (/orders, not a versioned prefix)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from order_service.api.dependencies import get_order_service
from order_service.core.domain_types import OrderId, UserId
from order_service.schemas.order import (
    OrderCreate, OrderResponse, OrderStatusUpdate, PaymentStatusUpdate,
)
from order_service.services.order_service import OrderService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/orders", tags=["orders"])


@router.post(
    "", response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    body: OrderCreate, service: OrderService = Depends(get_order_service),
):
    """Create an order: snapshot prices, reserve stock, persist, commit."""
    order = await service.create_order(
        user_id=UserId(body.user_id),
        items=[item.to_requested() for item in body.items],
        shipping_address=body.shipping_address,
        shipping_cost=body.shipping_cost,
        discount=body.discount,
    )
    return OrderResponse.from_record(order)


@router.get("/{order_id}", response_model=OrderResponse)
async def find_one(
    order_id: UUID, service: OrderService = Depends(get_order_service),
):
    order = await service.find_by_id(OrderId(order_id))
    return OrderResponse.from_record(order)


@router.get("", response_model=list[OrderResponse])
async def list_by_user(
    user_id: int = Query(..., alias="userId", gt=0),
    service: OrderService = Depends(get_order_service),
):
    """Orders of one user, newest first."""
    orders = await service.list_by_user(UserId(user_id))
    return [OrderResponse.from_record(o) for o in orders]


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_status(
    order_id: UUID,
    body: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service),
):
    order = await service.update_order_status(OrderId(order_id), body.order_status)
    return OrderResponse.from_record(order)


@router.patch("/{order_id}/payment", response_model=OrderResponse)
async def update_payment(
    order_id: UUID,
    body: PaymentStatusUpdate,
    service: OrderService = Depends(get_order_service),
):
    order = await service.update_payment_status(
        OrderId(order_id), body.payment_status, body.transaction_id,
    )
    return OrderResponse.from_record(order)


@router.patch("/{order_id}/cancel", response_model=OrderResponse)
async def cancel(
    order_id: UUID, service: OrderService = Depends(get_order_service),
):
    order = await service.cancel_order(OrderId(order_id))
    return OrderResponse.from_record(order)
