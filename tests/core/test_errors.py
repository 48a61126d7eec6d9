"""Error Hierarchy — codes, HTTP statuses and response envelope."""

from order_service.core.domain_types import OrderStatus
from order_service.core.errors import (
    ErrorContext, InvalidTransitionError, NoItemsError, OrderServiceError,
    ProductNotFoundError, ResourceNotFoundError, StockConflictError,
    UpstreamUnavailableError,
)


def test_all_errors_share_base_class():
    for err in (
        NoItemsError(),
        ProductNotFoundError(3),
        StockConflictError("nope"),
        UpstreamUnavailableError("timeout", "fetch products"),
    ):
        assert isinstance(err, OrderServiceError)


def test_http_status_per_error():
    assert NoItemsError().http_status == 400
    assert ResourceNotFoundError("Order", "x").http_status == 404
    assert StockConflictError("nope").http_status == 409
    assert UpstreamUnavailableError("boom", "commit stock").http_status == 502


def test_to_response_envelope():
    err = InvalidTransitionError(
        OrderStatus.PENDING, OrderStatus.SHIPPED,
        context=ErrorContext(order_id="abc"),
    )
    body = err.to_response()["error"]
    assert body["code"] == "INVALID_TRANSITION"
    assert body["category"] == "business_rule"
    assert body["message"] == "Cannot change status from pending to shipped"
    assert body["context"]["order_id"] == "abc"
