"""Order Number — format and determinism of generated order numbers."""

import random
from datetime import datetime, timezone

from order_service.core.order_number import (
    ORDER_NUMBER_PATTERN, generate_order_number,
)


def test_format_matches_pattern():
    now = datetime(2026, 3, 7, 23, 59, tzinfo=timezone.utc)
    for _ in range(200):
        number = generate_order_number(now)
        assert ORDER_NUMBER_PATTERN.match(number)
        assert number.startswith("ORD-20260307-")


def test_suffix_is_five_digits_without_leading_zero():
    rng = random.Random(0)
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    suffixes = {int(generate_order_number(now, rng)[-5:]) for _ in range(500)}
    assert min(suffixes) >= 10_000
    assert max(suffixes) <= 99_999


def test_seeded_rng_is_deterministic():
    now = datetime(2026, 10, 19, tzinfo=timezone.utc)
    assert generate_order_number(now, random.Random(42)) == generate_order_number(
        now, random.Random(42),
    )
