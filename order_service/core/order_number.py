"""Order Number — human-readable order identifier.

Invariants:
    - Format is ORD-YYYYMMDD-NNNNN, NNNNN uniform in 10000..99999 (always 5 digits)
    - Date part comes from the caller-supplied datetime (service clock, UTC)
    - Uniqueness is enforced by the store, not here: callers regenerate on collision
"""

import random
import re
from datetime import datetime

ORDER_NUMBER_PATTERN = re.compile(r"^ORD-\d{8}-\d{5}$")

_SUFFIX_MIN = 10_000
_SUFFIX_MAX = 99_999


def generate_order_number(now: datetime, rng: random.Random | None = None) -> str:
    suffix = (rng or random).randint(_SUFFIX_MIN, _SUFFIX_MAX)  # nosec B311
    return f"ORD-{now:%Y%m%d}-{suffix}"
