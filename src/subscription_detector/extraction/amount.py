"""Dollar amount extraction and validation."""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

RE_DOLLAR_AMOUNT = re.compile(r"\$(\d+(?:,\d{3})*(?:\.\d{2})?)")

MAX_AMOUNT = 10_000


def extract_amount(text: str) -> float | None:
    """Return the first "$1,234.56"-style amount in `text`, if any."""
    m = RE_DOLLAR_AMOUNT.search(text)
    if not m:
        return None
    return float(m.group(1).replace(",", ""))


def validate_amount(value: float | None) -> float | None:
    """Drop implausible amounts and round the rest to cents.

    Amounts that are NaN, infinite, not positive, or above 10000 are rejected
    (None). The range check runs before rounding, so 9999.999 is accepted and
    becomes 10000.0. Rounding is half-up on the decimal representation:
    12.005 -> 12.01.
    """

    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number) or number <= 0 or number > MAX_AMOUNT:
        return None

    try:
        rounded = Decimal(str(number)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None
    return float(rounded)
