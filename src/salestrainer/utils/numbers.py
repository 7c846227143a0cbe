"""Numeric helpers shared by scoring and metrics."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable


def round_one_decimal(value: float) -> float:
    """Round half-up to one decimal place (4.25 -> 4.3)."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def mean(values: Iterable[float]) -> float | None:
    """Arithmetic mean, or None for an empty input."""
    items = list(values)
    if not items:
        return None
    return sum(items) / len(items)
