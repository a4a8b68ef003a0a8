"""Money arithmetic for contract schedules and offer comparisons.

All monetary calculations use Decimal arithmetic to avoid floating-point
errors. Whole-dollar amounts are rounded with ROUND_HALF_UP.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

WHOLE = Decimal("1")

# Fallback contract value when neither party stated a total rate
DEFAULT_TOTAL_RATE = Decimal("1000")


def to_decimal(value: Any) -> Decimal | None:
    """Coerce a JSON number (or numeric string) to Decimal.

    Args:
        value: An int, float, Decimal or numeric string.

    Returns:
        The Decimal value, or ``None`` for missing, boolean or non-numeric input.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def round_whole(amount: Decimal) -> int:
    """Round to a whole currency unit, halves away from zero."""
    return int(amount.quantize(WHOLE, rounding=ROUND_HALF_UP))


def percentage_of(total: Decimal, percent: int) -> int:
    """Return *percent* % of *total*, rounded to a whole unit.

    Args:
        total: The base amount.
        percent: Whole-number percentage (e.g. ``30``).

    Returns:
        The rounded share.
    """
    return round_whole(total * Decimal(percent) / Decimal(100))


def rate_variance(proposed: Any, reference: Any) -> float:
    """Relative distance of a proposed rate from a reference rate.

    ``|proposed - reference| / reference``, or ``0.0`` when either rate is
    missing or the reference is zero.
    """
    proposed_rate = to_decimal(proposed)
    reference_rate = to_decimal(reference)
    if not proposed_rate or not reference_rate:
        return 0.0
    return float(abs(proposed_rate - reference_rate) / reference_rate)


def as_number(amount: Decimal) -> int | float:
    """Render a Decimal as a JSON number (int when integral)."""
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)
