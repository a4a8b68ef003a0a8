"""Decimal money helpers.

Re-exports key functions for convenient access:
    from influencerflow.pricing import percentage_of, rate_variance
"""

from influencerflow.pricing.engine import (
    DEFAULT_TOTAL_RATE,
    as_number,
    percentage_of,
    rate_variance,
    round_whole,
    to_decimal,
)

__all__ = [
    "DEFAULT_TOTAL_RATE",
    "as_number",
    "percentage_of",
    "rate_variance",
    "round_whole",
    "to_decimal",
]
