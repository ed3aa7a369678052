"""
Decimal Utilities
trl_engine/scoring/utils.py

Precision-safe decimal math for consensus and quality calculations.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Union


def to_decimal(value: Union[float, int, str, Decimal], places: Optional[int] = None) -> Decimal:
    """Convert a number to Decimal, optionally quantizing to ``places``."""
    result = value if isinstance(value, Decimal) else Decimal(str(value))
    if places is None:
        return result
    return result.quantize(Decimal(10) ** -places, rounding=ROUND_HALF_UP)


def clamp(
    value: Decimal,
    min_val: Decimal = Decimal("0"),
    max_val: Decimal = Decimal("100"),
) -> Decimal:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3)."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def mean(values: List[Decimal]) -> Decimal:
    if not values:
        raise ValueError("mean of empty list")
    return sum(values, Decimal("0")) / Decimal(len(values))


def weighted_mean(values: List[Decimal], weights: List[Decimal]) -> Decimal:
    """
    Calculate weighted mean.

    Formula: Σ(value_i × weight_i) / Σ(weight_i)
    Returns Decimal("0") if all weights are zero. The result is not
    quantized; scale decoding applies its own thresholds.
    """
    if len(values) != len(weights):
        raise ValueError("values and weights must have same length")

    total_weight = sum(weights, Decimal("0"))
    if total_weight == 0:
        return Decimal("0")

    numerator = sum((v * w for v, w in zip(values, weights)), Decimal("0"))
    return numerator / total_weight


def population_std_dev(values: List[Decimal], center: Optional[Decimal] = None) -> Decimal:
    """
    Population standard deviation.

    Formula: sqrt(Σ(value_i - mean)² / n)
    """
    if not values:
        raise ValueError("standard deviation of empty list")
    center = mean(values) if center is None else center
    variance = sum(((v - center) ** 2 for v in values), Decimal("0")) / Decimal(len(values))
    return variance.sqrt()
