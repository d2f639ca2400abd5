"""
Helper functions for numerical guards shared by the engine.
"""

from __future__ import annotations

import math


def safe_divide(
    numerator: float,
    denominator: float,
    fill_value: float = 0.0,
) -> float:
    """
    Safely divide two scalars, handling division by zero.

    Args:
        numerator: Numerator value
        denominator: Denominator value
        fill_value: Value to use when the result is not finite

    Returns:
        Result of division, or fill_value for zero/NaN/inf outcomes
    """
    if denominator == 0:
        return fill_value

    result = numerator / denominator
    if not math.isfinite(result):
        return fill_value
    return result


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper]."""
    return max(lower, min(upper, value))
