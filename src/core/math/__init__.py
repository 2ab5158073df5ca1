"""
Core math modules

Целочисленные fixed-point примитивы с проверкой переполнения.
"""

from src.core.math.fixed_point import (
    FeeSplit,
    apply_rate,
    bps_fee,
    checked_add,
    checked_mul,
    checked_sub,
    ensure_in_bounds,
    is_strict_int,
    split_fee,
)

__all__ = [
    # Types
    "FeeSplit",
    # Validation
    "is_strict_int",
    "ensure_in_bounds",
    # Checked operations
    "checked_add",
    "checked_sub",
    "checked_mul",
    # Fees and rates
    "bps_fee",
    "split_fee",
    "apply_rate",
]
