"""Math helpers — rounding, medians, fixed-point formatting. No engine imports."""

from __future__ import annotations

import math
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

import numpy as np
from numpy.typing import NDArray


def round_half_up(value: float) -> int:
    """floor(x + 0.5). Ties go toward +∞, unlike Python's banker's round()."""
    return int(math.floor(value + 0.5))


def round_half_up_array(values: NDArray[np.float64]) -> NDArray[np.float64]:
    """Vectorized round_half_up, result stays float64."""
    return np.floor(values + 0.5)


def upper_median(values: Sequence[float] | NDArray) -> float:
    """Element at floor(n/2) of the ascending sort.

    For even n this is the upper of the two middle values, not their mean.
    Raises ValueError on empty input.
    """
    if len(values) == 0:
        raise ValueError("median of empty sequence")
    ordered = np.sort(np.asarray(values))
    return ordered[len(ordered) // 2].item()


def to_fixed(value: float, digits: int) -> str:
    """Format with a fixed number of decimals, ties rounded away from zero.

    Rounds the exact binary value of ``value``, so 2.25 → "2.3" and
    1.005 → "1.00" (1.005 is stored as 1.00499...).
    """
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
