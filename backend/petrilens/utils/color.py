"""Color helpers — hex parsing, luma, RGB distance."""

from __future__ import annotations

import math
import re

import numpy as np
from numpy.typing import NDArray

from petrilens.errors import InvalidColorError

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

# ITU-R BT.601 luma weights
LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114


def parse_hex(color: str) -> tuple[int, int, int]:
    """Parse ``#rgb``, ``#rrggbb`` or ``#rrggbbaa`` to (r, g, b). Alpha is dropped."""
    m = _HEX_RE.match(color.strip()) if isinstance(color, str) else None
    if m is None:
        raise InvalidColorError(f"Not a hex color: {color!r}")
    digits = m.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def luma_array(rgb: NDArray) -> NDArray[np.float64]:
    """BT.601 luma over the last axis of an (..., ≥3) array."""
    rgb = rgb.astype(np.float64, copy=False)
    return LUMA_R * rgb[..., 0] + LUMA_G * rgb[..., 1] + LUMA_B * rgb[..., 2]


def color_variation(rgb: NDArray) -> NDArray[np.int32]:
    """|r-g| + |g-b| + |r-b| per pixel. 0 for perfect grays."""
    rgb = rgb.astype(np.int32, copy=False)
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    return np.abs(r - g) + np.abs(g - b) + np.abs(r - b)


def rgb_distance(a: tuple[float, float, float], b: tuple[float, float, float]) -> float:
    """Euclidean distance in RGB space."""
    return math.sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2 + (a[2] - b[2]) ** 2)
