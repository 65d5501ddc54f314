"""Nearest-reference-color classification of a tube photo.

The mean color of a central patch is compared against the test's positive
and negative reference colors; the nearer one wins, ties go to positive.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from petrilens.engine.context import RasterImage
from petrilens.tubes.catalog import TUBE_TESTS, TubeResult, get_test
from petrilens.tubes.sampling import center_pixel, central_patch, mean_color
from petrilens.utils.color import parse_hex, rgb_distance

logger = logging.getLogger(__name__)

PATCH_FRACTION = 0.15


@dataclass
class ReferenceMatch:
    result: TubeResult
    mean_color: tuple[float, float, float]
    distance_positive: float
    distance_negative: float


def sample_mean_color(raster: RasterImage, fraction: float = PATCH_FRACTION) -> tuple[float, float, float]:
    patch = central_patch(raster, fraction)
    if patch.size == 0:
        patch = center_pixel(raster)
    return mean_color(patch)


def nearest_reference(
    color: tuple[float, float, float],
    positive: tuple[int, int, int],
    negative: tuple[int, int, int],
) -> ReferenceMatch:
    d_pos = rgb_distance(color, positive)
    d_neg = rgb_distance(color, negative)
    result = TubeResult.POSITIVE if d_pos <= d_neg else TubeResult.NEGATIVE
    return ReferenceMatch(
        result=result,
        mean_color=color,
        distance_positive=d_pos,
        distance_negative=d_neg,
    )


def classify_by_reference(raster: RasterImage, positive_color: str, negative_color: str) -> ReferenceMatch:
    """Raises InvalidColorError when either reference is not a hex color."""
    positive = parse_hex(positive_color)
    negative = parse_hex(negative_color)
    return nearest_reference(sample_mean_color(raster), positive, negative)


def classify_test(raster: RasterImage, key: str) -> ReferenceMatch:
    test = get_test(key)
    match = classify_by_reference(raster, test.positive_color, test.negative_color)
    logger.debug("Tube %s: %s", key, match.result.value)
    return match


def classify_all(raster: RasterImage) -> dict[str, ReferenceMatch]:
    """One photo against every catalog test, in catalog order."""
    color = sample_mean_color(raster)
    return {
        key: nearest_reference(color, parse_hex(t.positive_color), parse_hex(t.negative_color))
        for key, t in TUBE_TESTS.items()
    }
