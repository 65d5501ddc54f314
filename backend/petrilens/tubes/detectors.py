"""Heuristic pixel-statistics detectors for three tube tests.

Each samples every third pixel of a central patch (half-side 20% of the
shorter dimension) and counts pixels of a characteristic appearance.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from petrilens.engine.context import RasterImage
from petrilens.tubes.catalog import TubeResult
from petrilens.tubes.sampling import central_patch, strided_samples
from petrilens.utils.color import color_variation, luma_array

logger = logging.getLogger(__name__)

PATCH_FRACTION = 0.2
SAMPLE_STEP = 3
# Pixels at or below this alpha are ignored by the color detectors
MIN_ALPHA = 100


@dataclass
class DetectionResult:
    test: str
    result: TubeResult
    # Pixels matching the test's characteristic appearance
    matched: int
    # Denominator the decision was made against
    considered: int


def _samples(raster: RasterImage):
    return strided_samples(central_patch(raster, PATCH_FRACTION), SAMPLE_STEP).astype(np.int32)


def detect_coagulase(raster: RasterImage) -> DetectionResult:
    """Clots or particles (dark or colorful pixels) outweighing clear liquid."""
    px = _samples(raster)
    lum = luma_array(px[:, :3])
    var = color_variation(px[:, :3])
    particle = (lum < 150) | (var > 60)
    clear = ~particle & (lum > 200) & (var < 30)
    particles = int(particle.sum())
    clear_count = int(clear.sum())
    result = TubeResult.POSITIVE if particles > clear_count * 0.5 else TubeResult.NEGATIVE
    return DetectionResult("coagulase", result, particles, clear_count)


def detect_citrate(raster: RasterImage) -> DetectionResult:
    """Blue indicator shift over more than 15% of opaque samples."""
    px = _samples(raster)
    px = px[px[:, 3] > MIN_ALPHA]
    r, g, b = px[:, 0], px[:, 1], px[:, 2]
    blue = (b > r) & (b > g) & (b > 60) & (b - r > 10) & (b - g > 10)
    total = int(px.shape[0])
    count = int(blue.sum())
    fraction = count / total if total else 0.0
    result = TubeResult.POSITIVE if fraction > 0.15 else TubeResult.NEGATIVE
    return DetectionResult("citrate", result, count, total)


def detect_oxidase(raster: RasterImage) -> DetectionResult:
    """Purple or black over more than 25% of opaque samples."""
    px = _samples(raster)
    px = px[px[:, 3] > MIN_ALPHA]
    r, g, b = px[:, 0], px[:, 1], px[:, 2]
    lum = luma_array(px[:, :3])
    dark = (lum < 100) | ((r > g) & (b > g) & (lum < 150))
    total = int(px.shape[0])
    count = int(dark.sum())
    fraction = count / total if total else 0.0
    result = TubeResult.POSITIVE if fraction > 0.25 else TubeResult.NEGATIVE
    return DetectionResult("oxidase", result, count, total)


DETECTORS: dict[str, Callable[[RasterImage], DetectionResult]] = {
    "coagulase": detect_coagulase,
    "citrate": detect_citrate,
    "oxidase": detect_oxidase,
}


def detect(test: str, raster: RasterImage) -> DetectionResult:
    """Run the named detector. Raises KeyError if there is none for ``test``."""
    try:
        detector = DETECTORS[test]
    except KeyError:
        raise KeyError(f"No automatic detector for {test!r}") from None
    found = detector(raster)
    logger.debug("Detector %s: %s (%d/%d)", test, found.result.value, found.matched, found.considered)
    return found
