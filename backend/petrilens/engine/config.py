"""Pipeline configuration — every tunable constant of the colony pipeline.

Defaults reproduce the reference counting behavior exactly.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PipelineConfig:
    """Controls thresholding, acceptance gates and colony classification."""

    # Acceptance floor: blobs below this many pixels are never colonies
    min_colony_size: int = 10

    # Background decision: median sample luma below this → dark background
    background_split: int = 127
    # Upper bound on full-frame background samples
    background_sample_budget: int = 2500
    # With a region, sample stride = radius / this
    region_sample_divisions: int = 20

    # Otsu shift toward the counted polarity
    threshold_shift: int = 20

    # Thin-filament rejection
    filament_aspect_ratio: float = 5.0
    filament_min_density: float = 0.3
    filament_min_circularity: float = 0.2
    filament_min_extent: int = 3
    filament_narrow_aspect_ratio: float = 3.0

    # Nesting: child must be under this fraction of the parent's size
    nesting_size_ratio: float = 0.5

    # Size buckets, as multiples of the median colony size
    large_4x_factor: int = 4
    large_2x_factor: int = 2

    # Shape labels
    round_circularity: float = 0.8
    oval_circularity: float = 0.6
    compact_density: float = 0.8

    # Render the binary mask PNG (skipped stage when False)
    render_mask: bool = True
