"""AnalysisContext — the single mutable state object flowing through all stages.

Raster-level results → AnalysisContext.* (gray, mask, threshold, ...)
Per-colony results → Colony fields, set at creation and by the layer-2 pass
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from petrilens.engine.config import PipelineConfig
from petrilens.errors import InvalidRegionError


class BackgroundMode(str, enum.Enum):
    AUTO = "auto"
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def _missing_(cls, value: object) -> BackgroundMode | None:
        # "unsure" has always been handled exactly like "auto"
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered == "unsure":
                return cls.AUTO
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class CountTarget(str, enum.Enum):
    AUTO = "auto"
    DARK = "dark"
    LIGHT = "light"


class Background(str, enum.Enum):
    DARK = "dark"
    LIGHT = "light"


class SizeCategory(str, enum.Enum):
    BELOW_AVERAGE = "Below Average"
    AVERAGE = "Average"
    LARGE_2X = "Large (2x+)"
    LARGE_4X = "Large (4x+)"


class ShapeType(str, enum.Enum):
    UNKNOWN = "Unknown"
    ROUND = "Round"
    OVAL = "Oval"
    IRREGULAR_COMPACT = "Irregular-Compact"
    IRREGULAR_SPARSE = "Irregular-Sparse"


@dataclass(frozen=True)
class RasterImage:
    """Decoded RGBA raster. The pixel buffer is read-only after construction."""

    width: int
    height: int
    # (height, width, 4) uint8
    pixels: NDArray[np.uint8]

    def __post_init__(self) -> None:
        if self.pixels.shape != (self.height, self.width, 4):
            raise ValueError(
                f"pixel buffer shape {self.pixels.shape} does not match "
                f"{self.width}×{self.height}×4"
            )
        self.pixels.flags.writeable = False

    @classmethod
    def from_array(cls, pixels: NDArray) -> RasterImage:
        """Wrap an (H, W, 3|4) array, adding an opaque alpha channel if needed."""
        arr = np.asarray(pixels, dtype=np.uint8)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise ValueError(f"expected (H, W, 3|4) array, got {arr.shape}")
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)
        else:
            arr = arr.copy()
        return cls(width=arr.shape[1], height=arr.shape[0], pixels=arr)


@dataclass(frozen=True)
class CircleRegion:
    """Circular region of interest in image-pixel coordinates."""

    center_x: float
    center_y: float
    radius: float

    def __post_init__(self) -> None:
        if not self.radius > 0:
            raise InvalidRegionError(f"Region radius must be > 0, got {self.radius}")


@dataclass(frozen=True)
class RawBlob:
    """A maximal 4-connected set of on pixels, before acceptance filtering."""

    discovery_index: int
    # Row-major flat pixel indices
    pixels: NDArray[np.intp]

    @property
    def size(self) -> int:
        return int(self.pixels.size)


@dataclass
class Colony:
    """An accepted blob with its geometric, color and classification features."""

    id: int
    size_px: int
    centroid_x: float
    centroid_y: float
    min_x: int
    max_x: int
    min_y: int
    max_y: int
    width: int
    height: int
    circularity: float
    density: float
    color_r: int
    color_g: int
    color_b: int
    # Classification: placeholders until the layer-2 pass
    size_category: SizeCategory = SizeCategory.AVERAGE
    shape_type: ShapeType = ShapeType.UNKNOWN
    count_multiplier: int = 1
    # None means "never examined as nested"; the nesting pass only sets True
    is_nested_in_parent: bool | None = None
    parent_id: int | None = None

    @property
    def color(self) -> tuple[int, int, int]:
        return (self.color_r, self.color_g, self.color_b)


@dataclass
class AnalysisResult:
    """Pipeline output handed back to callers."""

    mask_image: str
    colonies: list[Colony]
    avg_size: int
    effective_count: int
    width: int
    height: int
    background: Background
    count_dark: bool
    threshold: int
    mask: NDArray[np.uint8] | None = None


@dataclass
class AnalysisContext:
    """Shared state flowing through the entire pipeline."""

    raster: RasterImage
    region: CircleRegion | None = None
    background_mode: BackgroundMode = BackgroundMode.AUTO
    count_target: CountTarget = CountTarget.AUTO
    invert: bool = False
    config: PipelineConfig = field(default_factory=PipelineConfig)

    # --- Layer 0: thresholding ---
    # (H, W) uint8 luma
    gray: NDArray[np.uint8] | None = None
    background: Background = Background.LIGHT
    count_dark: bool = False
    otsu_threshold: int = 0
    threshold: int = 0
    # (H, W) uint8, 1 = on
    mask: NDArray[np.uint8] | None = None

    # --- Layer 1: extraction ---
    blobs: list[RawBlob] = field(default_factory=list)
    rejected_small: int = 0
    rejected_filaments: int = 0
    colonies: list[Colony] = field(default_factory=list)

    # --- Layer 2/3: classification + aggregation ---
    median_size: int = 0
    avg_size: int = 0
    effective_count: int = 0
    mask_image: str = ""

    # --- Pipeline metadata ---
    completed_stages: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def width(self) -> int:
        return self.raster.width

    @property
    def height(self) -> int:
        return self.raster.height

    def to_result(self) -> AnalysisResult:
        return AnalysisResult(
            mask_image=self.mask_image,
            colonies=list(self.colonies),
            avg_size=self.avg_size,
            effective_count=self.effective_count,
            width=self.width,
            height=self.height,
            background=self.background,
            count_dark=self.count_dark,
            threshold=self.threshold,
            mask=self.mask,
        )
