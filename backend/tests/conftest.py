"""Shared test fixtures — synthetic plates and tube photos built with numpy."""

from __future__ import annotations

import base64
import io

import numpy as np
import pytest
from PIL import Image

from petrilens.engine.context import Colony, RasterImage

# Dark agar, bright colonies: background luma 30, colonies 220
DARK_BG = 30
BRIGHT = 220


def blank(width: int, height: int, value: int | tuple[int, int, int] = 255, alpha: int = 255) -> np.ndarray:
    """(H, W, 4) uint8 canvas of a single color."""
    px = np.empty((height, width, 4), dtype=np.uint8)
    px[..., :3] = value
    px[..., 3] = alpha
    return px


def fill_rect(px: np.ndarray, x0: int, y0: int, w: int, h: int, value) -> np.ndarray:
    px[y0 : y0 + h, x0 : x0 + w, :3] = value
    return px


def fill_disk(px: np.ndarray, cx: int, cy: int, r: int, value) -> np.ndarray:
    ys, xs = np.ogrid[: px.shape[0], : px.shape[1]]
    inside = (xs - cx) ** 2 + (ys - cy) ** 2 <= r * r
    px[inside, :3] = value
    return px


def png_data_url(px: np.ndarray) -> str:
    buf = io.BytesIO()
    Image.fromarray(px).save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


def make_colony(id: int, size: int, bbox: tuple[int, int, int, int], **kwargs) -> Colony:
    """Colony with the given size and (min_x, max_x, min_y, max_y) bounding box."""
    min_x, max_x, min_y, max_y = bbox
    width = max_x - min_x + 1
    height = max_y - min_y + 1
    fields = dict(
        id=id,
        size_px=size,
        centroid_x=(min_x + max_x) / 2,
        centroid_y=(min_y + max_y) / 2,
        min_x=min_x,
        max_x=max_x,
        min_y=min_y,
        max_y=max_y,
        width=width,
        height=height,
        circularity=0.5,
        density=size / (width * height),
        color_r=200,
        color_g=200,
        color_b=200,
    )
    fields.update(kwargs)
    return Colony(**fields)


def dark_plate_pixels() -> np.ndarray:
    """100×100 dark plate with three bright 8×8 colonies and one hair-thin streak."""
    px = blank(100, 100, DARK_BG)
    fill_rect(px, 10, 10, 8, 8, BRIGHT)
    fill_rect(px, 60, 15, 8, 8, BRIGHT)
    fill_rect(px, 30, 60, 8, 8, BRIGHT)
    # 1×20 streak: rejected as a filament
    fill_rect(px, 80, 50, 1, 20, BRIGHT)
    # 2×2 speck: below the size floor
    fill_rect(px, 50, 90, 2, 2, BRIGHT)
    return px


def nested_plate_pixels() -> np.ndarray:
    """Dark plate with a hollow 40×40 square (4 px walls) around a 10×10 square."""
    px = blank(80, 80, DARK_BG)
    fill_rect(px, 20, 20, 40, 40, BRIGHT)
    fill_rect(px, 24, 24, 32, 32, DARK_BG)
    fill_rect(px, 35, 35, 10, 10, BRIGHT)
    return px


def light_plate_pixels() -> np.ndarray:
    """White plate, three dark colonies: black r=5 cores inside gray r=8 halos."""
    px = blank(100, 100, 255)
    for cx, cy in [(20, 20), (60, 30), (40, 70)]:
        fill_disk(px, cx, cy, 8, 60)
        fill_disk(px, cx, cy, 5, 0)
    return px


@pytest.fixture
def dark_plate() -> RasterImage:
    return RasterImage.from_array(dark_plate_pixels())


@pytest.fixture
def nested_plate() -> RasterImage:
    return RasterImage.from_array(nested_plate_pixels())


@pytest.fixture
def light_plate() -> RasterImage:
    return RasterImage.from_array(light_plate_pixels())


@pytest.fixture
def dark_plate_url() -> str:
    return png_data_url(dark_plate_pixels())
