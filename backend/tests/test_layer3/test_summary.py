"""Tests for layer 3: summary statistics and mask rendering."""

import numpy as np

from petrilens.engine.layer3.s3_01_summary import average_size, effective_count
from petrilens.engine.layer3.s3_02_mask_render import render_mask
from petrilens.engine.raster import decode_image
from tests.conftest import make_colony


def test_average_size_rounds_half_up():
    colonies = [make_colony(1, 10, (0, 4, 0, 4)), make_colony(2, 11, (10, 14, 0, 4))]
    assert average_size(colonies) == 11
    assert average_size([]) == 0


def test_effective_count_applies_multipliers():
    colonies = [
        make_colony(1, 400, (0, 19, 0, 19), count_multiplier=4),
        make_colony(2, 200, (30, 49, 0, 19), count_multiplier=2),
        make_colony(3, 100, (60, 79, 0, 19)),
    ]
    assert effective_count(colonies) == 7


def test_effective_count_excludes_parents_not_children():
    parent = make_colony(1, 400, (0, 19, 0, 19), count_multiplier=4)
    child = make_colony(2, 20, (5, 9, 5, 9), is_nested_in_parent=True, parent_id=1)
    lone = make_colony(3, 100, (60, 79, 0, 19), count_multiplier=2)
    assert effective_count([parent, child, lone]) == 3


def test_effective_count_empty():
    assert effective_count([]) == 0


def test_render_mask_dimensions():
    mask = np.zeros((3, 5), dtype=np.uint8)
    mask[1, 2] = 1
    url = render_mask(mask)
    assert url.startswith("data:image/png;base64,")
    raster = decode_image(url)
    assert (raster.width, raster.height) == (5, 3)
    assert raster.pixels[1, 2].tolist() == [255, 255, 255, 255]
    assert int(raster.pixels[..., 0].sum()) == 255
