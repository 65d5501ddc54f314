"""Tests for the leaf helpers: rounding, geometry, color, morphology."""

import numpy as np
import pytest

from petrilens.errors import InvalidColorError
from petrilens.utils.color import color_variation, parse_hex, rgb_distance
from petrilens.utils.geometry import circle_grid_samples, circle_mask, isoperimetric_ratio
from petrilens.utils.math_helpers import round_half_up, to_fixed, upper_median
from petrilens.utils.morphology import boundary_exposure, components_in_scan_order, label_components


@pytest.mark.parametrize("value, expected", [(0.5, 1), (1.5, 2), (2.5, 3), (-0.5, 0), (2.49, 2)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_upper_median_takes_upper_middle():
    assert upper_median([4, 1, 3, 2]) == 3
    assert upper_median([5]) == 5
    with pytest.raises(ValueError):
        upper_median([])


@pytest.mark.parametrize(
    "value, digits, expected",
    [(0.785398, 3, "0.785"), (4.25, 1, "4.3"), (80.00000000000001, 1, "80.0"), (1.005, 2, "1.00"), (3, 1, "3.0")],
)
def test_to_fixed(value, digits, expected):
    assert to_fixed(value, digits) == expected


def test_parse_hex_forms():
    assert parse_hex("#abc") == (170, 187, 204)
    assert parse_hex("#FF0000") == (255, 0, 0)
    assert parse_hex("#f2f568ff") == (242, 245, 104)


@pytest.mark.parametrize("bad", ["", "#12", "#gggggg", "red"])
def test_parse_hex_rejects(bad):
    with pytest.raises(InvalidColorError):
        parse_hex(bad)


def test_rgb_distance_and_variation():
    assert rgb_distance((0, 0, 0), (3, 4, 0)) == 5.0
    assert color_variation(np.array([[10, 20, 40]])).tolist() == [60]


def test_circle_mask_clips_offscreen_center():
    mask = circle_mask(10, 10, -2, 5, 3)
    assert mask[5, 0]
    assert not mask[5, 2]


def test_circle_grid_samples_stay_inside():
    xs, ys = circle_grid_samples(100, 100, 50, 50, 20, 2)
    assert len(xs) > 0
    assert ((xs - 50) ** 2 + (ys - 50) ** 2 <= 400).all()
    assert (xs % 2 == 0).all()


def test_circle_grid_samples_empty_when_off_grid():
    xs, ys = circle_grid_samples(10, 10, -50, -50, 5, 1)
    assert xs.size == ys.size == 0


def test_isoperimetric_ratio_zero_perimeter():
    assert isoperimetric_ratio(10, 0) == 0.0


def test_label_components_is_four_connected():
    mask = np.array(
        [
            [1, 0, 0],
            [0, 1, 0],
            [0, 0, 1],
        ],
        dtype=np.uint8,
    )
    _, count = label_components(mask)
    assert count == 3


def test_components_in_scan_order():
    mask = np.zeros((4, 6), dtype=np.uint8)
    mask[1:4, 0] = 1  # first pixel at row 1
    mask[0, 4:6] = 1  # first pixel at row 0
    labels, _ = label_components(mask)
    groups = components_in_scan_order(labels)
    assert [g.tolist() for g in groups] == [[4, 5], [6, 12, 18]]


def test_boundary_exposure_counts_image_edge():
    mask = np.zeros((5, 5), dtype=np.uint8)
    mask[0:4, 0:3] = 1
    # 3 × 4 block in the corner: perimeter 2·(3 + 4)
    assert int(boundary_exposure(mask).sum()) == 14
    assert boundary_exposure(np.ones((1, 1), dtype=np.uint8)).tolist() == [[4]]
