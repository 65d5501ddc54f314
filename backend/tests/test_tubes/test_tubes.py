"""Tests for the tube classifiers: reference colors and heuristic detectors."""

import pytest

from petrilens.engine.context import RasterImage
from petrilens.errors import InvalidColorError
from petrilens.tubes.catalog import TUBE_TESTS, TubeResult, get_test
from petrilens.tubes.detectors import detect, detect_citrate, detect_coagulase, detect_oxidase
from petrilens.tubes.reference import classify_all, classify_by_reference, classify_test, sample_mean_color
from petrilens.tubes.sampling import central_patch
from tests.conftest import blank, fill_rect


def _solid(color, size=40, alpha=255) -> RasterImage:
    return RasterImage.from_array(blank(size, size, color, alpha=alpha))


def test_reddish_patch_is_positive():
    match = classify_by_reference(_solid((200, 10, 10)), "#FF0000", "#0000FF")
    assert match.result == TubeResult.POSITIVE
    assert match.mean_color == (200.0, 10.0, 10.0)
    assert match.distance_positive < match.distance_negative


def test_bluish_patch_is_negative():
    assert classify_by_reference(_solid((10, 10, 200)), "#FF0000", "#0000FF").result == TubeResult.NEGATIVE


def test_equal_distance_goes_positive():
    match = classify_by_reference(_solid((128, 0, 128)), "#FF0000", "#0000FF")
    assert match.distance_positive == match.distance_negative
    assert match.result == TubeResult.POSITIVE


def test_only_the_central_patch_is_sampled():
    px = blank(100, 100, (0, 0, 255))
    # half-side floor(0.15·100) = 15 → patch [35, 65)
    fill_rect(px, 35, 35, 30, 30, (255, 0, 0))
    raster = RasterImage.from_array(px)
    assert central_patch(raster, 0.15).shape == (30, 30, 4)
    assert sample_mean_color(raster) == (255.0, 0.0, 0.0)


def test_tiny_image_samples_center_pixel():
    px = blank(3, 3, (0, 0, 255))
    px[1, 1, :3] = (255, 0, 0)
    assert sample_mean_color(RasterImage.from_array(px)) == (255.0, 0.0, 0.0)


def test_bad_reference_color():
    with pytest.raises(InvalidColorError):
        classify_by_reference(_solid((0, 0, 0)), "#FF0000", "blue")


def test_catalog_entries():
    assert len(TUBE_TESTS) == 8
    assert get_test("citrate").positive_color == "#00D2D3"
    with pytest.raises(KeyError):
        get_test("nope")


def test_classify_test_and_all():
    yellow = _solid((255, 217, 61))
    assert classify_test(yellow, "catalase").result == TubeResult.POSITIVE
    results = classify_all(yellow)
    assert list(results) == list(TUBE_TESTS)
    assert results["catalase"].result == TubeResult.POSITIVE


def test_coagulase_detector():
    clotted = detect_coagulase(_solid((90, 60, 40)))
    assert clotted.result == TubeResult.POSITIVE
    clear = detect_coagulase(_solid((240, 240, 240)))
    assert clear.result == TubeResult.NEGATIVE
    assert clear.matched == 0


def test_citrate_detector():
    assert detect_citrate(_solid((30, 60, 200))).result == TubeResult.POSITIVE
    assert detect_citrate(_solid((0, 200, 190))).result == TubeResult.NEGATIVE
    # transparent pixels are ignored entirely
    see_through = detect_citrate(_solid((30, 60, 200), alpha=0))
    assert see_through.considered == 0
    assert see_through.result == TubeResult.NEGATIVE


def test_oxidase_detector():
    assert detect_oxidase(_solid((120, 40, 130))).result == TubeResult.POSITIVE
    assert detect_oxidase(_solid((30, 30, 30))).result == TubeResult.POSITIVE
    assert detect_oxidase(_solid((230, 230, 230))).result == TubeResult.NEGATIVE


def test_detector_samples_every_third_pixel():
    # half-side floor(0.2·30) = 6 → 12×12 patch, 144 pixels, 48 samples
    found = detect_oxidase(_solid((30, 30, 30), size=30))
    assert found.considered == 48


def test_detect_dispatch():
    assert detect("citrate", _solid((30, 60, 200))).test == "citrate"
    with pytest.raises(KeyError):
        detect("indole", _solid((0, 0, 0)))
