"""Tests for image decoding and mask encoding."""

import base64
import io

import numpy as np
import pytest
from PIL import Image

from petrilens.engine.raster import decode_image, encode_png, mask_to_rgba, source_to_bytes, to_data_url
from petrilens.errors import ImageDecodeError
from tests.conftest import blank, png_data_url


def _rgb_png_bytes(width: int, height: int) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (10, 20, 30)).save(buf, format="PNG")
    return buf.getvalue()


def test_decode_data_url():
    raster = decode_image(png_data_url(blank(7, 3, (1, 2, 3))))
    assert (raster.width, raster.height) == (7, 3)
    assert raster.pixels.shape == (3, 7, 4)
    assert raster.pixels[0, 0].tolist() == [1, 2, 3, 255]


def test_decode_bare_base64_and_bytes():
    data = _rgb_png_bytes(4, 5)
    from_b64 = decode_image(base64.b64encode(data).decode("ascii"))
    from_bytes = decode_image(data)
    assert from_b64.pixels.tolist() == from_bytes.pixels.tolist()
    # RGB sources gain an opaque alpha channel
    assert from_bytes.pixels[0, 0].tolist() == [10, 20, 30, 255]


def test_raster_is_read_only():
    raster = decode_image(_rgb_png_bytes(2, 2))
    with pytest.raises(ValueError):
        raster.pixels[0, 0, 0] = 1


@pytest.mark.parametrize(
    "source",
    [
        "data:image/png;base64",
        "data:image/png,rawtext",
        "not base64 at all!",
        base64.b64encode(b"plain text, not an image").decode("ascii"),
        b"",
    ],
)
def test_decode_failures(source):
    with pytest.raises(ImageDecodeError):
        decode_image(source)


def test_pixel_limit():
    with pytest.raises(ImageDecodeError, match="limit"):
        decode_image(_rgb_png_bytes(10, 10), max_pixels=99)


def test_source_to_bytes_passthrough():
    assert source_to_bytes(b"abc") == b"abc"


def test_mask_round_trip_through_png():
    mask = np.array([[1, 0], [0, 1]], dtype=np.uint8)
    raster = decode_image(to_data_url(encode_png(mask_to_rgba(mask))))
    assert raster.pixels[..., 0].tolist() == [[255, 0], [0, 255]]
    assert (raster.pixels[..., 3] == 255).all()
