"""Pixel source adapter — encoded image in, RGBA raster out (and back).

Accepts ``data:`` URLs, bare base64 strings and raw encoded bytes. Every
acquisition path (file upload, clipboard paste, camera frame) is expected
to normalize to one of these before calling the engine.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging

import numpy as np
from numpy.typing import NDArray
from PIL import Image, UnidentifiedImageError

from petrilens.engine.context import RasterImage
from petrilens.errors import ImageDecodeError

logger = logging.getLogger(__name__)

_DATA_URL_PREFIX = "data:"


def source_to_bytes(source: str | bytes) -> bytes:
    """Strip a data URL header and base64-decode. Bytes pass through untouched."""
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)

    payload = source.strip()
    if payload.startswith(_DATA_URL_PREFIX):
        header, sep, payload = payload.partition(",")
        if not sep:
            raise ImageDecodeError("Malformed data URL: missing ',' separator")
        if ";base64" not in header:
            raise ImageDecodeError("Only base64-encoded data URLs are supported")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid base64 image payload: {e}") from e


def decode_image(source: str | bytes, max_pixels: int | None = None) -> RasterImage:
    """Decode an encoded image into an RGBA raster.

    Raises ImageDecodeError when the payload is not an image, has zero area
    or exceeds ``max_pixels``.
    """
    data = source_to_bytes(source)
    if not data:
        raise ImageDecodeError("Empty image payload")

    try:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
            if width == 0 or height == 0:
                raise ImageDecodeError("Image has zero area")
            if max_pixels is not None and width * height > max_pixels:
                raise ImageDecodeError(
                    f"Image is {width}×{height}, above the {max_pixels}-pixel limit"
                )
            pixels = np.array(img.convert("RGBA"))
    except ImageDecodeError:
        raise
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as e:
        logger.warning("Image decode failed: %s", e)
        raise ImageDecodeError(f"Cannot decode image: {e}") from e

    logger.info("Decoded image: %d×%d", width, height)
    return RasterImage(width=width, height=height, pixels=pixels)


def encode_png(pixels: NDArray[np.uint8]) -> bytes:
    """Encode an (H, W) or (H, W, 3|4) uint8 array as PNG."""
    buf = io.BytesIO()
    Image.fromarray(pixels).save(buf, format="PNG")
    return buf.getvalue()


def to_data_url(png_bytes: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


def mask_to_rgba(mask: NDArray[np.uint8]) -> NDArray[np.uint8]:
    """Binary mask → opaque RGBA image: white where on, black elsewhere."""
    value = np.where(mask.astype(bool), 255, 0).astype(np.uint8)
    alpha = np.full_like(value, 255)
    return np.stack([value, value, value, alpha], axis=-1)
