"""FastAPI dependency injection."""

from __future__ import annotations

from fastapi import HTTPException

from petrilens.config import Settings, settings
from petrilens.engine.context import RasterImage
from petrilens.engine.raster import decode_image, source_to_bytes


def get_settings() -> Settings:
    return settings


def load_raster(source: str, cfg: Settings | None = None) -> RasterImage:
    """Decode a request image, enforcing the upload limits.

    Oversized payloads → 413. Undecodable images raise ImageDecodeError,
    which the app maps to 422.
    """
    cfg = cfg or settings
    data = source_to_bytes(source)
    if len(data) > cfg.max_image_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Image payload is {len(data)} bytes, limit is {cfg.max_image_bytes}",
        )
    return decode_image(data, max_pixels=cfg.max_image_pixels)
