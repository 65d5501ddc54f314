"""Exception hierarchy shared by the engine, the tube classifiers and the API."""

from __future__ import annotations


class PetriLensError(Exception):
    """Base class for all PetriLens errors."""


class ImageDecodeError(PetriLensError, ValueError):
    """The source image could not be decoded into a raster."""


class InvalidRegionError(PetriLensError, ValueError):
    """A region of interest is malformed (e.g. non-positive radius)."""


class InvalidColorError(PetriLensError, ValueError):
    """A reference color is not a parsable hex string."""


class StageError(PetriLensError, RuntimeError):
    """A pipeline stage raised. Always chained from the original exception."""

    def __init__(self, stage_id: str, message: str) -> None:
        super().__init__(f"{stage_id}: {message}")
        self.stage_id = stage_id
