"""Binary-mask operations for colony extraction."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from skimage.measure import label


def label_components(mask: NDArray[np.uint8]) -> tuple[NDArray[np.int32], int]:
    """Label 4-connected components (up/down/left/right, never diagonal).

    skimage labels iteratively with union-find, so arbitrarily large blobs
    never hit a recursion limit.
    """
    labels, count = label(mask, background=0, connectivity=1, return_num=True)
    return labels.astype(np.int32, copy=False), int(count)


def components_in_scan_order(labels: NDArray[np.int32]) -> list[NDArray[np.intp]]:
    """Group flat pixel indices by component, ordered by first raster pixel.

    Within a component the indices are ascending (raster order). The order
    of components matches a row-major flood-fill scan: the component whose
    top-left-most pixel comes first in the scan is first.
    """
    flat = labels.ravel()
    on = np.flatnonzero(flat)
    if on.size == 0:
        return []

    order = np.argsort(flat[on], kind="stable")
    grouped = on[order]
    counts = np.bincount(flat[on])[1:]
    counts = counts[counts > 0]
    groups = np.split(grouped, np.cumsum(counts)[:-1])
    groups.sort(key=lambda g: int(g[0]))
    return groups


def boundary_exposure(mask: NDArray[np.uint8]) -> NDArray[np.int8]:
    """Per-pixel count of 4-neighbors that are off (or outside the grid).

    Off pixels get 0. Summed over a 4-connected component this is the
    number of (member, non-member) adjacent pairs, i.e. its perimeter:
    an on neighbor of a member is always in the same component.
    """
    on = mask.astype(bool)
    padded = np.pad(on, 1, mode="constant", constant_values=False)
    on_neighbors = (
        padded[:-2, 1:-1].astype(np.int8)
        + padded[2:, 1:-1]
        + padded[1:-1, :-2]
        + padded[1:-1, 2:]
    )
    return np.where(on, 4 - on_neighbors, 0).astype(np.int8)
