"""CSV export of a colony sequence, one row per colony in colony order."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable

from petrilens.engine.context import Colony
from petrilens.utils.math_helpers import to_fixed

CSV_HEADERS = [
    "Colony ID",
    "Color RGB",
    "Size (px)",
    "Size Category",
    "Count Multiplier",
    "Is Nested",
    "Shape",
    "Circularity",
    "Density",
    "Centroid X",
    "Centroid Y",
    "Width",
    "Height",
]


def colony_row(col: Colony) -> list[str | int]:
    nested = f"Yes (Parent: {col.parent_id})" if col.is_nested_in_parent else "No"
    return [
        col.id,
        f"{col.color_r},{col.color_g},{col.color_b}",
        col.size_px,
        col.size_category.value,
        col.count_multiplier or 1,
        nested,
        col.shape_type.value,
        to_fixed(col.circularity, 3),
        to_fixed(col.density * 100, 1),
        to_fixed(col.centroid_x, 1),
        to_fixed(col.centroid_y, 1),
        col.width,
        col.height,
    ]


def colonies_to_csv(colonies: Iterable[Colony]) -> str:
    """Header plus one row per colony, '\\n'-separated, no trailing newline.

    The RGB triple contains commas and is therefore quoted.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for col in colonies:
        writer.writerow(colony_row(col))
    return buf.getvalue().rstrip("\n")
