"""Reference-color catalog of the colorimetric tube tests."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class TubeResult(str, enum.Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TubeTest:
    key: str
    name: str
    short_name: str
    positive_color: str
    negative_color: str
    positive_description: str
    negative_description: str


TUBE_TESTS: dict[str, TubeTest] = {
    t.key: t
    for t in [
        TubeTest("gramStain", "Gram Stain", "Gram", "#9370DB", "#FF6B6B",
                 "Purple (Gram+)", "Pink/Red (Gram-)"),
        TubeTest("catalase", "Catalase", "CAT", "#FFD93D", "#E8E8E8",
                 "Bubbles (Positive)", "No Bubbles (Negative)"),
        TubeTest("oxidase", "Oxidase", "OX", "#7B68EE", "#CCCCCC",
                 "Purple/Black (Positive)", "Colorless (Negative)"),
        TubeTest("coagulase", "Coagulase", "COA", "#FF4757", "#F5F5F5",
                 "Clotted (Positive)", "Clear (Negative)"),
        TubeTest("indole", "Indole", "IND", "#E84393", "#F0F0F0",
                 "Red Ring (Positive)", "No Color (Negative)"),
        TubeTest("citrate", "Citrate", "CIT", "#00D2D3", "#F5F5F5",
                 "Blue/Green (Positive)", "No Color (Negative)"),
        TubeTest("urease", "Urease", "URS", "#f2f568ff", "#FF9F1C",
                 "Yellow (Positive)", "Pink/Orange (Negative)"),
        TubeTest("lactoseFermentation", "Lactose Fermentation", "LAC", "#f2f568ff", "#FFB6C1",
                 "Yellow (Positive)", "Red/Pink (Negative)"),
    ]
}


def get_test(key: str) -> TubeTest:
    """Look up a catalog entry. Raises KeyError for unknown keys."""
    try:
        return TUBE_TESTS[key]
    except KeyError:
        raise KeyError(f"Unknown tube test: {key!r}") from None
