"""Rule-based species identifier.

Biochemical outcomes, plate observations and colony statistics add weighted
evidence to named species. Scores are normalized against the best one and
the top five are returned with the reasons that contributed to them.

An empty result means "insufficient evidence", not an error.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from petrilens.engine.context import Colony
from petrilens.utils.math_helpers import round_half_up

logger = logging.getLogger(__name__)

TOP_CANDIDATES = 5

Outcome = Literal["positive", "negative", "unknown"]


@dataclass
class BiochemicalPanel:
    gram_stain: Literal["positive", "negative", "variable", "unknown"] = "unknown"
    catalase: Outcome = "unknown"
    coagulase: Outcome = "unknown"
    oxidase: Outcome = "unknown"
    motility: Outcome = "unknown"
    spore_forming: Outcome = "unknown"
    fermentation: Literal["glucose", "lactose", "sucrose", "none", "unknown"] = "unknown"
    voges_proskauer: Outcome = "unknown"
    methyl_red: Outcome = "unknown"


@dataclass
class Observations:
    elevation: Literal["flat", "raised", "convex", "umbonate"] = "flat"
    texture: Literal["smooth", "rough", "mucoid", "powdery"] = "smooth"
    hemolysis: Literal["none", "alpha", "beta", "gamma"] = "none"
    pigmentation: Literal[
        "none", "white", "yellow", "orange", "red", "brown", "black", "green", "pigmented"
    ] = "none"
    other_notes: str = ""
    sample_type: str = ""
    culture_medium: str = ""


@dataclass
class ColonyStats:
    """Aggregate plate signals used by the identifier."""

    count: int = 0
    mean_size: float = 0.0
    # More than half the colonies are below half the mean size
    mostly_small: bool = False
    # Some colony is above twice the mean size
    has_large: bool = False
    # Some colony is near-white (max channel > 200, min channel > 180)
    translucent: bool = False

    @classmethod
    def from_colonies(cls, colonies: Sequence[Colony]) -> ColonyStats:
        if not colonies:
            return cls()
        n = len(colonies)
        mean = sum(c.size_px for c in colonies) / n
        small = sum(1 for c in colonies if c.size_px < mean / 2)
        return cls(
            count=n,
            mean_size=mean,
            mostly_small=small > n / 2,
            has_large=any(c.size_px > mean * 2 for c in colonies),
            translucent=any(max(c.color) > 200 and min(c.color) > 180 for c in colonies),
        )


@dataclass
class Candidate:
    name: str
    confidence: int
    reasons: list[str] = field(default_factory=list)


class _Evidence:
    """Insertion-ordered score accumulator."""

    def __init__(self) -> None:
        self.scores: dict[str, float] = {}
        self.reasons: dict[str, list[str]] = {}

    def add(self, name: str, score: float, why: str) -> None:
        self.scores[name] = self.scores.get(name, 0) + score
        self.reasons.setdefault(name, []).append(why)


def _gram_positive_rules(ev: _Evidence, bio: BiochemicalPanel, obs: Observations) -> None:
    if bio.catalase == "negative":
        ev.add("Streptococcus", 15, "Gram+ Catalase-")
        if obs.hemolysis == "beta":
            ev.add("Streptococcus pyogenes", 20, "Beta hemolysis")
        elif obs.hemolysis == "alpha":
            ev.add("Streptococcus pneumoniae", 18, "Alpha hemolysis")
    if bio.catalase == "positive":
        ev.add("Staphylococcus", 20, "Gram+ Catalase+")
        if bio.coagulase == "positive":
            ev.add("Staphylococcus aureus", 25, "Coagulase+")
            if obs.pigmentation in ("yellow", "orange"):
                ev.add("Staphylococcus aureus", 10, "Yellow/orange pigmentation")
        elif bio.coagulase == "negative":
            ev.add("Staphylococcus epidermidis", 20, "Coagulase-")


def _gram_negative_rules(ev: _Evidence, bio: BiochemicalPanel, obs: Observations) -> None:
    if bio.oxidase == "positive":
        ev.add("Pseudomonas", 18, "Gram- Oxidase+")
        if obs.pigmentation == "green":
            ev.add("Pseudomonas aeruginosa", 25, "Green pigmentation")
    elif bio.oxidase == "negative":
        ev.add("Enterobacteriaceae", 15, "Gram- Oxidase-")
        if bio.methyl_red == "positive":
            ev.add("E. coli", 15, "Methyl Red+")
            if bio.voges_proskauer == "negative":
                ev.add("E. coli", 10, "MR+/VP-")
        if bio.voges_proskauer == "positive":
            ev.add("Klebsiella", 15, "VP+")


def identify(
    biochemical: BiochemicalPanel,
    observations: Observations | None = None,
    stats: ColonyStats | None = None,
) -> list[Candidate]:
    """Top candidates, highest normalized confidence first."""
    obs = observations or Observations()
    stats = stats or ColonyStats()
    ev = _Evidence()

    if biochemical.gram_stain == "positive":
        _gram_positive_rules(ev, biochemical, obs)
    if biochemical.gram_stain == "negative":
        _gram_negative_rules(ev, biochemical, obs)

    if biochemical.spore_forming == "positive" and biochemical.gram_stain == "positive":
        ev.add("Bacillus", 25, "Spore-forming Gram+")
    if biochemical.motility == "positive":
        ev.add("E. coli", 10, "Motile")
    elif biochemical.motility == "negative":
        ev.add("Klebsiella", 10, "Non-motile")

    if stats.count > 0:
        if stats.mostly_small:
            ev.add("Streptococcus", 8, "Small colonies")
        if stats.has_large:
            ev.add("Bacillus", 8, "Large colonies")
        if stats.translucent:
            ev.add("Streptococcus pneumoniae", 8, "Translucent colonies")

    if obs.texture == "mucoid":
        ev.add("Klebsiella", 12, "Mucoid texture")
        ev.add("Pseudomonas aeruginosa", 8, "Mucoid growth")
    if biochemical.fermentation == "glucose":
        ev.add("E. coli", 8, "Glucose fermentation")

    max_score = max([*ev.scores.values(), 1])
    candidates = [
        Candidate(name=name, confidence=round_half_up(score / max_score * 100), reasons=ev.reasons[name])
        for name, score in ev.scores.items()
    ]
    # sorted() is stable: equal confidences keep first-evidence order
    candidates = sorted(candidates, key=lambda c: c.confidence, reverse=True)[:TOP_CANDIDATES]
    logger.debug("Identify: %d species scored, top %s", len(ev.scores), candidates[0].name if candidates else "-")
    return candidates
