"""Tube-panel matcher — best species profile for a set of tube results."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from petrilens.tubes.catalog import TubeResult
from petrilens.utils.math_helpers import round_half_up

logger = logging.getLogger(__name__)

MAX_CONFIDENCE = 95


@dataclass
class PanelResults:
    gram_stain: TubeResult = TubeResult.UNKNOWN
    catalase: TubeResult = TubeResult.UNKNOWN
    oxidase: TubeResult = TubeResult.UNKNOWN
    coagulase: TubeResult = TubeResult.UNKNOWN
    indole: TubeResult = TubeResult.UNKNOWN
    citrate: TubeResult = TubeResult.UNKNOWN
    urease: TubeResult = TubeResult.UNKNOWN
    lactose_fermentation: TubeResult = TubeResult.UNKNOWN


@dataclass(frozen=True)
class SpeciesProfile:
    key: str
    name: str
    characteristics: tuple[str, ...]
    explanation: str
    common_in: str


@dataclass
class PanelMatch:
    profile: SpeciesProfile
    confidence: int
    scores: dict[str, float] = field(default_factory=dict)


SPECIES: dict[str, SpeciesProfile] = {
    p.key: p
    for p in [
        SpeciesProfile(
            "Staphylococcus aureus",
            "Staphylococcus aureus",
            ("Gram+", "Catalase+", "Coagulase+", "Golden colonies"),
            "Gram-positive cocci, catalase and coagulase positive. Common food poisoning pathogen.",
            "Dairy, cheese, processed foods, skin infections",
        ),
        SpeciesProfile(
            "E. coli",
            "Escherichia coli",
            ("Gram-", "Oxidase-", "Indole+", "Lactose+"),
            "Gram-negative rod, oxidase negative, indole positive. Common in food and water.",
            "Water, dairy, meat, fecal samples",
        ),
        SpeciesProfile(
            "Salmonella",
            "Salmonella species",
            ("Gram-", "Catalase+", "Citrate+", "No lactose fermentation"),
            "Gram-negative rod, catalase positive, citrate positive, no lactose fermentation.",
            "Meat, poultry, eggs, food poisoning",
        ),
        SpeciesProfile(
            "Listeria monocytogenes",
            "Listeria monocytogenes",
            ("Gram+", "Catalase+", "Coagulase-", "β-hemolytic"),
            "Gram-positive rod, catalase positive, coagulase negative. Important dairy pathogen.",
            "Dairy, meat, fermented foods",
        ),
        SpeciesProfile(
            "Pseudomonas aeruginosa",
            "Pseudomonas aeruginosa",
            ("Gram-", "Oxidase+", "Green pigment", "Non-fermenting"),
            "Gram-negative rod, oxidase positive. Often produces green-blue pigment.",
            "Water, soil, environmental samples",
        ),
        SpeciesProfile(
            "Lactobacillus",
            "Lactobacillus species",
            ("Gram+", "Catalase-", "Lactose+", "Homofermentative"),
            "Gram-positive rod, catalase negative. Essential in fermentation.",
            "Fermented dairy, yogurt, kimchi",
        ),
    ]
}

_P, _N = TubeResult.POSITIVE, TubeResult.NEGATIVE

# (panel field, required result, species key, score). Order matters: ties
# resolve to the species that scored first.
PANEL_RULES: list[tuple[str, TubeResult, str, float]] = [
    ("gram_stain", _P, "Staphylococcus aureus", 30),
    ("catalase", _P, "Staphylococcus aureus", 25),
    ("coagulase", _P, "Staphylococcus aureus", 35),
    ("gram_stain", _N, "E. coli", 20),
    ("oxidase", _N, "E. coli", 20),
    ("indole", _P, "E. coli", 30),
    ("lactose_fermentation", _P, "E. coli", 30),
    ("gram_stain", _N, "Salmonella", 20),
    ("catalase", _P, "Salmonella", 20),
    ("citrate", _P, "Salmonella", 35),
    ("lactose_fermentation", _N, "Salmonella", 25),
    ("gram_stain", _P, "Listeria monocytogenes", 25),
    ("catalase", _P, "Listeria monocytogenes", 25),
    ("coagulase", _N, "Listeria monocytogenes", 40),
    ("gram_stain", _N, "Pseudomonas aeruginosa", 25),
    ("oxidase", _P, "Pseudomonas aeruginosa", 50),
    ("gram_stain", _P, "Lactobacillus", 20),
    ("catalase", _N, "Lactobacillus", 25),
    ("lactose_fermentation", _P, "Lactobacillus", 35),
]


def score_panel(results: PanelResults) -> dict[str, float]:
    scores: dict[str, float] = {}
    for attr, required, species, score in PANEL_RULES:
        if getattr(results, attr) == required:
            scores[species] = scores.get(species, 0) + score
    return scores


def match_panel(results: PanelResults) -> PanelMatch | None:
    """Best-scoring species, or None when no test result scored anything."""
    scores = score_panel(results)
    if not scores:
        return None
    best_score = max(scores.values())
    best = next(name for name, s in scores.items() if s == best_score)
    confidence = min(round_half_up(best_score), MAX_CONFIDENCE)
    logger.debug("Panel match: %s (%d%%)", best, confidence)
    return PanelMatch(profile=SPECIES[best], confidence=confidence, scores=scores)
