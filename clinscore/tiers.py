"""
Risk-tier classification and interpretation.

Bands are ascending closed lower bounds: a score equal to a band's
``lower_bound`` belongs to that band. Scores under the first bound fall into
the first band, so classification is total.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .models import Interpretation, ThresholdBand
from .scoring import check_ascending

Number = Union[int, float]


def classify(score: Number, bands: Sequence[ThresholdBand]) -> str:
    """Pick the last band whose lower bound is <= score."""
    tier = bands[0].tier
    for band in bands:
        if band.lower_bound <= score:
            tier = band.tier
        else:
            break
    return tier


def interpret(tier: str, scale: "TierScale") -> Interpretation:
    return scale.interpret(tier)


class TierScale:
    """
    Ascending threshold bands with guidance text per tier.

    ``bands`` is a list of ``(lower_bound, tier, guidance)`` triples.
    """

    __slots__ = ("bands", "_guidance", "citation")

    def __init__(self, bands: Iterable[Tuple[Number, str, str]],
                 citation: Optional[str] = None):
        triples = list(bands)
        if not triples:
            raise ValueError("a TierScale needs at least one band")
        check_ascending([lower for lower, _, _ in triples], "TierScale")
        self.bands: Tuple[ThresholdBand, ...] = tuple(
            ThresholdBand(lower_bound=lower, tier=tier) for lower, tier, _ in triples
        )
        self._guidance: Dict[str, str] = {}
        for _, tier, guidance in triples:
            if tier in self._guidance and self._guidance[tier] != guidance:
                raise ValueError(f"tier {tier!r} declared twice with different guidance")
            self._guidance[tier] = guidance
        self.citation = citation

    @property
    def tiers(self) -> List[str]:
        return [band.tier for band in self.bands]

    def classify(self, score: Number) -> str:
        return classify(score, self.bands)

    def interpret(self, tier: str) -> Interpretation:
        return Interpretation(guidance_text=self._guidance[tier], citation=self.citation)

    def public(self) -> List[Dict[str, object]]:
        return [
            {"lower_bound": b.lower_bound, "tier": b.tier, "guidance": self._guidance[b.tier]}
            for b in self.bands
        ]
