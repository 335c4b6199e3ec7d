"""Aggregate statistics over a list of analysis results."""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from posemetrics.metrics import risk_level
from posemetrics.output import RISK_HIGH, RISK_LOW, RISK_MEDIUM, AnalysisResult

# Training advice shown for each overall risk category
RECOMMENDATIONS: Dict[str, Tuple[str, ...]] = {
    RISK_HIGH: (
        "Consider reducing training intensity",
        "Focus on proper form and technique",
        "Consult with a sports physiotherapist",
    ),
    RISK_MEDIUM: (
        "Monitor form during training",
        "Include strengthening exercises",
        "Ensure adequate rest between sessions",
    ),
    RISK_LOW: (
        "Maintain current training routine",
        "Continue monitoring technique",
        "Gradually increase intensity as needed",
    ),
}


@dataclass(frozen=True)
class MetricsSummary:
    """Mean metric values over a pass.

    Attributes:
        frame_count: Number of results averaged.
        speed: Mean speed.
        jump_height: Mean jump height.
        cadence: Mean cadence.
        agility_score: Mean agility score.
        risk_counts: Number of frames per overall risk category.
    """

    frame_count: int
    speed: float
    jump_height: float
    cadence: float
    agility_score: float
    risk_counts: Dict[str, int]

    @property
    def peak_risk(self) -> str:
        """Most severe overall category seen in any frame."""
        for level in ("high", "medium"):
            if self.risk_counts.get(level, 0) > 0:
                return level
        return "low"

    @property
    def recommendations(self) -> Tuple[str, ...]:
        """Training advice for the peak risk category."""
        return RECOMMENDATIONS[self.peak_risk]

    def to_dict(self) -> Dict[str, object]:
        return {
            "frameCount": self.frame_count,
            "speed": self.speed,
            "jumpHeight": self.jump_height,
            "cadence": self.cadence,
            "agilityScore": self.agility_score,
            "riskCounts": dict(self.risk_counts),
        }


def summarize(results: Sequence[AnalysisResult]) -> Optional[MetricsSummary]:
    """Average the scalar metrics of ``results``; None if empty."""
    if not results:
        return None

    values = np.array(
        [
            (
                r.metrics.speed,
                r.metrics.jump_height,
                r.metrics.cadence,
                r.metrics.agility_score,
            )
            for r in results
        ],
        dtype=np.float64,
    )
    means = values.mean(axis=0)

    risk_counts = {"low": 0, "medium": 0, "high": 0}
    for r in results:
        risk_counts[r.metrics.injury_risk.overall] += 1

    return MetricsSummary(
        frame_count=len(results),
        speed=float(means[0]),
        jump_height=float(means[1]),
        cadence=float(means[2]),
        agility_score=float(means[3]),
        risk_counts=risk_counts,
    )


def area_levels(result: AnalysisResult) -> Dict[str, str]:
    """Risk category of each body area in ``result``."""
    return {
        area: risk_level(value)
        for area, value in result.metrics.injury_risk.areas.to_dict().items()
    }


__all__ = ["RECOMMENDATIONS", "MetricsSummary", "summarize", "area_levels"]
