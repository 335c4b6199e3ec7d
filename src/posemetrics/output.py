"""Output records produced by PoseAnalyzer."""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from posemetrics.types import PoseData

# Risk categories, least to most severe
RISK_LOW = "low"
RISK_MEDIUM = "medium"
RISK_HIGH = "high"


@dataclass(frozen=True)
class RiskAreas:
    """Per-area injury risk percentages."""

    knees: float = 0.0
    ankles: float = 0.0
    shoulders: float = 0.0
    back: float = 0.0

    def values(self) -> Tuple[float, float, float, float]:
        return (self.knees, self.ankles, self.shoulders, self.back)

    def mean(self) -> float:
        return sum(self.values()) / 4

    def to_dict(self) -> Dict[str, float]:
        return {
            "knees": self.knees,
            "ankles": self.ankles,
            "shoulders": self.shoulders,
            "back": self.back,
        }


@dataclass(frozen=True)
class InjuryRisk:
    """Overall risk category plus the per-area scores it was derived from."""

    overall: str = RISK_LOW
    areas: RiskAreas = RiskAreas()

    def to_dict(self) -> Dict[str, Any]:
        return {"overall": self.overall, "areas": self.areas.to_dict()}


@dataclass(frozen=True)
class MotionMetrics:
    """Metrics derived from one frame.

    Attributes:
        speed: Smoothed torso speed, clamped to [0, 15].
        jump_height: Hip elevation above the standing baseline, >= 0.
        cadence: Ankle separation proxy for steps per minute, [0, 180].
        agility_score: Symmetry score in [0, 100].
        injury_risk: Heuristic injury risk assessment.
    """

    speed: float = 0.0
    jump_height: float = 0.0
    cadence: float = 0.0
    agility_score: float = 0.0
    injury_risk: InjuryRisk = InjuryRisk()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "speed": self.speed,
            "jumpHeight": self.jump_height,
            "cadence": self.cadence,
            "agilityScore": self.agility_score,
            "injuryRisk": self.injury_risk.to_dict(),
        }


@dataclass(frozen=True)
class AnalysisResult:
    """One analyzed frame.

    Results are immutable; gap-filling and frame remapping produce new
    instances through ``with_frame``.

    Attributes:
        poses: Poses detected in the frame.
        metrics: Metrics computed from the first pose.
        frame: Frame index (analysis index or remapped playback index).
        timestamp: Capture time in epoch milliseconds.
    """

    poses: Tuple[PoseData, ...]
    metrics: MotionMetrics
    frame: int
    timestamp: int

    def __post_init__(self) -> None:
        if not isinstance(self.poses, tuple):
            object.__setattr__(self, "poses", tuple(self.poses))

    def with_frame(self, frame: int, timestamp: Optional[int] = None) -> "AnalysisResult":
        """Return a copy stamped with another frame index (and timestamp)."""
        if timestamp is None:
            return replace(self, frame=frame)
        return replace(self, frame=frame, timestamp=timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "poses": [p.to_dict() for p in self.poses],
            "metrics": self.metrics.to_dict(),
            "frame": self.frame,
            "timestamp": self.timestamp,
        }


__all__ = [
    "RISK_LOW",
    "RISK_MEDIUM",
    "RISK_HIGH",
    "RiskAreas",
    "InjuryRisk",
    "MotionMetrics",
    "AnalysisResult",
]
