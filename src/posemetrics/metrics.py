"""Metric calculators for a single pose.

Every calculator is total: when the keypoints it needs are missing it
returns a neutral value (0, or an unpenalized score) instead of raising.
Presence is checked by name only; confidence gating is left to the
visualization helpers.

Only ``SpeedTracker`` keeps state (the previous torso centroid comes from
the caller and the velocity window lives in the tracker). The remaining
calculators look at the current frame alone.
"""

from collections import deque
from typing import Deque, Optional, Tuple

import numpy as np

from posemetrics.output import (
    RISK_HIGH,
    RISK_LOW,
    RISK_MEDIUM,
    InjuryRisk,
    MotionMetrics,
    RiskAreas,
)
from posemetrics.types import TORSO_KEYPOINTS, KeypointMap, PoseData

# Speed: pixels/frame -> m/s-equivalent
SPEED_SCALE = 0.15
SPEED_MAX = 15.0

# Jump height: expected pixel row of the hips when standing
JUMP_BASELINE_Y = 400.0
JUMP_SCALE = 0.1

CADENCE_SCALE = 0.5
CADENCE_MAX = 180.0

AGILITY_MAX = 100.0
AGILITY_TILT_PENALTY = 0.1

# Injury heuristics
KNEE_OFFSET_THRESHOLD = 50.0
KNEE_MISALIGNED_RISK = 30.0
SHOULDER_TILT_THRESHOLD = 30.0
SHOULDER_TILTED_RISK = 40.0
SHOULDER_LEVEL_RISK = 10.0

RISK_MEDIUM_ABOVE = 25.0
RISK_HIGH_ABOVE = 50.0


def torso_center(kpts: KeypointMap) -> Optional[Tuple[float, float]]:
    """Mean position of both hips and both shoulders, or None if any is missing."""
    if not kpts.present(*TORSO_KEYPOINTS):
        return None
    xs = [kpts[n].x for n in TORSO_KEYPOINTS]
    ys = [kpts[n].y for n in TORSO_KEYPOINTS]
    return (sum(xs) / 4, sum(ys) / 4)


class SpeedTracker:
    """Smoothed torso speed over a short window of frame-to-frame velocities.

    Each update with a usable previous pose pushes one displacement vector;
    the reported speed is the norm of the window's mean vector, scaled and
    capped. The window evicts its oldest vector once full.

    Args:
        window: Number of velocity vectors to average (default: 5).
    """

    def __init__(self, window: int = 5):
        self._velocities: Deque[Tuple[float, float]] = deque(maxlen=window)

    @property
    def velocities(self) -> Tuple[Tuple[float, float], ...]:
        return tuple(self._velocities)

    def update(self, current: KeypointMap, previous: Optional[KeypointMap]) -> float:
        """Record the displacement between two frames and return the smoothed speed.

        Returns 0 without touching the window when there is no previous
        pose or either frame lacks a torso keypoint.
        """
        center = torso_center(current)
        if center is None or previous is None:
            return 0.0
        prev_center = torso_center(previous)
        if prev_center is None:
            return 0.0

        self._velocities.append((center[0] - prev_center[0], center[1] - prev_center[1]))

        avg = np.mean(np.asarray(list(self._velocities), dtype=np.float64), axis=0)
        speed = float(np.hypot(avg[0], avg[1]))
        return min(speed * SPEED_SCALE, SPEED_MAX)

    def reset(self) -> None:
        self._velocities.clear()


def jump_height(kpts: KeypointMap) -> float:
    """Hip elevation above the fixed standing baseline, in approximate cm."""
    if not kpts.present("left_hip", "right_hip"):
        return 0.0
    hip_y = (kpts["left_hip"].y + kpts["right_hip"].y) / 2
    return max(0.0, JUMP_BASELINE_Y - hip_y) * JUMP_SCALE


def cadence(kpts: KeypointMap) -> float:
    """Steps-per-minute proxy from the vertical gap between the ankles.

    Single-frame: no step cycle is tracked over time.
    """
    if not kpts.present("left_ankle", "right_ankle"):
        return 0.0
    gap = abs(kpts["left_ankle"].y - kpts["right_ankle"].y)
    return min(gap * CADENCE_SCALE, CADENCE_MAX)


def agility_score(kpts: KeypointMap) -> float:
    """100 minus a penalty for shoulder and hip tilt, clamped to [0, 100]."""
    score = AGILITY_MAX
    for left, right in (("left_shoulder", "right_shoulder"), ("left_hip", "right_hip")):
        if kpts.present(left, right):
            score -= abs(kpts[left].y - kpts[right].y) * AGILITY_TILT_PENALTY
    return max(0.0, min(AGILITY_MAX, score))


def risk_level(value: float) -> str:
    """Map a risk percentage (or mean of percentages) to low/medium/high."""
    if value > RISK_HIGH_ABOVE:
        return RISK_HIGH
    if value > RISK_MEDIUM_ABOVE:
        return RISK_MEDIUM
    return RISK_LOW


def assess_injury_risk(kpts: KeypointMap) -> InjuryRisk:
    """Rule-based injury risk from joint alignment.

    Knees score 30 per side whose knee sits more than 50 px sideways from
    its ankle. Shoulders score 40 when tilted by more than 30 px, else 10,
    and stay 0 if a shoulder is missing. Ankles and back have no rule and
    are always 0.
    """
    knees = 0.0
    for knee, ankle in (("left_knee", "left_ankle"), ("right_knee", "right_ankle")):
        if kpts.present(knee, ankle):
            if abs(kpts[knee].x - kpts[ankle].x) > KNEE_OFFSET_THRESHOLD:
                knees += KNEE_MISALIGNED_RISK

    shoulders = 0.0
    if kpts.present("left_shoulder", "right_shoulder"):
        tilt = abs(kpts["left_shoulder"].y - kpts["right_shoulder"].y)
        shoulders = SHOULDER_TILTED_RISK if tilt > SHOULDER_TILT_THRESHOLD else SHOULDER_LEVEL_RISK

    areas = RiskAreas(knees=knees, ankles=0.0, shoulders=shoulders, back=0.0)
    return InjuryRisk(overall=risk_level(areas.mean()), areas=areas)


def compute_metrics(
    pose: Optional[PoseData],
    previous: Optional[PoseData],
    speed_tracker: SpeedTracker,
) -> MotionMetrics:
    """Compute every metric for ``pose``.

    Args:
        pose: First pose of the current frame, or None when nothing was detected.
        previous: First pose of the previous frame, if any.
        speed_tracker: Velocity window, updated in place.

    Returns:
        MotionMetrics; all zeros with low risk when ``pose`` is None.
    """
    if pose is None:
        return MotionMetrics()

    kpts = pose.keypoint_map()
    prev_kpts = previous.keypoint_map() if previous is not None else None
    return MotionMetrics(
        speed=speed_tracker.update(kpts, prev_kpts),
        jump_height=jump_height(kpts),
        cadence=cadence(kpts),
        agility_score=agility_score(kpts),
        injury_risk=assess_injury_risk(kpts),
    )


__all__ = [
    "SpeedTracker",
    "torso_center",
    "jump_height",
    "cadence",
    "agility_score",
    "risk_level",
    "assess_injury_risk",
    "compute_metrics",
]
