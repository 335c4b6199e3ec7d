"""Synthetic pose backend.

Stands in for a real detector: every frame yields one upright figure
whose vertical position oscillates slowly with wall-clock time. The
image content is ignored.
"""

import logging
import math
import time
from typing import Callable, List, Optional

import numpy as np

from posemetrics.types import Keypoint, PoseData

logger = logging.getLogger(__name__)

# (name, dx, dy, score) relative to the figure's base point
_FIGURE = [
    ("nose", 0, -100, 0.9),
    ("left_shoulder", -30, -50, 0.8),
    ("right_shoulder", 30, -50, 0.8),
    ("left_hip", -40, 20, 0.7),
    ("right_hip", 40, 20, 0.7),
    ("left_knee", -35, 100, 0.6),
    ("right_knee", 35, 100, 0.6),
    ("left_ankle", -30, 180, 0.5),
    ("right_ankle", 30, 180, 0.5),
]


class SyntheticPoseBackend:
    """Pose backend that fabricates a single moving figure.

    Args:
        base_x: Horizontal pixel position of the figure.
        base_y: Resting vertical pixel position of the figure.
        amplitude: Vertical oscillation amplitude in pixels.
        pose_score: Overall confidence reported for the pose.
        clock: Returns the current time in seconds (default: time.time).

    Example:
        >>> backend = SyntheticPoseBackend(clock=lambda: 0.0)
        >>> backend.initialize()
        >>> poses = backend.detect(image)
        >>> poses[0].keypoint_map()["nose"].y
        100.0
    """

    def __init__(
        self,
        base_x: float = 300.0,
        base_y: float = 200.0,
        amplitude: float = 20.0,
        pose_score: float = 0.85,
        clock: Optional[Callable[[], float]] = None,
    ):
        self._base_x = base_x
        self._base_y = base_y
        self._amplitude = amplitude
        self._pose_score = pose_score
        self._clock = clock or time.time
        self._initialized = False

    def initialize(self, device: str = "cpu") -> None:
        if self._initialized:
            return
        self._initialized = True
        logger.info("SyntheticPoseBackend initialized (device=%s)", device)

    def detect(self, image: np.ndarray) -> List[PoseData]:
        base_y = self._base_y + math.sin(self._clock()) * self._amplitude
        keypoints = tuple(
            Keypoint(x=self._base_x + dx, y=base_y + dy, score=score, name=name)
            for name, dx, dy, score in _FIGURE
        )
        return [PoseData(keypoints=keypoints, score=self._pose_score)]

    def cleanup(self) -> None:
        self._initialized = False


__all__ = ["SyntheticPoseBackend"]
