"""Skeleton topology and motion-trail bookkeeping for drawing poses."""

from collections import deque
from typing import Deque, List, Optional, Tuple

from posemetrics.types import TORSO_KEYPOINTS, Keypoint, PoseData

# Minimum keypoint score for drawing joints and bones
DRAW_MIN_SCORE = 0.3
# Minimum keypoint score for contributing to the motion trail
TRAIL_MIN_SCORE = 0.4

POSE_CONNECTIONS: List[Tuple[str, str]] = [
    # Face
    ("nose", "left_eye"),
    ("nose", "right_eye"),
    ("left_eye", "left_ear"),
    ("right_eye", "right_ear"),
    # Upper body
    ("left_shoulder", "right_shoulder"),
    ("left_shoulder", "left_elbow"),
    ("right_shoulder", "right_elbow"),
    ("left_elbow", "left_wrist"),
    ("right_elbow", "right_wrist"),
    ("left_shoulder", "left_hip"),
    ("right_shoulder", "right_hip"),
    ("left_hip", "right_hip"),
    # Lower body
    ("left_hip", "left_knee"),
    ("right_hip", "right_knee"),
    ("left_knee", "left_ankle"),
    ("right_knee", "right_ankle"),
]


def visible_connections(
    pose: PoseData, min_score: float = DRAW_MIN_SCORE
) -> List[Tuple[Keypoint, Keypoint]]:
    """Bones whose both endpoints exist with score > ``min_score``."""
    kpts = pose.keypoint_map()
    bones = []
    for start, end in POSE_CONNECTIONS:
        a = kpts.confident(start, min_score)
        b = kpts.confident(end, min_score)
        if a is not None and b is not None:
            bones.append((a, b))
    return bones


def visible_keypoints(pose: PoseData, min_score: float = DRAW_MIN_SCORE) -> List[Keypoint]:
    return [kp for kp in pose.keypoints if kp.is_confident(min_score)]


def body_center(pose: PoseData, min_score: float = TRAIL_MIN_SCORE) -> Optional[Tuple[float, float]]:
    """Mean of the confident torso keypoints, or None if there are none."""
    kpts = pose.keypoint_map()
    points = [kpts.confident(n, min_score) for n in TORSO_KEYPOINTS]
    points = [p for p in points if p is not None]
    if not points:
        return None
    return (
        sum(p.x for p in points) / len(points),
        sum(p.y for p in points) / len(points),
    )


class MotionTrail:
    """Recent confident torso keypoint positions, bounded by age.

    Args:
        max_age_ms: Points older than this (relative to the newest
            update) are dropped.
        min_score: Minimum keypoint score for a point to be recorded.
    """

    def __init__(self, max_age_ms: int = 2000, min_score: float = TRAIL_MIN_SCORE):
        self._max_age_ms = max_age_ms
        self._min_score = min_score
        self._points: Deque[Tuple[float, float, int]] = deque()

    def update(self, pose: PoseData, timestamp_ms: int) -> None:
        kpts = pose.keypoint_map()
        for name in TORSO_KEYPOINTS:
            kp = kpts.confident(name, self._min_score)
            if kp is not None:
                self._points.append((kp.x, kp.y, timestamp_ms))
        while self._points and timestamp_ms - self._points[0][2] >= self._max_age_ms:
            self._points.popleft()

    def points(self) -> List[Tuple[float, float]]:
        return [(x, y) for x, y, _ in self._points]

    def __len__(self) -> int:
        return len(self._points)

    def clear(self) -> None:
        self._points.clear()


__all__ = [
    "DRAW_MIN_SCORE",
    "TRAIL_MIN_SCORE",
    "POSE_CONNECTIONS",
    "visible_connections",
    "visible_keypoints",
    "body_center",
    "MotionTrail",
]
