"""Pose domain types: named keypoints, poses and frames."""

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Sequence, Tuple

import numpy as np


# COCO keypoint names in order
COCO_KEYPOINT_NAMES = [
    "nose",
    "left_eye",
    "right_eye",
    "left_ear",
    "right_ear",
    "left_shoulder",
    "right_shoulder",
    "left_elbow",
    "right_elbow",
    "left_wrist",
    "right_wrist",
    "left_hip",
    "right_hip",
    "left_knee",
    "right_knee",
    "left_ankle",
    "right_ankle",
]

# Torso landmarks used for the body centroid
TORSO_KEYPOINTS = ("left_hip", "right_hip", "left_shoulder", "right_shoulder")


@dataclass(frozen=True)
class Keypoint:
    """A named 2-D landmark in pixel coordinates.

    Attributes:
        x: Horizontal pixel position.
        y: Vertical pixel position (0 at the top of the image).
        score: Detection confidence in [0, 1], or None when unscored.
        name: Landmark name (see COCO_KEYPOINT_NAMES).
    """

    x: float
    y: float
    score: Optional[float] = None
    name: Optional[str] = None

    def is_confident(self, threshold: float) -> bool:
        """True if the keypoint carries a score above ``threshold``."""
        return self.score is not None and self.score > threshold

    def to_dict(self) -> Dict[str, object]:
        d: Dict[str, object] = {"x": self.x, "y": self.y}
        if self.score is not None:
            d["score"] = self.score
        if self.name is not None:
            d["name"] = self.name
        return d


class KeypointMap:
    """Lookup of a pose's keypoints by landmark name.

    The first keypoint carrying a given name wins, matching a linear
    search over the pose's keypoint list. Unnamed keypoints are not
    reachable by name.

    Example:
        >>> kpts = pose.keypoint_map()
        >>> if kpts.present("left_hip", "right_hip"):
        ...     hip_y = (kpts["left_hip"].y + kpts["right_hip"].y) / 2
    """

    def __init__(self, keypoints: Sequence[Keypoint]):
        self._by_name: Dict[str, Keypoint] = {}
        for kp in keypoints:
            if kp.name is not None and kp.name not in self._by_name:
                self._by_name[kp.name] = kp

    def get(self, name: str) -> Optional[Keypoint]:
        return self._by_name.get(name)

    def __getitem__(self, name: str) -> Keypoint:
        return self._by_name[name]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_name)

    def present(self, *names: str) -> bool:
        """True if every named keypoint exists, regardless of score."""
        return all(n in self._by_name for n in names)

    def confident(self, name: str, threshold: float) -> Optional[Keypoint]:
        """Return the keypoint if it exists with score > threshold."""
        kp = self._by_name.get(name)
        if kp is None or not kp.is_confident(threshold):
            return None
        return kp


@dataclass(frozen=True)
class PoseData:
    """One detected subject.

    Attributes:
        keypoints: Keypoints in detector order.
        score: Overall pose confidence, or None when unscored.
    """

    keypoints: Tuple[Keypoint, ...] = ()
    score: Optional[float] = None

    def __post_init__(self) -> None:
        if not isinstance(self.keypoints, tuple):
            object.__setattr__(self, "keypoints", tuple(self.keypoints))

    def keypoint_map(self) -> KeypointMap:
        return KeypointMap(self.keypoints)

    @classmethod
    def from_array(
        cls,
        keypoints: np.ndarray,
        names: Optional[Sequence[str]] = None,
        score: Optional[float] = None,
    ) -> "PoseData":
        """Build a pose from an (N, 3) array of (x, y, confidence).

        Args:
            keypoints: Array of shape (N, 3) or (N, 2). A 2-column array
                produces unscored keypoints.
            names: Landmark names in row order (default: COCO order).
            score: Overall pose confidence.
        """
        arr = np.asarray(keypoints, dtype=np.float64)
        if arr.ndim != 2 or arr.shape[1] not in (2, 3):
            raise ValueError(f"Expected (N, 2) or (N, 3) keypoints, got {arr.shape}")
        if names is None:
            names = COCO_KEYPOINT_NAMES
        if len(names) < arr.shape[0]:
            raise ValueError(
                f"{arr.shape[0]} keypoints but only {len(names)} names"
            )

        kps = []
        for row, name in zip(arr, names):
            conf = float(row[2]) if arr.shape[1] == 3 else None
            kps.append(Keypoint(x=float(row[0]), y=float(row[1]), score=conf, name=name))
        return cls(keypoints=tuple(kps), score=score)

    def to_dict(self) -> Dict[str, object]:
        d: Dict[str, object] = {"keypoints": [kp.to_dict() for kp in self.keypoints]}
        if self.score is not None:
            d["score"] = self.score
        return d


@dataclass
class Frame:
    """A decoded video frame.

    Attributes:
        data: BGR image array (H, W, 3).
        frame_id: Source frame index.
        t_src_ns: Timestamp on the source timeline in nanoseconds.
    """

    data: np.ndarray
    frame_id: int = 0
    t_src_ns: int = 0

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @classmethod
    def from_array(cls, data: np.ndarray, frame_id: int = 0, t_src_ns: int = 0) -> "Frame":
        return cls(data=data, frame_id=frame_id, t_src_ns=t_src_ns)


__all__ = [
    "COCO_KEYPOINT_NAMES",
    "TORSO_KEYPOINTS",
    "Keypoint",
    "KeypointMap",
    "PoseData",
    "Frame",
]
