"""Testing utilities.

FakeFrame is a lightweight stand-in for decoded frames, FakeVideoSource
stands in for VideoFileSource, and make_pose builds poses from
``name -> (x, y[, score])`` mappings.

Example:
    >>> from posemetrics.testing import FakeFrame, make_pose
    >>> frame = FakeFrame.create(640, 480)
    >>> pose = make_pose({"left_hip": (100, 300, 0.9), "right_hip": (140, 300, 0.9)})
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from posemetrics.types import Keypoint, PoseData

PointSpec = Union[Tuple[float, float], Tuple[float, float, Optional[float]]]


@dataclass
class FakeFrame:
    """Fake frame with a black BGR image.

    Provides the attributes PoseAnalyzer and the session loop use:
    data, frame_id, t_src_ns.
    """

    data: np.ndarray
    frame_id: int
    t_src_ns: int

    @classmethod
    def create(
        cls,
        width: int = 640,
        height: int = 480,
        frame_id: int = 0,
        t_src_ns: int = 0,
    ) -> "FakeFrame":
        data = np.zeros((height, width, 3), dtype=np.uint8)
        return cls(data=data, frame_id=frame_id, t_src_ns=t_src_ns)

    @classmethod
    def sequence(
        cls,
        count: int,
        width: int = 640,
        height: int = 480,
        interval_ns: int = 33_333_333,
    ) -> List["FakeFrame"]:
        """Create ``count`` frames with incrementing IDs (default ~30fps)."""
        return [
            cls.create(width=width, height=height, frame_id=i, t_src_ns=i * interval_ns)
            for i in range(count)
        ]


class FakeVideoSource:
    """In-memory replacement for VideoFileSource.

    Args:
        duration_sec: Reported video duration.
        fps: Native frame rate.
        width: Frame width.
        height: Frame height.
    """

    def __init__(self, duration_sec: float, fps: float = 30.0, width: int = 64, height: int = 48):
        self.duration_sec = duration_sec
        self.fps = fps
        self.width = width
        self.height = height
        self.sampled_rates: List[float] = []

    def __enter__(self) -> "FakeVideoSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        pass

    def sample(self, fps: float) -> Iterator[FakeFrame]:
        self.sampled_rates.append(fps)
        interval_ns = int(1e9 / fps)
        for i in range(int(self.duration_sec * fps)):
            yield FakeFrame.create(self.width, self.height, frame_id=i, t_src_ns=i * interval_ns)


def make_pose(points: Dict[str, PointSpec], score: Optional[float] = 0.9) -> PoseData:
    """Build a pose from ``name -> (x, y)`` or ``name -> (x, y, score)``."""
    keypoints = []
    for name, spec in points.items():
        kp_score = spec[2] if len(spec) > 2 else None
        keypoints.append(Keypoint(x=float(spec[0]), y=float(spec[1]), score=kp_score, name=name))
    return PoseData(keypoints=tuple(keypoints), score=score)


def shift_pose(pose: PoseData, dx: float, dy: float) -> PoseData:
    """Translate every keypoint of ``pose`` by (dx, dy)."""
    return PoseData(
        keypoints=tuple(
            Keypoint(x=kp.x + dx, y=kp.y + dy, score=kp.score, name=kp.name)
            for kp in pose.keypoints
        ),
        score=pose.score,
    )


class ScriptedPoseBackend:
    """Backend that replays a fixed list of per-frame pose lists.

    Entries may be an exception instance, which is raised for that frame.
    After the script runs out the last entry repeats.
    """

    def __init__(self, script: Sequence[Union[List[PoseData], Exception]]):
        self._script = list(script)
        self._index = 0
        self.initialized = False
        self.cleaned = False
        self.detect_calls = 0

    def initialize(self, device: str = "cpu") -> None:
        self.initialized = True

    def detect(self, image) -> List[PoseData]:
        self.detect_calls += 1
        if not self._script:
            return []
        entry = self._script[min(self._index, len(self._script) - 1)]
        self._index += 1
        if isinstance(entry, Exception):
            raise entry
        return entry

    def cleanup(self) -> None:
        self.cleaned = True


__all__ = [
    "FakeFrame",
    "FakeVideoSource",
    "ScriptedPoseBackend",
    "make_pose",
    "shift_pose",
]
