"""OpenCV overlays for analysis results.

All drawing happens on a copy of the input frame.
"""

from typing import Any, Optional

import cv2
import numpy as np

from posemetrics.output import AnalysisResult
from posemetrics.skeleton import MotionTrail, visible_connections, visible_keypoints

FONT = cv2.FONT_HERSHEY_SIMPLEX

# BGR colors cycled per pose index
POSE_COLORS = [
    (136, 255, 0),
    (107, 107, 255),
    (255, 123, 0),
    (61, 217, 255),
]

RISK_COLORS = {
    "low": (0, 200, 0),
    "medium": (0, 215, 255),
    "high": (0, 0, 255),
}


class SkeletonOverlay:
    """Draws every pose's skeleton, a confidence label and a motion trail.

    Args:
        point_radius: Joint radius in pixels.
        line_thickness: Bone thickness in pixels.
        show_trail: Draw the torso motion trail of the first pose.
        fps: Playback rate of the results. The trail is aged by playback
            time, ``result.frame / fps``.
    """

    def __init__(
        self,
        point_radius: int = 6,
        line_thickness: int = 3,
        show_trail: bool = True,
        fps: float = 30.0,
    ):
        if fps <= 0:
            raise ValueError(f"fps must be > 0, got {fps}")
        self._fps = fps
        self._point_radius = point_radius
        self._line_thickness = line_thickness
        self._trail: Optional[MotionTrail] = MotionTrail() if show_trail else None

    def draw(self, frame: np.ndarray, result: AnalysisResult) -> np.ndarray:
        output = frame.copy()

        if self._trail is not None and result.poses:
            self._trail.update(result.poses[0], self.playback_time_ms(result))
            points = self._trail.points()
            if len(points) > 1:
                pts = np.array(points, dtype=np.int32).reshape(-1, 1, 2)
                cv2.polylines(output, [pts], False, POSE_COLORS[0], 2)

        for index, pose in enumerate(result.poses):
            color = POSE_COLORS[index % len(POSE_COLORS)]

            for a, b in visible_connections(pose):
                cv2.line(
                    output,
                    (int(a.x), int(a.y)),
                    (int(b.x), int(b.y)),
                    color,
                    self._line_thickness,
                    cv2.LINE_AA,
                )

            for kp in visible_keypoints(pose):
                center = (int(kp.x), int(kp.y))
                cv2.circle(output, center, self._point_radius, color, -1)
                cv2.circle(output, center, self._point_radius, (255, 255, 255), 2)

            if pose.score:
                text = f"Pose {index + 1}: {pose.score * 100:.1f}%"
                cv2.putText(output, text, (10, 30 + index * 22), FONT, 0.5, color, 1)

        return output

    def reset(self) -> None:
        if self._trail is not None:
            self._trail.clear()

    @property
    def trail(self) -> Optional[MotionTrail]:
        return self._trail

    def playback_time_ms(self, result: AnalysisResult) -> int:
        return int(result.frame * 1000 / self._fps)


class MetricsOverlay:
    """Renders the current metrics as text in the bottom-left corner.

    Args:
        font_scale: OpenCV font scale.
        color: BGR text color.
    """

    def __init__(self, font_scale: float = 0.5, color: tuple = (255, 255, 255)):
        self._font_scale = font_scale
        self._color = color

    @property
    def line_height(self) -> int:
        return int(20 * self._font_scale / 0.45)

    def draw(self, frame: np.ndarray, result: AnalysisResult) -> np.ndarray:
        output = frame.copy()
        m = result.metrics
        lines = [
            (f"speed {m.speed:.1f} m/s", self._color),
            (f"jump {m.jump_height:.1f} cm", self._color),
            (f"cadence {m.cadence:.0f} spm", self._color),
            (f"agility {m.agility_score:.1f}/100", self._color),
            (f"risk {m.injury_risk.overall.upper()}", RISK_COLORS[m.injury_risk.overall]),
        ]
        y = output.shape[0] - 10 - self.line_height * (len(lines) - 1)
        for text, color in lines:
            cv2.putText(output, text, (10, y), FONT, self._font_scale, color, 1)
            y += self.line_height
        return output


class VideoSaver:
    """Write annotated frames to a video file.

    Args:
        path: Output file path (e.g., "output.mp4").
        fps: Output video FPS.
        width: Frame width.
        height: Frame height.
        codec: FourCC codec string (default "mp4v").
    """

    def __init__(self, path: str, fps: float, width: int, height: int, codec: str = "mp4v"):
        self._path = path
        self._skeleton = SkeletonOverlay(fps=fps)
        self._metrics = MetricsOverlay()
        fourcc = cv2.VideoWriter_fourcc(*codec)
        self._writer = cv2.VideoWriter(path, fourcc, fps, (width, height))
        if not self._writer.isOpened():
            raise IOError(f"Failed to open video writer: {path}")

    @property
    def skeleton(self) -> SkeletonOverlay:
        return self._skeleton

    def update(self, frame: Any, result: AnalysisResult) -> None:
        """Draw overlays for ``result`` and write the frame."""
        img = frame if isinstance(frame, np.ndarray) else frame.data
        display = self._skeleton.draw(img, result)
        display = self._metrics.draw(display, result)
        self._writer.write(display)

    def close(self) -> None:
        self._writer.release()


__all__ = ["SkeletonOverlay", "MetricsOverlay", "VideoSaver", "POSE_COLORS"]
