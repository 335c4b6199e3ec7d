"""PoseAnalyzer: per-frame motion metrics with rolling state."""

from collections import deque
import inspect
import logging
import time
from typing import Any, Callable, Deque, List, Optional, Sequence, Tuple

from posemetrics.backends.base import PoseBackend
from posemetrics.config import AnalyzerConfig
from posemetrics.errors import (
    BackendInitializationError,
    ConcurrentResetError,
    FrameAnalysisError,
    NotInitializedError,
)
from posemetrics.metrics import SpeedTracker, compute_metrics
from posemetrics.output import AnalysisResult
from posemetrics.types import PoseData

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class PoseAnalyzer:
    """Derives speed, jump height, cadence, agility and injury risk from poses.

    Frames must be fed one at a time, in order. The analyzer keeps three
    pieces of state between calls, all cleared by ``reset()``:

    - the previous frame's poses (for frame-to-frame displacement)
    - the last ``history_size`` results (see ``get_frame_history()``)
    - the last ``velocity_window`` displacement vectors (speed smoothing)

    Only the first pose of a frame is measured.

    Args:
        pose_backend: Detection backend (default: SyntheticPoseBackend).
        config: Rolling-window sizes and backend device.
        clock: Returns the capture timestamp in epoch milliseconds.

    Example:
        >>> analyzer = PoseAnalyzer()
        >>> analyzer.initialize()
        >>> result = analyzer.analyze_frame(frame, frame_index=0)
        >>> result.metrics.jump_height
    """

    def __init__(
        self,
        pose_backend: Optional[PoseBackend] = None,
        config: Optional[AnalyzerConfig] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self._pose_backend = pose_backend
        self._config = config or AnalyzerConfig()
        self._clock = clock or _now_ms
        self._initialized = False
        self._in_flight = False

        self._previous_poses: Tuple[PoseData, ...] = ()
        self._history: Deque[AnalysisResult] = deque(maxlen=self._config.history_size)
        self._speed = SpeedTracker(window=self._config.velocity_window)

    @property
    def name(self) -> str:
        return "pose_metrics"

    @property
    def config(self) -> AnalyzerConfig:
        return self._config

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def previous_poses(self) -> Tuple[PoseData, ...]:
        return self._previous_poses

    @property
    def velocity_history(self) -> Tuple[Tuple[float, float], ...]:
        return self._speed.velocities

    def initialize(self) -> None:
        """Initialize the detection backend. Safe to call more than once."""
        if self._initialized:
            return

        if self._pose_backend is None:
            from posemetrics.backends.synthetic import SyntheticPoseBackend

            self._pose_backend = SyntheticPoseBackend()

        try:
            self._pose_backend.initialize(self._config.device)
        except Exception as e:
            logger.error("Failed to initialize pose backend: %s", e)
            raise BackendInitializationError(e) from e

        self._initialized = True
        logger.info("PoseAnalyzer initialized")

    def cleanup(self) -> None:
        """Release backend resources and clear rolling state."""
        if self._pose_backend is not None:
            self._pose_backend.cleanup()
        self.reset()
        self._initialized = False
        logger.info("PoseAnalyzer cleaned up")

    def __enter__(self) -> "PoseAnalyzer":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    def analyze_frame(self, frame: Any, frame_index: int = 0) -> AnalysisResult:
        """Analyze one frame.

        Args:
            frame: Image array or Frame-like object with a ``data`` attribute.
            frame_index: Caller-assigned frame number stored on the result.

        Returns:
            AnalysisResult for this frame, also appended to the history.

        Raises:
            NotInitializedError: initialize() has not been called.
            FrameAnalysisError: The backend failed on this frame. Rolling
                state is left untouched.
        """
        self._check_initialized()
        self._in_flight = True
        try:
            try:
                poses = self._pose_backend.detect(_image_of(frame))
            except Exception as e:
                raise FrameAnalysisError(frame_index, e) from e
            if inspect.isawaitable(poses):
                _discard(poses)
                raise TypeError(
                    "Pose backend returned an awaitable; use analyze_frame_async()"
                )
            return self._record(poses, frame_index)
        finally:
            self._in_flight = False

    async def analyze_frame_async(self, frame: Any, frame_index: int = 0) -> AnalysisResult:
        """Analyze one frame with a backend whose ``detect`` may be async.

        Calls must still be sequential; ``reset()`` raises while one is
        suspended.
        """
        self._check_initialized()
        self._in_flight = True
        try:
            try:
                poses = self._pose_backend.detect(_image_of(frame))
                if inspect.isawaitable(poses):
                    poses = await poses
            except Exception as e:
                raise FrameAnalysisError(frame_index, e) from e
            return self._record(poses, frame_index)
        finally:
            self._in_flight = False

    def reset(self) -> None:
        """Clear previous poses, frame history and velocity window.

        Raises:
            ConcurrentResetError: A frame analysis is in flight.
        """
        if self._in_flight:
            raise ConcurrentResetError()
        self._previous_poses = ()
        self._history.clear()
        self._speed.reset()

    def get_frame_history(self) -> List[AnalysisResult]:
        """Snapshot of the most recent results, oldest first."""
        return list(self._history)

    def _check_initialized(self) -> None:
        if not self._initialized or self._pose_backend is None:
            raise NotInitializedError()

    def _record(self, poses: Optional[Sequence[PoseData]], frame_index: int) -> AnalysisResult:
        poses = tuple(poses or ())
        current = poses[0] if poses else None
        previous = self._previous_poses[0] if self._previous_poses else None

        metrics = compute_metrics(current, previous, self._speed)
        result = AnalysisResult(
            poses=poses,
            metrics=metrics,
            frame=frame_index,
            timestamp=self._clock(),
        )

        self._history.append(result)
        self._previous_poses = poses
        logger.debug(
            "frame=%d poses=%d speed=%.2f risk=%s",
            frame_index, len(poses), metrics.speed, metrics.injury_risk.overall,
        )
        return result


def _image_of(frame: Any) -> Any:
    """Unwrap Frame-like objects to their image array."""
    return getattr(frame, "data", frame)


def _discard(awaitable: Any) -> None:
    """Close an un-awaited coroutine so it does not warn on collection."""
    close = getattr(awaitable, "close", None)
    if close is not None:
        close()


__all__ = ["PoseAnalyzer"]
