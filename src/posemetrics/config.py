"""Configuration dataclasses for the analyzer and the session loop.

Example:
    >>> from posemetrics import PoseAnalyzer, AnalysisSession
    >>> from posemetrics.config import AnalyzerConfig, SessionConfig
    >>>
    >>> analyzer = PoseAnalyzer(config=AnalyzerConfig(history_size=60))
    >>> session = AnalysisSession(
    ...     analyzer,
    ...     SessionConfig(playback_fps=30, analysis_fps=10),
    ... )
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class AnalyzerConfig:
    """Rolling-window sizes for PoseAnalyzer.

    Attributes:
        history_size: Number of recent results kept for get_frame_history().
        velocity_window: Number of velocity vectors averaged for speed.
        device: Device string handed to the backend's initialize().
    """

    history_size: int = 30
    velocity_window: int = 5
    device: str = "cpu"

    def __post_init__(self) -> None:
        if self.history_size < 1:
            raise ValueError(f"history_size must be >= 1, got {self.history_size}")
        if self.velocity_window < 1:
            raise ValueError(f"velocity_window must be >= 1, got {self.velocity_window}")


@dataclass
class SessionConfig:
    """Sampling rates for AnalysisSession.

    Attributes:
        playback_fps: Frame rate of the dense, display-ready timeline.
        analysis_fps: Upper bound on the rate at which file frames are analyzed.
            The effective rate is min(playback_fps, analysis_fps).
        max_frames: Stop after this many analyzed frames (None = no limit).
    """

    playback_fps: float = 30.0
    analysis_fps: float = 15.0
    max_frames: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("playback_fps", "analysis_fps"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be > 0, got {value}")

    @property
    def effective_analysis_fps(self) -> float:
        """Rate at which video frames are sampled for analysis."""
        return min(self.playback_fps, self.analysis_fps)


__all__ = ["AnalyzerConfig", "SessionConfig"]
