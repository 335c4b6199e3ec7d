"""AnalysisSession - batch and streaming loops around a PoseAnalyzer.

A session owns the frame loop: it decides which frames are analyzed,
skips frames whose detection fails, and turns the sparse results of a
video pass into a dense playback timeline.

Example:
    >>> from posemetrics import PoseAnalyzer, AnalysisSession, VideoFileSource
    >>> session = AnalysisSession(PoseAnalyzer())
    >>> with VideoFileSource("run.mp4") as source:
    ...     result = session.analyze_video(source)
    >>> print(f"{result.sparse_count} analyzed, {len(result.results)} on timeline")
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional

from posemetrics.analyzer import PoseAnalyzer
from posemetrics.config import SessionConfig
from posemetrics.errors import FrameAnalysisError
from posemetrics.gapfill import fill_frame_gaps, playback_frame
from posemetrics.output import AnalysisResult
from posemetrics.summary import MetricsSummary, summarize

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]
ResultCallback = Callable[[AnalysisResult], None]


@dataclass
class SessionResult:
    """Outcome of one analysis pass.

    Attributes:
        results: Display-ready results (dense after a video pass).
        sparse_count: Number of frames actually analyzed.
        failed_frames: Analysis indices whose detection failed.
        total_frames: Length of the playback timeline (0 for streams).
    """

    results: List[AnalysisResult] = field(default_factory=list)
    sparse_count: int = 0
    failed_frames: List[int] = field(default_factory=list)
    total_frames: int = 0

    def summary(self) -> Optional[MetricsSummary]:
        return summarize(self.results)


class AnalysisSession:
    """Runs a PoseAnalyzer over a video file or a live frame stream.

    Args:
        analyzer: Engine to drive. Initialized on first use.
        config: Sampling rates and frame limit.
        on_progress: Called with the completed fraction after each frame.
        on_result: Called with every successfully analyzed result.
    """

    def __init__(
        self,
        analyzer: PoseAnalyzer,
        config: Optional[SessionConfig] = None,
        *,
        on_progress: Optional[ProgressCallback] = None,
        on_result: Optional[ResultCallback] = None,
    ):
        self._analyzer = analyzer
        self._config = config or SessionConfig()
        self._on_progress = on_progress
        self._on_result = on_result
        self._stop_requested = False

    @property
    def analyzer(self) -> PoseAnalyzer:
        return self._analyzer

    @property
    def config(self) -> SessionConfig:
        return self._config

    def stop(self) -> None:
        """Ask a running loop to stop before its next frame."""
        self._stop_requested = True

    def analyze_video(self, source: Any) -> SessionResult:
        """Analyze a video and return one result per playback frame.

        The source must provide ``duration_sec`` and ``sample(fps)``
        (see VideoFileSource). Frames are sampled at the effective
        analysis rate; the i-th sample is stamped with playback frame
        ``floor(i / analysis_fps * playback_fps)`` and the sparse results
        are gap-filled to ``floor(duration * playback_fps)`` frames.
        Sampling stops once ``max_frames`` frames have been analyzed
        successfully; failed frames do not count toward the limit.
        """
        self._begin()
        analysis_fps = self._config.effective_analysis_fps
        playback_fps = self._config.playback_fps
        expected = int(math.floor(source.duration_sec * analysis_fps))
        max_frames = self._config.max_frames
        total_frames = int(math.floor(source.duration_sec * playback_fps))

        result = SessionResult(total_frames=total_frames)
        sparse: List[AnalysisResult] = []

        for i, frame in enumerate(source.sample(analysis_fps)):
            if i >= expected or self._stop_requested:
                break
            analyzed = self._analyze_one(frame, i, result)
            if analyzed is not None:
                sparse.append(analyzed.with_frame(playback_frame(i, analysis_fps, playback_fps)))
            if max_frames is not None and len(sparse) >= max_frames:
                self._report_progress(1, 1)
                break
            self._report_progress(i + 1, expected)

        result.sparse_count = len(sparse)
        result.results = fill_frame_gaps(sparse, total_frames)
        logger.info(
            "Analyzed %d frames (%d failed), %d on timeline",
            result.sparse_count, len(result.failed_frames), len(result.results),
        )
        return result

    def analyze_stream(self, frames: Iterable[Any]) -> SessionResult:
        """Analyze frames as they arrive, numbering them 0, 1, 2, ...

        Runs until the iterable is exhausted, ``max_frames`` frames have
        been analyzed successfully, or ``stop()`` is called. No gap-filling is applied.
        """
        self._begin()
        max_frames = self._config.max_frames
        result = SessionResult()

        for i, frame in enumerate(frames):
            if self._stop_requested:
                break
            analyzed = self._analyze_one(frame, i, result)
            if analyzed is not None:
                result.results.append(analyzed)
            if max_frames is not None:
                self._report_progress(len(result.results), max_frames)
                if len(result.results) >= max_frames:
                    break

        result.sparse_count = len(result.results)
        return result

    def _begin(self) -> None:
        self._stop_requested = False
        self._analyzer.initialize()
        self._analyzer.reset()

    def _analyze_one(
        self, frame: Any, index: int, result: SessionResult
    ) -> Optional[AnalysisResult]:
        try:
            analyzed = self._analyzer.analyze_frame(frame, index)
        except FrameAnalysisError as e:
            logger.warning("Frame analysis error: %s", e)
            result.failed_frames.append(index)
            return None
        if self._on_result:
            self._on_result(analyzed)
        return analyzed

    def _report_progress(self, done: int, total: int) -> None:
        if self._on_progress and total > 0:
            self._on_progress(min(1.0, done / total))


__all__ = ["AnalysisSession", "SessionResult"]
