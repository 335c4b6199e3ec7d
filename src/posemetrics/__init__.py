from posemetrics.analyzer import PoseAnalyzer
from posemetrics.backends import PoseBackend, SyntheticPoseBackend
from posemetrics.config import AnalyzerConfig, SessionConfig
from posemetrics.errors import (
    BackendInitializationError,
    ConcurrentResetError,
    FrameAnalysisError,
    NotInitializedError,
    PoseMetricsError,
)
from posemetrics.gapfill import fill_frame_gaps, result_at_time
from posemetrics.output import AnalysisResult, InjuryRisk, MotionMetrics, RiskAreas
from posemetrics.session import AnalysisSession, SessionResult
from posemetrics.source import VideoFileSource
from posemetrics.summary import MetricsSummary, summarize
from posemetrics.types import COCO_KEYPOINT_NAMES, Frame, Keypoint, KeypointMap, PoseData

__all__ = [
    "PoseAnalyzer",
    "PoseBackend",
    "SyntheticPoseBackend",
    "AnalyzerConfig",
    "SessionConfig",
    "PoseMetricsError",
    "NotInitializedError",
    "BackendInitializationError",
    "FrameAnalysisError",
    "ConcurrentResetError",
    "fill_frame_gaps",
    "result_at_time",
    "AnalysisResult",
    "InjuryRisk",
    "MotionMetrics",
    "RiskAreas",
    "AnalysisSession",
    "SessionResult",
    "VideoFileSource",
    "MetricsSummary",
    "summarize",
    "COCO_KEYPOINT_NAMES",
    "Frame",
    "Keypoint",
    "KeypointMap",
    "PoseData",
]
