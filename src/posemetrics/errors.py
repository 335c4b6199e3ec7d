"""Exceptions raised by the pose metrics engine."""

from typing import Optional


class PoseMetricsError(Exception):
    """Base class for posemetrics errors."""


class NotInitializedError(PoseMetricsError):
    """Raised when a frame is analyzed before ``initialize()``."""

    def __init__(self, message: str = "Pose analyzer not initialized. Call initialize() first."):
        super().__init__(message)


class BackendInitializationError(PoseMetricsError):
    """Raised when the detection backend fails to initialize.

    Attributes:
        original_error: The exception raised by the backend.
    """

    def __init__(self, original_error: Exception):
        self.original_error = original_error
        super().__init__(f"Pose backend failed to initialize: {original_error}")


class FrameAnalysisError(PoseMetricsError):
    """Raised when pose detection fails for a single frame.

    Recoverable: a batch loop should log it and move on to the next frame.

    Attributes:
        frame_index: Caller-supplied index of the failed frame.
        original_error: The underlying exception from the backend.
    """

    def __init__(self, frame_index: int, original_error: Optional[Exception] = None):
        self.frame_index = frame_index
        self.original_error = original_error
        detail = f": {original_error}" if original_error is not None else ""
        super().__init__(f"Pose detection failed for frame {frame_index}{detail}")


class ConcurrentResetError(PoseMetricsError):
    """Raised when ``reset()`` is called while a frame is being analyzed."""

    def __init__(self, message: str = "Cannot reset while a frame analysis is in flight"):
        super().__init__(message)


__all__ = [
    "PoseMetricsError",
    "NotInitializedError",
    "BackendInitializationError",
    "FrameAnalysisError",
    "ConcurrentResetError",
]
