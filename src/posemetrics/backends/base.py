"""Backend protocol definitions for pose detection."""

from typing import Awaitable, List, Protocol, Union

import numpy as np

from posemetrics.types import PoseData


class PoseBackend(Protocol):
    """Protocol for pose detection backends.

    Implementations turn an image into zero or more poses with named,
    scored keypoints. ``detect`` may return the list directly or an
    awaitable resolving to it; only ``PoseAnalyzer.analyze_frame_async``
    accepts the latter.
    """

    def initialize(self, device: str = "cpu") -> None:
        """Initialize the backend and load models."""
        ...

    def detect(self, image: np.ndarray) -> Union[List[PoseData], Awaitable[List[PoseData]]]:
        """Detect poses in an image."""
        ...

    def cleanup(self) -> None:
        """Release resources and unload models."""
        ...


__all__ = ["PoseBackend"]
