"""Video file source backed by OpenCV."""

import logging
from typing import Iterator, Optional

import cv2

from posemetrics.types import Frame

logger = logging.getLogger(__name__)

# Tolerance for floating-point PTS imprecision when resampling. Without it
# int(ms * 1e6) truncation can land just below a target timestamp and
# skip a boundary frame.
_PTS_TOLERANCE_NS = 1_000_000  # 1 ms

NS_PER_SECOND = 1_000_000_000


class VideoFileSource:
    """Reads frames from a video file.

    Args:
        path: Path to the video file.

    Example:
        >>> with VideoFileSource("run.mp4") as source:
        ...     for frame in source.sample(fps=15):
        ...         analyzer.analyze_frame(frame, frame.frame_id)
    """

    def __init__(self, path: str):
        self._path = str(path)
        self._cap: Optional[cv2.VideoCapture] = None
        self._fps = 0.0
        self._frame_count = 0
        self._width = 0
        self._height = 0

    @property
    def path(self) -> str:
        return self._path

    @property
    def fps(self) -> float:
        return self._fps

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def duration_sec(self) -> float:
        if self._fps <= 0:
            return 0.0
        return self._frame_count / self._fps

    def open(self) -> None:
        if self._cap is not None:
            return
        cap = cv2.VideoCapture(self._path)
        if not cap.isOpened():
            raise IOError(f"Cannot open video: {self._path}")
        self._cap = cap
        self._fps = cap.get(cv2.CAP_PROP_FPS) or 30.0
        self._frame_count = int(cap.get(cv2.CAP_PROP_FRAME_COUNT))
        self._width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self._height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        logger.debug(
            "Opened %s: %.2f fps, %d frames, %dx%d",
            self._path, self._fps, self._frame_count, self._width, self._height,
        )

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None

    def __enter__(self) -> "VideoFileSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[Frame]:
        """Yield every frame from the current read position."""
        self.open()
        frame_id = 0
        while True:
            ret, image = self._cap.read()
            if not ret:
                break
            t_ns = int(frame_id / self._fps * NS_PER_SECOND)
            yield Frame.from_array(image, frame_id=frame_id, t_src_ns=t_ns)
            frame_id += 1

    def sample(self, fps: float) -> Iterator[Frame]:
        """Yield frames at ``fps``, numbered 0, 1, 2, ... in sample order.

        The k-th sample is the first decoded frame at or after ``k / fps``
        seconds, so above the native rate a decoded frame repeats for every
        target time it covers. Targets past the last decoded frame reuse it
        until ``duration_sec * fps`` samples have been produced. Sampling
        starts from the beginning of the file.
        """
        self.open()
        self._cap.set(cv2.CAP_PROP_POS_FRAMES, 0)
        interval_ns = NS_PER_SECOND / fps
        limit = int(self.duration_sec * fps)
        sample_id = 0
        last: Optional[Frame] = None
        for frame in self:
            if sample_id >= limit:
                break
            last = frame
            while sample_id < limit and sample_id * interval_ns <= frame.t_src_ns + _PTS_TOLERANCE_NS:
                yield Frame.from_array(frame.data, frame_id=sample_id, t_src_ns=frame.t_src_ns)
                sample_id += 1

        while last is not None and sample_id < limit:
            yield Frame.from_array(last.data, frame_id=sample_id, t_src_ns=last.t_src_ns)
            sample_id += 1


__all__ = ["VideoFileSource"]
