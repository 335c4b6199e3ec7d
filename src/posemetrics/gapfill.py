"""Densify sparse analysis results onto the playback timeline.

Analysis usually runs at a lower rate than playback, so the results of a
pass only cover some playback frames. ``fill_frame_gaps`` produces one
result per playback frame by carrying the nearest earlier result forward,
or the first later one backward when nothing earlier exists.
"""

import math
import time
from typing import Callable, List, Optional, Sequence

from posemetrics.output import AnalysisResult


def _now_ms() -> int:
    return int(time.time() * 1000)


def fill_frame_gaps(
    results: Sequence[AnalysisResult],
    total_frames: int,
    clock: Optional[Callable[[], int]] = None,
) -> List[AnalysisResult]:
    """Expand sparse results to one entry per frame in ``range(total_frames)``.

    For each frame ``f``:

    1. the next unconsumed result stamped ``f`` is emitted as-is;
    2. otherwise the last emitted result is copied with ``frame=f``;
    3. otherwise the first result anywhere in ``results`` with a frame
       greater than ``f`` is copied with ``frame=f``;
    4. otherwise the frame is skipped.

    Copies get a fresh timestamp from ``clock``. Inputs are never
    modified. The output is shorter than ``total_frames`` only when a
    frame has no usable neighbour, which for frames >= 0 means
    ``results`` is empty.

    Args:
        results: Results ordered by frame, stamped with playback frame indices.
        total_frames: Length of the playback timeline.
        clock: Returns epoch milliseconds for filled copies.

    Returns:
        New list of results.
    """
    clock = clock or _now_ms
    filled: List[AnalysisResult] = []
    cursor = 0

    for frame in range(total_frames):
        if cursor < len(results) and results[cursor].frame == frame:
            filled.append(results[cursor])
            cursor += 1
            continue

        if filled:
            filled.append(filled[-1].with_frame(frame, clock()))
            continue

        following = next((r for r in results if r.frame > frame), None)
        if following is not None:
            filled.append(following.with_frame(frame, clock()))

    return filled


def playback_frame(analysis_index: int, analysis_fps: float, playback_fps: float) -> int:
    """Playback frame index of the ``analysis_index``-th analyzed frame.

    ``floor(analysis_index / analysis_fps * playback_fps)``, multiplied
    before dividing so whole-number rates map exactly.
    """
    return int(analysis_index * playback_fps // analysis_fps)


def result_at_time(
    results: Sequence[AnalysisResult],
    time_sec: float,
    playback_fps: float = 30.0,
) -> Optional[AnalysisResult]:
    """Result to display at a playback position.

    The index is ``floor(time_sec * playback_fps)`` clamped to the last
    result; None when there are no results.
    """
    if not results:
        return None
    index = int(math.floor(time_sec * playback_fps))
    index = max(0, min(index, len(results) - 1))
    return results[index]


__all__ = ["fill_frame_gaps", "playback_frame", "result_at_time"]
