"""Tests for gap-filling and playback lookup."""

import pytest

from posemetrics.gapfill import fill_frame_gaps, playback_frame, result_at_time
from posemetrics.output import AnalysisResult, MotionMetrics


def _result(frame, speed=0.0, timestamp=100):
    return AnalysisResult(
        poses=(),
        metrics=MotionMetrics(speed=speed),
        frame=frame,
        timestamp=timestamp,
    )


class TestFillFrameGaps:
    def test_dense_input_returned_unchanged(self):
        dense = [_result(i, speed=float(i)) for i in range(5)]
        filled = fill_frame_gaps(dense, 5, clock=lambda: 999)
        assert len(filled) == 5
        assert all(a is b for a, b in zip(filled, dense))

    def test_forward_and_backward_fill(self):
        a = _result(3, speed=3.0)
        b = _result(7, speed=7.0)

        filled = fill_frame_gaps([a, b], 10, clock=lambda: 999)

        assert [r.frame for r in filled] == list(range(10))
        assert [r.metrics.speed for r in filled] == [3.0] * 7 + [7.0] * 3
        assert filled[3] is a
        assert filled[7] is b

    def test_filled_slots_are_new_objects_with_fresh_timestamp(self):
        a = _result(3, timestamp=100)
        filled = fill_frame_gaps([a], 6, clock=lambda: 999)

        for i in (0, 1, 2, 4, 5):
            assert filled[i] is not a
            assert filled[i].timestamp == 999
        assert filled[3].timestamp == 100

    def test_inputs_not_mutated(self):
        a = _result(2)
        b = _result(5)
        fill_frame_gaps([a, b], 8)
        assert (a.frame, b.frame) == (2, 5)
        assert (a.timestamp, b.timestamp) == (100, 100)

    def test_empty_input(self):
        assert fill_frame_gaps([], 10) == []

    def test_zero_total(self):
        assert fill_frame_gaps([_result(0)], 0) == []

    def test_results_beyond_total_ignored(self):
        filled = fill_frame_gaps([_result(1, speed=1.0), _result(12, speed=12.0)], 4, clock=lambda: 0)
        assert [r.metrics.speed for r in filled] == [1.0] * 4

    def test_backfill_scans_whole_sequence(self):
        """A stale result before the cursor does not block the forward search."""
        stale = _result(-1, speed=-1.0)
        later = _result(2, speed=2.0)
        filled = fill_frame_gaps([stale, later], 4, clock=lambda: 0)
        # The cursor is stuck on frame -1, so frame 2 is never consumed verbatim
        assert [r.metrics.speed for r in filled] == [2.0] * 4
        assert filled[2] is not later

    def test_slot_without_neighbours_is_omitted(self):
        filled = fill_frame_gaps([_result(-5)], 3)
        assert filled == []


class TestPlaybackFrame:
    @pytest.mark.parametrize(
        "index,analysis_fps,playback_fps,expected",
        [
            (0, 15.0, 30.0, 0),
            (4, 8.0, 16.0, 8),
            (5, 10.0, 20.0, 10),
            (1, 4.0, 30.0, 7),
            (123, 15.0, 30.0, 246),
            (3, 3.0, 30.0, 30),
        ],
    )
    def test_mapping(self, index, analysis_fps, playback_fps, expected):
        assert playback_frame(index, analysis_fps, playback_fps) == expected


class TestResultAtTime:
    def test_empty(self):
        assert result_at_time([], 1.0) is None

    def test_index_from_time(self):
        results = [_result(i) for i in range(30)]
        assert result_at_time(results, 0.5, 30.0).frame == 15

    def test_clamped_to_last(self):
        results = [_result(i) for i in range(10)]
        assert result_at_time(results, 100.0, 30.0).frame == 9

    def test_negative_time_clamped_to_first(self):
        results = [_result(i) for i in range(3)]
        assert result_at_time(results, -1.0).frame == 0
