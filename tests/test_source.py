"""Tests for VideoFileSource and the annotated-video path, on real files."""

from pathlib import Path

import cv2
import numpy as np
import pytest

from posemetrics.source import VideoFileSource


CLIP_FPS = 10.0
CLIP_FRAMES = 20
CLIP_SIZE = (64, 48)


@pytest.fixture
def clip(tmp_path):
    """A 2-second, 10 fps MJPG clip whose i-th frame is filled with i * 10."""
    path = str(tmp_path / "clip.avi")
    width, height = CLIP_SIZE
    writer = cv2.VideoWriter(path, cv2.VideoWriter_fourcc(*"MJPG"), CLIP_FPS, (width, height))
    assert writer.isOpened()
    for i in range(CLIP_FRAMES):
        writer.write(np.full((height, width, 3), i * 10, dtype=np.uint8))
    writer.release()
    return path


def _frame_index(frame) -> int:
    """Recover the clip frame index from its fill value."""
    return int(round(float(frame.data.mean()) / 10))


class TestMetadata:
    def test_properties(self, clip):
        with VideoFileSource(clip) as source:
            assert source.fps == pytest.approx(CLIP_FPS)
            assert source.frame_count == CLIP_FRAMES
            assert (source.width, source.height) == CLIP_SIZE
            assert source.duration_sec == pytest.approx(2.0)

    def test_missing_file(self, tmp_path):
        with pytest.raises(IOError):
            VideoFileSource(str(tmp_path / "missing.avi")).open()

    def test_iterates_every_frame(self, clip):
        with VideoFileSource(clip) as source:
            frames = list(source)

        assert len(frames) == CLIP_FRAMES
        assert [f.frame_id for f in frames] == list(range(CLIP_FRAMES))
        assert [_frame_index(f) for f in frames] == list(range(CLIP_FRAMES))
        assert frames[5].t_src_ns == 500_000_000


class TestSample:
    def test_native_rate(self, clip):
        with VideoFileSource(clip) as source:
            frames = list(source.sample(10))

        assert [_frame_index(f) for f in frames] == list(range(CLIP_FRAMES))
        assert [f.frame_id for f in frames] == list(range(CLIP_FRAMES))

    def test_downsampling(self, clip):
        with VideoFileSource(clip) as source:
            frames = list(source.sample(5))

        assert [_frame_index(f) for f in frames] == list(range(0, CLIP_FRAMES, 2))

    def test_upsampling_repeats_covering_frames(self, clip):
        with VideoFileSource(clip) as source:
            frames = list(source.sample(15))

        indices = [_frame_index(f) for f in frames]
        assert len(frames) == 30
        assert indices[:10] == [0, 1, 2, 2, 3, 4, 4, 5, 6, 6]
        assert indices[-1] == CLIP_FRAMES - 1
        assert indices == sorted(indices)
        assert [f.frame_id for f in frames] == list(range(30))

    def test_upsampled_frame_stays_near_its_target_time(self, clip):
        with VideoFileSource(clip) as source:
            for frame in source.sample(15):
                target_ns = frame.frame_id * 1e9 / 15
                assert frame.t_src_ns - target_ns < 1e9 / CLIP_FPS

    def test_resampling_rewinds(self, clip):
        with VideoFileSource(clip) as source:
            first = [_frame_index(f) for f in source.sample(5)]
            second = [_frame_index(f) for f in source.sample(5)]
        assert first == second


class TestAnnotatedOutput:
    def test_video_saver_writes_file(self, tmp_path):
        from posemetrics.output import AnalysisResult, MotionMetrics
        from posemetrics.viz import VideoSaver

        output = str(tmp_path / "out.avi")
        saver = VideoSaver(output, fps=10.0, width=64, height=48, codec="MJPG")
        result = AnalysisResult(poses=(), metrics=MotionMetrics(), frame=0, timestamp=0)
        saver.update(np.zeros((48, 64, 3), dtype=np.uint8), result)
        saver.close()

        assert Path(output).exists()
        assert Path(output).stat().st_size > 0

    def test_cli_writes_annotated_video(self, clip, tmp_path, capsys):
        from posemetrics.cli import main

        output = str(tmp_path / "annotated.avi")
        main(["analyze", clip, "-o", output])

        out = capsys.readouterr().out
        assert "Analyzed 30 frames (0 failed), 60/60 on timeline" in out
        assert f"Saved annotated video to {output}" in out

        cap = cv2.VideoCapture(output)
        assert cap.isOpened()
        written = 0
        while True:
            ret, image = cap.read()
            if not ret:
                break
            assert image.shape[:2] == (48, 64)
            written += 1
        cap.release()
        assert written == 60
