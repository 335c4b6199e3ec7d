"""Tests for the single-pose metric calculators."""

import pytest

from posemetrics.metrics import (
    SpeedTracker,
    agility_score,
    assess_injury_risk,
    cadence,
    compute_metrics,
    jump_height,
    risk_level,
    torso_center,
)
from posemetrics.output import MotionMetrics
from posemetrics.testing import make_pose, shift_pose


def _kpts(points):
    return make_pose(points).keypoint_map()


TORSO = {
    "left_shoulder": (270, 150, 0.8),
    "right_shoulder": (330, 150, 0.8),
    "left_hip": (260, 220, 0.7),
    "right_hip": (340, 220, 0.7),
}


class TestJumpHeight:
    def test_hips_above_baseline(self):
        kpts = _kpts({"left_hip": (100, 300, 0.9), "right_hip": (140, 300, 0.9)})
        assert jump_height(kpts) == pytest.approx(10.0)

    def test_uses_mean_hip_height(self):
        kpts = _kpts({"left_hip": (100, 280), "right_hip": (140, 320)})
        assert jump_height(kpts) == pytest.approx(10.0)

    def test_hips_below_baseline_is_zero(self):
        kpts = _kpts({"left_hip": (100, 450), "right_hip": (140, 460)})
        assert jump_height(kpts) == 0.0

    @pytest.mark.parametrize("present", [{}, {"left_hip": (1, 2)}, {"right_hip": (1, 2)}])
    def test_missing_hip_is_zero(self, present):
        assert jump_height(_kpts(present)) == 0.0


class TestCadence:
    def test_ankle_gap_scaled(self):
        kpts = _kpts({"left_ankle": (280, 500), "right_ankle": (320, 540)})
        assert cadence(kpts) == pytest.approx(20.0)

    def test_capped_at_180(self):
        kpts = _kpts({"left_ankle": (280, 0), "right_ankle": (320, 1000)})
        assert cadence(kpts) == 180.0

    def test_missing_ankle_is_zero(self):
        assert cadence(_kpts({"left_ankle": (280, 500)})) == 0.0


class TestAgilityScore:
    def test_no_pairs_is_full_score(self):
        assert agility_score(_kpts({"nose": (300, 100)})) == 100.0

    def test_level_hips_only(self):
        kpts = _kpts({"left_hip": (100, 300), "right_hip": (140, 300)})
        assert agility_score(kpts) == 100.0

    def test_shoulder_and_hip_tilt_penalties_add(self):
        kpts = _kpts({
            "left_shoulder": (270, 150),
            "right_shoulder": (330, 170),
            "left_hip": (260, 220),
            "right_hip": (340, 230),
        })
        assert agility_score(kpts) == pytest.approx(97.0)

    def test_clamped_to_zero(self):
        kpts = _kpts({"left_shoulder": (0, 0), "right_shoulder": (10, 5000)})
        assert agility_score(kpts) == 0.0

    def test_single_shoulder_gives_no_penalty(self):
        kpts = _kpts({"left_shoulder": (0, 0), "left_hip": (0, 10), "right_hip": (20, 10)})
        assert agility_score(kpts) == 100.0


class TestRiskLevel:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (0.0, "low"),
            (25.0, "low"),
            (25.01, "medium"),
            (50.0, "medium"),
            (50.01, "high"),
            (100.0, "high"),
        ],
    )
    def test_boundaries(self, value, expected):
        assert risk_level(value) == expected


class TestInjuryRisk:
    def test_no_keypoints(self):
        risk = assess_injury_risk(_kpts({}))
        assert risk.overall == "low"
        assert risk.areas.to_dict() == {"knees": 0, "ankles": 0, "shoulders": 0, "back": 0}

    def test_knee_offset_per_side(self):
        kpts = _kpts({
            "left_knee": (200, 300),
            "left_ankle": (260, 400),  # 60 px off
            "right_knee": (340, 300),
            "right_ankle": (350, 400),  # 10 px off
        })
        assert assess_injury_risk(kpts).areas.knees == 30.0

    def test_knee_offset_exactly_threshold_is_safe(self):
        kpts = _kpts({"left_knee": (200, 300), "left_ankle": (250, 400)})
        assert assess_injury_risk(kpts).areas.knees == 0.0

    def test_both_knees_misaligned(self):
        kpts = _kpts({
            "left_knee": (200, 300),
            "left_ankle": (300, 400),
            "right_knee": (400, 300),
            "right_ankle": (300, 400),
        })
        assert assess_injury_risk(kpts).areas.knees == 60.0

    def test_level_shoulders_score_ten(self):
        kpts = _kpts({"left_shoulder": (270, 150), "right_shoulder": (330, 160)})
        assert assess_injury_risk(kpts).areas.shoulders == 10.0

    def test_tilted_shoulders_score_forty(self):
        kpts = _kpts({"left_shoulder": (270, 150), "right_shoulder": (330, 190)})
        assert assess_injury_risk(kpts).areas.shoulders == 40.0

    def test_ankles_and_back_always_zero(self):
        kpts = _kpts({
            "left_knee": (200, 300),
            "left_ankle": (300, 400),
            "left_shoulder": (270, 150),
            "right_shoulder": (330, 190),
        })
        areas = assess_injury_risk(kpts).areas
        assert areas.ankles == 0.0
        assert areas.back == 0.0

    def test_worst_case_mean_is_exactly_25_and_low(self):
        kpts = _kpts({
            "left_knee": (200, 300),
            "left_ankle": (300, 400),
            "right_knee": (400, 300),
            "right_ankle": (300, 400),
            "left_shoulder": (270, 150),
            "right_shoulder": (330, 190),
        })
        risk = assess_injury_risk(kpts)
        assert risk.areas.mean() == 25.0
        assert risk.overall == "low"


class TestTorsoCenter:
    def test_mean_of_four_points(self):
        assert torso_center(_kpts(TORSO)) == pytest.approx((300.0, 185.0))

    def test_missing_point(self):
        points = dict(TORSO)
        del points["right_hip"]
        assert torso_center(_kpts(points)) is None


class TestSpeedTracker:
    def test_no_previous_is_zero_and_not_recorded(self):
        tracker = SpeedTracker()
        assert tracker.update(_kpts(TORSO), None) == 0.0
        assert tracker.velocities == ()

    def test_constant_displacement(self):
        """Shifting by (3, 4) per frame settles at 5 * 0.15."""
        tracker = SpeedTracker()
        pose = make_pose(TORSO)
        previous = None
        speeds = []
        for _ in range(7):
            prev_kpts = previous.keypoint_map() if previous is not None else None
            speeds.append(tracker.update(pose.keypoint_map(), prev_kpts))
            previous = pose
            pose = shift_pose(pose, 3, 4)

        assert speeds[0] == 0.0
        assert speeds[5] == pytest.approx(0.75)
        assert speeds[6] == pytest.approx(0.75)
        assert len(tracker.velocities) == 5

    def test_window_averages_vectors(self):
        tracker = SpeedTracker()
        a = make_pose(TORSO)
        b = shift_pose(a, 10, 0)
        assert tracker.update(b.keypoint_map(), a.keypoint_map()) == pytest.approx(1.5)
        # Moving back cancels the first vector
        assert tracker.update(a.keypoint_map(), b.keypoint_map()) == pytest.approx(0.0)

    def test_window_evicts_oldest(self):
        tracker = SpeedTracker(window=2)
        a = make_pose(TORSO)
        b = shift_pose(a, 100, 0)
        c = shift_pose(b, 0, 0)
        d = shift_pose(c, 0, 0)
        tracker.update(b.keypoint_map(), a.keypoint_map())
        tracker.update(c.keypoint_map(), b.keypoint_map())
        # (100, 0) has now been evicted
        assert tracker.update(d.keypoint_map(), c.keypoint_map()) == 0.0
        assert tracker.velocities == ((0.0, 0.0), (0.0, 0.0))

    def test_capped_at_15(self):
        tracker = SpeedTracker()
        a = make_pose(TORSO)
        b = shift_pose(a, 300, 400)
        assert tracker.update(b.keypoint_map(), a.keypoint_map()) == 15.0

    def test_missing_previous_torso_point(self):
        tracker = SpeedTracker()
        prev_points = dict(TORSO)
        del prev_points["left_shoulder"]
        assert tracker.update(_kpts(TORSO), _kpts(prev_points)) == 0.0
        assert tracker.velocities == ()

    def test_reset(self):
        tracker = SpeedTracker()
        a = make_pose(TORSO)
        tracker.update(shift_pose(a, 1, 1).keypoint_map(), a.keypoint_map())
        tracker.reset()
        assert tracker.velocities == ()


class TestComputeMetrics:
    def test_no_pose_gives_zero_metrics(self):
        metrics = compute_metrics(None, None, SpeedTracker())
        assert metrics == MotionMetrics()
        assert metrics.agility_score == 0.0
        assert metrics.injury_risk.overall == "low"

    def test_deterministic(self):
        pose = make_pose(TORSO)
        prev = shift_pose(pose, -2, 1)
        first = compute_metrics(pose, prev, SpeedTracker())
        second = compute_metrics(pose, prev, SpeedTracker())
        assert first == second
