"""
Unit tests for the keypoint type and footprint overlap.
"""

import math

import cv2
import numpy as np
import pytest

from kptrack.geometry.keypoint import (
    Keypoint,
    from_cv_keypoints,
    keypoint_overlap,
    to_cv_keypoints,
)


def _circle_iou(a, b):
    """Intersection over union of two keypoint discs in double precision."""
    ra, rb = a.radius, b.radius
    d = math.hypot(a.x - b.x, a.y - b.y)
    if d >= ra + rb:
        return 0.0
    if d <= abs(ra - rb):
        return min(ra, rb) ** 2 / max(ra, rb) ** 2
    cos_a = (d * d + ra * ra - rb * rb) / (2.0 * d * ra)
    cos_b = (d * d + rb * rb - ra * ra) / (2.0 * d * rb)
    ta = math.acos(max(-1.0, min(1.0, cos_a)))
    tb = math.acos(max(-1.0, min(1.0, cos_b)))
    inter = ra * ra * (ta - math.sin(ta) * cos_a) + rb * rb * (tb - math.sin(tb) * cos_b)
    return inter / (math.pi * (ra * ra + rb * rb) - inter)


class TestKeypoint:

    def test_position_is_x_then_y(self):
        kp = Keypoint(x=4.0, y=9.0, radius=3.0, response=200.0)
        assert kp.position == (4.0, 9.0)

    def test_size_is_diameter(self):
        assert Keypoint(x=0.0, y=0.0, radius=3.0).size == 6.0

    def test_opencv_defaults(self):
        kp = Keypoint(x=0.0, y=0.0, radius=1.0)
        assert kp.angle == -1.0
        assert kp.octave == 0
        assert kp.class_id == -1

    def test_is_immutable(self):
        kp = Keypoint(x=0.0, y=0.0, radius=1.0)
        with pytest.raises(AttributeError):
            kp.x = 5.0


class TestOverlap:

    def test_identical_footprints(self):
        a = Keypoint(x=10.0, y=10.0, radius=3.0)
        assert keypoint_overlap(a, a) == pytest.approx(1.0)

    def test_disjoint_footprints(self):
        a = Keypoint(x=0.0, y=0.0, radius=3.0)
        b = Keypoint(x=10.0, y=0.0, radius=3.0)
        assert keypoint_overlap(a, b) == 0.0

    def test_touching_footprints(self):
        a = Keypoint(x=0.0, y=0.0, radius=3.0)
        b = Keypoint(x=6.0, y=0.0, radius=3.0)
        assert keypoint_overlap(a, b) == 0.0

    def test_contained_footprint(self):
        big = Keypoint(x=5.0, y=5.0, radius=3.0)
        small = Keypoint(x=5.0, y=6.0, radius=1.0)
        assert keypoint_overlap(big, small) == pytest.approx(1.0 / 9.0, rel=1e-5)

    def test_unit_circles_one_apart(self):
        a = Keypoint(x=0.0, y=0.0, radius=1.0)
        b = Keypoint(x=0.0, y=1.0, radius=1.0)

        lens = 2.0 * math.acos(0.5) - 0.5 * math.sqrt(3.0)
        expected = lens / (2.0 * math.pi - lens)
        assert keypoint_overlap(a, b) == pytest.approx(expected, rel=1e-5)

    def test_symmetric(self):
        a = Keypoint(x=0.0, y=0.0, radius=3.0)
        b = Keypoint(x=2.0, y=1.5, radius=2.0)
        assert keypoint_overlap(a, b) == pytest.approx(keypoint_overlap(b, a), rel=1e-5)

    def test_decreases_with_distance(self):
        a = Keypoint(x=0.0, y=0.0, radius=3.0)
        ratios = [keypoint_overlap(a, Keypoint(x=d, y=0.0, radius=3.0))
                  for d in (0.5, 1.0, 2.0, 4.0, 5.5)]
        assert ratios == sorted(ratios, reverse=True)
        assert all(0.0 < r < 1.0 for r in ratios)

    def test_matches_circle_geometry_on_random_pairs(self):
        rng = np.random.default_rng(7)
        for _ in range(500):
            ax, ay, bx, by = rng.uniform(0.0, 20.0, 4)
            ra, rb = rng.uniform(0.5, 6.0, 2)
            a = Keypoint(x=float(ax), y=float(ay), radius=float(ra))
            b = Keypoint(x=float(bx), y=float(by), radius=float(rb))

            expected = _circle_iou(a, b)
            assert keypoint_overlap(a, b) == pytest.approx(expected, abs=1e-5)

    def test_same_as_opencv_keypoint_overlap(self):
        a = Keypoint(x=3.0, y=4.0, radius=3.0)
        b = Keypoint(x=5.0, y=4.5, radius=3.0)
        cv_a, cv_b = to_cv_keypoints([a, b])
        assert keypoint_overlap(a, b) == cv2.KeyPoint_overlap(cv_a, cv_b)


class TestOpenCVConversion:

    def test_to_cv(self):
        kp = Keypoint(x=12.5, y=7.25, radius=3.0, response=200.0, angle=45.0)
        (cv_kp,) = to_cv_keypoints([kp])

        assert isinstance(cv_kp, cv2.KeyPoint)
        assert cv_kp.pt == pytest.approx((12.5, 7.25))
        assert cv_kp.size == pytest.approx(6.0)
        assert cv_kp.response == pytest.approx(200.0)
        assert cv_kp.angle == pytest.approx(45.0)

    def test_round_trip(self):
        kps = [Keypoint(x=12.5, y=7.25, radius=3.0, response=200.0,
                        angle=45.0, octave=1, class_id=2),
               Keypoint(x=0.0, y=1.0, radius=2.0)]
        assert from_cv_keypoints(to_cv_keypoints(kps)) == kps
