# tests/test_geometry.py
"""
Tangent-point and arc primitives.

The tangent property is checked directly: every tangent point lies on the
circle, and the line from the external point to it is perpendicular to the
radius there.
"""

import math

import numpy as np
import pytest

from mini_pulley.geometry import (
    GeometryError,
    arc_length,
    arc_sweep,
    distance,
    normalize_angle,
    point_on_circle,
    radial_point,
    segment_circle_intersection,
    tangent_points,
    unit_vector,
)
from mini_pulley.model import Point


EXTERNAL_CASES = [
    (Point(0.0, 100.0), Point(0.0, 0.0), 30.0),
    (Point(-30.0, 200.0), Point(0.0, 0.0), 30.0),
    (Point(150.0, -40.0), Point(10.0, 20.0), 25.0),
    (Point(5.0, 5.0), Point(0.0, 0.0), 7.0),
]


@pytest.mark.parametrize("point, center, radius", EXTERNAL_CASES)
def test_tangent_points_lie_on_circle(point, center, radius):
    for t in tangent_points(point, center, radius):
        assert distance(t, center) == pytest.approx(radius, abs=1e-9)


@pytest.mark.parametrize("point, center, radius", EXTERNAL_CASES)
def test_tangent_line_perpendicular_to_radius(point, center, radius):
    for t in tangent_points(point, center, radius):
        to_point = (t.x - point.x, t.y - point.y)
        radius_vec = (t.x - center.x, t.y - center.y)
        dot = to_point[0] * radius_vec[0] + to_point[1] * radius_vec[1]
        assert dot == pytest.approx(0.0, abs=1e-6)


def test_tangent_points_are_symmetric_for_point_below_center():
    """Point straight below the centre: the two tangents mirror in x."""
    t1, t2 = tangent_points(Point(0.0, 100.0), Point(0.0, 0.0), 30.0)
    assert t1.x == pytest.approx(-t2.x)
    assert t1.y == pytest.approx(t2.y)
    # r²/d below the centre
    assert t1.y == pytest.approx(30.0 ** 2 / 100.0)


def test_point_inside_circle_has_no_tangent():
    with pytest.raises(GeometryError):
        tangent_points(Point(1.0, 1.0), Point(0.0, 0.0), 10.0)


def test_point_on_circle_returns_itself():
    p = Point(10.0, 0.0)
    t1, t2 = tangent_points(p, Point(0.0, 0.0), 10.0)
    assert distance(t1, p) == pytest.approx(0.0, abs=1e-9)
    assert distance(t2, p) == pytest.approx(0.0, abs=1e-9)


def test_radial_point_faces_target():
    rim = radial_point(Point(0.0, 0.0), 5.0, Point(0.0, 50.0))
    assert rim.x == pytest.approx(0.0, abs=1e-12)
    assert rim.y == pytest.approx(5.0)


def test_arc_length_takes_shorter_span():
    center = Point(0.0, 0.0)
    a = point_on_circle(center, 10.0, math.radians(170))
    b = point_on_circle(center, 10.0, math.radians(-170))
    # 20° across the ±180° seam, not 340°
    assert arc_length(a, b, center, 10.0) == pytest.approx(10.0 * math.radians(20))


def test_arc_sweep_shortest_by_default():
    center = Point(0.0, 0.0)
    start = point_on_circle(center, 1.0, math.radians(150))  # lower left
    end = point_on_circle(center, 1.0, math.radians(30))     # lower right
    assert arc_sweep(start, end, center) == pytest.approx(-math.radians(120))


def test_arc_sweep_forced_over_top():
    """Lower-left to lower-right: over the top is the long way (240°)."""
    center = Point(0.0, 0.0)
    start = point_on_circle(center, 1.0, math.radians(150))
    end = point_on_circle(center, 1.0, math.radians(30))
    assert arc_sweep(start, end, center, over_top=True) == pytest.approx(math.radians(240))


def test_arc_sweep_over_top_keeps_short_arc_when_it_already_passes_top():
    center = Point(0.0, 0.0)
    start = point_on_circle(center, 1.0, math.radians(-150))  # upper left
    end = point_on_circle(center, 1.0, math.radians(-30))     # upper right
    assert arc_sweep(start, end, center, over_top=True) == pytest.approx(math.radians(120))


def test_normalize_angle_range():
    for a in np.linspace(-10, 10, 41):
        n = normalize_angle(a)
        assert -math.pi < n <= math.pi
        assert math.cos(n) == pytest.approx(math.cos(a))


def test_unit_vector_of_coincident_points_is_zero():
    assert unit_vector(Point(1.0, 1.0), Point(1.0, 1.0)) == (0.0, 0.0)


class TestSegmentCircleIntersection:

    def test_direct_hit(self):
        hit = segment_circle_intersection(Point(-100, 0), Point(100, 0), Point(0, 0), 10.0)
        assert hit is not None
        assert hit.x == pytest.approx(-10.0)

    def test_clear_miss(self):
        assert segment_circle_intersection(Point(-100, 50), Point(100, 50), Point(0, 0), 10.0) is None

    def test_near_miss_within_tolerance(self):
        # Passes 10.5 from the centre of a radius-10 circle: inside 1.1 × r
        hit = segment_circle_intersection(Point(-100, 10.5), Point(100, 10.5), Point(0, 0), 10.0)
        assert hit is not None
        assert hit.y == pytest.approx(10.5)

    def test_near_miss_rejected_without_tolerance(self):
        hit = segment_circle_intersection(Point(-100, 10.5), Point(100, 10.5), Point(0, 0), 10.0,
                                          tolerance=1.0)
        assert hit is None

    def test_circle_beyond_segment_end(self):
        assert segment_circle_intersection(Point(0, 0), Point(10, 0), Point(50, 0), 5.0) is None
