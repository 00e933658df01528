# tests/test_routing.py
"""
Rope routing over pulleys.

Every routed rope must be a contiguous chain of segments whose lengths add
up to the rope's total length, whether it runs straight or wraps.
"""

import math

import pytest

from mini_pulley.geometry import arc_length, distance
from mini_pulley.model import Anchor, Mass, Point, Pulley, PulleyBecket, Rope, SystemState
from mini_pulley.routing import (
    SegmentKind,
    attached_pulley_ids,
    route_rope,
    segments_to_svg_path,
    total_length,
    wrapped_pulleys,
)


def assert_contiguous(segments):
    for prev, nxt in zip(segments, segments[1:]):
        assert prev.end == nxt.start


def wrap_system(pulley_y: float = 5.0):
    """A horizontal rope between two anchors, with a pulley sitting on its line."""
    return SystemState([
        Anchor("A", Point(-100.0, 0.0)),
        Anchor("B", Point(100.0, 0.0)),
        Pulley("P", Point(0.0, pulley_y), radius=20.0),
        Rope("R", "A", "B"),
    ])


class TestStraightRope:

    def test_single_line_between_anchors(self, hanging_mass):
        rope = hanging_mass.get("R")
        segments = route_rope(rope, Point(0.0, 0.0), Point(0.0, 100.0), hanging_mass)

        assert len(segments) == 1
        assert segments[0].kind is SegmentKind.LINE
        assert segments[0].length == pytest.approx(100.0)
        assert total_length(segments) == pytest.approx(100.0)

    def test_hub_end_moves_to_rim_facing_other_end(self, atwood):
        rope = atwood.get("R1")
        m1 = atwood.get("M1").position
        segments = route_rope(rope, m1, Point(0.0, 0.0), atwood)

        assert len(segments) == 1
        rim = segments[0].end
        assert distance(rim, Point(0.0, 0.0)) == pytest.approx(30.0)
        # Rim point lies on the centre → mass line
        cross = rim.x * m1.y - rim.y * m1.x
        assert cross == pytest.approx(0.0, abs=1e-9)
        assert segments[0].length == pytest.approx(distance(m1, Point(0, 0)) - 30.0)


class TestWrappedRope:

    def test_line_arc_line(self):
        system = wrap_system()
        segments = route_rope(system.get("R"), Point(-100.0, 0.0), Point(100.0, 0.0), system)

        assert [s.kind for s in segments] == [SegmentKind.LINE, SegmentKind.ARC, SegmentKind.LINE]
        assert wrapped_pulleys(segments) == ["P"]
        assert_contiguous(segments)

    def test_lengths_sum_to_total(self):
        system = wrap_system()
        segments = route_rope(system.get("R"), Point(-100.0, 0.0), Point(100.0, 0.0), system)

        assert total_length(segments) == pytest.approx(sum(s.length for s in segments))
        # Going round the wheel is longer than the straight line
        assert total_length(segments) > 200.0

    def test_arc_geometry(self):
        system = wrap_system()
        segments = route_rope(system.get("R"), Point(-100.0, 0.0), Point(100.0, 0.0), system)
        arc = segments[1]

        assert arc.pulley_id == "P"
        assert arc.radius == 20.0
        assert arc.center == Point(0.0, 5.0)
        assert arc.length == pytest.approx(arc_length(arc.start, arc.end, arc.center, 20.0))
        assert distance(arc.start, arc.center) == pytest.approx(20.0)
        assert distance(arc.end, arc.center) == pytest.approx(20.0)

    def test_wrap_goes_over_the_top(self):
        """Entry left of centre, exit right of centre: both above the hub (y < centre)."""
        system = wrap_system()
        segments = route_rope(system.get("R"), Point(-100.0, 0.0), Point(100.0, 0.0), system)
        arc = segments[1]

        assert arc.start.x < 0.0 < arc.end.x
        assert arc.start.y < 5.0 and arc.end.y < 5.0
        assert arc.sweep > 0.0
        assert abs(arc.sweep) < math.pi

    def test_under_graze_length_uses_shorter_arc(self):
        """Pulley hub just above the line: the rope only touches the underside."""
        system = wrap_system(pulley_y=-5.0)
        segments = route_rope(system.get("R"), Point(-100.0, 0.0), Point(100.0, 0.0), system)
        arc = segments[1]

        assert arc.kind is SegmentKind.ARC
        assert arc.length == pytest.approx(arc_length(arc.start, arc.end, arc.center, 20.0))
        assert arc.length < 20.0 * math.pi / 2
        # Drawn over the top, measured the short way round
        assert abs(arc.sweep) > math.pi
        assert_contiguous(segments)
        assert total_length(segments) < 210.0

    def test_tangent_legs_are_tangent(self):
        system = wrap_system()
        segments = route_rope(system.get("R"), Point(-100.0, 0.0), Point(100.0, 0.0), system)
        center = Point(0.0, 5.0)

        for leg, touch in ((segments[0], segments[0].end), (segments[2], segments[2].start)):
            lx, ly = leg.end.x - leg.start.x, leg.end.y - leg.start.y
            rx, ry = touch.x - center.x, touch.y - center.y
            assert lx * rx + ly * ry == pytest.approx(0.0, abs=1e-6)

    def test_near_graze_still_wraps(self):
        # Line passes 21 from a radius-20 pulley: within the 1.1 graze factor
        system = wrap_system(pulley_y=21.0)
        segments = route_rope(system.get("R"), Point(-100.0, 0.0), Point(100.0, 0.0), system)
        assert wrapped_pulleys(segments) == ["P"]

    def test_two_pulleys_in_order(self):
        system = SystemState([
            Anchor("A", Point(-200.0, 0.0)),
            Anchor("B", Point(200.0, 0.0)),
            Pulley("P2", Point(60.0, 5.0), radius=20.0),
            Pulley("P1", Point(-60.0, 5.0), radius=20.0),
            Rope("R", "A", "B"),
        ])
        segments = route_rope(system.get("R"), Point(-200.0, 0.0), Point(200.0, 0.0), system)

        assert len(segments) == 5
        assert wrapped_pulleys(segments) == ["P1", "P2"]
        assert_contiguous(segments)
        assert total_length(segments) > 400.0


class TestAttachedPulleys:

    def test_hub_and_becket_attachment(self):
        block = PulleyBecket("MP", Point(0.0, 100.0), radius=30.0)
        other = Pulley("P", Point(0.0, 0.0), radius=10.0)
        assert attached_pulley_ids(Rope("R", "MP_becket", "M"), [block, other]) == {"MP"}
        assert attached_pulley_ids(Rope("R", "P", "MP"), [block, other]) == {"MP", "P"}
        assert attached_pulley_ids(Rope("R", "A", "M"), [block, other]) == set()

    def test_becket_rope_does_not_wrap_its_own_pulley(self):
        """A rope from the hook straight up through its own wheel stays a single line."""
        system = SystemState([
            Anchor("A", Point(0.0, 0.0)),
            PulleyBecket("MP", Point(0.0, 100.0), radius=30.0),
            Mass("M", Point(0.0, 300.0), mass=1.0),
            Rope("R", "MP_becket", "A"),
        ])
        segments = route_rope(system.get("R"), Point(0.0, 142.0), Point(0.0, 0.0), system)
        assert len(segments) == 1
        assert segments[0].start == Point(0.0, 142.0)


def test_svg_path_commands():
    system = wrap_system()
    segments = route_rope(system.get("R"), Point(-100.0, 0.0), Point(100.0, 0.0), system)
    path = segments_to_svg_path(segments)

    assert path.startswith("M -100.000 0.000")
    assert path.count(" L ") == 2
    assert path.count(" A ") == 1
    assert path.endswith("100.000 0.000")


def test_svg_path_empty():
    assert segments_to_svg_path(()) == ""
