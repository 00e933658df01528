# mini_pulley/routing.py
"""
ROPE ROUTER: Line and Arc Paths Over Pulleys
============================================

PURPOSE:
--------
Given the two end points of a rope and the set of pulleys in the system,
produce the physical path of the rope as an ordered tuple of segments:

    line → arc → line → arc → ... → line

Each arc follows a pulley's rim between an ENTRY and an EXIT tangent point.
The segment lengths always add up to the rope's total length.

ALGORITHM:
----------
1. If an end point sits on a pulley HUB, move it to the rim point facing the
   other end (a becket hook end point is left alone).
2. Find the pulleys the straight line crosses or nearly grazes
   (radius × graze_tolerance), ignoring pulleys the rope is attached to.
3. For each pulley, compute both tangents from the current point and both
   tangents towards the far end, and keep the (entry, exit) pair with the
   shortest  |A→entry| + shorter_arc(entry, exit) + |exit→B|.
4. Walk the pulleys in order of distance from the start and emit segments.

An arc's length is the shorter span between its entry and exit. Its
``sweep`` is what gets drawn: a wrap whose entry and exit lie on opposite
sides of the pulley (a rope coming up on the left and going down on the
right) is swept over the top of the wheel.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import DEFAULT_CONFIG, SolverConfig
from .geometry import (
    GeometryError,
    angle_between,
    arc_length,
    arc_sweep,
    distance,
    radial_point,
    segment_circle_intersection,
    tangent_points,
    unit_vector,
)
from .model import AnyPulley, Point, Rope, SystemState

logger = logging.getLogger(__name__)


class SegmentKind(Enum):
    LINE = "line"
    ARC = "arc"


@dataclass(frozen=True)
class RopeSegment:
    """
    One leg of a rope path.

    Arcs additionally carry the wrapped pulley's centre, radius, the polar
    angles of their end points, the signed ``sweep`` used for drawing and
    the pulley id. ``length`` is the shorter arc between the end points.
    """
    kind: SegmentKind
    start: Point
    end: Point
    length: float
    center: Optional[Point] = None
    radius: Optional[float] = None
    start_angle: Optional[float] = None
    end_angle: Optional[float] = None
    sweep: Optional[float] = None
    pulley_id: Optional[str] = None

    @property
    def is_arc(self) -> bool:
        return self.kind is SegmentKind.ARC

    def direction(self) -> Tuple[float, float]:
        """Unit vector start → end (chord direction for arcs)."""
        return unit_vector(self.start, self.end)


def line_segment(start: Point, end: Point) -> RopeSegment:
    return RopeSegment(SegmentKind.LINE, start, end, distance(start, end))


def arc_segment(pulley: AnyPulley, entry: Point, exit_: Point) -> RopeSegment:
    center = pulley.position
    over_top = (entry.x - center.x) * (exit_.x - center.x) < 0
    sweep = arc_sweep(entry, exit_, center, over_top=over_top)
    return RopeSegment(
        kind=SegmentKind.ARC,
        start=entry,
        end=exit_,
        length=arc_length(entry, exit_, center, pulley.radius),
        center=center,
        radius=pulley.radius,
        start_angle=angle_between(center, entry),
        end_angle=angle_between(center, exit_),
        sweep=sweep,
        pulley_id=pulley.id,
    )


@dataclass(frozen=True)
class PulleyCrossing:
    """A pulley lying on the straight path and where the path first meets it."""
    pulley: AnyPulley
    distance: float
    hit: Point


def attached_pulley_ids(rope: Rope, pulleys: Iterable[AnyPulley]) -> set:
    """Pulleys the rope ends at, either on the hub or on the becket hook."""
    ends = {rope.start_node_id, rope.end_node_id}
    attached = set()
    for pulley in pulleys:
        becket = getattr(pulley, "becket_node_id", None)
        if pulley.id in ends or (becket is not None and becket in ends):
            attached.add(pulley.id)
    return attached


def _hub_pulley(node_id: str, pulleys: Sequence[AnyPulley]) -> Optional[AnyPulley]:
    for pulley in pulleys:
        if pulley.id == node_id:
            return pulley
    return None


def best_tangent_pair(start: Point, end: Point, pulley: AnyPulley) -> Tuple[Point, Point]:
    """
    Entry/exit tangent points giving the shortest start → wrap → end path.

    Raises GeometryError if either point is inside the pulley.
    """
    center, r = pulley.position, pulley.radius
    entries = tangent_points(start, center, r)
    exits = tangent_points(end, center, r)

    best = None
    best_length = math.inf
    for entry in entries:
        for exit_ in exits:
            total = distance(start, entry) + arc_length(entry, exit_, center, r) + distance(exit_, end)
            if total < best_length:
                best_length = total
                best = (entry, exit_)
    return best


def find_crossings(
    start: Point,
    end: Point,
    pulleys: Iterable[AnyPulley],
    graze_tolerance: float = 1.1,
) -> List[PulleyCrossing]:
    """Pulleys hit by the straight segment, sorted by distance from start."""
    crossings = []
    for pulley in pulleys:
        hit = segment_circle_intersection(start, end, pulley.position, pulley.radius, graze_tolerance)
        if hit is not None:
            crossings.append(PulleyCrossing(pulley, distance(start, pulley.position), hit))
    crossings.sort(key=lambda c: c.distance)
    return crossings


def route_rope(
    rope: Rope,
    start: Point,
    end: Point,
    system: SystemState,
    config: SolverConfig = DEFAULT_CONFIG,
) -> Tuple[RopeSegment, ...]:
    """
    Compute the path of ``rope`` between node positions ``start`` and ``end``.

    Parameters:
    -----------
    rope : Rope
        The rope being routed (its end node ids decide hub/becket handling)
    start, end : Point
        Positions of the rope's start and end nodes
    system : SystemState
        Full component list (all pulleys are candidates for wrapping)
    config : SolverConfig
        Provides the graze tolerance

    Returns:
    --------
    Tuple[RopeSegment, ...]
        Ordered segments; sum of lengths = rope length
    """
    pulleys = system.pulleys

    # Hub end points sit on the rim, facing the other end
    adj_start, adj_end = start, end
    start_hub = _hub_pulley(rope.start_node_id, pulleys)
    if start_hub is not None:
        adj_start = radial_point(start_hub.position, start_hub.radius, end)
    end_hub = _hub_pulley(rope.end_node_id, pulleys)
    if end_hub is not None:
        adj_end = radial_point(end_hub.position, end_hub.radius, start)

    excluded = attached_pulley_ids(rope, pulleys)
    candidates = [p for p in pulleys if p.id not in excluded]
    crossings = find_crossings(adj_start, adj_end, candidates, config.graze_tolerance)

    if not crossings:
        return (line_segment(adj_start, adj_end),)

    segments = []
    current = adj_start
    for crossing in crossings:
        pulley = crossing.pulley
        try:
            entry, exit_ = best_tangent_pair(current, adj_end, pulley)
        except GeometryError as exc:
            logger.debug("Rope %s: no tangent on pulley %s (%s); using radial points",
                         rope.id, pulley.id, exc)
            entry = radial_point(pulley.position, pulley.radius, current)
            exit_ = radial_point(pulley.position, pulley.radius, adj_end)
        segments.append(line_segment(current, entry))
        segments.append(arc_segment(pulley, entry, exit_))
        current = exit_
    segments.append(line_segment(current, adj_end))

    logger.debug("Rope %s routed over %s", rope.id, [c.pulley.id for c in crossings])
    return tuple(segments)


def total_length(segments: Iterable[RopeSegment]) -> float:
    return sum(seg.length for seg in segments)


def wrapped_pulleys(segments: Iterable[RopeSegment]) -> List[str]:
    return [seg.pulley_id for seg in segments if seg.is_arc]


def segments_to_svg_path(segments: Sequence[RopeSegment]) -> str:
    """
    SVG path data (M/L/A commands) for a routed rope.

    SVG's y axis points down like ours, so a positive sweep maps to
    sweep-flag 1.
    """
    if not segments:
        return ""
    parts = [f"M {segments[0].start.x:.3f} {segments[0].start.y:.3f}"]
    for seg in segments:
        if seg.is_arc:
            large_arc = 1 if abs(seg.sweep) > math.pi else 0
            sweep_flag = 1 if seg.sweep > 0 else 0
            parts.append(
                f"A {seg.radius:.3f} {seg.radius:.3f} 0 {large_arc} {sweep_flag} "
                f"{seg.end.x:.3f} {seg.end.y:.3f}"
            )
        else:
            parts.append(f"L {seg.end.x:.3f} {seg.end.y:.3f}")
    return " ".join(parts)
