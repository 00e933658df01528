# mini_pulley/geometry.py
"""
GEOMETRY: Circle Tangents and Arc Primitives
============================================

PURPOSE:
--------
Low-level 2D geometry used by the rope router. Everything here is a pure
function of Points and floats.

TANGENT POINTS FROM AN EXTERNAL POINT:
--------------------------------------
For a point P at distance d from a circle (centre C, radius r):

    anglePCT  = asin(r / d)                  angle at P between PC and PT
    θ_tangent = atan2(P − C) ± (π/2 − anglePCT)

    T = C + r·(cos θ_tangent, sin θ_tangent)

(π/2 − asin(r/d) is just acos(r/d), the angle at C between CP and CT.)
By construction |T − C| = r and (T − P)·(T − C) = 0.

ANGLES:
-------
Angles are measured with atan2 in the Y-DOWN frame, so −π/2 is the TOP of a
circle and +π/2 the bottom.
"""

import math
from typing import Optional, Tuple

import numpy as np

from .model import Point


class GeometryError(ValueError):
    """Raised when a construction has no solution (e.g. point inside circle)."""
    pass


TOP_ANGLE = -math.pi / 2


def distance(p: Point, q: Point) -> float:
    return float(np.hypot(q.x - p.x, q.y - p.y))


def angle_between(origin: Point, target: Point) -> float:
    """Polar angle of the vector origin → target."""
    return math.atan2(target.y - origin.y, target.x - origin.x)


def unit_vector(p: Point, q: Point) -> Tuple[float, float]:
    """Unit vector p → q; (0, 0) for coincident points."""
    dx = q.x - p.x
    dy = q.y - p.y
    length = float(np.hypot(dx, dy))
    if length == 0.0:
        return 0.0, 0.0
    return dx / length, dy / length


def normalize_angle(angle: float) -> float:
    """Wrap an angle into (−π, π]."""
    while angle > math.pi:
        angle -= 2 * math.pi
    while angle <= -math.pi:
        angle += 2 * math.pi
    return angle


def point_on_circle(center: Point, radius: float, angle: float) -> Point:
    return Point(center.x + radius * math.cos(angle), center.y + radius * math.sin(angle))


def radial_point(center: Point, radius: float, toward: Point) -> Point:
    """Rim point facing ``toward``. Used when no tangent exists."""
    if toward == center:
        return Point(center.x, center.y - radius)
    return point_on_circle(center, radius, angle_between(center, toward))


def tangent_points(point: Point, center: Point, radius: float) -> Tuple[Point, Point]:
    """
    The two tangent points on a circle as seen from an external point.

    Parameters:
    -----------
    point : Point
        External point P
    center : Point
        Circle centre C
    radius : float
        Circle radius r (> 0)

    Returns:
    --------
    Tuple[Point, Point]
        (T+, T−) for θ = atan2(P − C) ± (π/2 − asin(r/d)).
        A point exactly on the circle returns itself twice.

    Raises:
    -------
    GeometryError
        If P lies strictly inside the circle (no real tangent).
    """
    d = distance(center, point)
    if d < radius:
        raise GeometryError(
            f"Point ({point.x:.3g}, {point.y:.3g}) is inside circle "
            f"(d={d:.3g} < r={radius:.3g}); no tangent exists."
        )

    angle_to_point = angle_between(center, point)
    angle_pct = math.asin(min(1.0, radius / d))
    offset = math.pi / 2 - angle_pct

    return (
        point_on_circle(center, radius, angle_to_point + offset),
        point_on_circle(center, radius, angle_to_point - offset),
    )


def arc_length(start: Point, end: Point, center: Point, radius: float) -> float:
    """Length of the SHORTER arc between two rim points."""
    diff = angle_between(center, end) - angle_between(center, start)
    diff = diff % (2 * math.pi)
    if diff > math.pi:
        diff = 2 * math.pi - diff
    return radius * diff


def _passes_through(start_angle: float, sweep: float, target: float) -> bool:
    """Does the sweep start_angle → start_angle + sweep cross ``target``?"""
    if sweep >= 0:
        return (target - start_angle) % (2 * math.pi) <= sweep
    return (start_angle - target) % (2 * math.pi) <= -sweep


def arc_sweep(start: Point, end: Point, center: Point, over_top: bool = False) -> float:
    """
    Signed angular sweep from ``start`` to ``end`` around ``center``.

    Positive sweeps increase the atan2 angle (clockwise on screen, since y
    points down). By default the shorter direction is taken; with
    ``over_top=True`` the direction passing through the top of the circle
    is used instead, even if it is the longer way round.
    """
    a0 = angle_between(center, start)
    a1 = angle_between(center, end)
    short = normalize_angle(a1 - a0)
    if not over_top or _passes_through(a0, short, TOP_ANGLE):
        return short
    # Go the other way round
    return short - 2 * math.pi if short > 0 else short + 2 * math.pi


def segment_circle_intersection(
    a: Point,
    b: Point,
    center: Point,
    radius: float,
    tolerance: float = 1.1,
) -> Optional[Point]:
    """
    First point where segment a→b meets a circle, or None.

    Solves |a + t·(b − a) − c|² = r² for t ∈ [0, 1]. If the segment misses,
    the closest point on the segment still counts as a hit when it lies
    within ``radius * tolerance`` of the centre (near-miss / graze).
    """
    dx = b.x - a.x
    dy = b.y - a.y
    fx = a.x - center.x
    fy = a.y - center.y

    qa = dx * dx + dy * dy
    if qa == 0.0:
        return None
    qb = 2 * (fx * dx + fy * dy)
    qc = fx * fx + fy * fy - radius * radius

    disc = qb * qb - 4 * qa * qc
    if disc >= 0:
        root = math.sqrt(disc)
        for t in ((-qb - root) / (2 * qa), (-qb + root) / (2 * qa)):
            if 0.0 <= t <= 1.0:
                return Point(a.x + t * dx, a.y + t * dy)

    # Near-miss check on the closest point of the segment
    t_closest = min(1.0, max(0.0, -qb / (2 * qa)))
    closest = Point(a.x + t_closest * dx, a.y + t_closest * dy)
    if distance(closest, center) <= radius * tolerance:
        return closest
    return None
