# mini_pulley/checks.py
"""
PLAUSIBILITY CHECKS: Advisory Warnings on Solved Systems
========================================================

Nothing in this module can fail a solve. It only produces text that is
attached to an otherwise successful result.

Two kinds of checks:

1. validate_solution       per-unknown sanity (ropes cannot push, values
                           must be finite)
2. check_physics_constraints
                           layout hints for the idealised static model
                           (ropes carrying masses should hang vertically,
                           Atwood machines should hang from the tangent line)
"""

import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np

from .graph import Graph
from .kernel.unknowns import Tension, Unknown
from .model import Mass, Pulley, SystemState, is_fixed_pulley


@dataclass(frozen=True)
class SolutionValidation:
    valid: bool
    warnings: Tuple[str, ...] = ()


def validate_solution(
    solution: Sequence[float],
    unknowns: Sequence[Unknown],
    tol: float = 1e-9,
) -> SolutionValidation:
    """
    Flag negative tensions and non-finite values.

    Tensions within ``tol`` of zero are round-off, not a pushing rope.

    Examples:
    ---------
    >>> validate_solution([-1.5], [Tension(0, "R1")]).warnings
    ('T_chain_R1 is negative (-1.50 N) - rope cannot push',)
    """
    warnings = []
    for value, unknown in zip(solution, unknowns):
        if not np.isfinite(value):
            warnings.append(f"{unknown.label} is not finite ({value})")
        elif isinstance(unknown, Tension) and value < -tol:
            warnings.append(f"{unknown.label} is negative ({value:.2f} N) - rope cannot push")
    return SolutionValidation(valid=not warnings, warnings=tuple(warnings))


@dataclass(frozen=True)
class PhysicsAdvisory:
    severity: str  # "warning" | "info"
    message: str
    component_ids: Tuple[str, ...] = field(default_factory=tuple)


def _rope_angle_from_vertical(graph: Graph, rope_id: str, mass_id: str) -> float:
    """Angle (degrees) between vertical and the rope leg touching the mass."""
    segments = graph.rope_segments.get(rope_id)
    if not segments:
        return 0.0
    edge = graph.edges[rope_id]
    leg = segments[0] if edge.start_node_id == mass_id else segments[-1]
    dx = abs(leg.end.x - leg.start.x)
    dy = abs(leg.end.y - leg.start.y)
    if dy == 0:
        return 90.0 if dx > 0 else 0.0
    return math.degrees(math.atan2(dx, dy))


def check_physics_constraints(
    system: SystemState,
    graph: Graph,
    vertical_tolerance_deg: float = 5.0,
) -> List[PhysicsAdvisory]:
    """
    Layout advisories for fixed-pulley systems.

    - A rope running from a fixed pulley to a mass more than
      ``vertical_tolerance_deg`` off vertical.
    - An Atwood machine (1 fixed pulley, 2 masses, 2 ropes) whose masses do
      not hang from the pulley's tangent line (|dx| ≈ radius).
    """
    advisories: List[PhysicsAdvisory] = []
    pulleys = [p for p in system.pulleys if is_fixed_pulley(p)]

    for pulley in pulleys:
        for edge in graph.rope_edges_at(pulley.id):
            other_id = edge.end_node_id if edge.start_node_id == pulley.id else edge.start_node_id
            if not isinstance(system.get(other_id), Mass):
                continue
            angle = _rope_angle_from_vertical(graph, edge.id, other_id)
            if angle > vertical_tolerance_deg:
                advisories.append(PhysicsAdvisory(
                    severity="warning",
                    message=(
                        f"Rope {edge.id} is {angle:.1f}° from vertical. Ropes supporting "
                        f"masses should hang vertically (≤{vertical_tolerance_deg:g}°) "
                        f"for the static model to be accurate."
                    ),
                    component_ids=(edge.id, pulley.id, other_id),
                ))

    masses = system.masses
    if len(pulleys) == 1 and len(masses) == 2 and len(system.ropes) == 2:
        pulley: Pulley = pulleys[0]
        for mass in masses:
            dx = abs(mass.position.x - pulley.position.x)
            if abs(dx - pulley.radius) > 10 and dx > 10:
                advisories.append(PhysicsAdvisory(
                    severity="info",
                    message=(
                        f"Atwood machine detected: mass {mass.id} should hang in line with "
                        f"the pulley tangent (radius {pulley.radius:g}). "
                        f"Current offset from centre: {dx:.0f}"
                    ),
                    component_ids=(mass.id, pulley.id),
                ))

    return advisories
