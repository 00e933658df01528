# mini_pulley/results.py
"""
RESULT ASSEMBLY: Unknowns → Physical Quantities
===============================================

PURPOSE:
--------
Map the solved vector back onto the physical model:

    Tension(chain)        → every rope of the chain, and every segment
    SpringForce(spring)   → spring force (positive = tension)
    DisplacementX/Y(node) → node displacement

and add the derived quantities a user looks at first: support reactions,
total rope length, per-rope analysis and a mechanical-advantage estimate.

The result is immutable: mappings are exposed through MappingProxyType.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .equations import edge_direction_at
from .graph import Graph
from .kernel.assemble import EquationSystem
from .kernel.unknowns import DisplacementX, DisplacementY, SpringForce, Tension
from .model import Anchor, Mass, Point, Rope, SpringPulley, SystemState, is_fixed_pulley
from .routing import RopeSegment, total_length, wrapped_pulleys


def _empty_map():
    return MappingProxyType({})


@dataclass(frozen=True)
class RopeAnalysis:
    rope_id: str
    segments: Tuple[RopeSegment, ...]
    total_length: float
    tension: float
    wraps_around: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SolverResult:
    """
    Everything a collaborator (UI, report, animator) needs from one solve.

    ``mechanical_advantage`` is a topological APPROXIMATION (fixed pulleys + 1),
    not derived from the solved tensions. See mechanical_advantage_report for
    a tension-based breakdown.
    """
    tensions: Mapping[str, float] = field(default_factory=_empty_map)
    segment_tensions: Mapping[str, float] = field(default_factory=_empty_map)
    spring_forces: Mapping[str, float] = field(default_factory=_empty_map)
    reaction_forces: Mapping[str, Point] = field(default_factory=_empty_map)
    displacements: Mapping[str, Point] = field(default_factory=_empty_map)
    total_rope_length: float = 0.0
    mechanical_advantage: Optional[int] = None
    rope_analysis: Mapping[str, RopeAnalysis] = field(default_factory=_empty_map)
    solved: bool = False
    error: Optional[str] = None
    warnings: Tuple[str, ...] = ()
    equation_system: Optional[EquationSystem] = None


def error_result(message: str) -> SolverResult:
    """Failed solve: solved=False, empty maps, the cause as ``error``."""
    return SolverResult(solved=False, error=message)


def estimate_mechanical_advantage(system: SystemState) -> Optional[int]:
    """
    Idealised block-and-tackle estimate: number of fixed pulleys + 1.

    Returns None when there is no fixed pulley. This is a coarse
    topological count and can be wrong for non-ideal layouts.
    """
    count = sum(1 for p in system.pulleys if is_fixed_pulley(p))
    return count + 1 if count > 0 else None


def _edge_forces(
    graph: Graph,
    eq: EquationSystem,
    solution: np.ndarray,
) -> Dict[str, float]:
    """Axial force in every edge (chain tension, spring unknown or Hooke's law)."""
    by_unknown = {(type(u), u.key): float(solution[u.index]) for u in eq.unknowns}
    forces = {}
    for edge in graph.edges.values():
        if edge.is_rope:
            root = eq.chains.get(edge.id, edge.id)
            forces[edge.id] = by_unknown.get((Tension, root), 0.0)
        elif edge.internal:
            forces[edge.id] = edge.known_force()
        else:
            forces[edge.id] = by_unknown.get((SpringForce, edge.id), 0.0)
    return forces


def reaction_forces(graph: Graph, edge_forces: Mapping[str, float]) -> Dict[str, Point]:
    """
    Force each fixed node must supply: R = −Σ (edge force on the node).

    Only fixed nodes touched by at least one edge are reported.
    """
    reactions = {}
    for node in graph.fixed_nodes():
        edges = graph.incident_edges(node.id)
        if not edges:
            continue
        rx = ry = 0.0
        for edge in edges:
            ux, uy = edge_direction_at(graph, edge, node.id)
            rx -= edge_forces[edge.id] * ux
            ry -= edge_forces[edge.id] * uy
        reactions[node.id] = Point(rx, ry)
    return reactions


def assemble_result(
    system: SystemState,
    graph: Graph,
    eq: EquationSystem,
    solution: np.ndarray,
    warnings: Sequence[str] = (),
) -> SolverResult:
    """
    Package a successful solve.

    Warnings do not change ``solved``; they are surfaced as
    ``error="Warning: ..."`` and in ``warnings``.
    """
    solution = np.asarray(solution, dtype=float)
    edge_forces = _edge_forces(graph, eq, solution)

    tensions: Dict[str, float] = {}
    segment_tensions: Dict[str, float] = {}
    analysis: Dict[str, RopeAnalysis] = {}
    for edge in graph.edges.values():
        if not edge.is_rope:
            continue
        tension = edge_forces[edge.id]
        segments = graph.rope_segments.get(edge.id, ())
        tensions[edge.id] = tension
        for i in range(len(segments)):
            segment_tensions[f"{edge.id}_seg{i}"] = tension
        analysis[edge.id] = RopeAnalysis(
            rope_id=edge.id,
            segments=segments,
            total_length=total_length(segments) if segments else edge.length,
            tension=tension,
            wraps_around=tuple(wrapped_pulleys(segments)),
        )

    spring_forces = {
        edge.id: edge_forces[edge.id]
        for edge in graph.edges.values()
        if not edge.is_rope
    }

    displacements: Dict[str, Point] = {}
    for unknown in eq.unknowns:
        if isinstance(unknown, DisplacementX):
            prev = displacements.get(unknown.node_id, Point(0.0, 0.0))
            displacements[unknown.node_id] = Point(float(solution[unknown.index]), prev.y)
        elif isinstance(unknown, DisplacementY):
            prev = displacements.get(unknown.node_id, Point(0.0, 0.0))
            displacements[unknown.node_id] = Point(prev.x, float(solution[unknown.index]))

    warnings = tuple(warnings)
    return SolverResult(
        tensions=MappingProxyType(tensions),
        segment_tensions=MappingProxyType(segment_tensions),
        spring_forces=MappingProxyType(spring_forces),
        reaction_forces=MappingProxyType(reaction_forces(graph, edge_forces)),
        displacements=MappingProxyType(displacements),
        total_rope_length=sum(a.total_length for a in analysis.values()),
        mechanical_advantage=estimate_mechanical_advantage(system),
        rope_analysis=MappingProxyType(analysis),
        solved=True,
        error=f"Warning: {', '.join(warnings)}" if warnings else None,
        warnings=warnings,
        equation_system=eq,
    )


# =============================================================================
# Mechanical advantage breakdown
# =============================================================================

@dataclass(frozen=True)
class MechanicalAdvantageReport:
    """
    Load/effort breakdown of a solved pulley system.

    load     heaviest mass (its weight is the load force)
    effort   least-tension rope that ends at an anchor
    """
    mechanical_advantage: float
    effort_force: float
    load_force: float
    velocity_ratio: float
    explanation: str
    supporting_ropes: int
    pulley_configuration: str
    load_mass_id: Optional[str] = None
    effort_rope_id: Optional[str] = None


def mechanical_advantage_report(
    system: SystemState,
    result: SolverResult,
) -> Optional[MechanicalAdvantageReport]:
    """
    Estimate MA from the rope topology around the heaviest mass.

    Returns None if the system has no mass or the result is not solved.
    """
    masses = system.masses
    if not masses or not result.solved:
        return None

    load: Mass = max(masses, key=lambda m: m.mass)
    load_force = load.mass * system.gravity

    effort_rope: Optional[Rope] = None
    min_tension = float("inf")
    for rope in system.ropes:
        tension = result.tensions.get(rope.id)
        if tension is None or tension >= min_tension:
            continue
        ends = (system.get(rope.start_node_id), system.get(rope.end_node_id))
        if any(isinstance(c, Anchor) for c in ends):
            min_tension = tension
            effort_rope = rope

    supporting = sum(1 for r in system.ropes if load.id in (r.start_node_id, r.end_node_id))
    fixed = sum(1 for p in system.pulleys if is_fixed_pulley(p))
    movable = sum(1 for p in system.pulleys if isinstance(p, SpringPulley))

    if supporting == 0:
        ma = 1
        explanation = "No mechanical advantage - no rope system detected"
        configuration = "None"
    elif supporting == 1 and fixed == 1 and movable == 0:
        ma = 1
        explanation = "Simple fixed pulley: changes direction only, MA = 1"
        configuration = "Fixed pulley"
    else:
        ma = supporting
        if movable > 0:
            configuration = f"{fixed} fixed, {movable} movable pulley(s)"
            explanation = f"Compound system with {supporting} supporting ropes, MA ≈ {ma}"
        else:
            configuration = f"{fixed} fixed pulley(s)"
            explanation = f"{supporting} supporting ropes, MA ≈ {ma}"

    effort = min_tension if effort_rope is not None else load_force / ma
    return MechanicalAdvantageReport(
        mechanical_advantage=ma,
        effort_force=effort,
        load_force=load_force,
        velocity_ratio=ma,
        explanation=explanation,
        supporting_ropes=supporting,
        pulley_configuration=configuration,
        load_mass_id=load.id,
        effort_rope_id=effort_rope.id if effort_rope is not None else None,
    )


# =============================================================================
# Tabular views
# =============================================================================

def rope_table(result: SolverResult) -> pd.DataFrame:
    """One row per rope: tension, length, segment count, wrapped pulleys."""
    rows: List[dict] = []
    for rope_id, a in result.rope_analysis.items():
        rows.append({
            "rope_id": rope_id,
            "tension": a.tension,
            "total_length": a.total_length,
            "n_segments": len(a.segments),
            "n_arcs": sum(1 for s in a.segments if s.is_arc),
            "wraps_around": ", ".join(a.wraps_around),
        })
    columns = ["rope_id", "tension", "total_length", "n_segments", "n_arcs", "wraps_around"]
    return pd.DataFrame(rows, columns=columns)


def equation_table(eq: EquationSystem) -> pd.DataFrame:
    """The system as a labelled matrix, with the constant vector as column ``b``."""
    index = list(eq.row_labels) if len(eq.row_labels) == eq.n_equations else None
    df = pd.DataFrame(eq.A, index=index, columns=eq.labels)
    df["b"] = eq.b
    return df
