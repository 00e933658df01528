# mini_pulley/equations.py
"""
EQUATION BUILDER: Force Equilibrium at Every Movable Node
=========================================================

PURPOSE:
--------
Turn the graph into a linear system A·x = b whose unknowns are

    1. one TENSION per rope chain
    2. one FORCE per spring (internal spring-pulley springs excluded)
    3. optionally, small displacements (dx, dy) of every movable node

ROPE CHAINS:
------------
An ideal pulley (massless, frictionless, not accelerating) carries the same
tension on both sides. So two ropes meeting at a FIXED pulley hub are really
one continuous rope, and get ONE tension unknown. Chains are found with a
union-find over rope ids. Spring pulleys move, so they are NOT chained:
they are balanced like any other movable node.

EQUILIBRIUM ROWS:
-----------------
For each movable node (y points down):

    Σ T_e·u_e  =  −(known forces)

    u_e       unit vector from the node INTO edge e (along the rope segment
              that actually touches the node, so wraps are respected)
    known     gravity (0, m·g) and internal spring forces k·(L − L0)

so the Y row starts from −m·g. An applied ForceVector (fx, fy) is added to
the constants as given, so a positive fy works against gravity. Rows that
are all (numerically) zero are dropped; they would only make the matrix
rank-deficient.

A movable becket hook moves rigidly with its hub, so its loads are added to
the hub's rows instead of getting rows of its own.
"""

import logging
from typing import Dict, List, Optional, Tuple

from .config import DEFAULT_CONFIG, SolverConfig
from .geometry import unit_vector
from .graph import Edge, Graph
from .kernel.assemble import EquationRow, EquationSystem, assemble_rows
from .kernel.solve import RankError
from .kernel.unknowns import DisplacementX, DisplacementY, SpringForce, Tension, UnknownIndex
from .model import SystemState, is_fixed_pulley

logger = logging.getLogger(__name__)


class RopeChains:
    """
    Union-find over rope ids (parent map + path compression).

    Examples:
    ---------
    >>> chains = RopeChains(["R1", "R2", "R3"])
    >>> chains.union("R1", "R2")
    >>> chains.find("R2")
    'R1'
    >>> chains.roots()
    ['R1', 'R3']
    """

    def __init__(self, rope_ids=()):
        self._parent: Dict[str, str] = {}
        self._order: List[str] = []
        for rope_id in rope_ids:
            self.add(rope_id)

    def add(self, rope_id: str) -> None:
        if rope_id not in self._parent:
            self._parent[rope_id] = rope_id
            self._order.append(rope_id)

    def find(self, rope_id: str) -> str:
        self.add(rope_id)
        root = rope_id
        while self._parent[root] != root:
            root = self._parent[root]
        # Path compression
        while self._parent[rope_id] != root:
            self._parent[rope_id], rope_id = root, self._parent[rope_id]
        return root

    def union(self, a: str, b: str) -> None:
        root_a, root_b = self.find(a), self.find(b)
        if root_a != root_b:
            self._parent[root_b] = root_a

    def roots(self) -> List[str]:
        return [r for r in self._order if self.find(r) == r]

    def members(self, root: str) -> List[str]:
        return [r for r in self._order if self.find(r) == root]

    def mapping(self) -> Dict[str, str]:
        return {r: self.find(r) for r in self._order}

    def __len__(self) -> int:
        return len(self.roots())


def find_rope_chains(graph: Graph, system: SystemState) -> RopeChains:
    """Union the two ropes at every fixed pulley hub with exactly two ropes."""
    chains = RopeChains(e.id for e in graph.edges.values() if e.is_rope)
    for component in system.components:
        if not is_fixed_pulley(component):
            continue
        ropes = graph.rope_edges_at(component.id)
        if len(ropes) == 2:
            chains.union(ropes[0].id, ropes[1].id)
    return chains


def edge_direction_at(graph: Graph, edge: Edge, node_id: str) -> Tuple[float, float]:
    """
    Unit vector pointing from ``node_id`` into ``edge``.

    Routed ropes use the touching segment (first segment at the start node,
    last segment at the end node); springs and unrouted ropes use the
    straight start → end direction. The start end gets sign +1, the end
    gets −1.
    """
    sign = 1.0 if node_id == edge.start_node_id else -1.0
    segments = graph.rope_segments.get(edge.id) if edge.is_rope else None
    if segments:
        segment = segments[0] if sign > 0 else segments[-1]
        dx, dy = segment.direction()
    else:
        start = graph.nodes[edge.start_node_id]
        end = graph.nodes[edge.end_node_id]
        dx, dy = unit_vector(start.position, end.position)
    return sign * dx, sign * dy


def _register_unknowns(
    graph: Graph,
    chains: RopeChains,
    include_displacements: bool,
) -> UnknownIndex:
    index = UnknownIndex()
    for root in chains.roots():
        index.add(Tension, root)
    for edge in graph.edges.values():
        if not edge.is_rope and not edge.internal:
            index.add(SpringForce, edge.id)
    if include_displacements:
        for node in graph.movable_nodes():
            if node.rigid_parent is None:
                index.add(DisplacementX, node.id)
                index.add(DisplacementY, node.id)
    return index


def _edge_column(edge: Edge, chains: RopeChains, index: UnknownIndex) -> Optional[int]:
    if edge.is_rope:
        return index.column(Tension, chains.find(edge.id))
    if edge.internal:
        return None
    return index.column(SpringForce, edge.id)


def _compatibility_rows(
    graph: Graph,
    chains: RopeChains,
    index: UnknownIndex,
) -> List[EquationRow]:
    """
    Small-deflection compatibility, one row per spring and per rope chain.

    Elongation of an edge:  δ = −Σ_ends u·d   (u points into the edge)

    spring:  F + k·Σ u·d = k·(L − L0)
    chain:   Σ_ropes Σ_ends u·d = 0        (inextensible, total length fixed)
    """
    def scatter(row: EquationRow, edge: Edge, scale: float) -> None:
        for node_id in (edge.start_node_id, edge.end_node_id):
            node = graph.nodes[node_id]
            if node.is_fixed:
                continue
            ux, uy = edge_direction_at(graph, edge, node_id)
            row.add(index.column(DisplacementX, node.body_id), scale * ux)
            row.add(index.column(DisplacementY, node.body_id), scale * uy)

    rows = []
    for edge in graph.edges.values():
        if edge.is_rope or edge.internal:
            continue
        row = EquationRow(label=f"spring:{edge.id}", constant=edge.known_force())
        row.add(index.column(SpringForce, edge.id), 1.0)
        scatter(row, edge, edge.stiffness)
        rows.append(row)

    for root in chains.roots():
        row = EquationRow(label=f"chain:{root}")
        for rope_id in chains.members(root):
            scatter(row, graph.edges[rope_id], 1.0)
        rows.append(row)
    return rows


def build_equation_system(
    graph: Graph,
    system: SystemState,
    config: SolverConfig = DEFAULT_CONFIG,
) -> EquationSystem:
    """
    Assemble the equilibrium equations of a (validated) graph.

    Parameters:
    -----------
    graph : Graph
        Output of build_graph, already validated
    system : SystemState
        Source of gravity and applied forces
    config : SolverConfig
        degenerate_tol, include_displacements

    Returns:
    --------
    EquationSystem
        A, b, ordered unknowns, row labels and the rope → chain map
    """
    chains = find_rope_chains(graph, system)
    index = _register_unknowns(graph, chains, config.include_displacements)
    n = len(index)

    # Two rows per movable body, in node order
    rows: Dict[str, Tuple[EquationRow, EquationRow]] = {}
    for node in graph.movable_nodes():
        if node.rigid_parent is None:
            rows[node.id] = (EquationRow(f"{node.id}.x"), EquationRow(f"{node.id}.y"))

    def body_rows(node_id: str) -> Optional[Tuple[EquationRow, EquationRow]]:
        node = graph.nodes.get(node_id)
        if node is None or node.is_fixed:
            return None
        return rows.get(node.body_id)

    # Gravity and applied forces
    for node in graph.movable_nodes():
        row_x, row_y = body_rows(node.id)
        row_y.constant -= node.mass * system.gravity
        for force in system.forces_on(node.id):
            row_x.constant += force.fx
            row_y.constant += force.fy

    # Edge forces, scattered to both ends
    for edge in graph.edges.values():
        column = _edge_column(edge, chains, index)
        for node_id in (edge.start_node_id, edge.end_node_id):
            target = body_rows(node_id)
            if target is None:
                continue
            ux, uy = edge_direction_at(graph, edge, node_id)
            row_x, row_y = target
            if column is not None:
                row_x.add(column, ux)
                row_y.add(column, uy)
            elif edge.internal:
                force = edge.known_force()
                row_x.constant -= force * ux
                row_y.constant -= force * uy

    all_rows = [r for pair in rows.values() for r in pair]
    if config.include_displacements:
        all_rows += _compatibility_rows(graph, chains, index)

    A, b, labels = assemble_rows(n, all_rows, config.degenerate_tol)
    dropped = len(all_rows) - len(labels)
    logger.debug("Equations built: %d rows (%d degenerate dropped), %d unknowns, %d chain(s) for %d rope(s)",
                 len(labels), dropped, n, len(chains), len(chains.mapping()))

    return EquationSystem(
        A=A,
        b=b,
        unknowns=index.freeze(),
        row_labels=tuple(labels),
        chains=chains.mapping(),
    )


def validate_equation_system(eq: EquationSystem) -> Tuple[bool, Optional[str]]:
    """
    Rank checks before solving.

    Returns (valid, error). More equations than unknowns is fine: the
    solver falls back to least squares.
    """
    if eq.A.shape[0] == 0:
        return False, "No equations generated"
    if eq.A.shape[0] != eq.b.shape[0]:
        return False, "Equation count mismatch"

    n_unknowns = eq.n_unknowns
    n_equations = eq.n_equations
    if n_equations < n_unknowns:
        deficit = n_unknowns - n_equations
        return False, (
            f"Underdetermined: {deficit} more unknown(s) than equation(s) "
            f"- system needs more constraints"
        )
    if n_equations > n_unknowns:
        logger.info("Overdetermined: %d extra equation(s) - using least squares",
                    n_equations - n_unknowns)
    return True, None


def require_valid_equations(eq: EquationSystem) -> EquationSystem:
    """Raise RankError unless ``validate_equation_system`` passes."""
    valid, error = validate_equation_system(eq)
    if not valid:
        raise RankError(error)
    return eq


def format_equation_system(eq: EquationSystem, precision: int = 2) -> str:
    """Human-readable rows, e.g. ``M.y: -1.00·T_chain_R = -98.10``."""
    labels = eq.labels
    lines = [f"Unknowns: {', '.join(labels)}"]
    for i in range(eq.n_equations):
        terms = [
            f"{coeff:+.{precision}f}·{labels[j]}"
            for j, coeff in enumerate(eq.A[i])
            if abs(coeff) >= 10 ** (-precision - 1)
        ]
        name = eq.row_labels[i] if i < len(eq.row_labels) else f"Eq {i}"
        lines.append(f"  {name}: {' '.join(terms) or '0'} = {eq.b[i]:.{precision}f}")
    return "\n".join(lines)
