# mini_pulley/graph.py
"""
GRAPH BUILDER: Components → Nodes and Edges
===========================================

PURPOSE:
--------
Turn the flat component list into the typed model the equation builder
works on:

    NODES  connection points with a position, a fixed flag and a point mass
    EDGES  ropes and springs between two nodes

Component → node mapping:

    Anchor               1 fixed node, mass 0
    Pulley               1 node (fixed unless pulley.fixed is False), mass 0
    PulleyBecket         hub + becket hook "<id>_becket" (radius + offset below)
    SpringPulley         movable hub with a small self-mass, plus a fixed
                         virtual anchor "<id>_anchor" and an internal spring
                         edge "<id>_spring" anchor → hub
    SpringPulleyBecket   as SpringPulley, plus a becket hook
    Mass                 1 movable node carrying the mass

A becket hook is rigidly attached to its hub: it inherits the hub's fixed
flag and, when movable, its loads are balanced on the hub (see
``Node.rigid_parent``).

Every rope is routed (see routing.py) and its edge length is the sum of its
segment lengths.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .config import DEFAULT_CONFIG, SolverConfig
from .kernel.solve import AnalysisError
from .model import (
    Anchor,
    Axis,
    Component,
    ForceVector,
    Mass,
    Point,
    Pulley,
    PulleyBecket,
    Rope,
    Spring,
    SpringPulley,
    SpringPulleyBecket,
    SystemState,
)
from .routing import RopeSegment, route_rope, total_length

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    COMPONENT = "component"
    BECKET = "becket"
    SPRING_ANCHOR = "spring_anchor"


class EdgeKind(Enum):
    ROPE = "rope"
    SPRING = "spring"


@dataclass(frozen=True)
class Node:
    id: str
    component_id: str
    position: Point
    is_fixed: bool
    mass: float = 0.0
    kind: NodeKind = NodeKind.COMPONENT
    rigid_parent: Optional[str] = None  # hub id for becket hooks

    @property
    def is_auxiliary(self) -> bool:
        return self.kind is not NodeKind.COMPONENT

    @property
    def body_id(self) -> str:
        """Node whose equilibrium rows carry this node's loads."""
        return self.rigid_parent or self.id


@dataclass(frozen=True)
class Edge:
    id: str
    start_node_id: str
    end_node_id: str
    kind: EdgeKind
    length: float = 0.0
    stiffness: Optional[float] = None
    rest_length: Optional[float] = None
    current_length: Optional[float] = None
    internal: bool = False  # spring-pulley suspension, force known

    @property
    def is_rope(self) -> bool:
        return self.kind is EdgeKind.ROPE

    def touches(self, node_id: str) -> bool:
        return node_id == self.start_node_id or node_id == self.end_node_id

    def known_force(self) -> float:
        """Hooke's law force of an internal spring, positive in tension."""
        return self.stiffness * (self.current_length - self.rest_length)


@dataclass(frozen=True)
class Graph:
    nodes: Dict[str, Node] = field(default_factory=dict)
    edges: Dict[str, Edge] = field(default_factory=dict)
    rope_segments: Dict[str, Tuple[RopeSegment, ...]] = field(default_factory=dict)

    def incident_edges(self, node_id: str) -> List[Edge]:
        return [e for e in self.edges.values() if e.touches(node_id)]

    def rope_edges_at(self, node_id: str) -> List[Edge]:
        return [e for e in self.edges.values() if e.is_rope and e.touches(node_id)]

    def movable_nodes(self) -> List[Node]:
        return [n for n in self.nodes.values() if not n.is_fixed]

    def fixed_nodes(self) -> List[Node]:
        return [n for n in self.nodes.values() if n.is_fixed]


class StructuralError(AnalysisError):
    """Graph is not a valid mechanical network (dangling/unconnected parts)."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(f"Graph validation failed: {', '.join(self.errors)}")


@dataclass(frozen=True)
class GraphValidation:
    valid: bool
    errors: Tuple[str, ...] = ()


def _becket_node(pulley: Pulley, is_fixed: bool, offset: float) -> Node:
    return Node(
        id=pulley.becket_node_id,
        component_id=pulley.id,
        position=pulley.position.offset(0.0, pulley.radius + offset),
        is_fixed=is_fixed,
        mass=0.0,
        kind=NodeKind.BECKET,
        rigid_parent=None if is_fixed else pulley.id,
    )


def _spring_anchor(pulley: SpringPulley) -> Node:
    """Virtual fixed mount of a spring pulley, ``current_length`` up/left of the hub."""
    length = pulley.current_length
    if pulley.axis is Axis.VERTICAL:
        position = pulley.position.offset(0.0, -length)
    else:
        position = pulley.position.offset(-length, 0.0)
    return Node(
        id=f"{pulley.id}_anchor",
        component_id=pulley.id,
        position=position,
        is_fixed=True,
        kind=NodeKind.SPRING_ANCHOR,
    )


def _component_nodes(component: Component, config: SolverConfig) -> List[Node]:
    """Nodes contributed by one component (order: most specific type first)."""
    if isinstance(component, SpringPulleyBecket):
        hub = Node(component.id, component.id, component.position, False, config.spring_pulley_mass)
        return [hub, _becket_node(component, False, config.becket_offset), _spring_anchor(component)]
    if isinstance(component, SpringPulley):
        hub = Node(component.id, component.id, component.position, False, config.spring_pulley_mass)
        return [hub, _spring_anchor(component)]
    if isinstance(component, PulleyBecket):
        hub = Node(component.id, component.id, component.position, component.fixed)
        return [hub, _becket_node(component, component.fixed, config.becket_offset)]
    if isinstance(component, Pulley):
        return [Node(component.id, component.id, component.position, component.fixed)]
    if isinstance(component, Anchor):
        return [Node(component.id, component.id, component.position, True)]
    if isinstance(component, Mass):
        return [Node(component.id, component.id, component.position, False, component.mass)]
    if isinstance(component, (Rope, Spring, ForceVector)):
        return []
    raise TypeError(f"Unsupported component type: {type(component).__name__}")


def build_graph(system: SystemState, config: SolverConfig = DEFAULT_CONFIG) -> Graph:
    """
    Build the node/edge model of a system.

    Ropes or springs naming a missing node still get an (unrouted) edge so
    that ``validate_graph`` can report them.

    Parameters:
    -----------
    system : SystemState
        Immutable component snapshot
    config : SolverConfig
        Becket offset, spring-pulley self-mass, graze tolerance

    Returns:
    --------
    Graph
        Fresh graph; nothing is cached between calls
    """
    nodes: Dict[str, Node] = {}
    for component in system.components:
        for node in _component_nodes(component, config):
            nodes[node.id] = node

    edges: Dict[str, Edge] = {}
    rope_segments: Dict[str, Tuple[RopeSegment, ...]] = {}

    for component in system.components:
        if isinstance(component, Rope):
            start = nodes.get(component.start_node_id)
            end = nodes.get(component.end_node_id)
            length = component.length
            if start is not None and end is not None:
                segments = route_rope(component, start.position, end.position, system, config)
                rope_segments[component.id] = segments
                length = total_length(segments)
            edges[component.id] = Edge(
                id=component.id,
                start_node_id=component.start_node_id,
                end_node_id=component.end_node_id,
                kind=EdgeKind.ROPE,
                length=length,
            )
        elif isinstance(component, Spring):
            edges[component.id] = Edge(
                id=component.id,
                start_node_id=component.start_node_id,
                end_node_id=component.end_node_id,
                kind=EdgeKind.SPRING,
                stiffness=component.stiffness,
                rest_length=component.rest_length,
                current_length=component.current_length,
            )
        elif isinstance(component, SpringPulley):
            spring_id = f"{component.id}_spring"
            edges[spring_id] = Edge(
                id=spring_id,
                start_node_id=f"{component.id}_anchor",
                end_node_id=component.id,
                kind=EdgeKind.SPRING,
                length=component.current_length,
                stiffness=component.stiffness,
                rest_length=component.rest_length,
                current_length=component.current_length,
                internal=True,
            )

    graph = Graph(nodes=nodes, edges=edges, rope_segments=rope_segments)
    logger.debug("Graph built: %d nodes, %d edges, %d routed ropes",
                 len(nodes), len(edges), len(rope_segments))
    return graph


def validate_graph(graph: Graph, system: SystemState) -> GraphValidation:
    """
    Structural checks run before any equation is built.

    Reports:
    - edges referencing missing nodes
    - anchors, pulleys and masses touched by no rope or spring
    - movable nodes with mass but no connections
    - pulley hubs without exactly two rope connections (becket separate)
    - force vectors applied to missing nodes
    """
    errors: List[str] = []

    for edge in graph.edges.values():
        if edge.start_node_id not in graph.nodes:
            errors.append(f"Edge {edge.id} references non-existent start node {edge.start_node_id}")
        if edge.end_node_id not in graph.nodes:
            errors.append(f"Edge {edge.id} references non-existent end node {edge.end_node_id}")

    reported = set()
    for component in system.of_type(Anchor, Pulley, SpringPulley, Mass):
        touching = graph.incident_edges(component.id)
        becket_id = getattr(component, "becket_node_id", None)
        if becket_id is not None:
            touching += graph.incident_edges(becket_id)
        if not any(not e.internal for e in touching):
            errors.append(
                f"{type(component).__name__} {component.id} is not connected to any rope or spring"
            )
            reported.add(component.id)

    for node in graph.movable_nodes():
        if node.mass > 0 and node.component_id not in reported and not graph.incident_edges(node.id):
            errors.append(f"Node {node.id} is a floating mass with no connections")

    for component in system.of_type(Pulley, SpringPulley):
        count = len(graph.rope_edges_at(component.id))
        if count != 2:
            errors.append(
                f"Pulley {component.id} must have exactly 2 rope connections "
                f"(has {count}). Becket is separate."
            )

    for force in system.of_type(ForceVector):
        if force.applied_to_node_id not in graph.nodes:
            errors.append(f"Force {force.id} is applied to non-existent node {force.applied_to_node_id}")

    return GraphValidation(valid=not errors, errors=tuple(errors))


def require_valid_graph(graph: Graph, system: SystemState) -> Graph:
    """Raise StructuralError unless ``validate_graph`` passes."""
    check = validate_graph(graph, system)
    if not check.valid:
        raise StructuralError(list(check.errors))
    return graph
