# mini_pulley/model.py
"""
MODEL DEFINITIONS: Components and the System Snapshot
=====================================================

PURPOSE:
--------
This module defines the input side of the analysis: a flat, ordered list of
components plus a gravity value. The graph builder turns this into nodes and
edges; nothing downstream ever mutates it.

COMPONENTS:
-----------
    Anchor               fixed point (wall, ceiling)
    Pulley               ideal frictionless wheel, fixed by default
    PulleyBecket         fixed pulley with a hook (becket) below the hub
    SpringPulley         pulley hung from a spring, free to move
    SpringPulleyBecket   spring pulley with a becket hook
    Mass                 point mass subject to gravity
    Rope                 massless, inextensible, tension only
    Spring               linear elastic element, force = k·(L − L0)
    ForceVector          external force applied to a node

COORDINATES:
------------
Screen-style frame: x to the right, y DOWN. Gravity therefore acts in +y.

All components are frozen dataclasses, so a SystemState is an immutable
snapshot that can be shared freely between threads.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple, Type, Union


@dataclass(frozen=True)
class Point:
    """A 2D point (or vector) in the Y-down drawing frame."""
    x: float
    y: float

    def offset(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)


ORIGIN = Point(0.0, 0.0)


class Axis(Enum):
    """Direction a spring pulley's suspension spring acts along."""
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class Component:
    """Common base: every component has a unique string id."""
    id: str

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise ValueError(f"Component id must be a non-empty string (received: {self.id!r}).")


def _check_positive(owner: Component, name: str, value: float) -> None:
    if value <= 0:
        raise ValueError(f"{type(owner).__name__} {owner.id}: {name} must be positive (received: {value}).")


def _check_non_negative(owner: Component, name: str, value: float) -> None:
    if value < 0:
        raise ValueError(f"{type(owner).__name__} {owner.id}: {name} must be non-negative (received: {value}).")


@dataclass(frozen=True)
class Anchor(Component):
    position: Point

    @property
    def fixed(self) -> bool:
        return True


@dataclass(frozen=True)
class Pulley(Component):
    """Ideal pulley. Fixed to the wall unless ``fixed=False``."""
    position: Point
    radius: float
    fixed: bool = True

    def __post_init__(self):
        super().__post_init__()
        _check_positive(self, "radius", self.radius)


@dataclass(frozen=True)
class PulleyBecket(Pulley):
    """Pulley with a becket hook rigidly attached below the hub."""

    @property
    def becket_node_id(self) -> str:
        return f"{self.id}_becket"


@dataclass(frozen=True)
class SpringPulley(Component):
    """
    Pulley mounted on a linear spring.

    The spring runs from a virtual anchor to the hub along ``axis``.
    ``current_length`` defaults to ``rest_length`` (unloaded spring).
    """
    position: Point
    radius: float
    stiffness: float
    rest_length: float
    current_length: Optional[float] = None
    axis: Axis = Axis.VERTICAL

    def __post_init__(self):
        super().__post_init__()
        _check_positive(self, "radius", self.radius)
        _check_positive(self, "stiffness", self.stiffness)
        _check_non_negative(self, "rest_length", self.rest_length)
        if self.current_length is None:
            object.__setattr__(self, "current_length", self.rest_length)
        _check_non_negative(self, "current_length", self.current_length)
        if not isinstance(self.axis, Axis):
            object.__setattr__(self, "axis", Axis(self.axis))

    @property
    def spring_force(self) -> float:
        """Hooke's law, positive when stretched."""
        return self.stiffness * (self.current_length - self.rest_length)


@dataclass(frozen=True)
class SpringPulleyBecket(SpringPulley):

    @property
    def becket_node_id(self) -> str:
        return f"{self.id}_becket"


@dataclass(frozen=True)
class Mass(Component):
    position: Point
    mass: float

    def __post_init__(self):
        super().__post_init__()
        _check_non_negative(self, "mass", self.mass)


@dataclass(frozen=True)
class Rope(Component):
    """
    Rope between two node ids.

    ``length`` is the nominal drawn length; the routed length always wins.
    """
    start_node_id: str
    end_node_id: str
    length: float = 0.0
    position: Point = ORIGIN


@dataclass(frozen=True)
class Spring(Component):
    start_node_id: str
    end_node_id: str
    stiffness: float
    rest_length: float
    current_length: Optional[float] = None
    position: Point = ORIGIN

    def __post_init__(self):
        super().__post_init__()
        _check_positive(self, "stiffness", self.stiffness)
        _check_non_negative(self, "rest_length", self.rest_length)
        if self.current_length is None:
            object.__setattr__(self, "current_length", self.rest_length)


@dataclass(frozen=True)
class ForceVector(Component):
    """
    External force (N) applied to a node.

    (fx, fy) is added to the node's equilibrium constants, so a positive fy
    works against gravity (it points up on screen).
    """
    fx: float
    fy: float
    applied_to_node_id: str
    position: Point = ORIGIN


PULLEY_TYPES = (Pulley, SpringPulley)  # includes both becket variants

AnyPulley = Union[Pulley, PulleyBecket, SpringPulley, SpringPulleyBecket]

COMPONENT_TYPES = (Anchor, Pulley, SpringPulley, Mass, Rope, Spring, ForceVector)


def is_fixed_pulley(component: Component) -> bool:
    """True for a wall-mounted Pulley or PulleyBecket."""
    return isinstance(component, Pulley) and component.fixed


@dataclass(frozen=True)
class SystemState:
    """
    Immutable snapshot of the whole system: ordered components + gravity.

    Examples:
    ---------
    >>> system = SystemState([
    ...     Anchor("A", Point(0, 0)),
    ...     Mass("M", Point(0, 100), mass=10.0),
    ...     Rope("R", "A", "M"),
    ... ])
    >>> system.get("M").mass
    10.0
    """
    components: Tuple[Component, ...] = field(default_factory=tuple)
    gravity: float = 9.81

    def __post_init__(self):
        object.__setattr__(self, "components", tuple(self.components))
        seen = set()
        for component in self.components:
            if not isinstance(component, Component):
                raise TypeError(f"Expected a Component, got {type(component).__name__}.")
            if not isinstance(component, COMPONENT_TYPES):
                raise TypeError(f"Unsupported component type: {type(component).__name__}")
            if component.id in seen:
                raise ValueError(f"Duplicate component id: {component.id}")
            seen.add(component.id)

    def get(self, component_id: str) -> Optional[Component]:
        for component in self.components:
            if component.id == component_id:
                return component
        return None

    def of_type(self, *types: Type[Component]) -> Iterator[Component]:
        return (c for c in self.components if isinstance(c, types))

    @property
    def pulleys(self) -> Tuple[AnyPulley, ...]:
        return tuple(self.of_type(*PULLEY_TYPES))

    @property
    def ropes(self) -> Tuple[Rope, ...]:
        return tuple(self.of_type(Rope))

    @property
    def masses(self) -> Tuple[Mass, ...]:
        return tuple(self.of_type(Mass))

    def forces_on(self, node_id: str) -> Tuple[ForceVector, ...]:
        return tuple(f for f in self.of_type(ForceVector) if f.applied_to_node_id == node_id)
