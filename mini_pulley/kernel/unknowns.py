# mini_pulley/kernel/unknowns.py
"""
UNKNOWN INDEX: Structured Column Identifiers
============================================

PURPOSE:
--------
Maps each physical unknown to its column in the equation matrix:

    Tension(chain_id)        one per rope chain
    SpringForce(spring_id)   one per (non-internal) spring
    DisplacementX(node_id)   optional small-deflection unknowns
    DisplacementY(node_id)

This is the bridge between "tension in the chain rooted at rope R1" and
"column 0". Results are read back by type, never by parsing a label.

USAGE:
------
    index = UnknownIndex()
    t = index.add(Tension, "R1")        # → Tension(index=0, chain_id="R1")
    f = index.add(SpringForce, "S1")    # → SpringForce(index=1, spring_id="S1")
    index.column(Tension, "R1")         # → 0
    index.labels()                      # → ["T_chain_R1", "F_spring_S1"]
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple, Type


@dataclass(frozen=True)
class Unknown(ABC):
    index: int

    @property
    @abstractmethod
    def key(self) -> str:
        ...

    @property
    @abstractmethod
    def label(self) -> str:
        ...


@dataclass(frozen=True)
class Tension(Unknown):
    chain_id: str

    @property
    def key(self) -> str:
        return self.chain_id

    @property
    def label(self) -> str:
        return f"T_chain_{self.chain_id}"


@dataclass(frozen=True)
class SpringForce(Unknown):
    spring_id: str

    @property
    def key(self) -> str:
        return self.spring_id

    @property
    def label(self) -> str:
        return f"F_spring_{self.spring_id}"


@dataclass(frozen=True)
class DisplacementX(Unknown):
    node_id: str

    @property
    def key(self) -> str:
        return self.node_id

    @property
    def label(self) -> str:
        return f"dx_{self.node_id}"


@dataclass(frozen=True)
class DisplacementY(Unknown):
    node_id: str

    @property
    def key(self) -> str:
        return self.node_id

    @property
    def label(self) -> str:
        return f"dy_{self.node_id}"


class UnknownIndex:
    """
    Ordered registry of unknowns, scoped to one equation build.

    Examples:
    ---------
    >>> index = UnknownIndex()
    >>> index.add(Tension, "R1")
    Tension(index=0, chain_id='R1')
    >>> index.add(Tension, "R1").index   # adding twice returns the existing one
    0
    >>> len(index)
    1
    """

    def __init__(self):
        self._ordered: List[Unknown] = []
        self._by_key: Dict[Tuple[Type[Unknown], str], Unknown] = {}

    def add(self, kind: Type[Unknown], key: str) -> Unknown:
        existing = self._by_key.get((kind, key))
        if existing is not None:
            return existing
        unknown = kind(len(self._ordered), key)
        self._ordered.append(unknown)
        self._by_key[(kind, key)] = unknown
        return unknown

    def column(self, kind: Type[Unknown], key: str) -> Optional[int]:
        unknown = self._by_key.get((kind, key))
        return None if unknown is None else unknown.index

    def labels(self) -> List[str]:
        return [u.label for u in self._ordered]

    def freeze(self) -> Tuple[Unknown, ...]:
        return tuple(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    def __iter__(self) -> Iterator[Unknown]:
        return iter(self._ordered)
