# tests/conftest.py
"""Shared scenario builders for the pulley-system tests."""

import math

import pytest

from mini_pulley.model import (
    Anchor,
    Mass,
    Point,
    Pulley,
    PulleyBecket,
    Rope,
    Spring,
    SystemState,
)

G = 9.81


def build_hanging_mass(mass: float = 10.0, gravity: float = G) -> SystemState:
    """One mass hanging 100 units below an anchor on a single rope."""
    return SystemState([
        Anchor("A", Point(0.0, 0.0)),
        Mass("M", Point(0.0, 100.0), mass=mass),
        Rope("R", "A", "M"),
    ], gravity=gravity)


def build_atwood(
    m1: float = 10.0,
    m2: float = 10.0,
    radius: float = 30.0,
    drop: float = 200.0,
    spread: float = None,
) -> SystemState:
    """
    Atwood machine: one fixed pulley, two masses hanging from its rim.

    Masses hang ``drop`` below the hub at x = ∓spread (default: the radius).

            (P)
           /   \\
         R1     R2
         |       |
        [M1]   [M2]
    """
    spread = radius if spread is None else spread
    return SystemState([
        Pulley("P", Point(0.0, 0.0), radius=radius),
        Mass("M1", Point(-spread, drop), mass=m1),
        Mass("M2", Point(spread, drop), mass=m2),
        Rope("R1", "M1", "P"),
        Rope("R2", "P", "M2"),
    ])


def build_two_pulley_chain() -> SystemState:
    """Three ropes M1 → P1 → P2 → M2 forming one continuous rope."""
    return SystemState([
        Pulley("P1", Point(0.0, 0.0), radius=20.0),
        Pulley("P2", Point(200.0, 0.0), radius=20.0),
        Mass("M1", Point(-20.0, 200.0), mass=10.0),
        Mass("M2", Point(220.0, 200.0), mass=10.0),
        Rope("R1", "M1", "P1"),
        Rope("R2", "P1", "P2"),
        Rope("R3", "P2", "M2"),
    ])


def build_movable_pulley(mass: float = 10.0) -> SystemState:
    """
    Single movable pulley: rope from A1 down round the block and up to A2,
    load hanging from the block's becket.
    """
    return SystemState([
        Anchor("A1", Point(-30.0, 0.0)),
        Anchor("A2", Point(30.0, 0.0)),
        PulleyBecket("MP", Point(0.0, 100.0), radius=30.0, fixed=False),
        Mass("M", Point(0.0, 200.0), mass=mass),
        Rope("R1", "A1", "MP"),
        Rope("R2", "MP", "A2"),
        Rope("R3", "MP_becket", "M"),
    ])


def build_spring_v(k: float = 100.0, mass: float = 10.0) -> SystemState:
    """Mass hanging from two 45° springs, both at their rest length."""
    rest = 100.0 * math.sqrt(2.0)
    return SystemState([
        Anchor("A1", Point(-100.0, 0.0)),
        Anchor("A2", Point(100.0, 0.0)),
        Mass("M", Point(0.0, 100.0), mass=mass),
        Spring("S1", "A1", "M", stiffness=k, rest_length=rest),
        Spring("S2", "A2", "M", stiffness=k, rest_length=rest),
    ])


@pytest.fixture
def hanging_mass():
    return build_hanging_mass()


@pytest.fixture
def atwood():
    return build_atwood()


@pytest.fixture
def two_pulley_chain():
    return build_two_pulley_chain()


@pytest.fixture
def movable_pulley():
    return build_movable_pulley()


@pytest.fixture
def spring_v():
    return build_spring_v()


@pytest.fixture
def make_hanging_mass():
    return build_hanging_mass


@pytest.fixture
def make_atwood():
    return build_atwood
