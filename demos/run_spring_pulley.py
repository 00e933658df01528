# File: demos/run_spring_pulley.py
"""
DEMO: SPRINGS, SPRING PULLEYS AND SMALL DISPLACEMENTS
=====================================================

Three small systems:

1. A mass hanging from two 45° springs, solved twice: forces only, then
   with the small-displacement formulation switched on (how far does the
   mass sink?).
2. A spring-mounted pulley whose spring is pre-stretched just enough to
   carry the load hanging under it.
3. The equation system of (2), printed as a labelled table.

Run from the repository root:

    python demos/run_spring_pulley.py
"""

import logging
import math

import pandas as pd

from mini_pulley import (
    Anchor,
    Mass,
    Point,
    Rope,
    SolverConfig,
    Spring,
    SpringPulley,
    SystemState,
    solve,
)
from mini_pulley.logging_config import setup_logging
from mini_pulley.results import equation_table


def spring_v(k: float = 100.0) -> SystemState:
    rest = 100.0 * math.sqrt(2.0)
    return SystemState([
        Anchor("A1", Point(-100.0, 0.0)),
        Anchor("A2", Point(100.0, 0.0)),
        Mass("M", Point(0.0, 100.0), mass=10.0),
        Spring("S1", "A1", "M", stiffness=k, rest_length=rest),
        Spring("S2", "A2", "M", stiffness=k, rest_length=rest),
    ])


def spring_pulley(k: float = 100.0) -> SystemState:
    g = 9.81
    stretch = (10.0 + 0.5) * g / k  # load + the pulley's own 0.5 kg
    return SystemState([
        Anchor("A", Point(100.0, 100.0)),
        SpringPulley("SP", Point(0.0, 100.0), radius=20.0, stiffness=k,
                     rest_length=50.0, current_length=50.0 + stretch),
        Mass("M", Point(0.0, 200.0), mass=10.0),
        Rope("R1", "A", "SP"),
        Rope("R2", "SP", "M"),
    ])


def main():
    setup_logging(logging.INFO)

    print("Spring V (k = 100 N/unit, m = 10 kg)")
    print("=" * 60)
    forces_only = solve(spring_v())
    with_disp = solve(spring_v(), SolverConfig(include_displacements=True))
    for spring_id in ("S1", "S2"):
        print(f"  F_{spring_id} = {forces_only.spring_forces[spring_id]:.2f} N "
              f"(with displacements: {with_disp.spring_forces[spring_id]:.2f} N)")
    d = with_disp.displacements["M"]
    print(f"  Mass displacement: dx = {d.x:.4f}, dy = {d.y:.4f}")
    print(f"  Expected: F = m·g/√2 = {98.1 / math.sqrt(2):.2f} N, dy = m·g/k = {98.1 / 100:.4f}")
    print()

    print("Spring pulley carrying 10 kg")
    print("=" * 60)
    system = spring_pulley()
    result = solve(system)
    if not result.solved:
        print(f"FAILED: {result.error}")
        return
    for rope_id, tension in result.tensions.items():
        print(f"  T_{rope_id} = {tension:8.2f} N")
    print(f"  Spring force = {result.spring_forces['SP_spring']:.2f} N")
    print()

    print("Equation system")
    print("=" * 60)
    with pd.option_context("display.float_format", "{:.3f}".format):
        print(equation_table(result.equation_system))


if __name__ == "__main__":
    main()
